class PortalNotFoundError(Exception):
    """Token unknown or expired, broken job chain, or a job outside the visitor's scope."""


class PortalAuthenticationError(Exception):
    """Generic portal authentication failure. Never says which check failed."""


class SessionStoreError(Exception):
    """The session could not be persisted or read back."""


class NotFoundError(Exception):
    pass


class ConflictError(Exception):
    pass
