from jobportal.services.audit import AuditService
from jobportal.services.auth import AuthService
from jobportal.services.contact import ContactService
from jobportal.services.credentials import CredentialStore
from jobportal.services.job import JobService, MessageService
from jobportal.services.live_updates import InMemoryChannelRegistry
from jobportal.services.portal_access import PortalAccessGate
from jobportal.services.portal_session import PortalAuthService
from jobportal.services.portal_token import PortalTokenService
from jobportal.services.sales import SalesService

__all__ = [
    "AuditService",
    "AuthService",
    "ContactService",
    "CredentialStore",
    "InMemoryChannelRegistry",
    "JobService",
    "MessageService",
    "PortalAccessGate",
    "PortalAuthService",
    "PortalTokenService",
    "SalesService",
]
