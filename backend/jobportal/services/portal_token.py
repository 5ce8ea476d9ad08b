from __future__ import annotations

import secrets
from datetime import timedelta
from typing import Protocol
from uuid import UUID

from sqlmodel import Session, select

from jobportal.core.config import settings
from jobportal.core.logging_setup import logger
from jobportal.models.base import utcnow
from jobportal.models.job import Job
from jobportal.models.portal import PortalToken
from jobportal.services.errors import NotFoundError, PortalNotFoundError

TOKEN_BYTES = 32


class TokenStore(Protocol):
    def add(self, record: PortalToken) -> PortalToken: ...

    def get(self, token: str) -> PortalToken | None: ...


class SqlTokenStore:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, record: PortalToken) -> PortalToken:
        self.session.add(record)
        self.session.commit()
        self.session.refresh(record)
        return record

    def get(self, token: str) -> PortalToken | None:
        return self.session.exec(select(PortalToken).where(PortalToken.token == token)).first()


class PortalTokenService:
    """Issues and resolves bearer tokens that grant read access to one job."""

    def __init__(self, session: Session, store: TokenStore | None = None) -> None:
        self.session = session
        self.store = store or SqlTokenStore(session)

    def issue(self, job_id: UUID, ttl: timedelta | None = None) -> PortalToken:
        if not self.session.get(Job, job_id):
            raise NotFoundError("Job not found")
        if ttl is None:
            ttl = timedelta(days=settings.portal_token_ttl_days)
        record = PortalToken(
            job_id=job_id,
            token=secrets.token_urlsafe(TOKEN_BYTES),
            expires_at=utcnow() + ttl,
        )
        record = self.store.add(record)
        logger.info("Portal token issued for job %s, expires %s", job_id, record.expires_at)
        return record

    def resolve(self, token: str) -> UUID:
        """Return the job id bound to ``token``.

        Unknown and expired tokens raise the same ``PortalNotFoundError``.
        """
        record = self.store.get(token) if token else None
        if record is None or self._is_expired(record):
            raise PortalNotFoundError("Portal token not found or expired")
        return record.job_id

    @staticmethod
    def _is_expired(record: PortalToken) -> bool:
        if record.expires_at is None:
            return False
        return record.expires_at <= utcnow()
