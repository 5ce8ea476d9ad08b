from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from functools import lru_cache
from typing import Protocol
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from jobportal.core.config import settings
from jobportal.core.logging_setup import logger
from jobportal.models.base import utcnow
from jobportal.models.contact import Contact
from jobportal.models.portal import PortalSessionRecord
from jobportal.schemas.portal import PortalIdentity
from jobportal.services.audit import AuditService
from jobportal.services.credentials import CredentialStore, credential_store
from jobportal.services.errors import PortalAuthenticationError, SessionStoreError

SESSION_ID_BYTES = 32


@dataclass
class PortalSession:
    session_id: str
    contact_id: UUID
    email: str | None
    first_name: str | None
    last_name: str | None
    expires_at: datetime

    def identity(self) -> PortalIdentity:
        return PortalIdentity(
            contact_id=self.contact_id,
            email=self.email,
            first_name=self.first_name,
            last_name=self.last_name,
        )

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now


class SessionStore(Protocol):
    def save(self, portal_session: PortalSession) -> None: ...

    def get(self, session_id: str) -> PortalSession | None: ...

    def delete(self, session_id: str) -> None: ...


class InMemorySessionStore:
    """Process local store. Expired entries are dropped lazily on read or by ``purge_expired``."""

    def __init__(self) -> None:
        self._sessions: dict[str, PortalSession] = {}

    def save(self, portal_session: PortalSession) -> None:
        self._sessions[portal_session.session_id] = portal_session

    def get(self, session_id: str) -> PortalSession | None:
        portal_session = self._sessions.get(session_id)
        if portal_session is None:
            return None
        if portal_session.is_expired(utcnow()):
            self._sessions.pop(session_id, None)
            return None
        return portal_session

    def delete(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    def purge_expired(self) -> int:
        now = utcnow()
        expired = [key for key, value in self._sessions.items() if value.is_expired(now)]
        for key in expired:
            del self._sessions[key]
        return len(expired)

    def __len__(self) -> int:
        return len(self._sessions)


class SqlSessionStore:
    def __init__(self, session: Session) -> None:
        self.session = session

    def save(self, portal_session: PortalSession) -> None:
        record = PortalSessionRecord(
            session_id=portal_session.session_id,
            contact_id=portal_session.contact_id,
            email=portal_session.email,
            first_name=portal_session.first_name,
            last_name=portal_session.last_name,
            expires_at=portal_session.expires_at,
        )
        try:
            self.session.merge(record)
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise SessionStoreError("Failed to persist portal session") from exc

    def get(self, session_id: str) -> PortalSession | None:
        try:
            record = self.session.get(PortalSessionRecord, session_id)
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise SessionStoreError("Failed to load portal session") from exc
        if record is None:
            return None
        if record.expires_at <= utcnow():
            self.delete(session_id)
            return None
        return PortalSession(
            session_id=record.session_id,
            contact_id=record.contact_id,
            email=record.email,
            first_name=record.first_name,
            last_name=record.last_name,
            expires_at=record.expires_at,
        )

    def delete(self, session_id: str) -> None:
        record = self.session.get(PortalSessionRecord, session_id)
        if record is None:
            return
        self.session.delete(record)
        self.session.commit()


@lru_cache
def _decoy_record() -> str:
    # Verified against when no real record exists so every failure costs one KDF run.
    return credential_store.hash(secrets.token_urlsafe(16))


class PortalAuthService:
    def __init__(
        self,
        session: Session,
        store: SessionStore,
        credentials: CredentialStore | None = None,
        audit_service: AuditService | None = None,
    ) -> None:
        self.session = session
        self.store = store
        self.credentials = credentials or credential_store
        self.audit_service = audit_service or AuditService(session)

    def login(
        self,
        email: str,
        password: str,
        *,
        previous_session_id: str | None = None,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> PortalSession:
        contact = self._find_contact(email)
        record = contact.portal_password_hash if contact and contact.portal_enabled else None

        if record:
            verified, replacement = self.credentials.verify_and_update(password, record)
        else:
            self.credentials.verify(password, _decoy_record())
            verified, replacement = False, None

        if not verified:
            self.audit_service.record_auth(
                contact_id=contact.id if contact else None,
                event_type="portal_login",
                ip_address=ip_address,
                user_agent=user_agent,
                success=False,
            )
            logger.info("Portal login rejected")
            raise PortalAuthenticationError("Invalid credentials")

        if previous_session_id:
            self.store.delete(previous_session_id)

        portal_session = PortalSession(
            session_id=secrets.token_urlsafe(SESSION_ID_BYTES),
            contact_id=contact.id,
            email=contact.email,
            first_name=contact.first_name,
            last_name=contact.last_name,
            expires_at=utcnow() + timedelta(minutes=settings.portal_session_ttl_minutes),
        )
        try:
            self.store.save(portal_session)
        except SessionStoreError:
            logger.exception("Portal session could not be saved for contact %s", contact.id)
            raise

        # The login is only recorded once the session exists.
        if replacement:
            contact.portal_password_hash = replacement
        contact.portal_last_login_at = utcnow()
        self.session.add(contact)
        self.session.commit()
        self.session.refresh(contact)

        self.audit_service.record_auth(
            contact_id=contact.id,
            event_type="portal_login",
            ip_address=ip_address,
            user_agent=user_agent,
            success=True,
        )
        logger.info("Portal login for contact %s", contact.id)
        return portal_session

    def logout(self, session_id: str | None) -> None:
        if session_id:
            self.store.delete(session_id)

    def current_identity(self, session_id: str | None) -> PortalIdentity | None:
        if not session_id:
            return None
        portal_session = self.store.get(session_id)
        return portal_session.identity() if portal_session else None

    def _find_contact(self, email: str) -> Contact | None:
        normalized = (email or "").strip().lower()
        if not normalized:
            return None
        return self.session.exec(
            select(Contact).where(func.lower(Contact.email) == normalized)
        ).first()
