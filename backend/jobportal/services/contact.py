from __future__ import annotations

from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, func, select

from jobportal.models.base import utcnow
from jobportal.models.contact import Contact
from jobportal.schemas.contact import ContactCreate
from jobportal.services.credentials import CredentialStore, credential_store, generate_portal_password
from jobportal.services.errors import ConflictError, NotFoundError


class ContactService:
    def __init__(self, session: Session, credentials: CredentialStore | None = None) -> None:
        self.session = session
        self.credentials = credentials or credential_store

    def create(self, payload: ContactCreate) -> Contact:
        data = payload.model_dump()
        data["email"] = self._normalize_email(data.get("email"))
        for key in ("first_name", "last_name", "company_name", "phone"):
            value = data.get(key)
            if isinstance(value, str):
                data[key] = value.strip() or None
        if data["email"] and self.get_by_email(data["email"]):
            raise ConflictError("A contact with this email already exists")
        contact = Contact(**data)
        self.session.add(contact)
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise ConflictError("A contact with this email already exists") from exc
        self.session.refresh(contact)
        return contact

    def get(self, contact_id: UUID) -> Contact:
        contact = self.session.get(Contact, contact_id)
        if not contact:
            raise NotFoundError("Contact not found")
        return contact

    def get_by_email(self, email: str) -> Contact | None:
        normalized = self._normalize_email(email)
        if not normalized:
            return None
        return self.session.exec(select(Contact).where(func.lower(Contact.email) == normalized)).first()

    def search(self, query: str = "", limit: int = 10) -> list[Contact]:
        statement = select(Contact)
        if query:
            pattern = f"%{query.lower()}%"
            statement = statement.where(
                func.lower(Contact.first_name).like(pattern)
                | func.lower(Contact.last_name).like(pattern)
                | func.lower(Contact.email).like(pattern)
                | func.lower(Contact.company_name).like(pattern)
                | func.lower(Contact.phone).like(pattern)
            )
        statement = statement.order_by(Contact.created_at.desc()).limit(max(limit, 1))
        return list(self.session.exec(statement).all())

    def enable_portal(self, contact_id: UUID, password: str | None = None) -> tuple[Contact, str | None]:
        """Turn on portal access. Returns the contact and the generated password, if one was generated.

        Any previous password hash is replaced.
        """
        contact = self.get(contact_id)
        if not contact.email:
            raise ConflictError("Contact needs an email address for portal access")
        temporary_password = None
        if password is None:
            temporary_password = generate_portal_password()
            password = temporary_password
        contact.portal_password_hash = self.credentials.hash(password)
        contact.portal_enabled = True
        contact.updated_at = utcnow()
        self.session.add(contact)
        self.session.commit()
        self.session.refresh(contact)
        return contact, temporary_password

    def disable_portal(self, contact_id: UUID) -> Contact:
        contact = self.get(contact_id)
        contact.portal_enabled = False
        contact.portal_password_hash = None
        contact.updated_at = utcnow()
        self.session.add(contact)
        self.session.commit()
        self.session.refresh(contact)
        return contact

    @staticmethod
    def _normalize_email(email: str | None) -> str | None:
        if not email:
            return None
        return email.strip().lower() or None
