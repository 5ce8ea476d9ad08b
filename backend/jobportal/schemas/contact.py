from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from jobportal.models.contact import ContactType


class ContactBase(BaseModel):
    first_name: str | None = None
    last_name: str | None = None
    company_name: str | None = None
    email: EmailStr | None = None
    phone: str | None = None
    type: ContactType = ContactType.LEAD

    class Config:
        use_enum_values = True


class ContactCreate(ContactBase):
    pass


class ContactRead(ContactBase):
    """Contact as exposed over the API. The portal password hash is never part of it."""

    id: UUID
    email: str | None = None
    portal_enabled: bool = False
    portal_last_login_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class PortalEnableRequest(BaseModel):
    password: str | None = Field(default=None, min_length=1, max_length=128)


class PortalEnableResponse(BaseModel):
    contact: ContactRead
    temporary_password: str | None = None
