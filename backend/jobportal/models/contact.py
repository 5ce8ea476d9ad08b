from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlmodel import Field

from jobportal.models.base import TimestampedModel, UUIDModel


class ContactType(str, Enum):
    LEAD = "lead"
    CUSTOMER = "customer"
    SUPPLIER = "supplier"


class Contact(UUIDModel, TimestampedModel, table=True):
    __tablename__ = "contacts"

    first_name: str | None = Field(default=None, max_length=128)
    last_name: str | None = Field(default=None, max_length=128)
    company_name: str | None = Field(default=None, max_length=255)
    email: str | None = Field(default=None, max_length=255, index=True, unique=True)
    phone: str | None = Field(default=None, max_length=32)
    type: str = Field(default=ContactType.LEAD.value, max_length=16)

    portal_enabled: bool = Field(default=False)
    portal_password_hash: str | None = Field(default=None, max_length=255)
    portal_last_login_at: datetime | None = Field(default=None)
