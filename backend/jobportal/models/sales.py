from __future__ import annotations

from datetime import datetime
from enum import Enum
from uuid import UUID

from sqlmodel import Field

from jobportal.models.base import TimestampedModel, UUIDModel


class QuoteStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    EXPIRED = "expired"


class ContractStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    ACTIVE = "active"
    COMPLETE = "complete"


class InvoiceStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    OVERDUE = "overdue"


class Quote(UUIDModel, TimestampedModel, table=True):
    __tablename__ = "quotes"

    contact_id: UUID = Field(foreign_key="contacts.id", index=True)
    total_cents: int = Field(default=0)
    status: str = Field(default=QuoteStatus.DRAFT.value, max_length=16)
    valid_until: datetime | None = Field(default=None)


class Contract(UUIDModel, TimestampedModel, table=True):
    __tablename__ = "contracts"

    quote_id: UUID = Field(foreign_key="quotes.id", index=True)
    signed_url: str | None = Field(default=None)
    status: str = Field(default=ContractStatus.PENDING.value, max_length=16)


class Invoice(UUIDModel, TimestampedModel, table=True):
    __tablename__ = "invoices"

    contract_id: UUID = Field(foreign_key="contracts.id", index=True)
    amount_due_cents: int
    due_date: datetime | None = Field(default=None)
    status: str = Field(default=InvoiceStatus.DRAFT.value, max_length=16)
