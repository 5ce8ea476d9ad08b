from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from jobportal.models.sales import ContractStatus, InvoiceStatus, QuoteStatus


class QuoteCreate(BaseModel):
    contact_id: UUID
    total_cents: int = Field(default=0, ge=0)
    status: QuoteStatus = QuoteStatus.DRAFT
    valid_until: datetime | None = None

    class Config:
        use_enum_values = True


class QuoteRead(QuoteCreate):
    id: UUID
    status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class ContractCreate(BaseModel):
    quote_id: UUID
    signed_url: str | None = None
    status: ContractStatus = ContractStatus.PENDING

    class Config:
        use_enum_values = True


class ContractRead(ContractCreate):
    id: UUID
    status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class InvoiceCreate(BaseModel):
    contract_id: UUID
    amount_due_cents: int = Field(ge=0)
    due_date: datetime | None = None
    status: InvoiceStatus = InvoiceStatus.DRAFT

    class Config:
        use_enum_values = True


class InvoiceRead(InvoiceCreate):
    id: UUID
    status: str
    created_at: datetime | None = None

    class Config:
        from_attributes = True
