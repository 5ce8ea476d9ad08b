from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from jobportal.schemas.contact import ContactRead
from jobportal.schemas.job import JobFileRead, JobRead
from jobportal.schemas.sales import ContractRead, InvoiceRead, QuoteRead


class PortalView(BaseModel):
    """Read-only aggregate a portal visitor is entitled to see for one job."""

    job: JobRead
    contract: ContractRead
    quote: QuoteRead
    contact: ContactRead
    files: list[JobFileRead] = []
    invoices: list[InvoiceRead] = []


class PortalIdentity(BaseModel):
    contact_id: UUID
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None


class PortalLoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class PortalTokenCreate(BaseModel):
    job_id: UUID
    ttl_days: int | None = Field(default=None, ge=0, le=365)


class PortalTokenRead(BaseModel):
    token: str
    job_id: UUID
    expires_at: datetime | None = None
    created_at: datetime | None = None
    portal_url: str


class PortalDocumentType(str, Enum):
    QUOTE = "quote"
    CONTRACT = "contract"


class PortalDecision(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"


class PortalDecisionRead(BaseModel):
    document_type: PortalDocumentType
    document_id: UUID
    status: str
