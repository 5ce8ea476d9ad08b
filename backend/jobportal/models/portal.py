from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlmodel import Field, SQLModel

from jobportal.models.base import TimestampedModel, UUIDModel, utcnow


class PortalToken(UUIDModel, TimestampedModel, table=True):
    __tablename__ = "portal_tokens"

    job_id: UUID = Field(foreign_key="jobs.id", index=True)
    token: str = Field(max_length=128, index=True, unique=True)
    expires_at: datetime | None = Field(default=None)


class PortalSessionRecord(SQLModel, table=True):
    __tablename__ = "portal_sessions"

    session_id: str = Field(primary_key=True, max_length=128)
    contact_id: UUID = Field(index=True)
    email: str | None = Field(default=None, max_length=255)
    first_name: str | None = Field(default=None, max_length=128)
    last_name: str | None = Field(default=None, max_length=128)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)
    expires_at: datetime = Field(index=True)
