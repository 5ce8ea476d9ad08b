from __future__ import annotations

from datetime import datetime
from enum import Enum
from uuid import UUID

from sqlmodel import Field

from jobportal.models.base import TimestampedModel, UUIDModel


class JobStage(str, Enum):
    PLANNING = "planning"
    MATERIALS_ORDERED = "materials_ordered"
    IN_PROGRESS = "in_progress"
    FINISHING = "finishing"
    COMPLETE = "complete"


class Job(UUIDModel, TimestampedModel, table=True):
    __tablename__ = "jobs"

    contract_id: UUID = Field(foreign_key="contracts.id", index=True)
    title: str = Field(max_length=255)
    site_address: str | None = Field(default=None)
    stage: str = Field(default=JobStage.PLANNING.value, max_length=32)
    start_date: datetime | None = Field(default=None)
    end_date: datetime | None = Field(default=None)
    special_instructions: str | None = Field(default=None)


class JobFile(UUIDModel, TimestampedModel, table=True):
    __tablename__ = "job_files"

    job_id: UUID = Field(foreign_key="jobs.id", index=True)
    url: str
    filename: str = Field(max_length=255)
    filesize: int | None = Field(default=None)
    mimetype: str | None = Field(default=None, max_length=128)
    label: str | None = Field(default=None, max_length=128)
    uploaded_by: str | None = Field(default=None, max_length=64)


class MessageChannel(str, Enum):
    EMAIL = "email"
    SMS = "sms"


class MessageDirection(str, Enum):
    INBOUND = "inbound"
    OUTBOUND = "outbound"


class Message(UUIDModel, TimestampedModel, table=True):
    __tablename__ = "messages"

    contact_id: UUID | None = Field(default=None, foreign_key="contacts.id", index=True)
    job_id: UUID | None = Field(default=None, foreign_key="jobs.id", index=True)
    subject: str | None = Field(default=None, max_length=255)
    body: str
    channel: str = Field(default=MessageChannel.EMAIL.value, max_length=16)
    direction: str = Field(default=MessageDirection.INBOUND.value, max_length=16)
    read: bool = Field(default=False)


class Note(UUIDModel, TimestampedModel, table=True):
    __tablename__ = "notes"

    job_id: UUID | None = Field(default=None, foreign_key="jobs.id", index=True)
    created_by: str | None = Field(default=None, max_length=64)
    content: str
