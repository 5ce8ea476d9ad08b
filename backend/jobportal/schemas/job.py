from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from jobportal.models.job import JobStage, MessageChannel, MessageDirection


class JobBase(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    site_address: str | None = None
    stage: JobStage = JobStage.PLANNING
    start_date: datetime | None = None
    end_date: datetime | None = None
    special_instructions: str | None = None

    class Config:
        use_enum_values = True


class JobCreate(JobBase):
    contract_id: UUID


class JobUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    site_address: str | None = None
    stage: JobStage | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    special_instructions: str | None = None

    class Config:
        use_enum_values = True


class JobRead(JobBase):
    id: UUID
    contract_id: UUID
    stage: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class JobFileCreate(BaseModel):
    job_id: UUID
    url: str = Field(min_length=1)
    filename: str = Field(min_length=1, max_length=255)
    filesize: int | None = Field(default=None, ge=0)
    mimetype: str | None = None
    label: str | None = None
    uploaded_by: str | None = None


class JobFileRead(JobFileCreate):
    id: UUID
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class MessageCreate(BaseModel):
    contact_id: UUID | None = None
    job_id: UUID | None = None
    subject: str | None = None
    body: str = Field(min_length=1)
    channel: MessageChannel = MessageChannel.EMAIL
    direction: MessageDirection = MessageDirection.INBOUND

    class Config:
        use_enum_values = True


class MessageRead(MessageCreate):
    id: UUID
    channel: str
    direction: str
    read: bool = False
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class NoteCreate(BaseModel):
    job_id: UUID | None = None
    created_by: str | None = None
    content: str = Field(min_length=1)


class NoteRead(NoteCreate):
    id: UUID
    created_at: datetime | None = None

    class Config:
        from_attributes = True
