from __future__ import annotations

from uuid import UUID

from sqlmodel import Session, select

from jobportal.models.base import utcnow
from jobportal.models.contact import Contact
from jobportal.models.job import Job, JobFile, Message, Note
from jobportal.models.sales import Contract
from jobportal.schemas.job import JobCreate, JobFileCreate, JobUpdate, MessageCreate, NoteCreate
from jobportal.services.errors import NotFoundError


class JobService:
    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, payload: JobCreate) -> Job:
        if not self.session.get(Contract, payload.contract_id):
            raise NotFoundError("Contract not found")
        job = Job(**payload.model_dump())
        return self._save(job)

    def get(self, job_id: UUID) -> Job:
        job = self.session.get(Job, job_id)
        if not job:
            raise NotFoundError("Job not found")
        return job

    def update(self, job_id: UUID, payload: JobUpdate) -> Job:
        job = self.get(job_id)
        for key, value in payload.model_dump(exclude_unset=True).items():
            setattr(job, key, value)
        job.updated_at = utcnow()
        return self._save(job)

    def list_files(self, job_id: UUID) -> list[JobFile]:
        self.get(job_id)
        statement = select(JobFile).where(JobFile.job_id == job_id).order_by(JobFile.created_at)
        return list(self.session.exec(statement).all())

    def add_file(self, payload: JobFileCreate) -> JobFile:
        self.get(payload.job_id)
        job_file = JobFile(**payload.model_dump())
        return self._save(job_file)

    def delete_file(self, file_id: UUID) -> UUID:
        """Delete a file record and return the id of the job it belonged to."""
        job_file = self.session.get(JobFile, file_id)
        if not job_file:
            raise NotFoundError("File not found")
        job_id = job_file.job_id
        self.session.delete(job_file)
        self.session.commit()
        return job_id

    def add_note(self, payload: NoteCreate) -> Note:
        if payload.job_id is not None:
            self.get(payload.job_id)
        note = Note(**payload.model_dump())
        return self._save(note)

    def list_notes(self, job_id: UUID) -> list[Note]:
        self.get(job_id)
        statement = select(Note).where(Note.job_id == job_id).order_by(Note.created_at)
        return list(self.session.exec(statement).all())

    def _save(self, instance):
        self.session.add(instance)
        self.session.commit()
        self.session.refresh(instance)
        return instance


class MessageService:
    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, payload: MessageCreate) -> Message:
        if payload.job_id is not None and not self.session.get(Job, payload.job_id):
            raise NotFoundError("Job not found")
        if payload.contact_id is not None and not self.session.get(Contact, payload.contact_id):
            raise NotFoundError("Contact not found")
        message = Message(**payload.model_dump())
        self.session.add(message)
        self.session.commit()
        self.session.refresh(message)
        return message

    def list_for_job(self, job_id: UUID) -> list[Message]:
        statement = select(Message).where(Message.job_id == job_id).order_by(Message.created_at)
        return list(self.session.exec(statement).all())

    def mark_read(self, message_id: UUID) -> Message:
        message = self.session.get(Message, message_id)
        if not message:
            raise NotFoundError("Message not found")
        message.read = True
        message.updated_at = utcnow()
        self.session.add(message)
        self.session.commit()
        self.session.refresh(message)
        return message
