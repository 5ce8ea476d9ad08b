"""Staff side job mutations.

Every mutation that a portal viewer can see is published to the job's live
channels once the database work has been committed. Publishing runs as a
background task after the response, so delivery problems never affect it.
"""

from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Response, status
from sqlmodel import Session

from jobportal.api.deps import get_channel_registry, get_current_active_user, get_db
from jobportal.models.user import User
from jobportal.schemas.job import (
    JobCreate,
    JobFileCreate,
    JobFileRead,
    JobRead,
    JobUpdate,
    MessageCreate,
    MessageRead,
    NoteCreate,
    NoteRead,
)
from jobportal.services.errors import NotFoundError
from jobportal.services.job import JobService, MessageService
from jobportal.services.live_updates import (
    ChannelRegistry,
    FileAdded,
    FileDeleted,
    JobUpdated,
    MessagePosted,
    NotePosted,
)

router = APIRouter(tags=["jobs"])


def _not_found(exc: NotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


@router.post("/jobs", response_model=JobRead, status_code=status.HTTP_201_CREATED)
def create_job(
    payload: JobCreate,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> JobRead:
    try:
        job = JobService(session).create(payload)
    except NotFoundError as exc:
        raise _not_found(exc) from exc
    return JobRead.model_validate(job, from_attributes=True)


@router.get("/jobs/{job_id}", response_model=JobRead)
def get_job(
    job_id: UUID,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> JobRead:
    try:
        job = JobService(session).get(job_id)
    except NotFoundError as exc:
        raise _not_found(exc) from exc
    return JobRead.model_validate(job, from_attributes=True)


@router.put("/jobs/{job_id}", response_model=JobRead)
def update_job(
    job_id: UUID,
    payload: JobUpdate,
    background_tasks: BackgroundTasks,
    session: Session = Depends(get_db),
    registry: ChannelRegistry = Depends(get_channel_registry),
    current_user: User = Depends(get_current_active_user),
) -> JobRead:
    try:
        job = JobService(session).update(job_id, payload)
    except NotFoundError as exc:
        raise _not_found(exc) from exc
    result = JobRead.model_validate(job, from_attributes=True)
    background_tasks.add_task(registry.publish, job.id, JobUpdated(job=result.model_dump(mode="json")))
    return result


@router.get("/jobs/{job_id}/files", response_model=list[JobFileRead])
def list_files(
    job_id: UUID,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> list[JobFileRead]:
    try:
        files = JobService(session).list_files(job_id)
    except NotFoundError as exc:
        raise _not_found(exc) from exc
    return [JobFileRead.model_validate(item, from_attributes=True) for item in files]


@router.post("/files", response_model=JobFileRead, status_code=status.HTTP_201_CREATED)
def create_file(
    payload: JobFileCreate,
    background_tasks: BackgroundTasks,
    session: Session = Depends(get_db),
    registry: ChannelRegistry = Depends(get_channel_registry),
    current_user: User = Depends(get_current_active_user),
) -> JobFileRead:
    try:
        job_file = JobService(session).add_file(payload)
    except NotFoundError as exc:
        raise _not_found(exc) from exc
    result = JobFileRead.model_validate(job_file, from_attributes=True)
    background_tasks.add_task(registry.publish, job_file.job_id, FileAdded(file=result.model_dump(mode="json")))
    return result


@router.delete("/files/{file_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_file(
    file_id: UUID,
    background_tasks: BackgroundTasks,
    session: Session = Depends(get_db),
    registry: ChannelRegistry = Depends(get_channel_registry),
    current_user: User = Depends(get_current_active_user),
) -> Response:
    try:
        job_id = JobService(session).delete_file(file_id)
    except NotFoundError as exc:
        raise _not_found(exc) from exc
    background_tasks.add_task(registry.publish, job_id, FileDeleted(file_id=file_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/notes", response_model=NoteRead, status_code=status.HTTP_201_CREATED)
def create_note(
    payload: NoteCreate,
    background_tasks: BackgroundTasks,
    session: Session = Depends(get_db),
    registry: ChannelRegistry = Depends(get_channel_registry),
    current_user: User = Depends(get_current_active_user),
) -> NoteRead:
    try:
        note = JobService(session).add_note(payload)
    except NotFoundError as exc:
        raise _not_found(exc) from exc
    result = NoteRead.model_validate(note, from_attributes=True)
    if note.job_id is not None:
        background_tasks.add_task(registry.publish, note.job_id, NotePosted(note=result.model_dump(mode="json")))
    return result


@router.get("/jobs/{job_id}/notes", response_model=list[NoteRead])
def list_notes(
    job_id: UUID,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> list[NoteRead]:
    try:
        notes = JobService(session).list_notes(job_id)
    except NotFoundError as exc:
        raise _not_found(exc) from exc
    return [NoteRead.model_validate(item, from_attributes=True) for item in notes]


@router.post("/messages", response_model=MessageRead, status_code=status.HTTP_201_CREATED)
def create_message(
    payload: MessageCreate,
    background_tasks: BackgroundTasks,
    session: Session = Depends(get_db),
    registry: ChannelRegistry = Depends(get_channel_registry),
    current_user: User = Depends(get_current_active_user),
) -> MessageRead:
    try:
        message = MessageService(session).create(payload)
    except NotFoundError as exc:
        raise _not_found(exc) from exc
    result = MessageRead.model_validate(message, from_attributes=True)
    if message.job_id is not None:
        background_tasks.add_task(
            registry.publish, message.job_id, MessagePosted(message=result.model_dump(mode="json"))
        )
    return result


@router.get("/jobs/{job_id}/messages", response_model=list[MessageRead])
def list_job_messages(
    job_id: UUID,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> list[MessageRead]:
    messages = MessageService(session).list_for_job(job_id)
    return [MessageRead.model_validate(item, from_attributes=True) for item in messages]


@router.put("/messages/{message_id}/read", response_model=MessageRead)
def mark_message_read(
    message_id: UUID,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> MessageRead:
    try:
        message = MessageService(session).mark_read(message_id)
    except NotFoundError as exc:
        raise _not_found(exc) from exc
    return MessageRead.model_validate(message, from_attributes=True)
