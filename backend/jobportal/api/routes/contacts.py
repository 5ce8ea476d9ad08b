from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel import Session

from jobportal.api.deps import get_current_active_user, get_db
from jobportal.models.user import User
from jobportal.schemas.contact import ContactCreate, ContactRead, PortalEnableRequest, PortalEnableResponse
from jobportal.services.audit import AuditService
from jobportal.services.contact import ContactService
from jobportal.services.errors import ConflictError, NotFoundError

router = APIRouter(prefix="/contacts", tags=["contacts"])


@router.post("", response_model=ContactRead, status_code=status.HTTP_201_CREATED)
def create_contact(
    payload: ContactCreate,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> ContactRead:
    try:
        contact = ContactService(session).create(payload)
    except ConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    return ContactRead.model_validate(contact, from_attributes=True)


@router.get("", response_model=list[ContactRead])
def search_contacts(
    q: str = Query(""),
    limit: int = Query(10, ge=1, le=50),
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> list[ContactRead]:
    contacts = ContactService(session).search(q.strip(), limit)
    return [ContactRead.model_validate(contact, from_attributes=True) for contact in contacts]


@router.get("/{contact_id}", response_model=ContactRead)
def get_contact(
    contact_id: UUID,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> ContactRead:
    try:
        contact = ContactService(session).get(contact_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Contact not found") from exc
    return ContactRead.model_validate(contact, from_attributes=True)


@router.post("/{contact_id}/enable-portal", response_model=PortalEnableResponse)
def enable_portal(
    contact_id: UUID,
    payload: PortalEnableRequest | None = None,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> PortalEnableResponse:
    password = payload.password if payload else None
    try:
        contact, temporary_password = ContactService(session).enable_portal(contact_id, password)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Contact not found") from exc
    except ConflictError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    AuditService(session).record_event(
        event_type="portal_enabled",
        actor_id=current_user.id,
        actor_role=current_user.role,
        details={"contact_id": str(contact.id), "generated_password": temporary_password is not None},
    )
    return PortalEnableResponse(
        contact=ContactRead.model_validate(contact, from_attributes=True),
        temporary_password=temporary_password,
    )


@router.post("/{contact_id}/disable-portal", response_model=ContactRead)
def disable_portal(
    contact_id: UUID,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> ContactRead:
    try:
        contact = ContactService(session).disable_portal(contact_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Contact not found") from exc

    AuditService(session).record_event(
        event_type="portal_disabled",
        actor_id=current_user.id,
        actor_role=current_user.role,
        details={"contact_id": str(contact.id)},
    )
    return ContactRead.model_validate(contact, from_attributes=True)
