from datetime import timedelta
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlmodel import Session

from jobportal.api.deps import (
    get_current_active_user,
    get_db,
    get_portal_auth_service,
    get_portal_identity,
    get_portal_session_id,
)
from jobportal.core.config import settings
from jobportal.models.user import User
from jobportal.schemas.contact import ContactRead
from jobportal.schemas.portal import (
    PortalDecision,
    PortalDecisionRead,
    PortalDocumentType,
    PortalIdentity,
    PortalLoginRequest,
    PortalTokenCreate,
    PortalTokenRead,
    PortalView,
)
from jobportal.services.audit import AuditService
from jobportal.services.contact import ContactService
from jobportal.services.errors import (
    NotFoundError,
    PortalAuthenticationError,
    PortalNotFoundError,
    SessionStoreError,
)
from jobportal.services.portal_access import PortalAccessGate
from jobportal.services.portal_session import PortalAuthService
from jobportal.services.portal_token import PortalTokenService

router = APIRouter(prefix="/portal", tags=["portal"])

TOKEN_NOT_FOUND = "Portal token not found or expired"


def _client_meta(request: Request) -> tuple[str | None, str | None]:
    return (request.client.host if request.client else None, request.headers.get("user-agent"))


@router.post("/login", response_model=ContactRead)
def portal_login(
    payload: PortalLoginRequest,
    request: Request,
    response: Response,
    session: Session = Depends(get_db),
    auth_service: PortalAuthService = Depends(get_portal_auth_service),
    current_session_id: str | None = Depends(get_portal_session_id),
) -> ContactRead:
    ip_address, user_agent = _client_meta(request)
    try:
        portal_session = auth_service.login(
            payload.email,
            payload.password,
            previous_session_id=current_session_id,
            ip_address=ip_address,
            user_agent=user_agent,
        )
    except PortalAuthenticationError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials") from exc
    except SessionStoreError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Session handling error"
        ) from exc

    response.set_cookie(
        key=settings.portal_session_cookie,
        value=portal_session.session_id,
        max_age=settings.portal_session_ttl_minutes * 60,
        httponly=True,
        samesite="lax",
        secure=settings.portal_session_cookie_secure,
    )
    contact = ContactService(session).get(portal_session.contact_id)
    return ContactRead.model_validate(contact, from_attributes=True)


@router.post("/logout")
def portal_logout(
    response: Response,
    auth_service: PortalAuthService = Depends(get_portal_auth_service),
    session_id: str | None = Depends(get_portal_session_id),
) -> dict[str, str]:
    auth_service.logout(session_id)
    response.delete_cookie(settings.portal_session_cookie)
    return {"message": "Successfully logged out"}


@router.get("/me", response_model=PortalIdentity)
def portal_me(identity: Annotated[PortalIdentity, Depends(get_portal_identity)]) -> PortalIdentity:
    return identity


@router.get("/jobs", response_model=list[PortalView])
def portal_jobs(
    identity: Annotated[PortalIdentity, Depends(get_portal_identity)],
    session: Session = Depends(get_db),
) -> list[PortalView]:
    try:
        return PortalAccessGate(session).resolve_by_session(identity)
    except PortalAuthenticationError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated") from exc


@router.get("/jobs/{job_id}", response_model=PortalView)
def portal_job(
    job_id: UUID,
    identity: Annotated[PortalIdentity, Depends(get_portal_identity)],
    session: Session = Depends(get_db),
) -> PortalView:
    try:
        return PortalAccessGate(session).resolve_job_for_session(identity, job_id)
    except PortalAuthenticationError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated") from exc
    except PortalNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found") from exc


@router.post("/tokens", response_model=PortalTokenRead, status_code=status.HTTP_201_CREATED)
def issue_portal_token(
    payload: PortalTokenCreate,
    session: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> PortalTokenRead:
    ttl = timedelta(days=payload.ttl_days) if payload.ttl_days is not None else None
    try:
        record = PortalTokenService(session).issue(payload.job_id, ttl)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found") from exc

    AuditService(session).record_event(
        event_type="portal_token_issued",
        actor_id=current_user.id,
        actor_role=current_user.role,
        job_id=record.job_id,
        details={"expires_at": record.expires_at.isoformat() if record.expires_at else None},
    )
    return PortalTokenRead(
        token=record.token,
        job_id=record.job_id,
        expires_at=record.expires_at,
        created_at=record.created_at,
        portal_url=settings.portal_url_for(record.token),
    )


@router.get("/{token}", response_model=PortalView)
def portal_by_token(token: str, session: Session = Depends(get_db)) -> PortalView:
    try:
        return PortalAccessGate(session).resolve_by_token(token)
    except PortalNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=TOKEN_NOT_FOUND) from exc


@router.post("/{token}/documents/{document_type}/{decision}", response_model=PortalDecisionRead)
def portal_document_decision(
    token: str,
    document_type: PortalDocumentType,
    decision: PortalDecision,
    request: Request,
    session: Session = Depends(get_db),
) -> PortalDecisionRead:
    try:
        result = PortalAccessGate(session).decide(token, document_type, decision)
    except PortalNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=TOKEN_NOT_FOUND) from exc

    ip_address, user_agent = _client_meta(request)
    AuditService(session).record_event(
        event_type="portal_document_decision",
        ip_address=ip_address,
        user_agent=user_agent,
        details={
            "document_type": result.document_type.value,
            "document_id": str(result.document_id),
            "status": result.status,
        },
    )
    return result
