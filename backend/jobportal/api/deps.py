from typing import Annotated, Callable
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlmodel import Session
from starlette.requests import HTTPConnection

from jobportal.core.config import settings
from jobportal.db.session import get_session
from jobportal.models.user import StaffRole, User
from jobportal.schemas.portal import PortalIdentity
from jobportal.services.errors import SessionStoreError
from jobportal.services.live_updates import ChannelRegistry
from jobportal.services.portal_session import PortalAuthService, SessionStore, SqlSessionStore
from jobportal.utils.security import decode_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.api_prefix}/auth/login")


def get_db() -> Session:
    yield from get_session()


def get_current_user(
    token: Annotated[str, Depends(oauth2_scheme)],
    session: Annotated[Session, Depends(get_db)],
) -> User:
    try:
        payload = decode_token(token)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token") from exc

    try:
        user_id = UUID(str(payload["sub"]))
    except (ValueError, TypeError) as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token subject") from exc

    user = session.get(User, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")
    return user


def get_current_active_user(current_user: Annotated[User, Depends(get_current_user)]) -> User:
    if not current_user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User inactive")
    return current_user


def require_roles(*roles: StaffRole) -> Callable[[User], User]:
    allowed = {role.value for role in roles}

    def dependency(current_user: Annotated[User, Depends(get_current_active_user)]) -> User:
        if current_user.role == StaffRole.OWNER.value:
            return current_user
        if current_user.role not in allowed:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
        return current_user

    return dependency


def get_channel_registry(connection: HTTPConnection) -> ChannelRegistry:
    return connection.app.state.channel_registry


def get_session_store(
    connection: HTTPConnection,
    session: Annotated[Session, Depends(get_db)],
) -> SessionStore:
    if settings.portal_session_backend == "database":
        return SqlSessionStore(session)
    return connection.app.state.session_store


def get_portal_auth_service(
    session: Annotated[Session, Depends(get_db)],
    store: Annotated[SessionStore, Depends(get_session_store)],
) -> PortalAuthService:
    return PortalAuthService(session, store)


def get_portal_session_id(request: Request) -> str | None:
    return request.cookies.get(settings.portal_session_cookie)


def get_portal_identity(
    session_id: Annotated[str | None, Depends(get_portal_session_id)],
    auth_service: Annotated[PortalAuthService, Depends(get_portal_auth_service)],
) -> PortalIdentity:
    try:
        identity = auth_service.current_identity(session_id)
    except SessionStoreError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Session handling error") from exc
    if identity is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return identity
