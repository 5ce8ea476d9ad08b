from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from jobportal.api.deps import get_db
from jobportal.schemas.auth import LoginRequest, Token
from jobportal.services.auth import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=Token)
def login(payload: LoginRequest, session: Session = Depends(get_db)) -> Token:
    try:
        return AuthService(session).authenticate(payload)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials") from exc
