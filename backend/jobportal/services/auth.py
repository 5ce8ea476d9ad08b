from sqlmodel import Session, select

from jobportal.models.base import utcnow
from jobportal.models.user import User
from jobportal.schemas.auth import LoginRequest, Token
from jobportal.utils.security import create_access_token, get_password_hash, verify_password


class AuthService:
    """Staff authentication."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def authenticate(self, payload: LoginRequest) -> Token:
        statement = select(User).where(User.email == payload.username.lower())
        user = self.session.exec(statement).first()

        if not user or not user.is_active:
            raise ValueError("Invalid credentials")

        if not verify_password(payload.password, user.password_hash):
            raise ValueError("Invalid credentials")

        user.last_login_at = utcnow()
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)

        return Token(access_token=create_access_token(str(user.id), user.role))

    def create_staff_user(self, email: str, full_name: str, password: str, role: str) -> User:
        existing = self.session.exec(select(User).where(User.email == email.lower())).first()
        if existing:
            existing.password_hash = get_password_hash(password)
            existing.full_name = full_name
            existing.role = role
            existing.is_active = True
            user = existing
        else:
            user = User(
                email=email.lower(),
                full_name=full_name,
                password_hash=get_password_hash(password),
                role=role,
            )
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        return user
