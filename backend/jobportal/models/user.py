from datetime import datetime
from enum import Enum

from sqlmodel import Field

from jobportal.models.base import TimestampedModel, UUIDModel


class StaffRole(str, Enum):
    OWNER = "owner"
    ADMIN = "admin"
    STAFF = "staff"


class User(UUIDModel, TimestampedModel, table=True):
    __tablename__ = "users"

    email: str = Field(index=True, unique=True)
    full_name: str
    password_hash: str
    role: str = Field(default=StaffRole.STAFF.value)
    is_active: bool = Field(default=True)
    last_login_at: datetime | None = Field(default=None)
