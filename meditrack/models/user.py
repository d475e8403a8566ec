"""User model."""

import enum

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from meditrack.database import Base
from meditrack.models.mixins import TimestampMixin, id_column


class UserRole(str, enum.Enum):
    """Roles a user record can hold."""

    OWNER = "owner"
    ADMIN = "admin"
    USER = "user"
    CARETAKER = "caretaker"


class User(TimestampMixin, Base):
    """Owner, admin or patient account."""

    __tablename__ = "users"

    id: Mapped[str] = id_column()
    name: Mapped[str] = mapped_column(String(255))
    email: Mapped[str] = mapped_column(String(320), unique=True, index=True)
    phone: Mapped[str | None] = mapped_column(String(50))
    dob: Mapped[str | None] = mapped_column(String(20))
    password_hash: Mapped[str | None] = mapped_column(String(512))
    role: Mapped[str] = mapped_column(
        String(50), default=UserRole.USER.value, index=True
    )
    organization_id: Mapped[str | None] = mapped_column(String(64), index=True)
