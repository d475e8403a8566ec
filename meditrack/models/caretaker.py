"""Caretaker model."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from meditrack.database import Base
from meditrack.models.mixins import TimestampMixin, id_column


class Caretaker(TimestampMixin, Base):
    """Login granted to someone looking after a single patient."""

    __tablename__ = "caretakers"

    id: Mapped[str] = id_column()
    email: Mapped[str] = mapped_column(String(320), index=True)
    password_hash: Mapped[str] = mapped_column(String(512))
    patient_id: Mapped[str] = mapped_column(String(64))
