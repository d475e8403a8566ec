"""Organization model."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from meditrack.database import Base
from meditrack.models.mixins import TimestampMixin, id_column


class Organization(TimestampMixin, Base):
    """Care organization owned by a single user."""

    __tablename__ = "organizations"

    id: Mapped[str] = id_column()
    owner_id: Mapped[str] = mapped_column(String(64), index=True)
    name: Mapped[str] = mapped_column(String(255))
    description: Mapped[str] = mapped_column(Text, default="")
