"""Shared model helpers."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column


def utcnow() -> datetime:
    """Return the current UTC time.

    Returns
    -------
    datetime
        Timezone-aware current time.
    """
    return datetime.now(timezone.utc)


class TimestampMixin:
    """Common timestamp columns."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )


def id_column() -> Mapped[str]:
    """Return a string primary-key column defaulting to a random UUID.

    Returns
    -------
    Mapped[str]
        SQLAlchemy mapped identifier column.
    """
    return mapped_column(
        String(64), primary_key=True, default=lambda: str(uuid.uuid4())
    )
