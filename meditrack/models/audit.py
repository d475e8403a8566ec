"""Audit log model."""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from meditrack.database import Base


class AuditLog(Base):
    """Append-only audit entry.

    The actor's name and organization are copied in at write time and never
    recomputed. ``legacy_actor_id`` holds the actor of entries written before
    ``actor_user_id`` existed. The timestamp comes from the database clock so
    entries from several API processes share one time source.
    """

    __tablename__ = "logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    action: Mapped[str] = mapped_column(String(100), index=True)
    actor_user_id: Mapped[str | None] = mapped_column(String(64))
    legacy_actor_id: Mapped[str | None] = mapped_column(String(64))
    actor_name: Mapped[str] = mapped_column(String(255))
    entity_kind: Mapped[str] = mapped_column(String(100))
    entity_id: Mapped[str] = mapped_column(String(64))
    entity_name: Mapped[str | None] = mapped_column(String(255))
    details: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)
    organization_id: Mapped[str | None] = mapped_column(String(64), index=True)
    timestamp: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), index=True
    )
