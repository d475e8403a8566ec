"""Audit log schemas."""

from datetime import datetime
from typing import Any

from meditrack.schemas.common import APIModel


class LogEntryResponse(APIModel):
    """Audit log entry as returned to viewers."""

    id: int
    action: str
    actor_user_id: str | None
    actor_name: str | None
    entity_kind: str
    entity_id: str
    entity_name: str | None
    details: dict[str, Any] | None
    timestamp: datetime | None
    organization_id: str | None
