"""ORM models."""

from meditrack.models.audit import AuditLog
from meditrack.models.caretaker import Caretaker
from meditrack.models.organization import Organization
from meditrack.models.user import User, UserRole

__all__ = [
    "AuditLog",
    "Caretaker",
    "Organization",
    "User",
    "UserRole",
]
