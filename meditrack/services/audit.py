"""Audit log writer and reader."""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from meditrack.config import DEFAULT_PRIVILEGED_LOG_ACTIONS
from meditrack.exceptions import InvalidViewerError, LogAccessDenied, LogQueryError
from meditrack.models.audit import AuditLog
from meditrack.models.user import User, UserRole

logger = logging.getLogger(__name__)

UNKNOWN_ACTOR = "Unknown"


class AuditAction:
    """Action literals used by the domain handlers.

    The set is open; any non-empty string is accepted by the writer.
    """

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    LOGIN = "LOGIN"
    REGISTER = "REGISTER"
    REGISTER_ADMIN = "REGISTER_ADMIN"
    UPDATE_ADMIN = "UPDATE_ADMIN"
    DELETE_ADMIN = "DELETE_ADMIN"
    CREATE_ORGANIZATION = "CREATE_ORGANIZATION"
    UPDATE_ORGANIZATION = "UPDATE_ORGANIZATION"
    DELETE_ORGANIZATION = "DELETE_ORGANIZATION"
    DELETE_USER = "DELETE_USER"
    UPDATE_USER = "UPDATE_USER"
    REQUEST_PASSWORD_RESET = "REQUEST_PASSWORD_RESET"


class EntityKind:
    """Kinds of record an entry can point at."""

    USER = "User"
    ORGANIZATION = "Organization"
    MEDICATION = "Medication"
    REMINDER = "Reminder"


class ViewerScope(str, enum.Enum):
    """Visibility classes for log readers."""

    GLOBAL = "global"
    ORGANIZATION = "organization"


def scope_for_role(role: str) -> ViewerScope:
    """Map a user role to its log visibility class.

    Parameters
    ----------
    role : str
        Viewer role.

    Returns
    -------
    ViewerScope
        Visibility class.

    Raises
    ------
    LogAccessDenied
        When the role may not read the audit log.
    """
    if role == UserRole.OWNER.value:
        return ViewerScope.GLOBAL
    if role == UserRole.ADMIN.value:
        return ViewerScope.ORGANIZATION
    raise LogAccessDenied(f"Role {role!r} cannot read audit logs")


@dataclass(frozen=True, slots=True)
class LogEntryView:
    """Read-side projection of an audit entry.

    Attributes
    ----------
    id : int
        Entry identifier.
    action : str
        Action literal.
    actor_user_id : str | None
        Acting user, falling back to the legacy actor field.
    actor_name : str | None
        Actor name captured at write time.
    entity_kind : str
        Kind of the affected record.
    entity_id : str
        Affected record identifier.
    entity_name : str | None
        Affected record display name.
    details : dict[str, Any] | None
        Action-specific payload.
    timestamp : datetime | None
        Write time, ``None`` if never assigned.
    organization_id : str | None
        Actor organization at write time.
    """

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

    @classmethod
    def from_row(cls, row: AuditLog) -> LogEntryView:
        """Project a stored row.

        Parameters
        ----------
        row : AuditLog
            Stored entry.

        Returns
        -------
        LogEntryView
            Caller-facing view.
        """
        timestamp = row.timestamp
        if timestamp is not None and timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        return cls(
            id=row.id,
            action=row.action,
            actor_user_id=row.actor_user_id or row.legacy_actor_id or None,
            actor_name=row.actor_name,
            entity_kind=row.entity_kind,
            entity_id=row.entity_id,
            entity_name=row.entity_name,
            details=row.details,
            timestamp=timestamp,
            organization_id=row.organization_id or None,
        )


class AuditLogWriter:
    """Best-effort recorder of state-changing actions.

    Parameters
    ----------
    session_factory : async_sessionmaker[AsyncSession]
        Store client. Each call opens its own session so a failed insert
        never touches the caller's transaction.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def record(
        self,
        action: str,
        actor_user_id: str,
        entity_kind: str,
        entity_id: str,
        entity_name: str | None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Append one entry; never raises.

        Parameters
        ----------
        action : str
            Action literal, see ``AuditAction``.
        actor_user_id : str
            User performing the action.
        entity_kind : str
            Kind of the affected record.
        entity_id : str
            Affected record identifier.
        entity_name : str | None
            Affected record display name.
        details : dict[str, Any] | None, default=None
            Action-specific payload.

        Returns
        -------
        None
            Failures are logged and swallowed.
        """
        if not action:
            logger.error(
                "Refusing to log change without an action for %s %s",
                entity_kind,
                entity_id,
            )
            return
        actor_name, organization_id = await self._lookup_actor(actor_user_id)
        try:
            async with self._session_factory() as session:
                session.add(
                    AuditLog(
                        action=action,
                        actor_user_id=actor_user_id,
                        actor_name=actor_name,
                        entity_kind=entity_kind,
                        entity_id=str(entity_id),
                        entity_name=entity_name,
                        details=details or {},
                        organization_id=organization_id,
                    )
                )
                await session.commit()
        except Exception:
            logger.exception(
                "Error logging change %s for %s %s", action, entity_kind, entity_id
            )
            return
        logger.info("Logged %s for %s with ID %s", action, entity_kind, entity_id)

    async def _lookup_actor(self, actor_user_id: str) -> tuple[str, str | None]:
        """Snapshot the actor's name and organization.

        Parameters
        ----------
        actor_user_id : str
            Actor identifier.

        Returns
        -------
        tuple[str, str | None]
            Actor name and organization id, or placeholders.
        """
        try:
            async with self._session_factory() as session:
                actor = await session.get(User, actor_user_id)
        except Exception:
            logger.warning(
                "Actor lookup failed for user %s", actor_user_id, exc_info=True
            )
            return UNKNOWN_ACTOR, None
        if actor is None:
            return UNKNOWN_ACTOR, None
        return actor.name or UNKNOWN_ACTOR, actor.organization_id or None


class AuditLogReader:
    """Role-scoped queries over the audit log.

    Parameters
    ----------
    session_factory : async_sessionmaker[AsyncSession]
        Store client.
    privileged_actions : Iterable[str]
        Actions hidden from organization-scoped viewers.
    unscoped_admin_sees_all : bool, default=False
        Drop the organization filter for scoped viewers without an
        organization. When disabled such viewers see nothing.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        privileged_actions: Iterable[str] = DEFAULT_PRIVILEGED_LOG_ACTIONS,
        unscoped_admin_sees_all: bool = False,
    ) -> None:
        self._session_factory = session_factory
        self.privileged_actions = frozenset(privileged_actions)
        self.unscoped_admin_sees_all = unscoped_admin_sees_all

    async def query(
        self, viewer_user_id: str | None, viewer_role: str
    ) -> list[LogEntryView]:
        """Return the entries visible to a viewer, newest first.

        Parameters
        ----------
        viewer_user_id : str | None
            Viewer identifier; required for organization-scoped roles.
        viewer_role : str
            Viewer role.

        Returns
        -------
        list[LogEntryView]
            Visible entries ordered by timestamp descending.

        Raises
        ------
        LogAccessDenied
            When the role may not read the log.
        InvalidViewerError
            When an organization-scoped viewer omits their user id.
        LogQueryError
            When the store query fails.
        """
        scope = scope_for_role(viewer_role)
        if scope is ViewerScope.ORGANIZATION and not viewer_user_id:
            raise InvalidViewerError(
                "userId is required for organization-scoped viewers"
            )

        query = select(AuditLog).order_by(
            AuditLog.timestamp.desc().nulls_last(), AuditLog.id.desc()
        )
        try:
            async with self._session_factory() as session:
                if scope is ViewerScope.ORGANIZATION:
                    if self.privileged_actions:
                        query = query.where(
                            AuditLog.action.not_in(self.privileged_actions)
                        )
                    viewer = await session.get(User, viewer_user_id)
                    organization_id = viewer.organization_id if viewer else None
                    if organization_id:
                        query = query.where(AuditLog.organization_id == organization_id)
                    elif not self.unscoped_admin_sees_all:
                        logger.info(
                            "Viewer %s has no organization; returning no log entries",
                            viewer_user_id,
                        )
                        return []
                result = await session.execute(query)
                rows = result.scalars().all()
        except SQLAlchemyError as exc:
            raise LogQueryError("Failed to fetch logs", details=str(exc)) from exc
        return [LogEntryView.from_row(row) for row in rows]
