"""Shared router helpers."""

from fastapi import Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from meditrack.config import Settings, get_settings
from meditrack.database import get_session, get_session_factory
from meditrack.models.user import User, UserRole
from meditrack.services.audit import AuditLogReader, AuditLogWriter
from meditrack.services.identity import IdentityProvider
from meditrack.services.mailer import LoggingMailer, Mailer, ResendMailer


async def commit_session(session: AsyncSession) -> None:
    """Commit the current transaction.

    Parameters
    ----------
    session : AsyncSession
        Active database session.

    Returns
    -------
    None
        Commits current transaction.
    """
    await session.commit()


async def ensure_email_available(session: AsyncSession, *, email: str) -> None:
    """Ensure no user record already uses an email.

    Parameters
    ----------
    session : AsyncSession
        Active database session.
    email : str
        Requested email.

    Returns
    -------
    None
        Raises 400 on conflict.
    """
    result = await session.execute(select(User.id).where(User.email == email))
    if result.scalars().first() is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered",
        )


def ensure_known_role(role: str) -> str:
    """Return ``role`` if it is a known user role, else raise 400."""
    if role not in {member.value for member in UserRole}:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown role: {role}",
        )
    return role


def get_audit_writer(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> AuditLogWriter:
    """Build the audit writer on the shared store client."""
    return AuditLogWriter(session_factory)


def get_audit_reader(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
    settings: Settings = Depends(get_settings),
) -> AuditLogReader:
    """Build the audit reader with the configured visibility rules."""
    return AuditLogReader(
        session_factory,
        privileged_actions=settings.privileged_log_actions,
        unscoped_admin_sees_all=settings.unscoped_admin_sees_all,
    )


def get_identity_provider(
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> IdentityProvider:
    """Bind the identity provider to the request session."""
    return IdentityProvider(session, settings)


def get_mailer(settings: Settings = Depends(get_settings)) -> Mailer:
    """Return the configured mailer.

    Parameters
    ----------
    settings : Settings
        Application settings.

    Returns
    -------
    Mailer
        Resend-backed mailer, or a logging mailer without an API key.
    """
    if settings.resend_api_key:
        return ResendMailer(api_key=settings.resend_api_key, sender=settings.mail_from)
    return LoggingMailer()
