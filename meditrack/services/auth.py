"""Credential verification."""

from __future__ import annotations

from typing import TypeVar

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from meditrack.models.caretaker import Caretaker
from meditrack.models.user import User
from meditrack.services.security import verify_password

AccountModel = TypeVar("AccountModel", User, Caretaker)


async def authenticate_user(
    session: AsyncSession, *, email: str, password: str
) -> User | None:
    """Return the user matching an email and password.

    Parameters
    ----------
    session : AsyncSession
        Active database session.
    email : str
        Sign-in email.
    password : str
        Raw password.

    Returns
    -------
    User | None
        Matching user if the credentials are valid.
    """
    return await _match_credentials(
        session,
        query=select(User).where(User.email == email),
        password=password,
    )


async def authenticate_caretaker(
    session: AsyncSession, *, email: str, password: str
) -> Caretaker | None:
    """Return the caretaker matching an email and password.

    Parameters
    ----------
    session : AsyncSession
        Active database session.
    email : str
        Sign-in email.
    password : str
        Raw password.

    Returns
    -------
    Caretaker | None
        Matching caretaker if the credentials are valid.
    """
    return await _match_credentials(
        session,
        query=select(Caretaker).where(Caretaker.email == email).limit(1),
        password=password,
    )


async def _match_credentials(
    session: AsyncSession,
    query: Select[tuple[AccountModel]],
    password: str,
) -> AccountModel | None:
    """Match a raw password against the first candidate row.

    Parameters
    ----------
    session : AsyncSession
        Active database session.
    query : Select[tuple[AccountModel]]
        Candidate account query.
    password : str
        Raw password.

    Returns
    -------
    AccountModel | None
        Matching account if found.
    """
    result = await session.execute(query)
    account = result.scalars().first()
    if account is None or not verify_password(password, account.password_hash):
        return None
    return account
