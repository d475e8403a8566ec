"""Identity provider backed by the user store."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from urllib.parse import urlencode

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from meditrack.config import Settings
from meditrack.exceptions import AccountExistsError, AccountNotFoundError
from meditrack.models.user import User
from meditrack.services.security import create_password_reset_token


@dataclass(frozen=True, slots=True)
class IdentityAccount:
    """Account as seen by the identity provider.

    Attributes
    ----------
    uid : str
        Account identifier, shared with the user record.
    email : str
        Sign-in email.
    display_name : str | None
        Display name.
    """

    uid: str
    email: str
    display_name: str | None


class IdentityProvider:
    """Account creation, lookup and password reset links.

    Parameters
    ----------
    session : AsyncSession
        Active database session.
    settings : Settings
        Token signing and reset link configuration.
    """

    def __init__(self, session: AsyncSession, settings: Settings) -> None:
        self.session = session
        self.settings = settings

    async def create_account(
        self, *, email: str, display_name: str | None
    ) -> IdentityAccount:
        """Reserve a new account identifier for an unused email.

        Parameters
        ----------
        email : str
            Sign-in email.
        display_name : str | None
            Display name.

        Returns
        -------
        IdentityAccount
            New account; the caller persists the user record under ``uid``.
        """
        if await self._find_by_email(email) is not None:
            raise AccountExistsError(
                "The email address is already in use by another account."
            )
        return IdentityAccount(
            uid=uuid.uuid4().hex, email=email, display_name=display_name
        )

    async def get_account_by_email(self, email: str) -> IdentityAccount:
        """Look up an account by email.

        Parameters
        ----------
        email : str
            Sign-in email.

        Returns
        -------
        IdentityAccount
            Matching account.
        """
        user = await self._find_by_email(email)
        if user is None:
            raise AccountNotFoundError(
                "There is no user record corresponding to the provided identifier."
            )
        return IdentityAccount(uid=user.id, email=user.email, display_name=user.name)

    async def generate_password_reset_link(self, account: IdentityAccount) -> str:
        """Build a signed password reset link.

        Parameters
        ----------
        account : IdentityAccount
            Account requesting the reset.

        Returns
        -------
        str
            Reset URL carrying a short-lived token.
        """
        token = create_password_reset_token(account.uid, account.email, self.settings)
        return f"{self.settings.password_reset_url}?{urlencode({'token': token})}"

    async def _find_by_email(self, email: str) -> User | None:
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalars().first()
