"""Security helpers."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerifyMismatchError

from meditrack.config import Settings

password_hasher = PasswordHasher()

PASSWORD_RESET_PURPOSE = "password_reset"


def hash_password(password: str) -> str:
    """Hash a password for storage.

    Parameters
    ----------
    password : str
        Raw password.

    Returns
    -------
    str
        Argon2 password hash.
    """
    return password_hasher.hash(password)


def verify_password(password: str, password_hash: str | None) -> bool:
    """Verify a password against its hash.

    Parameters
    ----------
    password : str
        Raw password.
    password_hash : str | None
        Stored password hash.

    Returns
    -------
    bool
        Whether the password matches.
    """
    if not password_hash:
        return False
    try:
        return password_hasher.verify(password_hash, password)
    except (VerifyMismatchError, InvalidHashError):
        return False


def create_access_token(claims: dict[str, Any], settings: Settings) -> str:
    """Sign a session token.

    Parameters
    ----------
    claims : dict[str, Any]
        User claims to embed.
    settings : Settings
        Signing configuration.

    Returns
    -------
    str
        Encoded JWT.
    """
    payload = dict(claims)
    payload["exp"] = datetime.now(timezone.utc) + timedelta(
        minutes=settings.jwt_expires_minutes
    )
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def create_password_reset_token(user_id: str, email: str, settings: Settings) -> str:
    """Sign a single-purpose password reset token.

    Parameters
    ----------
    user_id : str
        Account identifier.
    email : str
        Account email.
    settings : Settings
        Signing configuration.

    Returns
    -------
    str
        Encoded JWT.
    """
    payload = {
        "sub": user_id,
        "email": email,
        "purpose": PASSWORD_RESET_PURPOSE,
        "exp": datetime.now(timezone.utc)
        + timedelta(minutes=settings.password_reset_expires_minutes),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str, settings: Settings) -> dict[str, Any] | None:
    """Verify and decode a token.

    Parameters
    ----------
    token : str
        Encoded JWT.
    settings : Settings
        Signing configuration.

    Returns
    -------
    dict[str, Any] | None
        Claims, or ``None`` when the token is invalid or expired.
    """
    try:
        return jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm]
        )
    except jwt.PyJWTError:
        return None
