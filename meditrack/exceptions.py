"""Service exception types."""

from __future__ import annotations


class MediTrackError(Exception):
    """Base service error."""


class LogQueryError(MediTrackError):
    """Audit log query could not be answered.

    Parameters
    ----------
    message : str
        Error message.
    details : str | None, default=None
        Underlying cause, surfaced to the caller.
    """

    def __init__(self, message: str, details: str | None = None) -> None:
        self.details = details
        super().__init__(message)


class LogAccessDenied(MediTrackError):
    """Viewer role has no access to the audit log."""


class IdentityError(MediTrackError):
    """Identity provider operation failed."""


class AccountExistsError(IdentityError):
    """An account already uses the requested email."""


class AccountNotFoundError(IdentityError):
    """No account matches the requested email."""


class MailDeliveryError(MediTrackError):
    """Outbound email could not be delivered.

    Parameters
    ----------
    message : str
        Error message.
    status_code : int | None, default=None
        HTTP status returned by the mail provider, if any.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class InvalidViewerError(MediTrackError):
    """Log viewer parameters are incomplete."""
