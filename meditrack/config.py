"""Runtime configuration."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PRIVILEGED_LOG_ACTIONS: tuple[str, ...] = (
    "REGISTER_ADMIN",
    "UPDATE_ADMIN",
    "DELETE_ADMIN",
    "CREATE_ORGANIZATION",
    "UPDATE_ORGANIZATION",
    "DELETE_ORGANIZATION",
)


class Settings(BaseSettings):
    """Application settings.

    Attributes
    ----------
    app_name : str
        Human-readable application name.
    database_url : str
        SQLAlchemy database URL.
    jwt_secret : str
        HMAC secret used to sign access and reset tokens.
    jwt_algorithm : str
        JWT signing algorithm.
    jwt_expires_minutes : int
        Access token lifetime.
    cors_origins : list[str]
        Origins allowed to call the API with credentials.
    log_level : str
        Root log level for the operational log.
    privileged_log_actions : list[str]
        Audit actions hidden from organization-scoped viewers.
    unscoped_admin_sees_all : bool
        Whether an admin without an organization sees every organization's
        non-privileged entries instead of none.
    password_reset_url : str
        Base URL of the frontend password reset page.
    password_reset_expires_minutes : int
        Password reset token lifetime.
    resend_api_key : str | None
        Resend API key; reset emails are only logged when unset.
    mail_from : str
        Sender address for outbound email.
    """

    model_config = SettingsConfigDict(env_prefix="MEDITRACK_", extra="ignore")

    app_name: str = "MediTrack"
    database_url: str = "sqlite+aiosqlite:///./meditrack.db"
    jwt_secret: str = "change-me"
    jwt_algorithm: str = "HS256"
    jwt_expires_minutes: int = 60
    cors_origins: list[str] = Field(default_factory=lambda: ["http://middleware:3001"])
    log_level: str = "INFO"
    privileged_log_actions: list[str] = Field(
        default_factory=lambda: list(DEFAULT_PRIVILEGED_LOG_ACTIONS)
    )
    unscoped_admin_sees_all: bool = False
    password_reset_url: str = "http://localhost:3000/reset-password"
    password_reset_expires_minutes: int = 60
    resend_api_key: str | None = None
    mail_from: str = "onboarding@resend.dev"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings.

    Returns
    -------
    Settings
        Cached settings instance.
    """
    return Settings()
