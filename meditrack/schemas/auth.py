"""Registration, login and account schemas."""

from pydantic import Field

from meditrack.schemas.common import APIModel, RequestModel


class RegisterAdminRequest(RequestModel):
    """Register an organization admin."""

    name: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=3, max_length=320)
    phone: str = Field(min_length=1, max_length=50)
    password: str = Field(min_length=1)
    organization_id: str = Field(min_length=1, max_length=64)
    role: str | None = None


class RegisterAdminResponse(APIModel):
    """Registered admin."""

    message: str
    user_id: str


class RegisterRequest(RequestModel):
    """Self-service registration."""

    email: str = Field(min_length=3, max_length=320)
    password: str = Field(min_length=6)
    name: str = Field(min_length=1, max_length=255)
    role: str | None = None


class RegisterResponse(APIModel):
    """Registered user."""

    message: str
    uid: str


class LoginRequest(RequestModel):
    """Email and password sign-in."""

    email: str
    password: str


class LoginResponse(APIModel):
    """Session token and the signed-in user's profile."""

    token: str
    user_id: str
    email: str
    name: str
    role: str
    organization_id: str | None = None


class CaretakerLoginResponse(APIModel):
    """Patient a caretaker is allowed to follow."""

    patient_id: str


class PasswordResetRequest(RequestModel):
    """Request a password reset email."""

    email: str = Field(min_length=3, max_length=320)


class ProfileUpdateRequest(RequestModel):
    """Update the signed-in user's own profile."""

    user_id: str | None = None
    name: str | None = Field(default=None, max_length=255)
    email: str | None = Field(default=None, max_length=320)
    password: str | None = None
    current_password: str | None = None
