"""User, admin and patient schemas."""

from datetime import datetime

from pydantic import Field

from meditrack.schemas.common import APIModel, RequestModel


class AdminUpdateRequest(RequestModel):
    """Replace an admin's contact details and organization."""

    name: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=3, max_length=320)
    phone: str = Field(min_length=1, max_length=50)
    organization_id: str = Field(min_length=1, max_length=64)


class PatientCreateRequest(RequestModel):
    """Create a patient record."""

    email: str = Field(min_length=3, max_length=320)
    name: str = Field(min_length=1, max_length=255)
    phone: str | None = Field(default=None, max_length=50)
    dob: str | None = Field(default=None, max_length=20)
    password: str | None = None
    role: str = "user"
    organization_id: str | None = Field(default=None, max_length=64)


class PatientUpdateRequest(RequestModel):
    """Replace a patient's contact details and organization."""

    name: str = Field(min_length=1, max_length=255)
    email: str = Field(min_length=3, max_length=320)
    phone: str = Field(min_length=1, max_length=50)
    organization_id: str = Field(min_length=1, max_length=64)
    role: str | None = None


class CreatedResponse(APIModel):
    """Identifier of a created record."""

    id: str
    message: str


class UserResponse(APIModel):
    """User profile without credentials."""

    id: str
    name: str
    email: str
    phone: str | None = None
    dob: str | None = None
    role: str
    organization_id: str | None = None
    created_at: datetime
    updated_at: datetime | None = None


class AdminResponse(UserResponse):
    """Admin profile keyed by ``userId``."""

    user_id: str


class UserSummary(APIModel):
    """Display name and email."""

    name: str
    email: str
