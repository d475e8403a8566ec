"""Organization schemas."""

from datetime import datetime

from pydantic import AliasChoices, Field

from meditrack.schemas.common import APIModel, RequestModel


class OrganizationCreateRequest(RequestModel):
    """Create an organization owned by ``user_id``."""

    user_id: str | None = None
    name: str | None = Field(default=None, max_length=255)
    description: str | None = None


class OrganizationUpdateRequest(RequestModel):
    """Rename or redescribe an organization."""

    user_id: str | None = None
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None


class OrganizationDeleteRequest(RequestModel):
    """Identify the owner deleting an organization."""

    user_id: str | None = None


class OrganizationCreateResponse(APIModel):
    """Created organization."""

    organization_id: str
    message: str


class OrganizationSummary(APIModel):
    """Organization id and name for pickers."""

    organization_id: str
    name: str


class OrganizationResponse(APIModel):
    """Organization metadata."""

    id: str
    user_id: str = Field(validation_alias=AliasChoices("owner_id", "userId", "user_id"))
    name: str
    description: str
    created_at: datetime
    updated_at: datetime | None = None
