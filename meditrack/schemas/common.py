"""Common schema primitives."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class RequestModel(BaseModel):
    """Base request body; accepts camelCase keys on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class APIModel(BaseModel):
    """Base API model with attribute validation and camelCase output."""

    model_config = ConfigDict(
        from_attributes=True, alias_generator=to_camel, populate_by_name=True
    )


class MessageResponse(APIModel):
    """Simple message response."""

    message: str
    timestamp: datetime | None = None


class ErrorResponse(APIModel):
    """Error body for lookups that report a cause."""

    error: str
    details: str | None = None
