"""Audit log routes."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse

from meditrack.exceptions import InvalidViewerError, LogAccessDenied, LogQueryError
from meditrack.routers.dependencies import get_audit_reader
from meditrack.schemas.common import ErrorResponse
from meditrack.schemas.logs import LogEntryResponse
from meditrack.services.audit import AuditLogReader

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["logs"])


@router.get(
    "/logs",
    response_model=list[LogEntryResponse],
    responses={500: {"model": ErrorResponse}},
)
async def list_logs(
    role: str = Query(min_length=1),
    user_id: str | None = Query(default=None, alias="userId"),
    reader: AuditLogReader = Depends(get_audit_reader),
) -> list[LogEntryResponse] | JSONResponse:
    """List the audit entries visible to a viewer, newest first."""
    logger.info("Fetching logs for user %s with role %s", user_id, role)
    try:
        entries = await reader.query(user_id, role)
    except LogAccessDenied as exc:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)
        ) from exc
    except InvalidViewerError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    except LogQueryError as exc:
        logger.error("Error fetching logs: %s", exc.details)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(error=str(exc), details=exc.details).model_dump(),
        )
    return [LogEntryResponse.model_validate(entry) for entry in entries]
