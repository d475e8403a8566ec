"""Organization routes."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from meditrack.database import get_session
from meditrack.models.organization import Organization
from meditrack.routers.dependencies import commit_session, get_audit_writer
from meditrack.schemas.common import MessageResponse
from meditrack.schemas.organizations import (
    OrganizationCreateRequest,
    OrganizationCreateResponse,
    OrganizationDeleteRequest,
    OrganizationResponse,
    OrganizationSummary,
    OrganizationUpdateRequest,
)
from meditrack.services.audit import AuditAction, AuditLogWriter, EntityKind

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["organizations"])


async def _get_owned_organization_or_403(
    session: AsyncSession, *, organization_id: str, user_id: str | None
) -> Organization:
    """Return an organization owned by ``user_id`` or raise 403.

    Parameters
    ----------
    session : AsyncSession
        Active database session.
    organization_id : str
        Organization identifier.
    user_id : str | None
        Claimed owner.

    Returns
    -------
    Organization
        Matching organization row.
    """
    organization = await session.get(Organization, organization_id)
    if organization is None or not user_id or organization.owner_id != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Unauthorized or organization not found",
        )
    return organization


@router.post(
    "/organization/create",
    response_model=OrganizationCreateResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_organization(
    payload: OrganizationCreateRequest,
    session: AsyncSession = Depends(get_session),
    audit: AuditLogWriter = Depends(get_audit_writer),
) -> OrganizationCreateResponse:
    """Create an organization."""
    if not payload.user_id or not payload.name:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User ID and name are required",
        )
    organization = Organization(
        owner_id=payload.user_id,
        name=payload.name,
        description=payload.description or "",
    )
    session.add(organization)
    await commit_session(session)
    await audit.record(
        AuditAction.CREATE_ORGANIZATION,
        payload.user_id,
        EntityKind.ORGANIZATION,
        organization.id,
        organization.name,
        {"data": {"description": payload.description}},
    )
    return OrganizationCreateResponse(
        organization_id=organization.id,
        message="Organization created successfully",
    )


@router.get("/organization/get-all", response_model=list[OrganizationSummary])
async def list_all_organizations(
    session: AsyncSession = Depends(get_session),
) -> list[OrganizationSummary]:
    """List every organization's id and name."""
    result = await session.execute(
        select(Organization).order_by(Organization.name.asc(), Organization.id.asc())
    )
    return [
        OrganizationSummary(organization_id=row.id, name=row.name)
        for row in result.scalars().all()
    ]


@router.get("/organizations", response_model=list[OrganizationResponse])
async def list_owned_organizations(
    user_id: str | None = Query(default=None, alias="userId"),
    session: AsyncSession = Depends(get_session),
) -> list[OrganizationResponse]:
    """List organizations owned by a user."""
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="userId is required",
        )
    result = await session.execute(
        select(Organization)
        .where(Organization.owner_id == user_id)
        .order_by(Organization.created_at.desc(), Organization.id.desc())
    )
    return [OrganizationResponse.model_validate(row) for row in result.scalars().all()]


@router.put("/organization/{organization_id}", response_model=MessageResponse)
async def update_organization(
    organization_id: str,
    payload: OrganizationUpdateRequest,
    session: AsyncSession = Depends(get_session),
    audit: AuditLogWriter = Depends(get_audit_writer),
) -> MessageResponse:
    """Update an organization's name and description."""
    logger.info("Update organization request received for ID %s", organization_id)
    organization = await _get_owned_organization_or_403(
        session, organization_id=organization_id, user_id=payload.user_id
    )
    organization.name = payload.name
    if payload.description is not None:
        organization.description = payload.description
    await commit_session(session)
    await audit.record(
        AuditAction.UPDATE_ORGANIZATION,
        payload.user_id,
        EntityKind.ORGANIZATION,
        organization.id,
        organization.name,
        {"data": {"description": payload.description}},
    )
    return MessageResponse(message="Organization updated successfully")


@router.delete("/organization/{organization_id}", response_model=MessageResponse)
async def delete_organization(
    organization_id: str,
    payload: OrganizationDeleteRequest | None = None,
    session: AsyncSession = Depends(get_session),
    audit: AuditLogWriter = Depends(get_audit_writer),
) -> MessageResponse:
    """Delete an organization."""
    logger.info("Delete organization request received for ID %s", organization_id)
    user_id = payload.user_id if payload is not None else None
    organization = await _get_owned_organization_or_403(
        session, organization_id=organization_id, user_id=user_id
    )
    name = organization.name
    await session.delete(organization)
    await commit_session(session)
    await audit.record(
        AuditAction.DELETE_ORGANIZATION,
        user_id,
        EntityKind.ORGANIZATION,
        organization_id,
        name,
        {},
    )
    return MessageResponse(message="Organization deleted successfully")
