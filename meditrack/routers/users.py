"""Admin and patient routes."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from meditrack.database import get_session
from meditrack.models.user import User, UserRole
from meditrack.routers.dependencies import (
    commit_session,
    ensure_email_available,
    get_audit_writer,
)
from meditrack.schemas.common import MessageResponse
from meditrack.schemas.users import (
    AdminResponse,
    AdminUpdateRequest,
    CreatedResponse,
    PatientCreateRequest,
    PatientUpdateRequest,
    UserResponse,
    UserSummary,
)
from meditrack.services.audit import AuditAction, AuditLogWriter, EntityKind
from meditrack.services.security import hash_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["users"])


async def _get_admin_or_404(session: AsyncSession, user_id: str) -> User:
    """Return an admin user or raise 404.

    Parameters
    ----------
    session : AsyncSession
        Active database session.
    user_id : str
        User identifier.

    Returns
    -------
    User
        Matching admin row.
    """
    user = await session.get(User, user_id)
    if user is None or user.role != UserRole.ADMIN.value:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Admin not found",
        )
    return user


async def _get_patient_or_404(session: AsyncSession, user_id: str) -> User:
    """Return a patient user, raising 404 if missing and 403 for other roles.

    Parameters
    ----------
    session : AsyncSession
        Active database session.
    user_id : str
        User identifier.

    Returns
    -------
    User
        Matching patient row.
    """
    user = await session.get(User, user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Patient not found",
        )
    if user.role != UserRole.USER.value:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Can only modify patients (role: user)",
        )
    return user


@router.get("/get-all-admins", response_model=list[AdminResponse])
async def list_admins(
    session: AsyncSession = Depends(get_session),
) -> list[AdminResponse]:
    """List admins, newest first."""
    result = await session.execute(
        select(User)
        .where(User.role == UserRole.ADMIN.value)
        .order_by(User.created_at.desc(), User.id.desc())
    )
    return [
        AdminResponse(
            user_id=row.id,
            **UserResponse.model_validate(row).model_dump(),
        )
        for row in result.scalars().all()
    ]


@router.post("/update-admin/{user_id}", response_model=MessageResponse)
async def update_admin(
    user_id: str,
    payload: AdminUpdateRequest,
    session: AsyncSession = Depends(get_session),
    audit: AuditLogWriter = Depends(get_audit_writer),
) -> MessageResponse:
    """Replace an admin's details."""
    logger.info("Update admin request received for id %s", user_id)
    admin = await _get_admin_or_404(session, user_id)
    if payload.email != admin.email:
        await ensure_email_available(session, email=payload.email)
    for field, value in payload.model_dump().items():
        setattr(admin, field, value)
    await commit_session(session)
    await audit.record(
        AuditAction.UPDATE_ADMIN,
        admin.id,
        EntityKind.USER,
        admin.id,
        admin.name,
        {"data": {"email": admin.email, "organizationId": admin.organization_id}},
    )
    return MessageResponse(message="Admin updated successfully")


@router.delete("/delete-admin/{user_id}", response_model=MessageResponse)
async def delete_admin(
    user_id: str,
    session: AsyncSession = Depends(get_session),
    audit: AuditLogWriter = Depends(get_audit_writer),
) -> MessageResponse:
    """Delete an admin."""
    logger.info("Delete admin request received for id %s", user_id)
    admin = await _get_admin_or_404(session, user_id)
    name, email = admin.name, admin.email
    await session.delete(admin)
    await commit_session(session)
    await audit.record(
        AuditAction.DELETE_ADMIN,
        user_id,
        EntityKind.USER,
        user_id,
        name,
        {"data": {"email": email}},
    )
    return MessageResponse(message="Admin deleted successfully")


@router.get("/users", response_model=list[UserResponse])
async def list_users(
    organization_id: str | None = Query(default=None, alias="organizationId"),
    role: str | None = Query(default=None),
    session: AsyncSession = Depends(get_session),
) -> list[UserResponse]:
    """List users, optionally filtered by organization and role."""
    query = select(User).order_by(User.created_at.desc(), User.id.desc())
    if organization_id:
        query = query.where(User.organization_id == organization_id)
    if role:
        query = query.where(User.role == role)
    result = await session.execute(query)
    return [UserResponse.model_validate(row) for row in result.scalars().all()]


@router.post("/users", response_model=CreatedResponse)
async def create_patient(
    payload: PatientCreateRequest,
    session: AsyncSession = Depends(get_session),
    audit: AuditLogWriter = Depends(get_audit_writer),
) -> CreatedResponse:
    """Create a patient record."""
    logger.info(
        "Creating new patient %s in organization %s",
        payload.email,
        payload.organization_id,
    )
    if payload.role != UserRole.USER.value:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Can only create patients (role: user)",
        )
    await ensure_email_available(session, email=payload.email)
    patient = User(
        email=payload.email,
        name=payload.name,
        phone=payload.phone,
        dob=payload.dob,
        password_hash=hash_password(payload.password) if payload.password else None,
        role=payload.role,
        organization_id=payload.organization_id,
    )
    session.add(patient)
    await commit_session(session)
    await audit.record(
        AuditAction.CREATE,
        patient.id,
        EntityKind.USER,
        patient.id,
        patient.name,
        {"data": {"email": patient.email, "organizationId": patient.organization_id}},
    )
    return CreatedResponse(id=patient.id, message="Patient created successfully")


@router.get("/user", response_model=UserSummary)
async def get_user(
    user_id: str | None = Query(default=None, alias="userId"),
    session: AsyncSession = Depends(get_session),
) -> UserSummary:
    """Return a user's name and email."""
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="userId is required",
        )
    user = await session.get(User, user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="User not found"
        )
    return UserSummary(name=user.name, email=user.email)


@router.post("/users/{user_id}", response_model=MessageResponse)
async def update_patient(
    user_id: str,
    payload: PatientUpdateRequest,
    session: AsyncSession = Depends(get_session),
    audit: AuditLogWriter = Depends(get_audit_writer),
) -> MessageResponse:
    """Replace a patient's details."""
    patient = await _get_patient_or_404(session, user_id)
    if payload.role != UserRole.USER.value:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Can only update patients (role: user)",
        )
    if payload.email != patient.email:
        await ensure_email_available(session, email=payload.email)
    for field, value in payload.model_dump(exclude={"role"}).items():
        setattr(patient, field, value)
    await commit_session(session)
    await audit.record(
        AuditAction.UPDATE_USER,
        patient.id,
        EntityKind.USER,
        patient.id,
        patient.name,
        {
            "data": {
                "email": patient.email,
                "phone": patient.phone,
                "organizationId": patient.organization_id,
            }
        },
    )
    return MessageResponse(message="Patient updated")


@router.delete("/users/{user_id}", response_model=MessageResponse)
async def delete_patient(
    user_id: str,
    session: AsyncSession = Depends(get_session),
    audit: AuditLogWriter = Depends(get_audit_writer),
) -> MessageResponse:
    """Delete a patient."""
    patient = await _get_patient_or_404(session, user_id)
    name, email = patient.name, patient.email
    await session.delete(patient)
    await commit_session(session)
    await audit.record(
        AuditAction.DELETE_USER,
        user_id,
        EntityKind.USER,
        user_id,
        name,
        {"data": {"email": email}},
    )
    return MessageResponse(message="Patient deleted")
