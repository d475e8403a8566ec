"""Registration, login and account routes."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from meditrack.config import Settings, get_settings
from meditrack.database import get_session
from meditrack.exceptions import (
    AccountExistsError,
    AccountNotFoundError,
    MailDeliveryError,
)
from meditrack.models.user import User, UserRole
from meditrack.routers.dependencies import (
    commit_session,
    ensure_email_available,
    ensure_known_role,
    get_audit_writer,
    get_identity_provider,
    get_mailer,
)
from meditrack.schemas.auth import (
    CaretakerLoginResponse,
    LoginRequest,
    LoginResponse,
    PasswordResetRequest,
    ProfileUpdateRequest,
    RegisterAdminRequest,
    RegisterAdminResponse,
    RegisterRequest,
    RegisterResponse,
)
from meditrack.schemas.common import MessageResponse
from meditrack.services.audit import AuditAction, AuditLogWriter, EntityKind
from meditrack.services.auth import authenticate_caretaker, authenticate_user
from meditrack.services.identity import IdentityProvider
from meditrack.services.mailer import Mailer, password_reset_email
from meditrack.services.security import (
    create_access_token,
    hash_password,
    verify_password,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])

PASSWORD_RESET_SUBJECT = "Reset Your Password - MediTrack"


@router.post("/register-admin", response_model=RegisterAdminResponse)
async def register_admin(
    payload: RegisterAdminRequest,
    session: AsyncSession = Depends(get_session),
    audit: AuditLogWriter = Depends(get_audit_writer),
) -> RegisterAdminResponse:
    """Register an admin inside an organization."""
    logger.info("Register admin request received for %s", payload.email)
    await ensure_email_available(session, email=payload.email)
    user = User(
        name=payload.name,
        email=payload.email,
        phone=payload.phone,
        password_hash=hash_password(payload.password),
        role=ensure_known_role(payload.role or UserRole.ADMIN.value),
        organization_id=payload.organization_id,
    )
    session.add(user)
    await commit_session(session)
    await audit.record(
        AuditAction.REGISTER_ADMIN,
        user.id,
        EntityKind.USER,
        user.id,
        user.name,
        {"data": {"email": user.email, "organizationId": user.organization_id}},
    )
    return RegisterAdminResponse(
        message="Admin registered successfully", user_id=user.id
    )


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    payload: RegisterRequest,
    session: AsyncSession = Depends(get_session),
    identity: IdentityProvider = Depends(get_identity_provider),
    audit: AuditLogWriter = Depends(get_audit_writer),
) -> RegisterResponse:
    """Create an identity account and its user record."""
    role = ensure_known_role(payload.role or UserRole.USER.value)
    try:
        account = await identity.create_account(
            email=payload.email, display_name=payload.name
        )
    except AccountExistsError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Registration failed: {exc}",
        ) from exc
    user = User(
        id=account.uid,
        email=payload.email,
        name=payload.name,
        role=role,
        password_hash=hash_password(payload.password),
    )
    session.add(user)
    await commit_session(session)
    await audit.record(
        AuditAction.REGISTER,
        user.id,
        EntityKind.USER,
        user.id,
        user.name,
        {"data": {"email": payload.email, "name": payload.name, "role": payload.role}},
    )
    return RegisterResponse(message="User registered successfully", uid=user.id)


@router.post("/login", response_model=LoginResponse)
async def login(
    payload: LoginRequest,
    session: AsyncSession = Depends(get_session),
    audit: AuditLogWriter = Depends(get_audit_writer),
    settings: Settings = Depends(get_settings),
) -> LoginResponse:
    """Verify credentials and issue a session token."""
    logger.info("Login request received for %s", payload.email)
    user = await authenticate_user(
        session, email=payload.email, password=payload.password
    )
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )
    token = create_access_token(
        {
            "userId": user.id,
            "email": user.email,
            "role": user.role,
            "name": user.name,
            "organizationId": user.organization_id,
        },
        settings,
    )
    await audit.record(
        AuditAction.LOGIN,
        user.id,
        EntityKind.USER,
        user.id,
        user.name,
        {"data": {"email": payload.email}},
    )
    return LoginResponse(
        token=token,
        user_id=user.id,
        email=user.email,
        name=user.name,
        role=user.role,
        organization_id=user.organization_id,
    )


@router.post("/caretaker-login", response_model=CaretakerLoginResponse)
async def caretaker_login(
    payload: LoginRequest,
    session: AsyncSession = Depends(get_session),
) -> CaretakerLoginResponse:
    """Return the patient a caretaker may follow."""
    if not payload.email or not payload.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email and password are required",
        )
    caretaker = await authenticate_caretaker(
        session, email=payload.email, password=payload.password
    )
    if caretaker is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )
    return CaretakerLoginResponse(patient_id=caretaker.patient_id)


@router.post("/update", response_model=MessageResponse)
async def update_profile(
    payload: ProfileUpdateRequest,
    session: AsyncSession = Depends(get_session),
    audit: AuditLogWriter = Depends(get_audit_writer),
) -> MessageResponse:
    """Update a user's own name, email or password."""
    if not payload.user_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="userId is required",
        )
    user = await session.get(User, payload.user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="User not found"
        )

    if payload.password:
        if not payload.current_password:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Current password is required to change password",
            )
        if not verify_password(payload.current_password, user.password_hash):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Incorrect current password",
            )

    old_data = {"name": user.name, "email": user.email}
    if payload.email is not None and payload.email != user.email:
        await ensure_email_available(session, email=payload.email)
        user.email = payload.email
    if payload.name is not None:
        user.name = payload.name
    if payload.password:
        user.password_hash = hash_password(payload.password)
    await commit_session(session)

    await audit.record(
        AuditAction.UPDATE,
        user.id,
        EntityKind.USER,
        user.id,
        user.name,
        {"oldData": old_data, "newData": {"name": user.name, "email": user.email}},
    )
    logger.info("User updated successfully: %s", user.id)
    return MessageResponse(message="User updated successfully")


@router.post("/request-password-reset", response_model=MessageResponse)
async def request_password_reset(
    payload: PasswordResetRequest,
    identity: IdentityProvider = Depends(get_identity_provider),
    mailer: Mailer = Depends(get_mailer),
    audit: AuditLogWriter = Depends(get_audit_writer),
) -> MessageResponse:
    """Email a password reset link."""
    try:
        account = await identity.get_account_by_email(payload.email)
    except AccountNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        ) from exc
    reset_link = await identity.generate_password_reset_link(account)
    try:
        await mailer.send(
            to=payload.email,
            subject=PASSWORD_RESET_SUBJECT,
            html=password_reset_email(reset_link),
        )
    except MailDeliveryError as exc:
        logger.error("Error sending reset email to %s: %s", payload.email, exc)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Error sending reset email",
        ) from exc
    await audit.record(
        AuditAction.REQUEST_PASSWORD_RESET,
        account.uid,
        EntityKind.USER,
        account.uid,
        account.display_name or "N/A",
        {"data": {"email": payload.email}},
    )
    return MessageResponse(message="Reset email sent successfully!")
