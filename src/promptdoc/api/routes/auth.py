"""Authentication and profile endpoints: register, login, logout, me."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from promptdoc.api.deps import Principal, require_user
from promptdoc.api.schemas.auth import (
    AuthResponse,
    LoginRequest,
    ProfileUpdate,
    RegisterRequest,
    UserInfo,
)
from promptdoc.audit import log_audit
from promptdoc.auth import create_access_token, hash_password, verify_password
from promptdoc.db import get_session
from promptdoc.models import User
from promptdoc.models.enums import ThemePreference, UserRole
from promptdoc.password_validation import validate_password

logger = logging.getLogger(__name__)
router = APIRouter(tags=["auth"])


def _user_info(user: User) -> UserInfo:
    return UserInfo(
        id=user.id,
        email=user.email,
        name=user.name,
        role=user.role.value,
        theme_preference=user.theme_preference.value,
        created_at=user.created_at,
    )


@router.post("/auth/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    body: RegisterRequest,
    request: Request,
    session: AsyncSession = Depends(get_session),
):
    email = body.email.strip().lower()
    pw_errors = validate_password(body.password, email)
    if pw_errors:
        raise HTTPException(status_code=422, detail=pw_errors)

    existing = await session.execute(select(User).where(User.email == email))
    if existing.scalar_one_or_none() is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User with this email already exists",
        )

    settings = request.app.state.settings
    needs_approval = settings.require_admin_approval
    user = User(
        email=email,
        password_hash=hash_password(body.password),
        name=body.name,
        role=UserRole.user,
        is_active=not needs_approval,
    )
    session.add(user)
    await session.flush()
    await log_audit(
        session, user_id=user.id, action="register",
        target_type="user", target_id=user.id,
    )
    await session.commit()
    logger.info("Registered user %s (pending approval: %s)", email, needs_approval)

    token = None if needs_approval else create_access_token(user.id, user.role.value, settings)
    return AuthResponse(access_token=token, user=_user_info(user))


@router.post("/auth/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    request: Request,
    session: AsyncSession = Depends(get_session),
):
    result = await session.execute(
        select(User).where(User.email == body.email.strip().lower())
    )
    user = result.scalar_one_or_none()
    if user is None or not verify_password(body.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account disabled",
        )

    await session.execute(
        update(User)
        .where(User.id == user.id)
        .values(last_login_at=datetime.now(timezone.utc))
    )
    await log_audit(
        session, user_id=user.id, action="login", target_type="user",
        target_id=user.id,
    )
    await session.commit()

    return AuthResponse(
        access_token=create_access_token(
            user.id, user.role.value, request.app.state.settings,
        ),
        user=_user_info(user),
    )


@router.post("/auth/logout")
async def logout():
    # Tokens are stateless; the client discards its copy
    return {"detail": "Logged out"}


@router.get("/me", response_model=UserInfo)
async def get_me(
    principal: Principal = Depends(require_user),
    session: AsyncSession = Depends(get_session),
):
    user = await session.get(User, principal.id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return _user_info(user)


@router.patch("/me", response_model=UserInfo)
async def update_profile(
    body: ProfileUpdate,
    principal: Principal = Depends(require_user),
    session: AsyncSession = Depends(get_session),
):
    if body.theme_preference is not None and body.theme_preference not in (
        t.value for t in ThemePreference
    ):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="theme_preference must be 'light', 'dark', or 'system'",
        )

    user = await session.get(User, principal.id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    if body.name is not None:
        user.name = body.name
    if body.theme_preference is not None:
        user.theme_preference = ThemePreference(body.theme_preference)
    await session.commit()

    return _user_info(user)
