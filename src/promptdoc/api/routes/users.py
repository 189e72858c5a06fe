"""User management endpoints (admin-only)."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from promptdoc.api.deps import Principal, require_admin
from promptdoc.api.schemas.users import UpdateUserRequest, UserResponse
from promptdoc.audit import log_audit
from promptdoc.db import get_session
from promptdoc.models import User
from promptdoc.models.enums import UserRole

logger = logging.getLogger(__name__)
router = APIRouter(tags=["users"])


def _user_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        name=user.name,
        role=user.role.value,
        is_active=user.is_active,
        created_at=user.created_at,
        last_login_at=user.last_login_at,
    )


async def _get_user_or_404(session: AsyncSession, user_id: int) -> User:
    user = await session.get(User, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.get("/users", response_model=list[UserResponse])
async def list_users(
    include_inactive: bool = False,
    admin: Principal = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    query = select(User).order_by(User.created_at.desc(), User.id.desc())
    if not include_inactive:
        query = query.where(User.is_active.is_(True))
    result = await session.execute(query)
    return [_user_response(u) for u in result.scalars().all()]


@router.get("/users/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    admin: Principal = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    return _user_response(await _get_user_or_404(session, user_id))


@router.patch("/users/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    body: UpdateUserRequest,
    admin: Principal = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    user = await _get_user_or_404(session, user_id)

    if body.role is not None:
        if body.role not in ("admin", "user"):
            raise HTTPException(status_code=422, detail="Role must be 'admin' or 'user'")
        user.role = UserRole(body.role)

    if body.is_active is not None:
        if user_id == admin.id and not body.is_active:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot deactivate yourself",
            )
        user.is_active = body.is_active

    await log_audit(
        session, user_id=admin.id, action="update_user",
        target_type="user", target_id=user_id,
        detail=body.model_dump(exclude_none=True),
    )
    await session.commit()
    return _user_response(user)


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: int,
    admin: Principal = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    user = await _get_user_or_404(session, user_id)

    if user_id == admin.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot delete yourself")

    # Soft delete: documents stay owned by the deactivated account
    user.is_active = False
    await log_audit(
        session, user_id=admin.id, action="delete_user",
        target_type="user", target_id=user_id,
    )
    await session.commit()
