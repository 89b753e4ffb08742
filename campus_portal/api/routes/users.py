"""User Routes — directory listing and profile updates.

Invariants:
    - Listing the directory is ADMIN only
    - A user may update only their own record unless ADMIN
    - `role` is writable only by ADMIN (403 otherwise, even on one's own record)
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from campus_portal.api.deps import get_current_actor, get_directory_actor, require_admin
from campus_portal.core.authorization import authorize_owner_or_admin, ensure_role
from campus_portal.core.domain_types import Role
from campus_portal.core.errors import ResourceNotFoundError
from campus_portal.core.identity import Actor
from campus_portal.infrastructure.database import get_db
from campus_portal.models.user import User
from campus_portal.schemas.user import UserResponse, UserUpdate

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/users", tags=["users"])


async def get_user_or_404(db: AsyncSession, user_id: str) -> User:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise ResourceNotFoundError("User", user_id)
    return user


@router.get("", response_model=list[UserResponse])
async def list_users(
    _admin: Actor = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(select(User).order_by(User.created_at.desc()))
    return [UserResponse.model_validate(u) for u in result.scalars().all()]


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    _actor: Actor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    return UserResponse.model_validate(await get_user_or_404(db, user_id))


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    body: UserUpdate,
    actor: Actor = Depends(get_directory_actor),
    db: AsyncSession = Depends(get_db),
):
    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    if "role" in changes:
        ensure_role(actor, Role.ADMIN, "Only admins can update roles")
    authorize_owner_or_admin(actor, user_id, "update", "profile")

    user = await get_user_or_404(db, user_id)
    for field, value in changes.items():
        if field == "role":
            value = value.value
            logger.info(
                f"Role of {user_id} set to {value}",
                extra={"subject_id": actor.subject_id},
            )
        setattr(user, field, value)
    await db.commit()
    await db.refresh(user)
    return UserResponse.model_validate(user)
