"""User directory, filtered by role."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from workforce.api.v1.deps import get_actor, get_db
from workforce.core.access import Actor, can_list_users
from workforce.core.enums import Role
from workforce.core.exceptions import AuthorizationDenied
from workforce.models.user import User
from workforce.schemas.user import UserRead

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[UserRead])
async def list_users(
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
):
    """Admins see everyone, managers see employees, employees are refused."""
    if not can_list_users(actor):
        raise AuthorizationDenied("Not authorized to list users")

    stmt = select(User).order_by(User.name)
    if actor.is_manager:
        stmt = stmt.where(User.role == Role.EMPLOYEE.value)
    result = await db.execute(stmt)
    return result.scalars().all()
