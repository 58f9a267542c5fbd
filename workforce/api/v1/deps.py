"""
FastAPI dependencies — auth guards, database session and service wiring.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Cookie, Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from workforce.core.access import AccessScope, Actor
from workforce.core.config import settings
from workforce.core.exceptions import (AuthenticationRequired,
                                       AuthorizationDenied)
from workforce.core.security import decode_access_token
from workforce.db.session import get_db
from workforce.models.user import User
from workforce.repositories.sql import (SqlLeaveRequestRepository,
                                        SqlProjectRepository,
                                        SqlTaskRepository,
                                        SqlTimeEntryRepository)
from workforce.services.leave_requests import LeaveRequestService
from workforce.services.projects import ProjectService, TaskService
from workforce.services.scope import resolve_scope
from workforce.services.time_entries import TimeEntryService

# auto_error=False so we can fall back to the cookie when the header is missing
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_V1_PREFIX}/auth/login", auto_error=False
)

__all__ = [
    "get_db",
    "get_current_user",
    "get_current_active_user",
    "get_actor",
    "require_admin",
]


# ── Auth dependencies ───────────────────────────────────────────────
async def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    access_token: Optional[str] = Cookie(default=None),  # HttpOnly cookie
    db: AsyncSession = Depends(get_db),
) -> User:
    """Decode JWT from Header OR Cookie, look up user."""
    final_token = token
    if not final_token and access_token:
        # The login endpoint stores "Bearer <token>"
        final_token = access_token.removeprefix("Bearer ").strip()

    if not final_token:
        raise AuthenticationRequired("Could not validate credentials")

    payload = decode_access_token(final_token)
    if payload is None or payload.get("sub") is None:
        raise AuthenticationRequired("Could not validate credentials")

    try:
        user_id = int(payload["sub"])
    except ValueError:
        raise AuthenticationRequired("Invalid token subject")

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise AuthenticationRequired("Could not validate credentials")
    return user


async def get_current_active_user(
    current_user: User = Depends(get_current_user),
) -> User:
    """Reject inactive accounts."""
    if not current_user.is_active:
        raise AuthorizationDenied("User account is inactive")
    return current_user


async def get_actor(current_user: User = Depends(get_current_active_user)) -> Actor:
    return Actor.from_user(current_user)


async def require_admin(actor: Actor = Depends(get_actor)) -> Actor:
    """Only allow admin role to proceed."""
    if not actor.is_admin:
        raise AuthorizationDenied("Admin privileges required")
    return actor


async def get_access_scope(
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> AccessScope:
    return await resolve_scope(actor, SqlProjectRepository(db), SqlTaskRepository(db))


# ── Services ────────────────────────────────────────────────────────
def get_time_entry_service(db: AsyncSession = Depends(get_db)) -> TimeEntryService:
    return TimeEntryService(SqlTimeEntryRepository(db))


def get_leave_request_service(db: AsyncSession = Depends(get_db)) -> LeaveRequestService:
    return LeaveRequestService(SqlLeaveRequestRepository(db))


def get_project_service(db: AsyncSession = Depends(get_db)) -> ProjectService:
    return ProjectService(SqlProjectRepository(db), SqlTaskRepository(db))


def get_task_service(db: AsyncSession = Depends(get_db)) -> TaskService:
    return TaskService(SqlTaskRepository(db), SqlProjectRepository(db))
