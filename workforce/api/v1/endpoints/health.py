"""
Health and status endpoints.

``/health`` is public and only reports connectivity; ``/status`` needs a
logged-in user and returns a few live counters.
"""

from __future__ import annotations

import logging

import redis.asyncio as aioredis
from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from workforce.api.v1.deps import get_current_active_user, get_db
from workforce.core.config import settings
from workforce.core.enums import LeaveStatus, TimeEntryStatus
from workforce.models.leave_request import LeaveRequest
from workforce.models.time_entry import TimeEntry
from workforce.models.user import User
from workforce.schemas.common import HealthResponse, StatusResponse

router = APIRouter(tags=["health"])
logger = logging.getLogger(__name__)


@router.get("/health", response_model=HealthResponse)
async def health(db: AsyncSession = Depends(get_db)) -> HealthResponse:
    """Public health check — DB and Redis connectivity."""
    result = HealthResponse(db=False, redis=False)

    try:
        await db.execute(select(1))
        result.db = True
    except Exception as e:
        logger.error("Health check DB failure: %s", e)

    try:
        r = aioredis.from_url(settings.REDIS_URL, socket_connect_timeout=1)
        try:
            await r.ping()
            result.redis = True
        finally:
            await r.aclose()
    except Exception as e:
        logger.error("Health check Redis failure: %s", e)

    return result


@router.get("/status", response_model=StatusResponse)
async def system_status(
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_active_user),
) -> StatusResponse:
    """Active users, people currently clocked in and leave awaiting review."""
    users = await db.execute(
        select(func.count(User.id)).where(User.is_active.is_(True))
    )
    open_entries = await db.execute(
        select(func.count(TimeEntry.id)).where(
            TimeEntry.status == TimeEntryStatus.IN_PROGRESS.value
        )
    )
    pending = await db.execute(
        select(func.count(LeaveRequest.id)).where(
            LeaveRequest.status == LeaveStatus.PENDING.value
        )
    )

    return StatusResponse(
        total_users=users.scalar() or 0,
        open_time_entries=open_entries.scalar() or 0,
        pending_leave_requests=pending.scalar() or 0,
        status="operational",
    )
