"""
Time entry lifecycle: ``none → in_progress → completed``.

A user has at most one open entry.  Clock-in refuses to open a second one;
clock-out closes the open one exactly once and records the elapsed hours.
"""

from __future__ import annotations

import logging
from typing import Any

from workforce.core.access import Actor, AccessScope, can_view_time_entry
from workforce.core.enums import TimeEntryStatus
from workforce.core.exceptions import (AlreadyClockedIn, AlreadyCompleted,
                                       NotClockedIn)
from workforce.repositories.base import TimeEntryClose, TimeEntryRepository
from workforce.services.clock import Clock, elapsed_hours, utcnow

logger = logging.getLogger(__name__)


class TimeEntryService:
    def __init__(self, entries: TimeEntryRepository, clock: Clock = utcnow) -> None:
        self.entries = entries
        self.clock = clock

    async def current(self, user_id: int) -> Any | None:
        return await self.entries.get_open_for_user(user_id)

    async def clock_in(self, user_id: int) -> Any:
        if await self.entries.get_open_for_user(user_id, lock=True) is not None:
            raise AlreadyClockedIn()

        entry = await self.entries.create_open(user_id, self.clock())
        logger.info("User %s clocked in (entry %s)", user_id, entry.id)
        return entry

    async def clock_out(self, user_id: int, notes: str | None = None) -> Any:
        entry = await self.entries.get_open_for_user(user_id, lock=True)
        if entry is None:
            raise NotClockedIn()
        if entry.status == TimeEntryStatus.COMPLETED:
            raise AlreadyCompleted()

        clock_out = self.clock()
        change = TimeEntryClose(
            clock_out=clock_out,
            total_hours=elapsed_hours(entry.clock_in, clock_out),
            notes=notes or "",
        )
        closed = await self.entries.close(entry.id, change)
        if closed is None:
            # Another request completed it between our read and write.
            raise AlreadyCompleted()

        logger.info(
            "User %s clocked out (entry %s, %.2f h)", user_id, closed.id, change.total_hours
        )
        return closed

    async def list_visible(self, actor: Actor, scope: AccessScope) -> list[Any]:
        if actor.is_admin:
            rows = await self.entries.list_all()
        else:
            rows = await self.entries.list_for_users(
                sorted(scope.managed_user_ids | {actor.id}) if actor.is_manager else [actor.id]
            )
        return [e for e in rows if can_view_time_entry(actor, e, scope)]
