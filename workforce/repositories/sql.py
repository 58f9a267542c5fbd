"""
SQLAlchemy (async) implementations of the repository protocols.

Every write commits before returning so a service call maps to exactly one
transaction.  Lifecycle transitions are conditional UPDATEs: a concurrent
request that lost the race sees zero affected rows and gets ``None`` back.
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any, Sequence

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from workforce.core.enums import LeaveStatus, TimeEntryStatus
from workforce.core.exceptions import AlreadyClockedIn
from workforce.models.leave_request import LeaveRequest
from workforce.models.project import Project, Task
from workforce.models.time_entry import TimeEntry
from workforce.repositories.base import (LeaveDraft, LeaveTransition,
                                         ProjectDraft, TaskDraft,
                                         TimeEntryClose)

logger = logging.getLogger(__name__)


def _drop_none(values: dict[str, Any]) -> dict[str, Any]:
    """Leave unset optional columns to their model defaults."""
    return {k: v for k, v in values.items() if v is not None}


class _SqlRepository:
    model: Any

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, record_id: int) -> Any | None:
        return await self.session.get(self.model, record_id)

    async def _add(self, record: Any) -> Any:
        self.session.add(record)
        await self.session.commit()
        await self.session.refresh(record)
        return record

    async def _update_where(self, record_id: int, values: dict[str, Any], *conditions: Any) -> Any | None:
        result = await self.session.execute(
            update(self.model)
            .where(self.model.id == record_id, *conditions)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await self.session.rollback()
            return None
        await self.session.commit()
        return await self.session.get(self.model, record_id, populate_existing=True)

    async def _scalars(self, stmt: Any) -> Sequence[Any]:
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


# ── Time entries ────────────────────────────────────────────────────
class SqlTimeEntryRepository(_SqlRepository):
    model = TimeEntry

    async def get_open_for_user(self, user_id: int, lock: bool = False) -> TimeEntry | None:
        stmt = (
            select(TimeEntry)
            .where(
                TimeEntry.user_id == user_id,
                TimeEntry.status == TimeEntryStatus.IN_PROGRESS.value,
            )
            .order_by(TimeEntry.clock_in.desc())
            .limit(1)
        )
        if lock:
            stmt = stmt.with_for_update()
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_all(self) -> Sequence[TimeEntry]:
        return await self._scalars(select(TimeEntry).order_by(TimeEntry.clock_in.desc()))

    async def list_for_users(self, user_ids: Sequence[int]) -> Sequence[TimeEntry]:
        if not user_ids:
            return []
        return await self._scalars(
            select(TimeEntry)
            .where(TimeEntry.user_id.in_(list(user_ids)))
            .order_by(TimeEntry.clock_in.desc())
        )

    async def create_open(self, user_id: int, clock_in: Any) -> TimeEntry:
        entry = TimeEntry(
            user_id=user_id,
            clock_in=clock_in,
            status=TimeEntryStatus.IN_PROGRESS.value,
            break_minutes=0,
        )
        try:
            return await self._add(entry)
        except IntegrityError:
            # Lost the race against a concurrent clock-in for the same user.
            await self.session.rollback()
            logger.info("Concurrent clock-in rejected for user %s", user_id)
            raise AlreadyClockedIn()

    async def close(self, entry_id: int, change: TimeEntryClose) -> TimeEntry | None:
        return await self._update_where(
            entry_id,
            {**asdict(change), "status": TimeEntryStatus.COMPLETED.value},
            TimeEntry.status == TimeEntryStatus.IN_PROGRESS.value,
        )


# ── Leave requests ──────────────────────────────────────────────────
class SqlLeaveRequestRepository(_SqlRepository):
    model = LeaveRequest

    async def list_all(self, status: str | None = None) -> Sequence[LeaveRequest]:
        stmt = select(LeaveRequest)
        if status:
            stmt = stmt.where(LeaveRequest.status == status)
        return await self._scalars(stmt.order_by(LeaveRequest.requested_on.desc()))

    async def list_for_user(self, user_id: int, status: str | None = None) -> Sequence[LeaveRequest]:
        stmt = select(LeaveRequest).where(LeaveRequest.user_id == user_id)
        if status:
            stmt = stmt.where(LeaveRequest.status == status)
        return await self._scalars(stmt.order_by(LeaveRequest.requested_on.desc()))

    async def create(self, draft: LeaveDraft) -> LeaveRequest:
        return await self._add(
            LeaveRequest(**asdict(draft), status=LeaveStatus.PENDING.value)
        )

    async def transition(self, request_id: int, change: LeaveTransition) -> LeaveRequest | None:
        values = asdict(change)
        values["status"] = LeaveStatus(values["status"]).value
        return await self._update_where(
            request_id,
            values,
            LeaveRequest.status == LeaveStatus.PENDING.value,
        )


# ── Projects & tasks ────────────────────────────────────────────────
class SqlProjectRepository(_SqlRepository):
    model = Project

    async def list_all(self) -> Sequence[Project]:
        return await self._scalars(select(Project).order_by(Project.id))

    async def list_by_ids(self, project_ids: Sequence[int]) -> Sequence[Project]:
        if not project_ids:
            return []
        return await self._scalars(
            select(Project).where(Project.id.in_(list(project_ids))).order_by(Project.id)
        )

    async def list_by_manager(self, manager_id: int) -> Sequence[Project]:
        return await self._scalars(
            select(Project).where(Project.manager_id == manager_id).order_by(Project.id)
        )

    async def create(self, draft: ProjectDraft) -> Project:
        return await self._add(Project(**_drop_none(asdict(draft))))

    async def update(self, project_id: int, changes: dict[str, Any]) -> Project | None:
        if not changes:
            return await self.get(project_id)
        return await self._update_where(project_id, changes)


class SqlTaskRepository(_SqlRepository):
    model = Task

    async def list_all(self) -> Sequence[Task]:
        return await self._scalars(select(Task).order_by(Task.id))

    async def list_by_assignee(self, assignee_id: int) -> Sequence[Task]:
        return await self._scalars(
            select(Task).where(Task.assignee_id == assignee_id).order_by(Task.id)
        )

    async def list_by_projects(self, project_ids: Sequence[int]) -> Sequence[Task]:
        if not project_ids:
            return []
        return await self._scalars(
            select(Task).where(Task.project_id.in_(list(project_ids))).order_by(Task.id)
        )

    async def create(self, draft: TaskDraft) -> Task:
        return await self._add(Task(**_drop_none(asdict(draft))))

    async def update(self, task_id: int, changes: dict[str, Any]) -> Task | None:
        if not changes:
            return await self.get(task_id)
        return await self._update_where(task_id, changes)
