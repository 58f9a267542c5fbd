"""
Persistence capabilities the services depend on.

Services only ever see these protocols; the SQLAlchemy implementation lives
in ``workforce.repositories.sql`` and tests plug in in-memory fakes.  Each
transition is described by a small frozen change set carrying exactly the
fields that transition is allowed to write.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Protocol, Sequence

from workforce.core.enums import LeaveStatus


# ── Change sets ─────────────────────────────────────────────────────
@dataclass(frozen=True)
class TimeEntryClose:
    clock_out: datetime
    total_hours: float
    notes: str


@dataclass(frozen=True)
class LeaveDraft:
    user_id: int
    type: str
    start_date: date
    end_date: date
    reason: str | None
    requested_on: datetime


@dataclass(frozen=True)
class LeaveCancellation:
    status: LeaveStatus = LeaveStatus.CANCELLED


@dataclass(frozen=True)
class LeaveReview:
    status: LeaveStatus
    reviewer_id: int
    reviewed_on: datetime
    comments: str | None


LeaveTransition = LeaveCancellation | LeaveReview


@dataclass(frozen=True)
class ProjectDraft:
    name: str
    manager_id: int
    description: str | None = None
    deadline: date | None = None
    status: str | None = None


@dataclass(frozen=True)
class TaskDraft:
    title: str
    description: str | None = None
    project_id: int | None = None
    assignee_id: int | None = None
    status: str | None = None
    priority: str | None = None
    due_date: date | None = None


# ── Protocols ───────────────────────────────────────────────────────
class TimeEntryRepository(Protocol):
    async def get_open_for_user(self, user_id: int, lock: bool = False) -> Any | None:
        """Return the user's in_progress entry; ``lock`` takes a row lock where supported."""
        ...

    async def list_all(self) -> Sequence[Any]: ...

    async def list_for_users(self, user_ids: Sequence[int]) -> Sequence[Any]: ...

    async def create_open(self, user_id: int, clock_in: datetime) -> Any:
        """Insert an in_progress entry; raise ``AlreadyClockedIn`` if one exists."""
        ...

    async def close(self, entry_id: int, change: TimeEntryClose) -> Any | None:
        """Complete the entry only if still in_progress; ``None`` otherwise."""
        ...


class LeaveRequestRepository(Protocol):
    async def get(self, request_id: int) -> Any | None: ...

    async def list_all(self, status: str | None = None) -> Sequence[Any]: ...

    async def list_for_user(self, user_id: int, status: str | None = None) -> Sequence[Any]: ...

    async def create(self, draft: LeaveDraft) -> Any: ...

    async def transition(self, request_id: int, change: LeaveTransition) -> Any | None:
        """Apply *change* only if the request is still pending; ``None`` otherwise."""
        ...


class ProjectRepository(Protocol):
    async def get(self, project_id: int) -> Any | None: ...

    async def list_all(self) -> Sequence[Any]: ...

    async def list_by_ids(self, project_ids: Sequence[int]) -> Sequence[Any]: ...

    async def list_by_manager(self, manager_id: int) -> Sequence[Any]: ...

    async def create(self, draft: ProjectDraft) -> Any: ...

    async def update(self, project_id: int, changes: dict[str, Any]) -> Any | None: ...


class TaskRepository(Protocol):
    async def get(self, task_id: int) -> Any | None: ...

    async def list_all(self) -> Sequence[Any]: ...

    async def list_by_assignee(self, assignee_id: int) -> Sequence[Any]: ...

    async def list_by_projects(self, project_ids: Sequence[int]) -> Sequence[Any]: ...

    async def create(self, draft: TaskDraft) -> Any: ...

    async def update(self, task_id: int, changes: dict[str, Any]) -> Any | None: ...
