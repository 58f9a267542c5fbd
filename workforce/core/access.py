"""
Role model and the access filter.

Every read or mutation on a project, task, time entry or leave request is
decided by exactly one predicate below.  Predicates are pure: they look only
at the actor, the record and an explicit ``AccessScope`` that was resolved
beforehand, so repeated calls on unchanged data give the same answer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from workforce.core.enums import LeaveStatus, Role


REVIEWER_ROLES = frozenset({Role.MANAGER, Role.ADMIN})


@dataclass(frozen=True)
class Actor:
    """The authenticated user as seen by the lifecycle and access logic."""

    id: int
    role: Role
    department: str | None = None

    @classmethod
    def from_user(cls, user: Any) -> "Actor":
        return cls(id=user.id, role=Role(user.role), department=user.department)

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    @property
    def is_manager(self) -> bool:
        return self.role is Role.MANAGER

    @property
    def is_employee(self) -> bool:
        return self.role is Role.EMPLOYEE


@dataclass(frozen=True)
class AccessScope:
    """Project/user relationships of one actor, resolved from storage."""

    managed_project_ids: frozenset[int] = field(default_factory=frozenset)
    managed_user_ids: frozenset[int] = field(default_factory=frozenset)
    assigned_project_ids: frozenset[int] = field(default_factory=frozenset)


EMPTY_SCOPE = AccessScope()


# ── Projects ────────────────────────────────────────────────────────
def can_view_project(actor: Actor, project: Any, scope: AccessScope) -> bool:
    if actor.is_admin or project.manager_id == actor.id:
        return True
    if actor.is_manager and project.id in scope.managed_project_ids:
        return True
    return project.id in scope.assigned_project_ids


def can_create_project(actor: Actor) -> bool:
    return actor.role in REVIEWER_ROLES


def can_edit_project(actor: Actor, project: Any) -> bool:
    if actor.is_admin:
        return True
    return actor.is_manager and project.manager_id == actor.id


# ── Tasks ───────────────────────────────────────────────────────────
def can_view_task(actor: Actor, task: Any, scope: AccessScope) -> bool:
    if actor.is_admin or task.assignee_id == actor.id:
        return True
    return actor.is_manager and task.project_id in scope.managed_project_ids


def can_create_task(actor: Actor, project_id: int | None, scope: AccessScope) -> bool:
    """Employees always may (the task is forced onto them); managers only
    inside projects they manage."""
    if actor.is_admin or actor.is_employee:
        return True
    return project_id is not None and project_id in scope.managed_project_ids


def can_edit_task(actor: Actor, task: Any, scope: AccessScope) -> bool:
    if actor.is_admin:
        return True
    if actor.is_manager:
        return task.project_id is not None and task.project_id in scope.managed_project_ids
    return task.assignee_id == actor.id


# ── Time entries ────────────────────────────────────────────────────
def can_view_time_entry(actor: Actor, entry: Any, scope: AccessScope) -> bool:
    if actor.is_admin or entry.user_id == actor.id:
        return True
    return actor.is_manager and entry.user_id in scope.managed_user_ids


# ── Leave requests ──────────────────────────────────────────────────
def can_view_leave_request(actor: Actor, leave: Any) -> bool:
    if actor.is_admin or leave.user_id == actor.id:
        return True
    return actor.is_manager and leave.status == LeaveStatus.PENDING


def can_review_leave(actor: Actor) -> bool:
    return actor.role in REVIEWER_ROLES


def can_cancel_leave(actor: Actor, leave: Any) -> bool:
    return leave.user_id == actor.id


# ── Users ───────────────────────────────────────────────────────────
def can_list_users(actor: Actor) -> bool:
    return actor.role in REVIEWER_ROLES
