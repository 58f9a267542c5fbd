"""Role-based access predicates."""

from types import SimpleNamespace

import pytest

from workforce.core.access import (EMPTY_SCOPE, AccessScope, Actor,
                                   can_cancel_leave, can_create_project,
                                   can_create_task, can_edit_project,
                                   can_edit_task, can_list_users,
                                   can_review_leave, can_view_leave_request,
                                   can_view_project, can_view_task,
                                   can_view_time_entry)
from workforce.core.enums import Role

EMPLOYEE = Actor(id=1, role=Role.EMPLOYEE)
MANAGER = Actor(id=2, role=Role.MANAGER)
OTHER_MANAGER = Actor(id=3, role=Role.MANAGER)
ADMIN = Actor(id=4, role=Role.ADMIN)

PROJECT = SimpleNamespace(id=100, manager_id=MANAGER.id)
MANAGER_SCOPE = AccessScope(
    managed_project_ids=frozenset({PROJECT.id}),
    managed_user_ids=frozenset({EMPLOYEE.id}),
)
EMPLOYEE_SCOPE = AccessScope(assigned_project_ids=frozenset({PROJECT.id}))


def test_actor_from_user_row():
    row = SimpleNamespace(id=9, role="manager", department="Ops")
    actor = Actor.from_user(row)
    assert actor == Actor(id=9, role=Role.MANAGER, department="Ops")
    assert actor.is_manager and not actor.is_admin and not actor.is_employee


def test_actor_rejects_unknown_role():
    with pytest.raises(ValueError):
        Actor.from_user(SimpleNamespace(id=1, role="kiosk", department=None))


# ── Projects ────────────────────────────────────────────────────────
def test_project_visibility():
    assert can_view_project(ADMIN, PROJECT, EMPTY_SCOPE)
    assert can_view_project(MANAGER, PROJECT, MANAGER_SCOPE)
    assert not can_view_project(OTHER_MANAGER, PROJECT, EMPTY_SCOPE)
    assert can_view_project(EMPLOYEE, PROJECT, EMPLOYEE_SCOPE)
    assert not can_view_project(EMPLOYEE, PROJECT, EMPTY_SCOPE)


def test_project_writes():
    assert not can_create_project(EMPLOYEE)
    assert can_create_project(MANAGER)
    assert can_create_project(ADMIN)

    assert can_edit_project(MANAGER, PROJECT)
    assert can_edit_project(ADMIN, PROJECT)
    assert not can_edit_project(OTHER_MANAGER, PROJECT)
    assert not can_edit_project(EMPLOYEE, PROJECT)


# ── Tasks ───────────────────────────────────────────────────────────
def test_task_visibility():
    mine = SimpleNamespace(id=1, project_id=PROJECT.id, assignee_id=EMPLOYEE.id)
    unassigned = SimpleNamespace(id=2, project_id=PROJECT.id, assignee_id=None)
    loose = SimpleNamespace(id=3, project_id=None, assignee_id=None)

    assert can_view_task(EMPLOYEE, mine, EMPLOYEE_SCOPE)
    assert not can_view_task(EMPLOYEE, unassigned, EMPLOYEE_SCOPE)
    assert can_view_task(MANAGER, unassigned, MANAGER_SCOPE)
    assert not can_view_task(OTHER_MANAGER, unassigned, EMPTY_SCOPE)
    assert not can_view_task(MANAGER, loose, MANAGER_SCOPE)
    assert can_view_task(ADMIN, loose, EMPTY_SCOPE)


def test_task_creation_rights():
    assert can_create_task(EMPLOYEE, None, EMPTY_SCOPE)
    assert can_create_task(ADMIN, None, EMPTY_SCOPE)
    assert can_create_task(MANAGER, PROJECT.id, MANAGER_SCOPE)
    assert not can_create_task(MANAGER, None, MANAGER_SCOPE)
    assert not can_create_task(OTHER_MANAGER, PROJECT.id, EMPTY_SCOPE)


def test_task_edit_rights():
    mine = SimpleNamespace(id=1, project_id=PROJECT.id, assignee_id=EMPLOYEE.id)
    someone_elses = SimpleNamespace(id=2, project_id=PROJECT.id, assignee_id=99)

    assert can_edit_task(EMPLOYEE, mine, EMPLOYEE_SCOPE)
    assert not can_edit_task(EMPLOYEE, someone_elses, EMPLOYEE_SCOPE)
    assert can_edit_task(MANAGER, someone_elses, MANAGER_SCOPE)
    assert not can_edit_task(OTHER_MANAGER, someone_elses, EMPTY_SCOPE)
    assert can_edit_task(ADMIN, someone_elses, EMPTY_SCOPE)


# ── Time entries ────────────────────────────────────────────────────
def test_time_entry_visibility():
    entry = SimpleNamespace(user_id=EMPLOYEE.id)
    outsider = SimpleNamespace(user_id=77)

    assert can_view_time_entry(EMPLOYEE, entry, EMPTY_SCOPE)
    assert can_view_time_entry(MANAGER, entry, MANAGER_SCOPE)
    assert not can_view_time_entry(MANAGER, outsider, MANAGER_SCOPE)
    assert not can_view_time_entry(OTHER_MANAGER, entry, EMPTY_SCOPE)
    assert can_view_time_entry(ADMIN, outsider, EMPTY_SCOPE)


# ── Leave requests ──────────────────────────────────────────────────
@pytest.mark.parametrize("status", ["approved", "rejected", "cancelled"])
def test_manager_sees_only_pending_leave_of_others(status):
    pending = SimpleNamespace(user_id=EMPLOYEE.id, status="pending")
    decided = SimpleNamespace(user_id=EMPLOYEE.id, status=status)

    assert can_view_leave_request(MANAGER, pending)
    assert not can_view_leave_request(MANAGER, decided)
    assert can_view_leave_request(EMPLOYEE, decided)
    assert can_view_leave_request(ADMIN, decided)


def test_leave_review_and_cancel_rights():
    leave = SimpleNamespace(user_id=EMPLOYEE.id, status="pending")

    assert not can_review_leave(EMPLOYEE)
    assert can_review_leave(MANAGER)
    assert can_review_leave(ADMIN)

    assert can_cancel_leave(EMPLOYEE, leave)
    assert not can_cancel_leave(MANAGER, leave)
    assert not can_cancel_leave(ADMIN, leave)


def test_user_listing():
    assert not can_list_users(EMPLOYEE)
    assert can_list_users(MANAGER)
    assert can_list_users(ADMIN)


def test_predicates_are_repeatable():
    task = SimpleNamespace(id=1, project_id=PROJECT.id, assignee_id=None)
    answers = {can_view_task(MANAGER, task, MANAGER_SCOPE) for _ in range(5)}
    assert answers == {True}
