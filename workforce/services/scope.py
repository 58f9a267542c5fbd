"""Resolve the project/user relationships the access predicates consume."""

from __future__ import annotations

from workforce.core.access import EMPTY_SCOPE, AccessScope, Actor
from workforce.repositories.base import ProjectRepository, TaskRepository


async def resolve_scope(
    actor: Actor,
    projects: ProjectRepository,
    tasks: TaskRepository,
) -> AccessScope:
    """Admins need no scope; managers get their projects and the people
    working in them; everyone gets the projects they hold tasks in."""
    if actor.is_admin:
        return EMPTY_SCOPE

    assigned = await tasks.list_by_assignee(actor.id)
    assigned_project_ids = frozenset(t.project_id for t in assigned if t.project_id is not None)

    if not actor.is_manager:
        return AccessScope(assigned_project_ids=assigned_project_ids)

    managed = await projects.list_by_manager(actor.id)
    managed_project_ids = frozenset(p.id for p in managed)
    managed_tasks = await tasks.list_by_projects(sorted(managed_project_ids))
    managed_user_ids = frozenset(
        t.assignee_id for t in managed_tasks if t.assignee_id is not None
    )
    return AccessScope(
        managed_project_ids=managed_project_ids,
        managed_user_ids=managed_user_ids,
        assigned_project_ids=assigned_project_ids,
    )
