"""
Project and task records.

Plain CRUD; the only rules are the access predicates: who may see a record
and which fields a given role may change.
"""

from __future__ import annotations

import logging
from typing import Any

from workforce.core.access import (Actor, can_create_project,
                                   can_create_task, can_edit_project,
                                   can_edit_task, can_view_project,
                                   can_view_task)
from workforce.core.exceptions import AuthorizationDenied, NotFoundError
from workforce.repositories.base import (ProjectDraft, ProjectRepository,
                                         TaskDraft, TaskRepository)
from workforce.services.scope import resolve_scope

logger = logging.getLogger(__name__)

# Employees may only move their own tasks along.
EMPLOYEE_TASK_FIELDS = frozenset({"status"})


class ProjectService:
    def __init__(self, projects: ProjectRepository, tasks: TaskRepository) -> None:
        self.projects = projects
        self.tasks = tasks

    async def _load(self, project_id: int) -> Any:
        project = await self.projects.get(project_id)
        if project is None:
            raise NotFoundError("Project not found")
        return project

    async def list_visible(self, actor: Actor) -> list[Any]:
        if actor.is_admin:
            return list(await self.projects.list_all())
        scope = await resolve_scope(actor, self.projects, self.tasks)
        ids = scope.managed_project_ids | scope.assigned_project_ids
        rows = await self.projects.list_by_ids(sorted(ids))
        return [p for p in rows if can_view_project(actor, p, scope)]

    async def get(self, actor: Actor, project_id: int) -> Any:
        project = await self._load(project_id)
        scope = await resolve_scope(actor, self.projects, self.tasks)
        if not can_view_project(actor, project, scope):
            raise AuthorizationDenied("Not authorized to view this project")
        return project

    async def create(self, actor: Actor, data: dict[str, Any]) -> Any:
        if not can_create_project(actor):
            raise AuthorizationDenied("Only managers can create projects")

        manager_id = data.get("manager_id") if actor.is_admin else None
        project = await self.projects.create(
            ProjectDraft(
                name=data["name"],
                manager_id=manager_id or actor.id,
                description=data.get("description"),
                deadline=data.get("deadline"),
                status=data.get("status"),
            )
        )
        logger.info("Project %s created by user %s", project.id, actor.id)
        return project

    async def update(self, actor: Actor, project_id: int, changes: dict[str, Any]) -> Any:
        project = await self._load(project_id)
        if not can_edit_project(actor, project):
            raise AuthorizationDenied("Not authorized to update this project")

        updated = await self.projects.update(project_id, changes)
        if updated is None:
            raise NotFoundError("Project not found")
        logger.info("Project %s updated by user %s: %s", project_id, actor.id, sorted(changes))
        return updated


class TaskService:
    def __init__(self, tasks: TaskRepository, projects: ProjectRepository) -> None:
        self.tasks = tasks
        self.projects = projects

    async def _load(self, task_id: int) -> Any:
        task = await self.tasks.get(task_id)
        if task is None:
            raise NotFoundError("Task not found")
        return task

    async def _require_project(self, project_id: int | None) -> None:
        if project_id is not None and await self.projects.get(project_id) is None:
            raise NotFoundError("Project not found")

    async def list_visible(self, actor: Actor) -> list[Any]:
        if actor.is_admin:
            return list(await self.tasks.list_all())
        scope = await resolve_scope(actor, self.projects, self.tasks)
        rows = {t.id: t for t in await self.tasks.list_by_assignee(actor.id)}
        if actor.is_manager:
            for t in await self.tasks.list_by_projects(sorted(scope.managed_project_ids)):
                rows.setdefault(t.id, t)
        return [rows[k] for k in sorted(rows) if can_view_task(actor, rows[k], scope)]

    async def get(self, actor: Actor, task_id: int) -> Any:
        task = await self._load(task_id)
        scope = await resolve_scope(actor, self.projects, self.tasks)
        if not can_view_task(actor, task, scope):
            raise AuthorizationDenied("Not authorized to view this task")
        return task

    async def create(self, actor: Actor, data: dict[str, Any]) -> Any:
        project_id = data.get("project_id")
        assignee_id = actor.id if actor.is_employee else data.get("assignee_id")

        scope = await resolve_scope(actor, self.projects, self.tasks)
        if not can_create_task(actor, project_id, scope):
            raise AuthorizationDenied("Not authorized to add tasks to this project")
        await self._require_project(project_id)

        task = await self.tasks.create(
            TaskDraft(
                title=data["title"],
                description=data.get("description"),
                project_id=project_id,
                assignee_id=assignee_id,
                status=data.get("status"),
                priority=data.get("priority"),
                due_date=data.get("due_date"),
            )
        )
        logger.info("Task %s created by user %s", task.id, actor.id)
        return task

    async def update(self, actor: Actor, task_id: int, changes: dict[str, Any]) -> Any:
        task = await self._load(task_id)
        scope = await resolve_scope(actor, self.projects, self.tasks)
        if not can_edit_task(actor, task, scope):
            raise AuthorizationDenied("Not authorized to update this task")

        if actor.is_employee:
            changes = {k: v for k, v in changes.items() if k in EMPLOYEE_TASK_FIELDS}
        elif "project_id" in changes:
            # Moving a task is creating it somewhere else.
            if not can_create_task(actor, changes["project_id"], scope):
                raise AuthorizationDenied("Not authorized to move tasks to this project")
            await self._require_project(changes["project_id"])

        updated = await self.tasks.update(task_id, changes)
        if updated is None:
            raise NotFoundError("Task not found")
        logger.info("Task %s updated by user %s: %s", task_id, actor.id, sorted(changes))
        return updated
