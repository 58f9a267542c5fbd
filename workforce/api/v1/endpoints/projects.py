"""
Project and task CRUD.

Visibility and write rights come from the access filter; see
``workforce.core.access``.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from workforce.api.v1.deps import (get_actor, get_db, get_project_service,
                                   get_task_service)
from workforce.core.access import Actor
from workforce.core.enums import Role
from workforce.core.exceptions import ValidationError
from workforce.models.user import User
from workforce.schemas.project import (ProjectChanges, ProjectCreate,
                                       ProjectRead, TaskChanges, TaskCreate,
                                       TaskRead)
from workforce.services.projects import ProjectService, TaskService

router = APIRouter(tags=["projects"])


# ── Projects ────────────────────────────────────────────────────────
@router.get("/projects", response_model=list[ProjectRead])
async def list_projects(
    actor: Actor = Depends(get_actor),
    service: ProjectService = Depends(get_project_service),
):
    return await service.list_visible(actor)


@router.post("/projects", response_model=ProjectRead, status_code=status.HTTP_201_CREATED)
async def create_project(
    body: ProjectCreate,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
    service: ProjectService = Depends(get_project_service),
):
    """Create a project managed by the caller (admins may name a manager)."""
    if actor.is_admin and body.manager_id is not None:
        manager = await db.get(User, body.manager_id)
        if manager is None or manager.role == Role.EMPLOYEE.value:
            raise ValidationError("manager_id must reference a manager or admin")
    return await service.create(actor, body.model_dump())


@router.get("/projects/{project_id}", response_model=ProjectRead)
async def get_project(
    project_id: int,
    actor: Actor = Depends(get_actor),
    service: ProjectService = Depends(get_project_service),
):
    return await service.get(actor, project_id)


@router.put("/projects/{project_id}", response_model=ProjectRead)
async def update_project(
    project_id: int,
    body: ProjectChanges,
    actor: Actor = Depends(get_actor),
    service: ProjectService = Depends(get_project_service),
):
    return await service.update(actor, project_id, body.as_changes())


# ── Tasks ───────────────────────────────────────────────────────────
@router.get("/tasks", response_model=list[TaskRead])
async def list_tasks(
    actor: Actor = Depends(get_actor),
    service: TaskService = Depends(get_task_service),
):
    return await service.list_visible(actor)


@router.post("/tasks", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
async def create_task(
    body: TaskCreate,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
    service: TaskService = Depends(get_task_service),
):
    """Employees always create self-assigned tasks."""
    if not actor.is_employee and body.assignee_id is not None:
        if await db.get(User, body.assignee_id) is None:
            raise ValidationError("assignee_id does not reference a user")
    return await service.create(actor, body.model_dump())


@router.get("/tasks/{task_id}", response_model=TaskRead)
async def get_task(
    task_id: int,
    actor: Actor = Depends(get_actor),
    service: TaskService = Depends(get_task_service),
):
    return await service.get(actor, task_id)


@router.put("/tasks/{task_id}", response_model=TaskRead)
async def update_task(
    task_id: int,
    body: TaskChanges,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
    service: TaskService = Depends(get_task_service),
):
    changes = body.as_changes()
    if not actor.is_employee and changes.get("assignee_id") is not None:
        if await db.get(User, changes["assignee_id"]) is None:
            raise ValidationError("assignee_id does not reference a user")
    return await service.update(actor, task_id, changes)
