"""Pydantic schemas for projects and tasks."""

from __future__ import annotations

from datetime import date
from typing import Any, ClassVar

from pydantic import BaseModel, Field, field_validator

from workforce.core.enums import TaskPriority, WorkStatus


def _not_blank(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("must not be empty")
    return v


def _explicit_changes(model: BaseModel, required: frozenset[str]) -> dict[str, Any]:
    """Fields the client actually sent; nulls are dropped for NOT NULL columns."""
    data = model.model_dump(exclude_unset=True)
    return {k: v for k, v in data.items() if v is not None or k not in required}


# ── Project ─────────────────────────────────────────────────────────
class ProjectCreate(BaseModel):
    name: str = Field(max_length=200)
    description: str | None = None
    deadline: date | None = None
    status: WorkStatus | None = None
    manager_id: int | None = None  # honoured for admins only

    model_config = {"use_enum_values": True}

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        return _not_blank(v)


class ProjectChanges(BaseModel):
    name: str | None = Field(default=None, max_length=200)
    description: str | None = None
    deadline: date | None = None
    status: WorkStatus | None = None

    model_config = {"use_enum_values": True}

    required_fields: ClassVar[frozenset[str]] = frozenset({"name", "status"})

    def as_changes(self) -> dict[str, Any]:
        return _explicit_changes(self, self.required_fields)


class ProjectRead(BaseModel):
    id: int
    name: str
    description: str | None
    deadline: date | None
    status: WorkStatus
    manager_id: int

    model_config = {"from_attributes": True}


# ── Task ────────────────────────────────────────────────────────────
class TaskCreate(BaseModel):
    title: str = Field(max_length=255)
    description: str | None = None
    project_id: int | None = None
    assignee_id: int | None = None
    status: WorkStatus | None = None
    priority: TaskPriority | None = None
    due_date: date | None = None

    model_config = {"use_enum_values": True}

    @field_validator("title")
    @classmethod
    def _title(cls, v: str) -> str:
        return _not_blank(v)


class TaskChanges(BaseModel):
    title: str | None = Field(default=None, max_length=255)
    description: str | None = None
    project_id: int | None = None
    assignee_id: int | None = None
    status: WorkStatus | None = None
    priority: TaskPriority | None = None
    due_date: date | None = None

    model_config = {"use_enum_values": True}

    required_fields: ClassVar[frozenset[str]] = frozenset({"title", "status", "priority"})

    def as_changes(self) -> dict[str, Any]:
        return _explicit_changes(self, self.required_fields)


class TaskRead(BaseModel):
    id: int
    title: str
    description: str | None
    project_id: int | None
    assignee_id: int | None
    status: WorkStatus
    priority: TaskPriority
    due_date: date | None

    model_config = {"from_attributes": True}
