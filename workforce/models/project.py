"""
Project & Task models — plain records, visibility driven by ownership.
"""

from __future__ import annotations

from datetime import date

from sqlalchemy import Column, Date, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from workforce.core.enums import TaskPriority, WorkStatus
from workforce.db.base import Base


class Project(Base):
    __tablename__ = "projects"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    name: str = Column(String(200), nullable=False)  # type: ignore[assignment]
    description: str | None = Column(Text, nullable=True)  # type: ignore[assignment]
    deadline: date | None = Column(Date, nullable=True)  # type: ignore[assignment]
    status: str = Column(  # type: ignore[assignment]
        String(20),
        nullable=False,
        default=WorkStatus.IN_PROGRESS.value,
    )  # not_started | in_progress | completed
    manager_id: int = Column(  # type: ignore[assignment]
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    tasks = relationship("Task", back_populates="project", cascade="all, delete-orphan")


class Task(Base):
    __tablename__ = "tasks"
    __table_args__ = (Index("ix_tasks_project_assignee", "project_id", "assignee_id"),)

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    title: str = Column(String(255), nullable=False)  # type: ignore[assignment]
    description: str | None = Column(Text, nullable=True)  # type: ignore[assignment]
    project_id: int | None = Column(  # type: ignore[assignment]
        Integer,
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=True,
    )
    assignee_id: int | None = Column(  # type: ignore[assignment]
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    status: str = Column(  # type: ignore[assignment]
        String(20),
        nullable=False,
        default=WorkStatus.NOT_STARTED.value,
    )
    priority: str = Column(  # type: ignore[assignment]
        String(10),
        nullable=False,
        default=TaskPriority.MEDIUM.value,
    )  # low | medium | high
    due_date: date | None = Column(Date, nullable=True)  # type: ignore[assignment]

    project = relationship("Project", back_populates="tasks")
