"""
TimeEntry model — one clock-in/clock-out interval per row.

The partial unique index is the storage-level guarantee that a user never
has two open (``in_progress``) entries, even under concurrent clock-ins.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (Column, DateTime, Float, ForeignKey, Index, Integer,
                        String, Text, text)

from workforce.core.enums import TimeEntryStatus
from workforce.db.base import Base

_OPEN_ENTRY = text("status = 'in_progress'")


class TimeEntry(Base):
    __tablename__ = "time_entries"
    __table_args__ = (
        Index(
            "uq_time_entries_one_open_per_user",
            "user_id",
            unique=True,
            postgresql_where=_OPEN_ENTRY,
            sqlite_where=_OPEN_ENTRY,
        ),
        Index("ix_time_entries_user_clock_in", "user_id", "clock_in"),
    )

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    user_id: int = Column(  # type: ignore[assignment]
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    clock_in: datetime = Column(DateTime(timezone=True), nullable=False)  # type: ignore[assignment]
    clock_out: datetime | None = Column(DateTime(timezone=True), nullable=True)  # type: ignore[assignment]
    total_hours: float | None = Column(Float, nullable=True)  # type: ignore[assignment]
    break_minutes: int = Column(Integer, nullable=False, default=0)  # type: ignore[assignment]
    notes: str | None = Column(Text, nullable=True)  # type: ignore[assignment]
    status: str = Column(  # type: ignore[assignment]
        String(20),
        nullable=False,
        default=TimeEntryStatus.IN_PROGRESS.value,
    )  # in_progress | completed
