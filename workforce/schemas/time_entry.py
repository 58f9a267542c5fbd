"""Pydantic schemas for the time clock."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from workforce.core.enums import TimeEntryStatus
from workforce.services.clock import ensure_utc


class ClockOutRequest(BaseModel):
    """Clock-out may only attach a note; every other field is computed."""

    notes: str | None = Field(default=None, max_length=2000)


class TimeEntryRead(BaseModel):
    id: int
    user_id: int
    clock_in: datetime
    clock_out: datetime | None
    total_hours: float | None
    break_minutes: int
    notes: str | None
    status: TimeEntryStatus

    model_config = {"from_attributes": True}

    @field_validator("clock_in", "clock_out")
    @classmethod
    def _as_utc(cls, v: datetime | None) -> datetime | None:
        # SQLite hands back naive values
        return ensure_utc(v) if v is not None else v
