"""Pydantic schemas for leave requests."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator

from workforce.core.enums import LeaveStatus, LeaveType
from workforce.services.clock import ensure_utc


class LeaveRequestCreate(BaseModel):
    # end_date >= start_date is a lifecycle rule (InvalidDateRange, 400),
    # not a schema rule, so it is checked by the service.
    type: LeaveType
    start_date: date
    end_date: date
    reason: str | None = Field(default=None, max_length=2000)

    @field_validator("reason")
    @classmethod
    def _reason(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return v.strip() or None


class LeaveRequestUpdate(BaseModel):
    status: LeaveStatus
    comments: str | None = Field(default=None, max_length=2000)


class LeaveRequestRead(BaseModel):
    id: int
    user_id: int
    type: LeaveType
    start_date: date
    end_date: date
    reason: str | None
    status: LeaveStatus
    requested_on: datetime
    reviewed_on: datetime | None
    reviewer_id: int | None
    comments: str | None

    model_config = {"from_attributes": True}

    @field_validator("requested_on", "reviewed_on")
    @classmethod
    def _as_utc(cls, v: datetime | None) -> datetime | None:
        return ensure_utc(v) if v is not None else v
