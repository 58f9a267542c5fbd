"""Small response bodies shared across routers."""

from __future__ import annotations

from pydantic import BaseModel


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    db: bool
    redis: bool


class StatusResponse(BaseModel):
    total_users: int
    open_time_entries: int
    pending_leave_requests: int
    status: str
