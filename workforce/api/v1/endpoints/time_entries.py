"""
Time clock endpoints — clock in, clock out, current entry, history.

Every authenticated user may clock themselves in and out.  History is
filtered by role: employees see their own entries, managers also see the
people working in their projects, admins see everything.
"""

from __future__ import annotations

from fastapi import APIRouter, Body, Depends, status

from workforce.api.v1.deps import (get_access_scope, get_actor,
                                   get_time_entry_service)
from workforce.core.access import AccessScope, Actor
from workforce.schemas.time_entry import ClockOutRequest, TimeEntryRead
from workforce.services.time_entries import TimeEntryService

router = APIRouter(prefix="/time-entries", tags=["time-entries"])


@router.get("", response_model=list[TimeEntryRead])
async def list_time_entries(
    actor: Actor = Depends(get_actor),
    scope: AccessScope = Depends(get_access_scope),
    service: TimeEntryService = Depends(get_time_entry_service),
):
    return await service.list_visible(actor, scope)


@router.get("/current", response_model=TimeEntryRead | None)
async def current_time_entry(
    actor: Actor = Depends(get_actor),
    service: TimeEntryService = Depends(get_time_entry_service),
):
    """Return the caller's open entry, or ``null`` when clocked out."""
    return await service.current(actor.id)


@router.post("/clock-in", response_model=TimeEntryRead, status_code=status.HTTP_201_CREATED)
async def clock_in(
    actor: Actor = Depends(get_actor),
    service: TimeEntryService = Depends(get_time_entry_service),
):
    return await service.clock_in(actor.id)


@router.post("/clock-out", response_model=TimeEntryRead)
async def clock_out(
    body: ClockOutRequest | None = Body(default=None),
    actor: Actor = Depends(get_actor),
    service: TimeEntryService = Depends(get_time_entry_service),
):
    return await service.clock_out(actor.id, body.notes if body else None)
