"""
Leave request endpoints.

- POST creates a pending request for the caller.
- PUT with ``status: "cancelled"`` cancels (owner only); with
  ``approved`` / ``rejected`` reviews (manager / admin only).
- GET lists what the caller may see; ``/all`` is the reviewers' full view.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from workforce.api.v1.deps import get_actor, get_leave_request_service
from workforce.core.access import Actor
from workforce.core.enums import LeaveStatus
from workforce.schemas.leave_request import (LeaveRequestCreate,
                                             LeaveRequestRead,
                                             LeaveRequestUpdate)
from workforce.services.leave_requests import LeaveRequestService

router = APIRouter(prefix="/leave-requests", tags=["leave-requests"])


@router.get("", response_model=list[LeaveRequestRead])
async def list_leave_requests(
    status_filter: LeaveStatus | None = Query(default=None, alias="status"),
    actor: Actor = Depends(get_actor),
    service: LeaveRequestService = Depends(get_leave_request_service),
):
    return await service.list_visible(actor, status_filter)


@router.get("/all", response_model=list[LeaveRequestRead])
async def list_all_leave_requests(
    actor: Actor = Depends(get_actor),
    service: LeaveRequestService = Depends(get_leave_request_service),
):
    return await service.list_all(actor)


@router.post("", response_model=LeaveRequestRead, status_code=status.HTTP_201_CREATED)
async def create_leave_request(
    body: LeaveRequestCreate,
    actor: Actor = Depends(get_actor),
    service: LeaveRequestService = Depends(get_leave_request_service),
):
    """Submit a leave request for the caller; it always starts ``pending``."""
    return await service.create(
        actor.id,
        body.type.value,
        body.start_date,
        body.end_date,
        body.reason,
    )


@router.get("/{request_id}", response_model=LeaveRequestRead)
async def get_leave_request(
    request_id: int,
    actor: Actor = Depends(get_actor),
    service: LeaveRequestService = Depends(get_leave_request_service),
):
    return await service.get(request_id, actor)


@router.put("/{request_id}", response_model=LeaveRequestRead)
async def update_leave_request(
    request_id: int,
    body: LeaveRequestUpdate,
    actor: Actor = Depends(get_actor),
    service: LeaveRequestService = Depends(get_leave_request_service),
):
    return await service.update_status(request_id, actor, body.status, body.comments)
