"""
Leave request lifecycle: ``pending → approved | rejected | cancelled``.

Every request leaves ``pending`` at most once.  Owners may cancel, managers
and admins may approve or reject; nothing else changes a request.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from workforce.core.access import (Actor, can_cancel_leave,
                                   can_review_leave, can_view_leave_request)
from workforce.core.enums import LeaveStatus
from workforce.core.exceptions import (AuthorizationDenied, InvalidDateRange,
                                       NotAuthorized, NotFoundError, NotOwner,
                                       NotPending, ValidationError)
from workforce.repositories.base import (LeaveCancellation, LeaveDraft,
                                         LeaveRequestRepository, LeaveReview,
                                         LeaveTransition)
from workforce.services.clock import Clock, utcnow

logger = logging.getLogger(__name__)

REVIEW_DECISIONS = frozenset({LeaveStatus.APPROVED, LeaveStatus.REJECTED})


class LeaveRequestService:
    def __init__(self, requests: LeaveRequestRepository, clock: Clock = utcnow) -> None:
        self.requests = requests
        self.clock = clock

    async def _load(self, request_id: int) -> Any:
        leave = await self.requests.get(request_id)
        if leave is None:
            raise NotFoundError("Leave request not found")
        return leave

    async def _apply(self, request_id: int, change: LeaveTransition) -> Any:
        updated = await self.requests.transition(request_id, change)
        if updated is None:
            raise NotPending()
        return updated

    # ── Queries ─────────────────────────────────────────────────────
    async def get(self, request_id: int, actor: Actor) -> Any:
        leave = await self._load(request_id)
        if not can_view_leave_request(actor, leave):
            raise AuthorizationDenied("Not authorized to view this leave request")
        return leave

    async def list_visible(self, actor: Actor, status: LeaveStatus | None = None) -> list[Any]:
        wanted = status.value if status else None
        if actor.is_employee:
            rows = await self.requests.list_for_user(actor.id, wanted)
        else:
            rows = await self.requests.list_all(wanted)
        return [r for r in rows if can_view_leave_request(actor, r)]

    async def list_all(self, actor: Actor) -> list[Any]:
        if not can_review_leave(actor):
            raise AuthorizationDenied("Not authorized to view all leave requests")
        return list(await self.requests.list_all())

    # ── Transitions ─────────────────────────────────────────────────
    async def create(
        self,
        user_id: int,
        leave_type: str,
        start_date: date,
        end_date: date,
        reason: str | None = None,
    ) -> Any:
        if end_date < start_date:
            raise InvalidDateRange()

        leave = await self.requests.create(
            LeaveDraft(
                user_id=user_id,
                type=leave_type,
                start_date=start_date,
                end_date=end_date,
                reason=reason,
                requested_on=self.clock(),
            )
        )
        logger.info(
            "Leave request %s submitted by user %s (%s, %s..%s)",
            leave.id, user_id, leave_type, start_date, end_date,
        )
        return leave

    async def cancel(self, request_id: int, actor: Actor) -> Any:
        leave = await self._load(request_id)
        if leave.status != LeaveStatus.PENDING:
            raise NotPending("Only pending leave requests can be cancelled")
        if not can_cancel_leave(actor, leave):
            raise NotOwner()

        updated = await self._apply(request_id, LeaveCancellation())
        logger.info("Leave request %s cancelled by user %s", request_id, actor.id)
        return updated

    async def review(
        self,
        request_id: int,
        actor: Actor,
        decision: LeaveStatus,
        comments: str | None = None,
    ) -> Any:
        if not can_review_leave(actor):
            raise NotAuthorized()
        if decision not in REVIEW_DECISIONS:
            raise ValidationError("Status must be 'approved' or 'rejected'")

        leave = await self._load(request_id)
        if leave.status != LeaveStatus.PENDING:
            raise NotPending("Only pending leave requests can be processed")

        updated = await self._apply(
            request_id,
            LeaveReview(
                status=decision,
                reviewer_id=actor.id,
                reviewed_on=self.clock(),
                comments=comments or None,
            ),
        )
        logger.info("Leave request %s %s by user %s", request_id, decision.value, actor.id)
        return updated

    async def update_status(
        self,
        request_id: int,
        actor: Actor,
        status: LeaveStatus,
        comments: str | None = None,
    ) -> Any:
        """Dispatch a ``PUT {status, comments}`` to cancel or review."""
        if status == LeaveStatus.CANCELLED:
            return await self.cancel(request_id, actor)
        if status in REVIEW_DECISIONS:
            return await self.review(request_id, actor, status, comments)
        raise ValidationError("Status must be 'cancelled', 'approved' or 'rejected'")
