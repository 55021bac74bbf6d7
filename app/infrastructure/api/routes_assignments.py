"""Assignment commands — move to another machine / time, resize an edge."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field, field_validator

from app.adapters.notifications.log_notifier import CollectingNotifier
from app.application.use_cases.relocate_assignment import (
    RelocationController,
    ReleaseOutcome,
    ReleaseStatus,
)
from app.domain.exceptions import AssignmentNotFoundError, MachineNotFoundError
from app.domain.value_objects.enums import GestureKind
from app.domain.value_objects.time_window import to_naive_local
from app.infrastructure.api.dependencies import get_notifier, get_relocation_controller
from app.infrastructure.api.routes_schedule import serialize_assignment

router = APIRouter(prefix="/assignments", tags=["assignments"])


# Moves are limited to the widest zoom window in either direction
MAX_MOVE_MINUTES = 28 * 24 * 60


class MoveRequest(BaseModel):
    machine_id: str | None = None
    delta_minutes: float = Field(default=0, ge=-MAX_MOVE_MINUTES, le=MAX_MOVE_MINUTES)


class ResizeRequest(BaseModel):
    edge: Literal["start", "end"]
    to: datetime

    @field_validator("to")
    @classmethod
    def _local_time(cls, v: datetime) -> datetime:
        return to_naive_local(v)


_STATUS_CODES: dict[ReleaseStatus, int] = {
    ReleaseStatus.CONFLICT: 409,
    ReleaseStatus.REJECTED: 422,
    ReleaseStatus.FAILED: 502,
}


@router.post("/{assignment_id}/move")
async def move_assignment(
    assignment_id: str,
    req: MoveRequest,
    controller: RelocationController = Depends(get_relocation_controller),
    notifier: CollectingNotifier = Depends(get_notifier),
):
    """Shift an assignment in time and/or onto another machine (duration preserved)."""
    try:
        outcome = await controller.move_by(assignment_id, req.delta_minutes, req.machine_id)
    except AssignmentNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _respond(outcome, notifier)


@router.post("/{assignment_id}/resize")
async def resize_assignment(
    assignment_id: str,
    req: ResizeRequest,
    controller: RelocationController = Depends(get_relocation_controller),
    notifier: CollectingNotifier = Depends(get_notifier),
):
    """Drag one edge to a new time; snapped to the grid and clamped to the minimum duration."""
    kind = GestureKind.RESIZE_START if req.edge == "start" else GestureKind.RESIZE_END
    try:
        outcome = await controller.resize_to(assignment_id, kind, req.to)
    except AssignmentNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _respond(outcome, notifier)


def _respond(outcome: ReleaseOutcome, notifier: CollectingNotifier) -> dict:
    if isinstance(outcome.error, (AssignmentNotFoundError, MachineNotFoundError)):
        raise HTTPException(status_code=404, detail=str(outcome.error))

    status_code = _STATUS_CODES.get(outcome.status)
    if status_code is not None:
        raise HTTPException(
            status_code=status_code,
            detail={
                "status": outcome.status.value,
                "message": outcome.message,
                "conflicts": [serialize_assignment(c) for c in outcome.conflicts],
            },
        )

    return {
        "status": outcome.status.value,
        "assignment": serialize_assignment(outcome.assignment) if outcome.assignment else None,
        "notifications": [
            {"level": n.level, "title": n.title, "message": n.message}
            for n in notifier.notifications
        ],
    }
