"""RelocationController — move / resize gestures with a commit-time conflict check.

State machine per gesture:

    IDLE ──begin()──▶ DRAGGING(kind) ──release()──▶ RELEASING ──▶ IDLE
                          │  ▲
                          └──┘ drag()

While dragging only a local tentative copy changes. release() re-validates the
tentative placement against the board's freshest snapshot, then either rejects
it (nothing is written) or applies it optimistically and asks the repository
to persist it, rolling back if the write fails.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum

from app.application.ports.notifier_port import NotifierPort
from app.application.ports.schedule_repo import ScheduleRepository
from app.application.use_cases.schedule_board import ScheduleBoard
from app.domain.entities.assignment import Assignment
from app.domain.exceptions import (
    AssignmentConflictError,
    AssignmentNotFoundError,
    GestureStateError,
    InvalidIntervalError,
    MachineNotFoundError,
    PersistenceError,
    ScheduleError,
)
from app.domain.policies.conflict_detection import find_conflicts
from app.domain.policies.time_grid import (
    MIN_DURATION,
    SLOT,
    resize_end,
    resize_start,
    snap_delta,
    validate_interval,
)
from app.domain.value_objects.enums import GestureKind, GestureState

logger = logging.getLogger(__name__)


class ReleaseStatus(str, Enum):
    COMMITTED = "committed"
    UNCHANGED = "unchanged"
    REJECTED = "rejected"
    CONFLICT = "conflict"
    FAILED = "failed"
    DISCARDED = "discarded"


@dataclass
class ReleaseOutcome:
    """Result of one gesture release."""

    status: ReleaseStatus
    assignment: Assignment | None
    conflicts: list[Assignment] = field(default_factory=list)
    error: ScheduleError | None = None

    @property
    def committed(self) -> bool:
        return self.status == ReleaseStatus.COMMITTED

    @property
    def message(self) -> str:
        return str(self.error) if self.error else self.status.value


@dataclass
class Gesture:
    kind: GestureKind
    original: Assignment
    tentative: Assignment


class RelocationController:
    """Drives one interactive move/resize at a time against a ScheduleBoard."""

    def __init__(
        self,
        board: ScheduleBoard,
        repo: ScheduleRepository,
        notifier: NotifierPort,
        slot: timedelta = SLOT,
        min_duration: timedelta = MIN_DURATION,
    ):
        self._board = board
        self._repo = repo
        self._notifier = notifier
        self._slot = slot
        self._min_duration = min_duration
        self._state = GestureState.IDLE
        self._gesture: Gesture | None = None
        self._closed = False

    @property
    def state(self) -> GestureState:
        return self._state

    @property
    def tentative(self) -> Assignment | None:
        return self._gesture.tentative if self._gesture else None

    def close(self) -> None:
        """Leave scope; results of a write still in flight will be discarded."""
        self._closed = True
        self._gesture = None
        self._state = GestureState.IDLE

    # ─── Gesture steps ──────────────────────────────────────────────

    def begin(self, assignment_id: str, kind: GestureKind) -> Assignment:
        if self._state != GestureState.IDLE:
            raise GestureStateError(f"Cannot begin {kind.value}: controller is {self._state.value}")
        current = self._board.get(assignment_id)
        if current is None:
            raise AssignmentNotFoundError(assignment_id)

        # with_placement() copies, so the gesture never aliases the board's snapshot
        snapshot = current.with_placement()
        self._gesture = Gesture(kind=kind, original=snapshot, tentative=snapshot.with_placement())
        self._state = GestureState.DRAGGING
        logger.debug("Begin %s on assignment %s", kind.value, assignment_id)
        return self._gesture.tentative

    def drag(self, dx: float, machine_id: str | None = None) -> Assignment:
        """Update the tentative placement from a pointer displacement in axis units."""
        return self.drag_minutes(self._board.window.minutes_for(dx), machine_id)

    def drag_minutes(self, minutes: float, machine_id: str | None = None) -> Assignment:
        """Update the tentative placement from a displacement in minutes.

        *machine_id* is the lane under the pointer and only matters for moves.
        """
        gesture = self._require_dragging()
        original = gesture.original
        displacement = timedelta(minutes=minutes)

        if gesture.kind == GestureKind.MOVE:
            delta = snap_delta(minutes, self._slot)
            gesture.tentative = original.with_placement(
                machine_id=machine_id or original.machine_id,
                scheduled_start=original.scheduled_start + delta,
                scheduled_end=original.scheduled_end + delta,
            )
        elif gesture.kind == GestureKind.RESIZE_START:
            gesture.tentative = original.with_placement(
                scheduled_start=resize_start(
                    original.scheduled_start, original.scheduled_end,
                    displacement, self._slot, self._min_duration,
                ),
            )
        else:
            gesture.tentative = original.with_placement(
                scheduled_end=resize_end(
                    original.scheduled_start, original.scheduled_end,
                    displacement, self._slot, self._min_duration,
                ),
            )
        return gesture.tentative

    def cancel(self) -> None:
        self._gesture = None
        self._state = GestureState.IDLE

    async def release(self) -> ReleaseOutcome:
        """Finish the gesture: validate, check conflicts, then commit or reject."""
        gesture = self._require_dragging()
        self._state = GestureState.RELEASING
        try:
            return await self._commit(gesture.tentative)
        finally:
            self._gesture = None
            if not self._closed:
                self._state = GestureState.IDLE

    # ─── One-shot commands ──────────────────────────────────────────

    async def move_to(self, assignment_id: str, machine_id: str) -> ReleaseOutcome:
        """Drop an assignment onto another machine column, keeping its interval."""
        self.begin(assignment_id, GestureKind.MOVE)
        with self._cancel_on_error():
            self.drag_minutes(0, machine_id)
        return await self.release()

    async def move_by(
        self, assignment_id: str, minutes: float, machine_id: str | None = None
    ) -> ReleaseOutcome:
        self.begin(assignment_id, GestureKind.MOVE)
        with self._cancel_on_error():
            self.drag_minutes(minutes, machine_id)
        return await self.release()

    async def resize_to(
        self, assignment_id: str, kind: GestureKind, target: datetime
    ) -> ReleaseOutcome:
        """Drag one edge of an assignment to *target* (snapped and clamped)."""
        if kind == GestureKind.MOVE:
            raise ValueError("resize_to expects resize_start or resize_end")
        original = self.begin(assignment_id, kind)
        edge = original.scheduled_start if kind == GestureKind.RESIZE_START else original.scheduled_end
        with self._cancel_on_error():
            self.drag_minutes((target - edge).total_seconds() / 60)
        return await self.release()

    # ─── Internals ──────────────────────────────────────────────────

    @contextmanager
    def _cancel_on_error(self) -> Iterator[None]:
        """A one-shot command that fails mid-gesture leaves the controller idle."""
        try:
            yield
        except Exception:
            self.cancel()
            raise

    def _require_dragging(self) -> Gesture:
        if self._state != GestureState.DRAGGING or self._gesture is None:
            raise GestureStateError(f"No gesture in progress (controller is {self._state.value})")
        return self._gesture

    async def _commit(self, tentative: Assignment) -> ReleaseOutcome:
        # Freshest data: reloads that landed during the drag are visible here.
        current = self._board.get(tentative.id)
        if current is None:
            error = AssignmentNotFoundError(tentative.id)
            self._notifier.error("Assignment no longer exists", str(error))
            return ReleaseOutcome(ReleaseStatus.REJECTED, None, error=error)

        if tentative.same_placement(current):
            return ReleaseOutcome(ReleaseStatus.UNCHANGED, current)

        try:
            validate_interval(tentative.scheduled_start, tentative.scheduled_end, self._min_duration)
        except InvalidIntervalError as e:
            logger.debug("Rejected placement for %s: %s", tentative.id, e)
            return ReleaseOutcome(ReleaseStatus.REJECTED, current, error=e)

        if not self._board.has_machine(tentative.machine_id):
            error = MachineNotFoundError(tentative.machine_id)
            return ReleaseOutcome(ReleaseStatus.REJECTED, current, error=error)

        clashes = find_conflicts(
            self._board.assignments, tentative.machine_id, tentative.interval, excluding_id=tentative.id
        )
        if clashes:
            error = AssignmentConflictError(tentative.machine_id, clashes)
            logger.info("Conflict moving %s: %s", tentative.id, error)
            self._notifier.error("Scheduling conflict", str(error))
            return ReleaseOutcome(ReleaseStatus.CONFLICT, current, conflicts=clashes, error=error)

        changes = {}
        if tentative.machine_id != current.machine_id:
            changes["machine_id"] = tentative.machine_id
        if tentative.scheduled_start != current.scheduled_start:
            changes["scheduled_start"] = tentative.scheduled_start
        if tentative.scheduled_end != current.scheduled_end:
            changes["scheduled_end"] = tentative.scheduled_end

        self._board.apply_optimistic(tentative)
        error: ScheduleError | None = None
        try:
            ok = await self._repo.update_assignment(tentative.id, **changes)
        except PersistenceError as e:
            ok, error = False, e
        except Exception as e:
            logger.exception("Unexpected error persisting assignment %s", tentative.id)
            ok, error = False, PersistenceError(str(e))

        if self._closed:
            logger.info("Discarding write result for %s: controller closed", tentative.id)
            self._board.rollback(tentative.id)
            return ReleaseOutcome(ReleaseStatus.DISCARDED, tentative, error=error)

        if not ok:
            self._board.rollback(tentative.id)
            error = error or PersistenceError(f"Assignment {tentative.id} was not updated")
            self._notifier.error("Could not save change", str(error))
            return ReleaseOutcome(ReleaseStatus.FAILED, current, error=error)

        self._board.confirm(tentative)
        logger.info(
            "Assignment %s → machine %s [%s, %s)",
            tentative.id, tentative.machine_id,
            tentative.scheduled_start.isoformat(), tentative.scheduled_end.isoformat(),
        )
        if "machine_id" in changes:
            self._notifier.info("Reassigned", "Work order successfully moved to new machine")
        else:
            self._notifier.info("Rescheduled", "Work order time updated")
        return ReleaseOutcome(ReleaseStatus.COMMITTED, tentative)
