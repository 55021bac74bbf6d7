"""Domain errors raised by the scheduling engine."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.domain.entities.assignment import Assignment


class ScheduleError(Exception):
    """Base class for all scheduling errors."""


class InvalidIntervalError(ScheduleError, ValueError):
    """Start is not before end, or the interval is shorter than the minimum."""


class AssignmentConflictError(ScheduleError):
    """The candidate placement overlaps another active assignment."""

    def __init__(self, machine_id: str, conflicts: list[Assignment]):
        self.machine_id = machine_id
        self.conflicts = conflicts
        ranges = ", ".join(
            f"{c.scheduled_start:%d %b %H:%M}–{c.scheduled_end:%H:%M}" for c in conflicts
        )
        super().__init__(f"Machine {machine_id} is already booked: {ranges}")


class AssignmentNotFoundError(ScheduleError, LookupError):
    def __init__(self, assignment_id: str):
        self.assignment_id = assignment_id
        super().__init__(f"Assignment {assignment_id} not found")


class GestureStateError(ScheduleError):
    """A gesture operation was called in the wrong controller state."""


class PersistenceError(ScheduleError):
    """The repository failed to write a mutation."""


class LoadError(ScheduleError):
    """The repository failed to read machines or assignments."""


class MachineNotFoundError(ScheduleError, LookupError):
    def __init__(self, machine_id: str):
        self.machine_id = machine_id
        super().__init__(f"Machine {machine_id} not found")
