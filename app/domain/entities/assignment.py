"""Assignment entity — a work order's quantity placed on a machine for a time interval."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta

from app.domain.entities.work_order import WorkOrderRef
from app.domain.value_objects.enums import AssignmentStatus
from app.domain.value_objects.time_interval import TimeInterval


@dataclass
class Assignment:
    id: str
    machine_id: str
    work_order: WorkOrderRef
    scheduled_start: datetime
    scheduled_end: datetime
    status: AssignmentStatus = AssignmentStatus.SCHEDULED
    quantity_allocated: int = 0

    @property
    def interval(self) -> TimeInterval:
        return TimeInterval(self.scheduled_start, self.scheduled_end)

    @property
    def duration(self) -> timedelta:
        return self.scheduled_end - self.scheduled_start

    def is_active(self) -> bool:
        return self.status.is_active

    def is_running(self) -> bool:
        return self.status == AssignmentStatus.RUNNING

    def overlaps(self, interval: TimeInterval) -> bool:
        return self.interval.overlaps(interval)

    def with_placement(
        self,
        machine_id: str | None = None,
        scheduled_start: datetime | None = None,
        scheduled_end: datetime | None = None,
    ) -> Assignment:
        """Return a copy with a new machine and/or interval; self is left untouched."""
        return replace(
            self,
            machine_id=machine_id if machine_id is not None else self.machine_id,
            scheduled_start=scheduled_start if scheduled_start is not None else self.scheduled_start,
            scheduled_end=scheduled_end if scheduled_end is not None else self.scheduled_end,
        )

    def same_placement(self, other: Assignment) -> bool:
        return (
            self.machine_id == other.machine_id
            and self.scheduled_start == other.scheduled_start
            and self.scheduled_end == other.scheduled_end
        )
