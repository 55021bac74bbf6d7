"""SummaryPolicy — window-scoped counts for the schedule header tiles."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from app.domain.entities.assignment import Assignment
from app.domain.policies.utilization import MachineUtilization, bottlenecks


@dataclass(frozen=True)
class ScheduleSummary:
    jobs_today: int
    units_in_progress: int
    bottleneck_machines: list[str] = field(default_factory=list)
    next_completion: datetime | None = None


def summarize(
    assignments: Iterable[Assignment],
    utilization: dict[str, MachineUtilization],
    now: datetime,
) -> ScheduleSummary:
    """Aggregate the filtered assignment set.

    - jobs_today: assignments starting on now's calendar date
    - units_in_progress: allocated quantity across running assignments
    - bottleneck_machines: machine ids at or above the bottleneck threshold
    - next_completion: earliest end among running assignments, None if none run
    """
    assignments = list(assignments)
    today = now.date()
    running = [a for a in assignments if a.is_running()]

    return ScheduleSummary(
        jobs_today=sum(1 for a in assignments if a.scheduled_start.date() == today),
        units_in_progress=sum(a.quantity_allocated for a in running),
        bottleneck_machines=bottlenecks(utilization),
        next_completion=min((a.scheduled_end for a in running), default=None),
    )
