"""Timeline projection — one lane per machine, bars placed along the time axis."""

from __future__ import annotations

from collections.abc import Collection
from dataclasses import dataclass, field
from datetime import datetime

from app.domain.entities.assignment import Assignment
from app.domain.entities.machine import Machine
from app.domain.policies.assignment_filter import FilteredSchedule
from app.domain.policies.utilization import MachineUtilization
from app.domain.value_objects.enums import UtilizationBand
from app.domain.value_objects.time_window import TimeWindow


@dataclass(frozen=True)
class TimelineBar:
    assignment: Assignment
    offset: float
    width: float


@dataclass(frozen=True)
class TimelineLane:
    machine: Machine
    utilization: float
    band: UtilizationBand
    collapsed: bool
    bars: list[TimelineBar] = field(default_factory=list)


@dataclass(frozen=True)
class Timeline:
    window: TimeWindow
    width: float
    ticks: list[datetime]
    lanes: list[TimelineLane]
    now_offset: float | None = None


def place(assignment: Assignment, window: TimeWindow) -> TimelineBar:
    return TimelineBar(
        assignment=assignment,
        offset=window.offset_of(assignment.scheduled_start),
        width=window.width_of(assignment.scheduled_start, assignment.scheduled_end),
    )


def build_timeline(
    schedule: FilteredSchedule,
    window: TimeWindow,
    utilization: dict[str, MachineUtilization],
    collapsed: Collection[str] = (),
    now: datetime | None = None,
) -> Timeline:
    """Lay out the filtered set on the window.

    Collapsed lanes keep their bars; collapsing is a presentation flag only.
    Bars may start before offset 0 or run past the width when an assignment
    straddles the window edge.
    """
    lanes = []
    for machine in schedule.machines:
        util = utilization.get(machine.id)
        lanes.append(
            TimelineLane(
                machine=machine,
                utilization=util.percent if util else 0.0,
                band=util.band if util else UtilizationBand.UNDER_UTILIZED,
                collapsed=machine.id in collapsed,
                bars=[place(a, window) for a in schedule.assignments if a.machine_id == machine.id],
            )
        )

    now_offset = None
    if now is not None and window.contains(now):
        now_offset = window.offset_of(now)

    return Timeline(
        window=window,
        width=window.width,
        ticks=window.ticks(),
        lanes=lanes,
        now_offset=now_offset,
    )
