"""AssignmentFilterPolicy — the single upstream filter every projection consumes."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from app.domain.entities.assignment import Assignment
from app.domain.entities.machine import Machine
from app.domain.value_objects.enums import AssignmentStatus
from app.domain.value_objects.time_window import TimeWindow


@dataclass(frozen=True)
class ScheduleFilter:
    """User-selected filter. Empty statuses means every status."""

    statuses: frozenset[AssignmentStatus] = field(default_factory=frozenset)
    search: str = ""
    machine_group: str | None = None

    def matches_status(self, assignment: Assignment) -> bool:
        return not self.statuses or assignment.status in self.statuses

    def matches_search(self, assignment: Assignment) -> bool:
        term = self.search.strip().lower()
        if not term:
            return True
        return any(term in f.lower() for f in assignment.work_order.search_fields())

    def matches_machine(self, machine: Machine) -> bool:
        return self.machine_group is None or machine.location == self.machine_group


@dataclass(frozen=True)
class FilteredSchedule:
    machines: list[Machine]
    assignments: list[Assignment]


def apply_filter(
    machines: Iterable[Machine],
    assignments: Iterable[Assignment],
    schedule_filter: ScheduleFilter,
    window: TimeWindow,
) -> FilteredSchedule:
    """Filter machines by group and assignments by status, text and window.

    Assignments on machines hidden by the group filter are dropped too, so every
    projection sees exactly the same set. Input order is preserved.
    """
    visible_machines = [m for m in machines if schedule_filter.matches_machine(m)]
    visible_ids = {m.id for m in visible_machines}

    visible_assignments = [
        a
        for a in assignments
        if a.machine_id in visible_ids
        and window.overlaps(a.interval)
        and schedule_filter.matches_status(a)
        and schedule_filter.matches_search(a)
    ]
    return FilteredSchedule(machines=visible_machines, assignments=visible_assignments)


def machine_groups(machines: Iterable[Machine]) -> list[str]:
    """Distinct non-empty machine locations, in first-seen order."""
    seen: dict[str, None] = {}
    for m in machines:
        if m.location:
            seen.setdefault(m.location, None)
    return list(seen)
