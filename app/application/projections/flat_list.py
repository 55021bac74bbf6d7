"""Flat list projection — every visible assignment ordered by start time."""

from __future__ import annotations

from dataclasses import dataclass

from app.domain.entities.assignment import Assignment
from app.domain.policies.assignment_filter import FilteredSchedule


@dataclass(frozen=True)
class ListRow:
    assignment: Assignment
    machine_label: str


def build_list(schedule: FilteredSchedule) -> list[ListRow]:
    labels = {m.id: m.label for m in schedule.machines}
    ordered = sorted(schedule.assignments, key=lambda a: a.scheduled_start)
    return [ListRow(assignment=a, machine_label=labels.get(a.machine_id, a.machine_id)) for a in ordered]
