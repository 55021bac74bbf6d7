"""Resource board projection — one column per machine, jobs in insertion order."""

from __future__ import annotations

from dataclasses import dataclass, field

from app.domain.entities.assignment import Assignment
from app.domain.entities.machine import Machine
from app.domain.policies.assignment_filter import FilteredSchedule


@dataclass(frozen=True)
class BoardColumn:
    machine: Machine
    assignments: list[Assignment] = field(default_factory=list)

    @property
    def job_count(self) -> int:
        return len(self.assignments)


def build_board(schedule: FilteredSchedule) -> list[BoardColumn]:
    return [
        BoardColumn(
            machine=machine,
            assignments=[a for a in schedule.assignments if a.machine_id == machine.id],
        )
        for machine in schedule.machines
    ]
