"""ConflictDetectionPolicy — overlap checks between assignments on one machine.

Two intervals [s1, e1) and [s2, e2) conflict iff s1 < e2 and s2 < e1.
Only active assignments (scheduled / running / paused) take part;
completed and cancelled ones are historical and never block a slot.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Iterator

from app.domain.entities.assignment import Assignment
from app.domain.value_objects.time_interval import TimeInterval


def _candidates(
    assignments: Iterable[Assignment],
    machine_id: str,
    excluding_id: str | None,
) -> Iterator[Assignment]:
    for a in assignments:
        if a.machine_id != machine_id or a.id == excluding_id:
            continue
        if not a.is_active():
            continue
        yield a


def conflicts(
    assignments: Iterable[Assignment],
    machine_id: str,
    interval: TimeInterval,
    excluding_id: str | None = None,
) -> bool:
    """Pure function: does *interval* on *machine_id* overlap an active assignment?

    Stops at the first overlap found.
    """
    return any(a.overlaps(interval) for a in _candidates(assignments, machine_id, excluding_id))


def find_conflicts(
    assignments: Iterable[Assignment],
    machine_id: str,
    interval: TimeInterval,
    excluding_id: str | None = None,
) -> list[Assignment]:
    """Diagnostic variant of conflicts(): every overlapping assignment, by start time."""
    hits = [a for a in _candidates(assignments, machine_id, excluding_id) if a.overlaps(interval)]
    return sorted(hits, key=lambda a: a.scheduled_start)


def find_overlaps(assignments: Iterable[Assignment]) -> list[tuple[Assignment, Assignment]]:
    """Audit a whole snapshot for pairs of active assignments that already overlap.

    Such pairs can only come from writes made outside this engine.
    """
    by_machine: dict[str, list[Assignment]] = defaultdict(list)
    for a in assignments:
        if a.is_active():
            by_machine[a.machine_id].append(a)

    pairs: list[tuple[Assignment, Assignment]] = []
    for machine_assignments in by_machine.values():
        ordered = sorted(machine_assignments, key=lambda a: (a.scheduled_start, a.scheduled_end))
        for i, first in enumerate(ordered):
            for second in ordered[i + 1:]:
                # sorted by start: nothing later can overlap first once second starts after it ends
                if second.scheduled_start >= first.scheduled_end:
                    break
                pairs.append((first, second))
    return pairs
