"""UtilizationPolicy — per-machine busy fraction over the visible window."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from app.domain.entities.assignment import Assignment
from app.domain.entities.machine import Machine
from app.domain.value_objects.enums import AssignmentStatus, UtilizationBand
from app.domain.value_objects.time_window import TimeWindow

BOTTLENECK_THRESHOLD = 90.0


@dataclass(frozen=True)
class MachineUtilization:
    machine_id: str
    percent: float
    band: UtilizationBand
    is_bottleneck: bool


def band_for(percent: float) -> UtilizationBand:
    """Presentational band; carries no rule beyond the bottleneck threshold."""
    if percent >= 90:
        return UtilizationBand.CRITICAL
    if percent >= 70:
        return UtilizationBand.ELEVATED
    if percent >= 50:
        return UtilizationBand.HEALTHY
    return UtilizationBand.UNDER_UTILIZED


def utilization_percent(
    machine_id: str,
    assignments: Iterable[Assignment],
    window: TimeWindow,
) -> float:
    """Busy minutes inside the window as a percentage of the window, in [0, 100].

    Cancelled assignments are ignored; everything else is clipped to the window.
    Overlapping source data can push the raw sum past 100, hence the cap.
    """
    if window.length_minutes <= 0:
        return 0.0

    busy = 0.0
    for a in assignments:
        if a.machine_id != machine_id or a.status == AssignmentStatus.CANCELLED:
            continue
        clipped = window.clip(a.interval)
        if clipped is not None:
            busy += clipped.minutes

    return max(0.0, min(100.0, 100.0 * busy / window.length_minutes))


def compute_utilization(
    machines: Iterable[Machine],
    assignments: Iterable[Assignment],
    window: TimeWindow,
    threshold: float = BOTTLENECK_THRESHOLD,
) -> dict[str, MachineUtilization]:
    """Utilization for every machine, keyed by machine id."""
    assignments = list(assignments)
    result: dict[str, MachineUtilization] = {}
    for machine in machines:
        percent = utilization_percent(machine.id, assignments, window)
        result[machine.id] = MachineUtilization(
            machine_id=machine.id,
            percent=percent,
            band=band_for(percent),
            is_bottleneck=percent >= threshold,
        )
    return result


def bottlenecks(utilization: dict[str, MachineUtilization]) -> list[str]:
    return [machine_id for machine_id, u in utilization.items() if u.is_bottleneck]
