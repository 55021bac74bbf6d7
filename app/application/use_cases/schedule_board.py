"""ScheduleBoard — cached machine/assignment snapshot plus the derived views.

The board owns:
  * the last successfully loaded snapshot (never mutated in place),
  * an optimistic overlay of placements whose writes are in flight or not yet
    reconciled by a reload,
  * the change-feed subscription, released by close().

Every view (timeline, resource board, flat list, utilization, summary) is
computed from one filtered set, so the views can never disagree.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from app.application.ports.notifier_port import NotifierPort
from app.application.ports.schedule_repo import AssignmentQuery, ScheduleRepository
from app.application.projections.flat_list import ListRow, build_list
from app.application.projections.resource_board import BoardColumn, build_board
from app.application.projections.timeline import Timeline, build_timeline
from app.domain.entities.assignment import Assignment
from app.domain.entities.machine import Machine
from app.domain.policies.assignment_filter import (
    FilteredSchedule,
    ScheduleFilter,
    apply_filter,
    machine_groups,
)
from app.domain.policies.conflict_detection import find_overlaps
from app.domain.policies.summary import ScheduleSummary, summarize
from app.domain.policies.utilization import (
    BOTTLENECK_THRESHOLD,
    MachineUtilization,
    compute_utilization,
)
from app.domain.value_objects.enums import ZoomLevel
from app.domain.value_objects.time_window import TimeWindow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScheduleView:
    """Everything the schedule screen renders, derived from one filtered set."""

    window: TimeWindow
    filtered: FilteredSchedule
    utilization: dict[str, MachineUtilization]
    summary: ScheduleSummary
    timeline: Timeline
    board: list[BoardColumn]
    rows: list[ListRow]
    machine_groups: list[str] = field(default_factory=list)


class ScheduleBoard:
    """Read-mostly cache of the schedule with reload and optimistic-update support."""

    def __init__(
        self,
        repo: ScheduleRepository,
        notifier: NotifierPort,
        window: TimeWindow,
        schedule_filter: ScheduleFilter | None = None,
        clock: Callable[[], datetime] = datetime.now,
        bottleneck_threshold: float = BOTTLENECK_THRESHOLD,
    ):
        self._repo = repo
        self._notifier = notifier
        self._clock = clock
        self._threshold = bottleneck_threshold

        self.window = window
        self.filter = schedule_filter or ScheduleFilter()
        self.collapsed: set[str] = set()

        self._machines: list[Machine] = []
        self._confirmed: dict[str, Assignment] = {}
        self._overlay: dict[str, Assignment] = {}
        self._pending: set[str] = set()

        self._reload_seq = 0
        self._applied_seq = 0
        self._reload_tasks: set[asyncio.Task] = set()
        self._unsubscribe: Callable[[], None] | None = None
        self._closed = False
        self.loaded = False

    # ─── Lifetime ───────────────────────────────────────────────────

    async def open(self) -> bool:
        """Subscribe to change notifications and perform the first load."""
        if self._unsubscribe is None:
            self._unsubscribe = self._repo.subscribe(self._on_change)
        return await self.reload()

    async def close(self) -> None:
        """Leave scope: drop the subscription and any reload still in flight."""
        self._closed = True
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        tasks = list(self._reload_tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    @property
    def closed(self) -> bool:
        return self._closed

    def _on_change(self) -> None:
        if self._closed:
            return
        task = asyncio.get_running_loop().create_task(self.reload())
        self._reload_tasks.add(task)
        task.add_done_callback(self._reload_tasks.discard)

    # ─── Loading ────────────────────────────────────────────────────

    async def reload(self) -> bool:
        """Replace the snapshot with a fresh full load.

        Reloads are never merged. A reload that finishes after a newer one has
        already been applied is dropped. On failure the previous snapshot stays.
        """
        self._reload_seq += 1
        seq = self._reload_seq
        try:
            machines = await self._repo.list_machines()
            assignments = await self._repo.list_assignments(AssignmentQuery())
        except Exception as e:
            logger.exception("Schedule reload #%d failed", seq)
            self._notifier.error("Could not load schedule", str(e))
            return False

        if self._closed or seq < self._applied_seq:
            logger.debug("Dropping stale reload #%d", seq)
            return False

        self._applied_seq = seq
        self._machines = list(machines)
        self._confirmed = {a.id: a for a in assignments}
        # Placements still being written survive the refresh; the rest are corrected by it.
        self._overlay = {k: v for k, v in self._overlay.items() if k in self._pending}
        self.loaded = True

        overlaps = find_overlaps(self._confirmed.values())
        if overlaps:
            logger.warning(
                "Loaded schedule has %d overlapping assignment pair(s): %s",
                len(overlaps),
                ", ".join(f"{a.id}/{b.id}" for a, b in overlaps),
            )
        logger.info(
            "Schedule reload #%d: %d machines, %d assignments",
            seq, len(self._machines), len(self._confirmed),
        )
        return True

    # ─── Snapshot access ────────────────────────────────────────────

    @property
    def machines(self) -> list[Machine]:
        return list(self._machines)

    @property
    def assignments(self) -> list[Assignment]:
        """Unfiltered snapshot with optimistic placements applied, in load order."""
        return [self._overlay.get(a_id, a) for a_id, a in self._confirmed.items()]

    def get(self, assignment_id: str) -> Assignment | None:
        if assignment_id in self._overlay:
            return self._overlay[assignment_id]
        return self._confirmed.get(assignment_id)

    def has_machine(self, machine_id: str) -> bool:
        return any(m.id == machine_id for m in self._machines)

    # ─── Optimistic overlay ─────────────────────────────────────────

    def apply_optimistic(self, assignment: Assignment) -> None:
        self._overlay[assignment.id] = assignment
        self._pending.add(assignment.id)

    def confirm(self, assignment: Assignment) -> None:
        """The write succeeded: the placement becomes the last confirmed state."""
        self._pending.discard(assignment.id)
        self._overlay.pop(assignment.id, None)
        if assignment.id in self._confirmed:
            self._confirmed[assignment.id] = assignment

    def rollback(self, assignment_id: str) -> None:
        """The write failed: fall back to the last confirmed placement."""
        self._pending.discard(assignment_id)
        self._overlay.pop(assignment_id, None)

    # ─── Window and filter ──────────────────────────────────────────

    def shift(self, steps: int = 1) -> TimeWindow:
        self.window = self.window.shift(steps)
        return self.window

    def jump_to_now(self) -> TimeWindow:
        self.window = self.window.jump_to_now(self._clock())
        return self.window

    def set_zoom(self, zoom: ZoomLevel) -> TimeWindow:
        self.window = self.window.with_zoom(zoom)
        return self.window

    def set_filter(self, schedule_filter: ScheduleFilter) -> None:
        self.filter = schedule_filter

    def toggle_lane(self, machine_id: str) -> bool:
        """Collapse or expand a timeline lane. Returns True if now collapsed."""
        if machine_id in self.collapsed:
            self.collapsed.discard(machine_id)
            return False
        self.collapsed.add(machine_id)
        return True

    # ─── Derived views ──────────────────────────────────────────────

    def filtered(self) -> FilteredSchedule:
        return apply_filter(self._machines, self.assignments, self.filter, self.window)

    def view(self) -> ScheduleView:
        now = self._clock()
        filtered = self.filtered()
        utilization = compute_utilization(
            filtered.machines, filtered.assignments, self.window, self._threshold
        )
        return ScheduleView(
            window=self.window,
            filtered=filtered,
            utilization=utilization,
            summary=summarize(filtered.assignments, utilization, now),
            timeline=build_timeline(filtered, self.window, utilization, self.collapsed, now),
            board=build_board(filtered),
            rows=build_list(filtered),
            machine_groups=machine_groups(self._machines),
        )
