"""Schedule endpoints — timeline, resource board, list, utilization and summary."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from app.application.projections.flat_list import ListRow
from app.application.projections.resource_board import BoardColumn
from app.application.projections.timeline import Timeline
from app.application.use_cases.schedule_board import ScheduleBoard
from app.domain.entities.assignment import Assignment
from app.domain.entities.machine import Machine
from app.domain.policies.conflict_detection import find_overlaps
from app.domain.policies.summary import ScheduleSummary
from app.domain.value_objects.time_window import TimeWindow
from app.infrastructure.api.dependencies import get_schedule_board

router = APIRouter(prefix="/schedule", tags=["schedule"])


@router.get("")
async def get_schedule(
    collapsed: list[str] = Query(default=[]),
    board: ScheduleBoard = Depends(get_schedule_board),
):
    """All three projections plus utilization and summary, from one filtered set."""
    for machine_id in collapsed:
        board.toggle_lane(machine_id)
    view = board.view()

    return {
        "window": serialize_window(view.window),
        "summary": serialize_summary(view.summary),
        "machine_groups": view.machine_groups,
        "utilization": {
            machine_id: {
                "percent": round(u.percent, 1),
                "band": u.band.value,
                "is_bottleneck": u.is_bottleneck,
            }
            for machine_id, u in view.utilization.items()
        },
        "timeline": _serialize_timeline(view.timeline),
        "board": [_serialize_column(c) for c in view.board],
        "list": [_serialize_row(r) for r in view.rows],
    }


@router.get("/summary")
async def get_summary(board: ScheduleBoard = Depends(get_schedule_board)):
    """Header tiles only."""
    return serialize_summary(board.view().summary)


@router.get("/conflicts")
async def get_conflicts(board: ScheduleBoard = Depends(get_schedule_board)):
    """Audit of active assignments that already overlap in the stored data."""
    pairs = find_overlaps(board.assignments)
    return {
        "total": len(pairs),
        "conflicts": [
            {"machine_id": a.machine_id, "first": serialize_assignment(a), "second": serialize_assignment(b)}
            for a, b in pairs
        ],
    }


# ─── Serializers ─────────────────────────────────────────────────────


def serialize_window(w: TimeWindow) -> dict:
    return {
        "zoom": w.zoom.value,
        "start": w.start.isoformat(),
        "end": w.end.isoformat(),
        "scale": w.scale,
        "width": w.width,
    }


def serialize_summary(s: ScheduleSummary) -> dict:
    return {
        "jobs_today": s.jobs_today,
        "units_in_progress": s.units_in_progress,
        "bottleneck_machines": s.bottleneck_machines,
        "next_completion": s.next_completion.isoformat() if s.next_completion else None,
    }


def serialize_machine(m: Machine) -> dict:
    return {"id": m.id, "code": m.code, "name": m.name, "location": m.location}


def serialize_assignment(a: Assignment) -> dict:
    wo = a.work_order
    return {
        "id": a.id,
        "machine_id": a.machine_id,
        "scheduled_start": a.scheduled_start.isoformat(),
        "scheduled_end": a.scheduled_end.isoformat(),
        "status": a.status.value,
        "quantity_allocated": a.quantity_allocated,
        "work_order": {
            "wo_id": wo.id,
            "display_id": wo.display_id,
            "item_code": wo.item_code,
            "customer": wo.customer,
            "quantity": wo.quantity,
        },
    }


def _serialize_timeline(t: Timeline) -> dict:
    return {
        "width": t.width,
        "ticks": [tick.isoformat() for tick in t.ticks],
        "now_offset": t.now_offset,
        "lanes": [
            {
                "machine": serialize_machine(lane.machine),
                "utilization": round(lane.utilization, 1),
                "band": lane.band.value,
                "collapsed": lane.collapsed,
                "bars": [
                    {
                        "assignment": serialize_assignment(bar.assignment),
                        "offset": bar.offset,
                        "width": bar.width,
                    }
                    for bar in lane.bars
                ],
            }
            for lane in t.lanes
        ],
    }


def _serialize_column(c: BoardColumn) -> dict:
    return {
        "machine": serialize_machine(c.machine),
        "job_count": c.job_count,
        "assignments": [serialize_assignment(a) for a in c.assignments],
    }


def _serialize_row(r: ListRow) -> dict:
    return {"machine_label": r.machine_label, **serialize_assignment(r.assignment)}
