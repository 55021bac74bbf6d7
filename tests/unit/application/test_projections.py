"""Tests for the timeline, resource board and flat list projections."""

from datetime import datetime, timedelta

from app.application.projections.flat_list import build_list
from app.application.projections.resource_board import build_board
from app.application.projections.timeline import build_timeline, place
from app.domain.entities.assignment import Assignment
from app.domain.entities.work_order import WorkOrderRef
from app.domain.policies.assignment_filter import FilteredSchedule
from app.domain.policies.utilization import compute_utilization
from app.domain.value_objects.enums import UtilizationBand, ZoomLevel
from app.domain.value_objects.time_window import TimeWindow

MONDAY = datetime(2026, 10, 19)


def _make_assignment(id: str, machine_id: str, start_hour: float, end_hour: float) -> Assignment:
    return Assignment(
        id=id, machine_id=machine_id,
        work_order=WorkOrderRef(id=f"wo-{id}", display_id=None, item_code=None, customer=None),
        scheduled_start=MONDAY + timedelta(hours=start_hour),
        scheduled_end=MONDAY + timedelta(hours=end_hour),
    )


def test_place_uses_window_scale():
    window = TimeWindow.for_zoom(MONDAY, ZoomLevel.FINE)
    bar = place(_make_assignment("A", "M1", 9, 11), window)
    assert bar.offset == 1620
    assert bar.width == 360


def test_bar_straddling_window_start_has_negative_offset():
    window = TimeWindow.for_zoom(MONDAY, ZoomLevel.FINE)
    bar = place(_make_assignment("A", "M1", -2, 1), window)
    assert bar.offset == -360
    assert bar.width == 540


def test_timeline_lanes_follow_machines(machines):
    window = TimeWindow.for_zoom(MONDAY, ZoomLevel.FINE)
    schedule = FilteredSchedule(
        machines=machines,
        assignments=[_make_assignment("A", "M2", 0, 23), _make_assignment("B", "M1", 9, 11)],
    )
    util = compute_utilization(schedule.machines, schedule.assignments, window)

    timeline = build_timeline(schedule, window, util, collapsed={"M3"})

    assert [lane.machine.id for lane in timeline.lanes] == ["M1", "M2", "M3"]
    assert [bar.assignment.id for bar in timeline.lanes[1].bars] == ["A"]
    assert timeline.lanes[1].band == UtilizationBand.CRITICAL
    assert timeline.lanes[2].collapsed
    assert timeline.lanes[2].bars == []
    assert timeline.width == 4320
    assert len(timeline.ticks) == 25
    assert timeline.now_offset is None


def test_collapsed_lane_keeps_bars(machines):
    window = TimeWindow.for_zoom(MONDAY, ZoomLevel.FINE)
    schedule = FilteredSchedule(machines=machines, assignments=[_make_assignment("A", "M1", 9, 11)])

    timeline = build_timeline(schedule, window, {}, collapsed={"M1"})

    assert timeline.lanes[0].collapsed
    assert len(timeline.lanes[0].bars) == 1
    assert timeline.lanes[0].utilization == 0.0


def test_now_marker_only_inside_window(machines):
    window = TimeWindow.for_zoom(MONDAY, ZoomLevel.FINE)
    schedule = FilteredSchedule(machines=machines, assignments=[])

    inside = build_timeline(schedule, window, {}, now=MONDAY + timedelta(hours=2))
    outside = build_timeline(schedule, window, {}, now=MONDAY + timedelta(days=2))

    assert inside.now_offset == 360
    assert outside.now_offset is None


def test_board_columns_keep_insertion_order(machines):
    schedule = FilteredSchedule(
        machines=machines,
        assignments=[
            _make_assignment("late", "M1", 14, 15),
            _make_assignment("early", "M1", 8, 9),
            _make_assignment("other", "M3", 8, 9),
        ],
    )

    columns = build_board(schedule)

    assert [c.machine.id for c in columns] == ["M1", "M2", "M3"]
    assert [a.id for a in columns[0].assignments] == ["late", "early"]
    assert [c.job_count for c in columns] == [2, 0, 1]


def test_list_sorted_by_start_with_machine_label(machines):
    schedule = FilteredSchedule(
        machines=machines,
        assignments=[_make_assignment("late", "M1", 14, 15), _make_assignment("early", "M3", 8, 9)],
    )

    rows = build_list(schedule)

    assert [r.assignment.id for r in rows] == ["early", "late"]
    assert rows[0].machine_label == "PRS-01 - Press"
    assert rows[1].machine_label == "CNC-01 - Lathe"


def test_list_label_falls_back_to_machine_id(machines):
    schedule = FilteredSchedule(machines=[], assignments=[_make_assignment("A", "M7", 8, 9)])
    assert build_list(schedule)[0].machine_label == "M7"
