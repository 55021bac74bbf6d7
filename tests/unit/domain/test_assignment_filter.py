"""Tests for the upstream schedule filter."""

from datetime import datetime, timedelta

from app.domain.entities.assignment import Assignment
from app.domain.entities.machine import Machine
from app.domain.entities.work_order import WorkOrderRef
from app.domain.policies.assignment_filter import ScheduleFilter, apply_filter, machine_groups
from app.domain.value_objects.enums import AssignmentStatus, ZoomLevel
from app.domain.value_objects.time_window import TimeWindow


def _make_assignment(
    id: str, machine_id: str, day_offset: int = 0,
    status: AssignmentStatus = AssignmentStatus.SCHEDULED,
    customer: str | None = None, item_code: str | None = None,
) -> Assignment:
    start = datetime(2026, 10, 19, 9) + timedelta(days=day_offset)
    return Assignment(
        id=id, machine_id=machine_id,
        work_order=WorkOrderRef(
            id=f"wo-{id}", display_id=f"WO-{id}", item_code=item_code, customer=customer
        ),
        scheduled_start=start, scheduled_end=start + timedelta(hours=2), status=status,
    )


def _ids(schedule) -> list[str]:
    return [a.id for a in schedule.assignments]


def test_empty_filter_keeps_everything_in_window(monday, machines):
    window = TimeWindow.for_zoom(monday, ZoomLevel.MEDIUM)
    data = [_make_assignment("A", "M1"), _make_assignment("B", "M3", day_offset=3)]

    result = apply_filter(machines, data, ScheduleFilter(), window)

    assert _ids(result) == ["A", "B"]
    assert result.machines == machines


def test_assignments_outside_window_are_dropped(monday, machines):
    window = TimeWindow.for_zoom(monday, ZoomLevel.FINE)
    data = [_make_assignment("A", "M1"), _make_assignment("B", "M1", day_offset=1)]

    assert _ids(apply_filter(machines, data, ScheduleFilter(), window)) == ["A"]


def test_status_filter(monday, machines):
    window = TimeWindow.for_zoom(monday, ZoomLevel.FINE)
    data = [
        _make_assignment("A", "M1", status=AssignmentStatus.RUNNING),
        _make_assignment("B", "M2"),
        _make_assignment("C", "M3", status=AssignmentStatus.PAUSED),
    ]
    f = ScheduleFilter(statuses=frozenset({AssignmentStatus.RUNNING, AssignmentStatus.PAUSED}))

    assert _ids(apply_filter(machines, data, f, window)) == ["A", "C"]


def test_search_is_case_insensitive_across_fields(monday, machines):
    window = TimeWindow.for_zoom(monday, ZoomLevel.FINE)
    data = [
        _make_assignment("A", "M1", customer="Acme Corp"),
        _make_assignment("B", "M2", item_code="ACME-BRACKET"),
        _make_assignment("C", "M3", customer="Globex"),
    ]

    result = apply_filter(machines, data, ScheduleFilter(search="  acme "), window)
    assert _ids(result) == ["A", "B"]


def test_search_matches_display_id(monday, machines):
    window = TimeWindow.for_zoom(monday, ZoomLevel.FINE)
    data = [_make_assignment("A", "M1"), _make_assignment("B", "M2")]

    assert _ids(apply_filter(machines, data, ScheduleFilter(search="wo-b"), window)) == ["B"]


def test_machine_group_hides_machines_and_their_assignments(monday, machines):
    window = TimeWindow.for_zoom(monday, ZoomLevel.FINE)
    data = [_make_assignment("A", "M1"), _make_assignment("B", "M3")]

    result = apply_filter(machines, data, ScheduleFilter(machine_group="Hall B"), window)

    assert [m.id for m in result.machines] == ["M3"]
    assert _ids(result) == ["B"]


def test_assignment_on_unknown_machine_is_dropped(monday, machines):
    window = TimeWindow.for_zoom(monday, ZoomLevel.FINE)
    assert _ids(apply_filter(machines, [_make_assignment("A", "M9")], ScheduleFilter(), window)) == []


def test_machine_groups_distinct_in_order(machines):
    extra = machines + [Machine(id="M4", code="X", name="Spare"), Machine(id="M5", code="Y", name="Saw", location="Hall A")]
    assert machine_groups(extra) == ["Hall A", "Hall B"]
