"""Tests for domain entities."""

from datetime import datetime

from app.domain.entities.assignment import Assignment
from app.domain.entities.machine import Machine
from app.domain.entities.work_order import WorkOrderRef
from app.domain.value_objects.enums import AssignmentStatus


def _make_assignment(**overrides) -> Assignment:
    fields = dict(
        id="A1",
        machine_id="M1",
        work_order=WorkOrderRef(id="wo-1", display_id="WO-1001", item_code="SHAFT-7", customer="Acme"),
        scheduled_start=datetime(2026, 10, 19, 9, 0),
        scheduled_end=datetime(2026, 10, 19, 11, 0),
    )
    fields.update(overrides)
    return Assignment(**fields)


def test_machine_label():
    m = Machine(id="M1", code="CNC-01", name="Lathe")
    assert m.label == "CNC-01 - Lathe"


def test_work_order_label_falls_back_to_id():
    assert WorkOrderRef(id="wo-9", display_id=None, item_code=None, customer=None).label == "wo-9"
    assert WorkOrderRef(id="wo-9", display_id="WO-9", item_code=None, customer=None).label == "WO-9"


def test_work_order_search_fields_skip_empty():
    wo = WorkOrderRef(id="wo-1", display_id="WO-1001", item_code=None, customer="Acme")
    assert wo.search_fields() == ["WO-1001", "wo-1", "Acme"]


def test_assignment_defaults():
    a = _make_assignment()
    assert a.status == AssignmentStatus.SCHEDULED
    assert a.quantity_allocated == 0
    assert a.is_active()
    assert not a.is_running()


def test_assignment_duration():
    a = _make_assignment()
    assert a.duration.total_seconds() == 2 * 3600
    assert a.interval.minutes == 120


def test_with_placement_returns_copy():
    a = _make_assignment()
    moved = a.with_placement(machine_id="M2")

    assert moved is not a
    assert moved.machine_id == "M2"
    assert moved.scheduled_start == a.scheduled_start
    assert a.machine_id == "M1"


def test_same_placement_ignores_status():
    a = _make_assignment()
    b = _make_assignment(status=AssignmentStatus.RUNNING)
    assert a.same_placement(b)
    assert not a.same_placement(a.with_placement(scheduled_end=datetime(2026, 10, 19, 12, 0)))
