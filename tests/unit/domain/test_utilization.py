"""Tests for per-machine utilization and bottleneck detection."""

from datetime import datetime, timedelta

import pytest

from app.domain.entities.assignment import Assignment
from app.domain.entities.work_order import WorkOrderRef
from app.domain.policies.utilization import (
    band_for,
    bottlenecks,
    compute_utilization,
    utilization_percent,
)
from app.domain.value_objects.enums import AssignmentStatus, UtilizationBand, ZoomLevel
from app.domain.value_objects.time_window import TimeWindow


def _make_assignment(
    id: str, machine_id: str, start: datetime, end: datetime,
    status: AssignmentStatus = AssignmentStatus.SCHEDULED,
) -> Assignment:
    return Assignment(
        id=id, machine_id=machine_id,
        work_order=WorkOrderRef(id=f"wo-{id}", display_id=None, item_code=None, customer=None),
        scheduled_start=start, scheduled_end=end, status=status,
    )


def test_assignment_covering_window_is_full(monday):
    window = TimeWindow.for_zoom(monday, ZoomLevel.MEDIUM)
    a = _make_assignment("A", "M1", monday, monday + timedelta(days=7))

    assert utilization_percent("M1", [a], window) == 100.0


def test_assignment_is_clipped_to_window(monday):
    window = TimeWindow.for_zoom(monday, ZoomLevel.FINE)
    a = _make_assignment("A", "M1", monday - timedelta(hours=12), monday + timedelta(hours=6))

    assert utilization_percent("M1", [a], window) == pytest.approx(25.0)


def test_cancelled_is_excluded(monday):
    window = TimeWindow.for_zoom(monday, ZoomLevel.FINE)
    a = _make_assignment("A", "M1", monday, monday + timedelta(hours=12), AssignmentStatus.CANCELLED)

    assert utilization_percent("M1", [a], window) == 0.0


def test_completed_still_counts(monday):
    window = TimeWindow.for_zoom(monday, ZoomLevel.FINE)
    a = _make_assignment("A", "M1", monday, monday + timedelta(hours=12), AssignmentStatus.COMPLETED)

    assert utilization_percent("M1", [a], window) == pytest.approx(50.0)


def test_overlapping_data_is_capped(monday):
    window = TimeWindow.for_zoom(monday, ZoomLevel.FINE)
    full_day = (monday, monday + timedelta(days=1))
    data = [_make_assignment("A", "M1", *full_day), _make_assignment("B", "M1", *full_day)]

    assert utilization_percent("M1", data, window) == 100.0


def test_assignment_outside_window_is_ignored(monday):
    window = TimeWindow.for_zoom(monday, ZoomLevel.FINE)
    a = _make_assignment("A", "M1", monday + timedelta(days=2), monday + timedelta(days=3))

    assert utilization_percent("M1", [a], window) == 0.0


@pytest.mark.parametrize(
    "percent, band",
    [
        (100, UtilizationBand.CRITICAL),
        (90, UtilizationBand.CRITICAL),
        (89.9, UtilizationBand.ELEVATED),
        (70, UtilizationBand.ELEVATED),
        (50, UtilizationBand.HEALTHY),
        (49.9, UtilizationBand.UNDER_UTILIZED),
        (0, UtilizationBand.UNDER_UTILIZED),
    ],
)
def test_band_for(percent, band):
    assert band_for(percent) == band


def test_compute_utilization_flags_bottlenecks(monday, machines):
    window = TimeWindow.for_zoom(monday, ZoomLevel.FINE)
    data = [
        _make_assignment("A", "M1", monday, monday + timedelta(hours=22)),
        _make_assignment("B", "M2", monday, monday + timedelta(hours=12)),
    ]

    util = compute_utilization(machines, data, window)

    assert set(util) == {"M1", "M2", "M3"}
    assert util["M1"].is_bottleneck
    assert util["M1"].band == UtilizationBand.CRITICAL
    assert not util["M2"].is_bottleneck
    assert util["M3"].percent == 0.0
    assert bottlenecks(util) == ["M1"]


def test_custom_threshold(monday, machines):
    window = TimeWindow.for_zoom(monday, ZoomLevel.FINE)
    data = [_make_assignment("B", "M2", monday, monday + timedelta(hours=12))]

    util = compute_utilization(machines, data, window, threshold=50.0)
    assert bottlenecks(util) == ["M2"]
