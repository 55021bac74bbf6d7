"""Tests for CSV normalizer functions."""

from datetime import datetime, timezone

from app.adapters.csv_loader.normalizer import (
    clean_string,
    normalize_column_name,
    parse_datetime,
    parse_int,
    parse_status,
)
from app.domain.value_objects.enums import AssignmentStatus

# ─── normalize_column_name ───────────────────────────────────────────


def test_strip_trailing_spaces():
    assert normalize_column_name("  Machine ID  ") == "machine_id"


def test_remove_bom():
    assert normalize_column_name("\ufeffwo_id") == "wo_id"


def test_non_breaking_space():
    assert normalize_column_name("Scheduled\u00a0Start") == "scheduled_start"


def test_punctuation_removed():
    assert normalize_column_name("Qty. (allocated)") == "qty_allocated"


# ─── clean_string ────────────────────────────────────────────────────


def test_clean_string_strips():
    assert clean_string("  CNC-01  ") == "CNC-01"


def test_clean_string_empty_to_none():
    assert clean_string("   ") is None
    assert clean_string(None) is None


# ─── parse_datetime ──────────────────────────────────────────────────


def test_parse_iso_datetime():
    assert parse_datetime("2026-10-19T09:30:00") == datetime(2026, 10, 19, 9, 30)


def test_parse_space_separated_datetime():
    assert parse_datetime("2026-10-19 09:30") == datetime(2026, 10, 19, 9, 30)


def test_parse_dotted_datetime():
    assert parse_datetime("19.10.2026 14:00") == datetime(2026, 10, 19, 14, 0)


def test_parse_datetime_converts_offset_to_local_time():
    expected = datetime(2026, 10, 19, 7, 30, tzinfo=timezone.utc).astimezone().replace(tzinfo=None)
    assert parse_datetime("2026-10-19T09:30:00+02:00") == expected


def test_parse_datetime_garbage():
    assert parse_datetime("next tuesday") is None
    assert parse_datetime("") is None


# ─── parse_int / parse_status ────────────────────────────────────────


def test_parse_int():
    assert parse_int("40") == 40
    assert parse_int("40.0") == 40
    assert parse_int("12,0") == 12
    assert parse_int("lots") == 0
    assert parse_int(None) == 0


def test_parse_status_canonical():
    assert parse_status("Running") == AssignmentStatus.RUNNING


def test_parse_status_aliases():
    assert parse_status("In Progress") == AssignmentStatus.RUNNING
    assert parse_status("canceled") == AssignmentStatus.CANCELLED
    assert parse_status("Done") == AssignmentStatus.COMPLETED


def test_parse_status_empty_is_scheduled():
    assert parse_status("") == AssignmentStatus.SCHEDULED


def test_parse_status_unknown():
    assert parse_status("exploded") is None
