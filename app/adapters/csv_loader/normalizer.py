"""CSV value normalization — handles BOM, trailing spaces, date and number quirks."""

from __future__ import annotations

import re
from datetime import datetime

from app.domain.value_objects.enums import AssignmentStatus
from app.domain.value_objects.time_window import to_naive_local

DATETIME_FORMATS = (
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%d.%m.%Y %H:%M",
    "%d/%m/%Y %H:%M",
)

# Spellings seen in planner exports
STATUS_ALIASES: dict[str, AssignmentStatus] = {
    "in_progress": AssignmentStatus.RUNNING,
    "started": AssignmentStatus.RUNNING,
    "on_hold": AssignmentStatus.PAUSED,
    "hold": AssignmentStatus.PAUSED,
    "done": AssignmentStatus.COMPLETED,
    "finished": AssignmentStatus.COMPLETED,
    "canceled": AssignmentStatus.CANCELLED,
    "planned": AssignmentStatus.SCHEDULED,
}


def normalize_column_name(name: str) -> str:
    """Normalize a CSV column name.

    - Strips leading/trailing whitespace
    - Removes BOM characters (\\ufeff)
    - Replaces runs of spaces / non-breaking spaces with a single underscore
    - Lowercases
    - Strips non-alphanumeric characters (except underscore)
    """
    name = name.replace("\ufeff", "")
    name = name.strip()
    name = re.sub(r"[\s\u00a0]+", "_", name)
    name = name.lower()
    name = re.sub(r"[^\w]", "", name, flags=re.UNICODE)
    return name


def clean_string(value: str | None) -> str | None:
    """Strip whitespace and return None for empty strings."""
    if value is None:
        return None
    value = value.strip()
    return value if value else None


def parse_datetime(raw: str | None) -> datetime | None:
    """Parse a timestamp in any of the accepted formats; None when unparseable."""
    raw = clean_string(raw)
    if not raw:
        return None
    for fmt in DATETIME_FORMATS:
        try:
            return datetime.strptime(raw, fmt)
        except ValueError:
            continue
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        return None
    return to_naive_local(parsed)


def parse_int(raw: str | None) -> int:
    """Parse "4", "4.0" or "4,0"; anything else is 0."""
    raw = clean_string(raw)
    if not raw:
        return 0
    try:
        return int(float(raw.replace(",", ".")))
    except ValueError:
        return 0


def parse_status(raw: str | None) -> AssignmentStatus | None:
    """Map a status cell to AssignmentStatus; empty means scheduled, unknown means None."""
    raw = clean_string(raw)
    if not raw:
        return AssignmentStatus.SCHEDULED
    key = normalize_column_name(raw)
    try:
        return AssignmentStatus(key)
    except ValueError:
        return STATUS_ALIASES.get(key)
