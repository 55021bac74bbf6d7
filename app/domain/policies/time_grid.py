"""TimeGridPolicy — snapping and minimum-duration rules for interactive edits.

All times are snapped to a grid of SLOT boundaries counted from midnight of the
same day, so a snapped value is always a whole number of slots into its day.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta

from app.domain.exceptions import InvalidIntervalError
from app.domain.value_objects.time_window import start_of_day

SLOT = timedelta(minutes=15)
MIN_DURATION = timedelta(minutes=15)


def snap(ts: datetime, slot: timedelta = SLOT) -> datetime:
    """Round *ts* to the nearest slot boundary (ties round up)."""
    midnight = start_of_day(ts)
    slots = math.floor((ts - midnight) / slot + 0.5)
    return midnight + slots * slot


def snap_delta(minutes: float, slot: timedelta = SLOT) -> timedelta:
    """Round a pointer displacement to a whole number of slots."""
    slot_minutes = slot.total_seconds() / 60
    return math.floor(minutes / slot_minutes + 0.5) * slot


def validate_interval(
    start: datetime, end: datetime, min_duration: timedelta = MIN_DURATION
) -> None:
    """Raise InvalidIntervalError if [start, end) is not a schedulable interval."""
    if start >= end:
        raise InvalidIntervalError(f"Start {start:%Y-%m-%d %H:%M} must be before end {end:%Y-%m-%d %H:%M}")
    if end - start < min_duration:
        raise InvalidIntervalError(
            f"Duration {end - start} is shorter than the minimum {min_duration}"
        )


def is_valid_interval(
    start: datetime, end: datetime, min_duration: timedelta = MIN_DURATION
) -> bool:
    try:
        validate_interval(start, end, min_duration)
    except InvalidIntervalError:
        return False
    return True


def resize_start(
    start: datetime,
    end: datetime,
    displacement: timedelta,
    slot: timedelta = SLOT,
    min_duration: timedelta = MIN_DURATION,
) -> datetime:
    """Tentative new start for a resize-start drag.

    The candidate is snapped to the grid; if it would leave less than
    *min_duration* before *end* the original start is kept (no-op clamp).
    """
    candidate = snap(start + displacement, slot)
    if not is_valid_interval(candidate, end, min_duration):
        return start
    return candidate


def resize_end(
    start: datetime,
    end: datetime,
    displacement: timedelta,
    slot: timedelta = SLOT,
    min_duration: timedelta = MIN_DURATION,
) -> datetime:
    """Tentative new end for a resize-end drag; symmetric to resize_start."""
    candidate = snap(end + displacement, slot)
    if not is_valid_interval(start, candidate, min_duration):
        return end
    return candidate
