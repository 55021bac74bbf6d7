"""TimeWindow value object — the visible slice of the time axis.

A window is fixed by an anchor date and a zoom level. The zoom level decides
both how much time is visible and the scale (distance units per minute) that
every projection uses to place assignments along the axis.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from app.domain.value_objects.enums import ZoomLevel
from app.domain.value_objects.time_interval import TimeInterval


@dataclass(frozen=True)
class ZoomSpec:
    length: timedelta
    scale: float  # distance per minute
    tick: timedelta
    step: timedelta  # navigation step for shift()


ZOOM_SPECS: dict[ZoomLevel, ZoomSpec] = {
    ZoomLevel.FINE: ZoomSpec(
        length=timedelta(days=1), scale=3.0, tick=timedelta(hours=1), step=timedelta(days=1)
    ),
    ZoomLevel.MEDIUM: ZoomSpec(
        length=timedelta(days=7), scale=0.7, tick=timedelta(days=1), step=timedelta(days=7)
    ),
    ZoomLevel.COARSE: ZoomSpec(
        length=timedelta(days=28), scale=0.175, tick=timedelta(days=7), step=timedelta(days=28)
    ),
}


def start_of_day(ts: datetime) -> datetime:
    return ts.replace(hour=0, minute=0, second=0, microsecond=0)


def to_naive_local(ts: datetime) -> datetime:
    """Stored timestamps are naive local time; convert aware values into that form."""
    if ts.tzinfo is None:
        return ts
    return ts.astimezone().replace(tzinfo=None)


@dataclass(frozen=True)
class TimeWindow:
    start: datetime
    end: datetime
    scale: float
    zoom: ZoomLevel

    @classmethod
    def for_zoom(cls, anchor: datetime, zoom: ZoomLevel) -> "TimeWindow":
        spec = ZOOM_SPECS[zoom]
        start = start_of_day(anchor)
        return cls(start=start, end=start + spec.length, scale=spec.scale, zoom=zoom)

    # ─── Navigation ─────────────────────────────────────────────────

    def shift(self, steps: int = 1) -> "TimeWindow":
        """Move the window forward (positive) or backward (negative) by whole steps."""
        delta = ZOOM_SPECS[self.zoom].step * steps
        return TimeWindow.for_zoom(self.start + delta, self.zoom)

    def jump_to_now(self, now: datetime) -> "TimeWindow":
        return TimeWindow.for_zoom(now, self.zoom)

    def with_zoom(self, zoom: ZoomLevel) -> "TimeWindow":
        return TimeWindow.for_zoom(self.start, zoom)

    # ─── Scale math ─────────────────────────────────────────────────

    @property
    def interval(self) -> TimeInterval:
        return TimeInterval(self.start, self.end)

    @property
    def length_minutes(self) -> float:
        return (self.end - self.start).total_seconds() / 60

    @property
    def width(self) -> float:
        return self.length_minutes * self.scale

    def offset_of(self, ts: datetime) -> float:
        return (ts - self.start).total_seconds() / 60 * self.scale

    def width_of(self, start: datetime, end: datetime) -> float:
        return (end - start).total_seconds() / 60 * self.scale

    def minutes_for(self, distance: float) -> float:
        """Convert a distance along the axis back into minutes."""
        return distance / self.scale

    def contains(self, ts: datetime) -> bool:
        return self.start <= ts < self.end

    def overlaps(self, interval: TimeInterval) -> bool:
        return interval.overlaps(self.interval)

    def clip(self, interval: TimeInterval) -> TimeInterval | None:
        return interval.clip(self.interval)

    def ticks(self) -> list[datetime]:
        """Axis labels from start to end inclusive, one per tick step."""
        step = ZOOM_SPECS[self.zoom].tick
        labels = []
        current = self.start
        while current <= self.end:
            labels.append(current)
            current += step
        return labels
