"""TimeInterval value object — immutable half-open [start, end) range."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta


@dataclass(frozen=True)
class TimeInterval:
    start: datetime
    end: datetime

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def minutes(self) -> float:
        return self.duration.total_seconds() / 60

    def overlaps(self, other: "TimeInterval") -> bool:
        """Half-open overlap: touching endpoints do not overlap."""
        return self.start < other.end and other.start < self.end

    def clip(self, other: "TimeInterval") -> "TimeInterval | None":
        """Return the part of this interval inside *other*, or None if disjoint."""
        start = max(self.start, other.start)
        end = min(self.end, other.end)
        if start >= end:
            return None
        return TimeInterval(start, end)

    def shifted(self, delta: timedelta) -> "TimeInterval":
        return TimeInterval(self.start + delta, self.end + delta)
