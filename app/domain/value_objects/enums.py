"""Domain enums — pure Python, no external dependencies."""

from enum import Enum


class AssignmentStatus(str, Enum):
    SCHEDULED = "scheduled"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def is_active(self) -> bool:
        """Active assignments hold their machine and take part in overlap checks."""
        return self in ACTIVE_STATUSES


ACTIVE_STATUSES = frozenset(
    {AssignmentStatus.SCHEDULED, AssignmentStatus.RUNNING, AssignmentStatus.PAUSED}
)


class ZoomLevel(str, Enum):
    FINE = "fine"
    MEDIUM = "medium"
    COARSE = "coarse"


class GestureKind(str, Enum):
    MOVE = "move"
    RESIZE_START = "resize_start"
    RESIZE_END = "resize_end"


class GestureState(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    RELEASING = "releasing"


class UtilizationBand(str, Enum):
    CRITICAL = "critical"
    ELEVATED = "elevated"
    HEALTHY = "healthy"
    UNDER_UTILIZED = "under_utilized"
