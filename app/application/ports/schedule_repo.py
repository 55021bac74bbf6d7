"""Port interface for the machine / assignment store."""

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from app.domain.entities.assignment import Assignment
from app.domain.entities.machine import Machine
from app.domain.value_objects.enums import AssignmentStatus


@dataclass(frozen=True)
class AssignmentQuery:
    """Read filter. Empty statuses means every status; search matches job fields."""

    statuses: frozenset[AssignmentStatus] = field(default_factory=frozenset)
    search: str = ""


class ScheduleRepository(ABC):
    @abstractmethod
    async def list_machines(self) -> list[Machine]:
        ...

    @abstractmethod
    async def list_assignments(self, query: AssignmentQuery) -> list[Assignment]:
        ...

    @abstractmethod
    async def update_assignment(
        self,
        assignment_id: str,
        *,
        machine_id: str | None = None,
        scheduled_start: datetime | None = None,
        scheduled_end: datetime | None = None,
    ) -> bool:
        """Persist a new machine and/or interval. Returns False if nothing was updated.

        Raises PersistenceError when the write itself fails.
        """
        ...

    @abstractmethod
    def subscribe(self, on_change: Callable[[], None]) -> Callable[[], None]:
        """Register a callback fired on any change to the assignment set.

        Returns the function that removes the subscription.
        """
        ...
