"""SQLAlchemy repository implementation of ScheduleRepository."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from sqlalchemy import or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import contains_eager

from app.adapters.persistence.change_feed import ChangeFeed
from app.adapters.persistence.models import (
    MachineAssignmentModel,
    MachineModel,
    WorkOrderModel,
)
from app.application.ports.schedule_repo import AssignmentQuery, ScheduleRepository
from app.domain.entities.assignment import Assignment
from app.domain.entities.machine import Machine
from app.domain.entities.work_order import WorkOrderRef
from app.domain.exceptions import LoadError, PersistenceError
from app.domain.value_objects.enums import AssignmentStatus

logger = logging.getLogger(__name__)

# ─── Mappers ─────────────────────────────────────────────────────────


def _machine_to_domain(m: MachineModel) -> Machine:
    return Machine(id=m.id, code=m.machine_id, name=m.name, location=m.location)


def _work_order_to_domain(m: WorkOrderModel) -> WorkOrderRef:
    return WorkOrderRef(
        id=m.wo_id,
        display_id=m.display_id,
        item_code=m.item_code,
        customer=m.customer,
        quantity=m.quantity,
    )


def _assignment_to_domain(m: MachineAssignmentModel) -> Assignment:
    return Assignment(
        id=m.id,
        machine_id=m.machine_id,
        work_order=_work_order_to_domain(m.work_order),
        scheduled_start=m.scheduled_start,
        scheduled_end=m.scheduled_end,
        status=AssignmentStatus(m.status),
        quantity_allocated=m.quantity_allocated,
    )


# ─── Repository ──────────────────────────────────────────────────────


class SqlScheduleRepository(ScheduleRepository):
    """Opens a short-lived session per call; publishes to *feed* after each write."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], feed: ChangeFeed):
        self._sessions = session_factory
        self._feed = feed

    async def list_machines(self) -> list[Machine]:
        try:
            async with self._sessions() as s:
                result = await s.execute(select(MachineModel).order_by(MachineModel.machine_id))
                return [_machine_to_domain(m) for m in result.scalars()]
        except SQLAlchemyError as e:
            raise LoadError(f"Failed to load machines: {e}") from e

    async def list_assignments(self, query: AssignmentQuery) -> list[Assignment]:
        stmt = (
            select(MachineAssignmentModel)
            .join(MachineAssignmentModel.work_order)
            .options(contains_eager(MachineAssignmentModel.work_order))
            .order_by(MachineAssignmentModel.scheduled_start, MachineAssignmentModel.id)
        )
        if query.statuses:
            stmt = stmt.where(MachineAssignmentModel.status.in_([s.value for s in query.statuses]))
        term = query.search.strip()
        if term:
            pattern = f"%{term}%"
            stmt = stmt.where(
                or_(
                    WorkOrderModel.display_id.ilike(pattern),
                    WorkOrderModel.wo_id.ilike(pattern),
                    WorkOrderModel.item_code.ilike(pattern),
                    WorkOrderModel.customer.ilike(pattern),
                )
            )
        try:
            async with self._sessions() as s:
                result = await s.execute(stmt)
                return [_assignment_to_domain(m) for m in result.scalars()]
        except SQLAlchemyError as e:
            raise LoadError(f"Failed to load assignments: {e}") from e

    async def update_assignment(
        self,
        assignment_id: str,
        *,
        machine_id: str | None = None,
        scheduled_start: datetime | None = None,
        scheduled_end: datetime | None = None,
    ) -> bool:
        values: dict[str, object] = {}
        if machine_id is not None:
            values["machine_id"] = machine_id
        if scheduled_start is not None:
            values["scheduled_start"] = scheduled_start
        if scheduled_end is not None:
            values["scheduled_end"] = scheduled_end
        if not values:
            return True

        try:
            async with self._sessions() as s:
                result = await s.execute(
                    update(MachineAssignmentModel)
                    .where(MachineAssignmentModel.id == assignment_id)
                    .values(**values)
                )
                await s.commit()
        except SQLAlchemyError as e:
            logger.error("Update of assignment %s failed: %s", assignment_id, e)
            raise PersistenceError(f"Failed to update assignment {assignment_id}: {e}") from e

        if result.rowcount == 0:
            logger.warning("Assignment %s not found for update", assignment_id)
            return False

        self._feed.publish()
        return True

    def subscribe(self, on_change: Callable[[], None]) -> Callable[[], None]:
        return self._feed.subscribe(on_change)
