"""FastAPI dependency injection — wires adapters into use cases."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import datetime, timedelta

from fastapi import Depends, HTTPException, Query

from app.adapters.notifications.log_notifier import CollectingNotifier
from app.adapters.persistence.change_feed import ChangeFeed
from app.adapters.persistence.database import async_session_factory
from app.adapters.persistence.repositories import SqlScheduleRepository
from app.application.use_cases.relocate_assignment import RelocationController
from app.application.use_cases.schedule_board import ScheduleBoard
from app.config import settings
from app.domain.policies.assignment_filter import ScheduleFilter
from app.domain.value_objects.enums import AssignmentStatus, ZoomLevel
from app.domain.value_objects.time_window import TimeWindow, to_naive_local

# One feed per process: every repository built here publishes to it.
_change_feed = ChangeFeed()


def get_change_feed() -> ChangeFeed:
    return _change_feed


def get_schedule_repo() -> SqlScheduleRepository:
    return SqlScheduleRepository(async_session_factory, _change_feed)


def get_notifier() -> CollectingNotifier:
    return CollectingNotifier()


def get_schedule_filter(
    status: list[AssignmentStatus] = Query(default=[]),
    search: str = "",
    group: str | None = None,
) -> ScheduleFilter:
    return ScheduleFilter(statuses=frozenset(status), search=search, machine_group=group)


def get_time_window(
    zoom: ZoomLevel = settings.default_zoom,
    anchor: datetime | None = None,
) -> TimeWindow:
    return TimeWindow.for_zoom(to_naive_local(anchor) if anchor else datetime.now(), zoom)


async def get_schedule_board(
    window: TimeWindow = Depends(get_time_window),
    schedule_filter: ScheduleFilter = Depends(get_schedule_filter),
    repo: SqlScheduleRepository = Depends(get_schedule_repo),
    notifier: CollectingNotifier = Depends(get_notifier),
) -> AsyncGenerator[ScheduleBoard, None]:
    """A board scoped to one request; its subscription is released afterwards."""
    board = ScheduleBoard(
        repo=repo,
        notifier=notifier,
        window=window,
        schedule_filter=schedule_filter,
        bottleneck_threshold=settings.bottleneck_threshold,
    )
    try:
        if not await board.open():
            raise HTTPException(status_code=503, detail="Schedule could not be loaded")
        yield board
    finally:
        await board.close()


async def get_relocation_controller(
    board: ScheduleBoard = Depends(get_schedule_board),
    repo: SqlScheduleRepository = Depends(get_schedule_repo),
    notifier: CollectingNotifier = Depends(get_notifier),
) -> AsyncGenerator[RelocationController, None]:
    controller = RelocationController(
        board=board,
        repo=repo,
        notifier=notifier,
        slot=timedelta(minutes=settings.slot_minutes),
        min_duration=timedelta(minutes=settings.min_duration_minutes),
    )
    try:
        yield controller
    finally:
        controller.close()
