"""Notifier adapters — implement NotifierPort."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from app.application.ports.notifier_port import NotifierPort

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    level: str
    title: str
    message: str


class LogNotifier(NotifierPort):
    """Writes notifications to the log; used where no UI is attached."""

    def info(self, title: str, message: str) -> None:
        logger.info("%s: %s", title, message)

    def error(self, title: str, message: str) -> None:
        logger.warning("%s: %s", title, message)


class CollectingNotifier(LogNotifier):
    """Logs and also keeps notifications so an API response can return them."""

    def __init__(self):
        self.notifications: list[Notification] = []

    def info(self, title: str, message: str) -> None:
        super().info(title, message)
        self.notifications.append(Notification("info", title, message))

    def error(self, title: str, message: str) -> None:
        super().error(title, message)
        self.notifications.append(Notification("error", title, message))
