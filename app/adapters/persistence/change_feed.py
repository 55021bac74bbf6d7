"""In-process change feed — fan-out of "assignments changed" notifications.

Each subscription owns its own unsubscribe handle; there is no module-level
feed, whoever builds the repositories decides the feed's lifetime.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class ChangeFeed:
    def __init__(self):
        self._listeners: dict[int, Callable[[], None]] = {}
        self._next_token = 0

    def subscribe(self, on_change: Callable[[], None]) -> Callable[[], None]:
        token = self._next_token
        self._next_token += 1
        self._listeners[token] = on_change

        def unsubscribe() -> None:
            self._listeners.pop(token, None)

        return unsubscribe

    def publish(self) -> None:
        """Notify every listener. A failing listener does not stop the others."""
        for token, listener in list(self._listeners.items()):
            try:
                listener()
            except Exception:
                logger.exception("Change listener %d failed", token)

    def __len__(self) -> int:
        return len(self._listeners)
