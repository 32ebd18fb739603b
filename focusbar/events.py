"""In-process publish/subscribe hub for presentation events."""

import logging
from collections import defaultdict
from typing import Any, Callable, DefaultDict, List

logger = logging.getLogger(__name__)

TIMER_UPDATE = "timer:update"
ACTIVE_TASK_CHANGE = "tasks:active-change"
TRAY_TITLE = "tray:title"

Subscriber = Callable[[Any], None]


class Broadcaster:
    """Delivers published payloads to every subscriber of a channel.

    A subscriber that raises is logged and skipped; delivery to the rest
    continues and the publisher never sees the error.
    """

    def __init__(self) -> None:
        self._subscribers: DefaultDict[str, List[Subscriber]] = defaultdict(list)

    def subscribe(self, channel: str, callback: Subscriber) -> Callable[[], None]:
        """Register a callback. Returns a function that unsubscribes it."""
        self._subscribers[channel].append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers[channel]:
                self._subscribers[channel].remove(callback)

        return unsubscribe

    def publish(self, channel: str, payload: Any = None) -> None:
        for callback in list(self._subscribers[channel]):
            try:
                callback(payload)
            except Exception:
                logger.exception("Subscriber %r failed on %s", callback, channel)
