"""Registry of the task the current work phase is attributed to."""

import logging
from typing import Optional

from .events import ACTIVE_TASK_CHANGE, Broadcaster

logger = logging.getLogger(__name__)


class ActiveTaskRegistry:
    """Holds one optional task id.

    The id is a lookup key only; it is not checked against the task store
    and may point at a deleted task.
    """

    def __init__(self, broadcaster: Broadcaster):
        self.broadcaster = broadcaster
        self._task_id: Optional[str] = None

    def get(self) -> Optional[str]:
        return self._task_id

    def set(self, task_id: Optional[str]) -> None:
        """Replace the active task and publish the change."""
        self._task_id = task_id or None
        logger.info("Active task set to %s", self._task_id)
        self.broadcaster.publish(ACTIVE_TASK_CHANGE, self._task_id)
