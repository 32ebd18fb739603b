"""Command surface used by the UI and global shortcuts."""

import logging
from typing import Any, Callable, Dict, List, Optional

from .active_task import ActiveTaskRegistry
from .errors import UnknownCommandError
from .events import Broadcaster
from .notifications import Notifier
from .scheduler import IntervalScheduler, TimerEngine
from .settings import SettingsStore
from .stats import StatsRecorder
from .store import JsonStore
from .tasks import DailyPlan, PlanStore, TaskStore

logger = logging.getLogger(__name__)

STORE_FILENAME = "store.json"

# Global shortcut name -> engine method name.
SHORTCUTS = {
    "toggle-timer": "toggle",
    "stop-timer": "pause",
    "reset-timer": "reset",
}


class FocusbarService:
    """Owns the stores, the engine and the active task registry.

    Each public method maps to one command channel; see ``CHANNELS``.
    """

    CHANNELS = {
        "timer:get-state": "get_timer_state",
        "timer:start": "start_timer",
        "timer:pause": "pause_timer",
        "timer:reset": "reset_timer",
        "timer:skip": "skip_phase",
        "settings:get": "get_settings",
        "settings:update": "update_settings",
        "stats:get": "get_stats",
        "tasks:get": "get_tasks",
        "tasks:create": "create_task",
        "tasks:update": "update_task",
        "tasks:delete": "delete_task",
        "daily-plan:get": "get_daily_plan",
        "daily-plan:save": "save_daily_plan",
        "tasks:set-active": "set_active_task",
        "tasks:get-active": "get_active_task",
    }

    def __init__(
        self,
        store: JsonStore,
        scheduler: IntervalScheduler,
        notifier=None,
        broadcaster: Optional[Broadcaster] = None,
    ):
        self.store = store
        self.broadcaster = broadcaster or Broadcaster()
        self.settings = SettingsStore(store)
        self.stats = StatsRecorder(store)
        self.tasks = TaskStore(store)
        self.plans = PlanStore(store)
        self.active_task = ActiveTaskRegistry(self.broadcaster)
        self.engine = TimerEngine(
            scheduler=scheduler,
            settings=self.settings,
            stats=self.stats,
            tasks=self.tasks,
            notifier=notifier or Notifier(),
            broadcaster=self.broadcaster,
            active_task=self.active_task,
        )

    def dispatch(self, channel: str, *args: Any) -> Any:
        """Run the command registered for ``channel``."""
        name = self.CHANNELS.get(channel)
        if name is None:
            raise UnknownCommandError(f"No handler for {channel!r}")
        logger.debug("Dispatching %s", channel)
        return getattr(self, name)(*args)

    def shortcut(self, name: str) -> None:
        """Invoke a global shortcut by name."""
        method = SHORTCUTS.get(name)
        if method is None:
            raise UnknownCommandError(f"No shortcut {name!r}")
        getattr(self.engine, method)()

    def subscribe(self, channel: str, callback: Callable[[Any], None]) -> Callable[[], None]:
        return self.broadcaster.subscribe(channel, callback)

    # ----- Timer -----
    def get_timer_state(self) -> Dict[str, Any]:
        return self.engine.get_state().to_dict()

    def start_timer(self) -> None:
        self.engine.start()

    def pause_timer(self) -> None:
        self.engine.pause()

    def reset_timer(self) -> None:
        self.engine.reset()

    def skip_phase(self) -> None:
        self.engine.skip_phase()

    def toggle_timer(self) -> None:
        self.engine.toggle()

    # ----- Active task -----
    def set_active_task(self, task_id: Optional[str]) -> None:
        self.active_task.set(task_id)

    def get_active_task(self) -> Optional[str]:
        return self.active_task.get()

    # ----- Settings / stats -----
    def get_settings(self) -> Dict[str, Any]:
        return self.settings.get().to_dict()

    def update_settings(self, partial: Dict[str, Any]) -> Dict[str, Any]:
        return self.settings.update(partial).to_dict()

    def get_stats(self) -> Dict[str, Dict[str, Any]]:
        return {date: rec.to_dict() for date, rec in self.stats.get_stats().items()}

    # ----- Tasks / plans -----
    def get_tasks(self) -> List[Dict[str, Any]]:
        return [t.to_dict() for t in self.tasks.list_tasks()]

    def create_task(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self.tasks.create_task(**_snake_keys(data)).to_dict()

    def update_task(self, task_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        return self.tasks.update_task(task_id, **_snake_keys(updates)).to_dict()

    def delete_task(self, task_id: str) -> None:
        self.tasks.delete_task(task_id)

    def get_daily_plan(self, date: str) -> Optional[Dict[str, Any]]:
        plan = self.plans.get_daily_plan(date)
        return plan.to_dict() if plan else None

    def save_daily_plan(self, plan: Dict[str, Any]) -> Dict[str, Any]:
        saved = self.plans.save_daily_plan(DailyPlan.from_dict(plan))
        return saved.to_dict()


def _snake_keys(data: Dict[str, Any]) -> Dict[str, Any]:
    out = {}
    for key, value in data.items():
        snake = "".join(f"_{c.lower()}" if c.isupper() else c for c in key)
        out[snake] = value
    return out
