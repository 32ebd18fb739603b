"""Tasks and daily plans."""

import datetime as dt
import secrets
import time
from dataclasses import asdict, dataclass, field, fields, replace
from typing import Any, Callable, Dict, List, Optional

from .errors import TaskNotFoundError
from .store import JsonStore

PRIORITIES = ("P1", "P2", "P3")
STATUSES = ("inbox", "scheduled", "in-progress", "completed")
ENERGY_LEVELS = ("high", "medium", "low")


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _now_iso() -> str:
    return dt.datetime.now(dt.timezone.utc).isoformat()


def generate_id() -> str:
    """Short, time-ordered unique id."""
    return f"{int(time.time() * 1000):x}{secrets.token_hex(4)}"


@dataclass(frozen=True)
class Task:
    id: str
    title: str
    created_at: str
    time_estimate_minutes: int = 25
    priority: str = "P2"
    status: str = "inbox"
    completed_pomodoros: int = 0
    description: Optional[str] = None
    category: Optional[str] = None
    energy_level: Optional[str] = None
    completed_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        names = {f.name: _camel(f.name) for f in fields(cls)}
        return cls(**{name: data[key] for name, key in names.items() if key in data})

    def to_dict(self) -> Dict[str, Any]:
        return {_camel(k): v for k, v in asdict(self).items() if v is not None}


@dataclass(frozen=True)
class DailyPlan:
    date: str
    scheduled_task_ids: List[str] = field(default_factory=list)
    active_task_id: Optional[str] = None
    started_at: Optional[str] = None
    completed_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DailyPlan":
        names = {f.name: _camel(f.name) for f in fields(cls)}
        return cls(**{name: data[key] for name, key in names.items() if key in data})

    def to_dict(self) -> Dict[str, Any]:
        return {_camel(k): v for k, v in asdict(self).items() if v is not None}


class TaskStore:
    """Task CRUD on the ``tasks`` store key.

    Lookups return None for unknown ids; mutations raise TaskNotFoundError.
    """

    _READ_ONLY = ("id", "created_at")

    def __init__(self, store: JsonStore):
        self.store = store

    def _all(self) -> Dict[str, Dict[str, Any]]:
        return self.store.get("tasks") or {}

    def _put(self, task: Task) -> None:
        tasks = self._all()
        tasks[task.id] = task.to_dict()
        self.store.set("tasks", tasks)

    def list_tasks(self) -> List[Task]:
        """All tasks, newest first."""
        tasks = [Task.from_dict(raw) for raw in self._all().values()]
        return sorted(tasks, key=lambda t: t.created_at, reverse=True)

    def get_task(self, task_id: str) -> Optional[Task]:
        raw = self._all().get(task_id)
        return Task.from_dict(raw) if raw else None

    def create_task(self, title: str, **fields_: Any) -> Task:
        title = (title or "").strip()
        if not title:
            raise ValueError("Task title cannot be empty.")
        for name in self._READ_ONLY + ("completed_pomodoros",):
            fields_.pop(name, None)
        task = Task(id=generate_id(), title=title, created_at=_now_iso(), **fields_)
        _check_task(task)
        self._put(task)
        return task

    def update_task(self, task_id: str, **changes: Any) -> Task:
        task = self.get_task(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        for name in self._READ_ONLY:
            changes.pop(name, None)
        if changes.get("status") == "completed" and task.completed_at is None:
            changes.setdefault("completed_at", _now_iso())
        updated = replace(task, **changes)
        _check_task(updated)
        self._put(updated)
        return updated

    def delete_task(self, task_id: str) -> None:
        tasks = self._all()
        if tasks.pop(task_id, None) is not None:
            self.store.set("tasks", tasks)

    def increment_task_pomodoro(self, task_id: str) -> Task:
        task = self.get_task(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return self.update_task(task_id, completed_pomodoros=task.completed_pomodoros + 1)


def _check_task(task: Task) -> None:
    if task.priority not in PRIORITIES:
        raise ValueError(f"Invalid priority {task.priority!r}. Use P1/P2/P3.")
    if task.status not in STATUSES:
        raise ValueError(f"Invalid status {task.status!r}.")
    if task.energy_level is not None and task.energy_level not in ENERGY_LEVELS:
        raise ValueError(f"Invalid energy level {task.energy_level!r}.")


class PlanStore:
    """Daily plans keyed by ISO date on the ``dailyPlans`` store key."""

    def __init__(self, store: JsonStore, today: Callable[[], dt.date] = dt.date.today):
        self.store = store
        self.today = today

    def get_daily_plan(self, date: str) -> Optional[DailyPlan]:
        raw = (self.store.get("dailyPlans") or {}).get(date)
        return DailyPlan.from_dict(raw) if raw else None

    def save_daily_plan(self, plan: DailyPlan) -> DailyPlan:
        dt.date.fromisoformat(plan.date)
        plans = self.store.get("dailyPlans") or {}
        plans[plan.date] = plan.to_dict()
        self.store.set("dailyPlans", plans)
        return plan

    def get_today_plan(self) -> Optional[DailyPlan]:
        return self.get_daily_plan(self.today().isoformat())
