"""Per-day completed pomodoro statistics."""

import datetime as dt
from dataclasses import dataclass
from typing import Callable, Dict

from .store import JsonStore


@dataclass(frozen=True)
class SessionRecord:
    date: str
    completed_pomodoros: int = 0
    total_work_minutes: float = 0

    @classmethod
    def from_dict(cls, data: Dict) -> "SessionRecord":
        return cls(
            date=data["date"],
            completed_pomodoros=data.get("completedPomodoros", 0),
            total_work_minutes=data.get("totalWorkMinutes", 0),
        )

    def to_dict(self) -> Dict:
        return {
            "date": self.date,
            "completedPomodoros": self.completed_pomodoros,
            "totalWorkMinutes": self.total_work_minutes,
        }


class StatsRecorder:
    """Accumulates one SessionRecord per calendar date."""

    def __init__(self, store: JsonStore, today: Callable[[], dt.date] = dt.date.today):
        self.store = store
        self.today = today

    def _today_key(self) -> str:
        return self.today().isoformat()

    def get_stats(self) -> Dict[str, SessionRecord]:
        raw = self.store.get("stats") or {}
        return {date: SessionRecord.from_dict(rec) for date, rec in raw.items()}

    def get_today_stats(self) -> SessionRecord:
        key = self._today_key()
        return self.get_stats().get(key, SessionRecord(date=key))

    def record_completed_pomodoro(self, work_minutes: float) -> SessionRecord:
        today = self.get_today_stats()
        record = SessionRecord(
            date=today.date,
            completed_pomodoros=today.completed_pomodoros + 1,
            total_work_minutes=today.total_work_minutes + work_minutes,
        )
        raw = self.store.get("stats") or {}
        raw[record.date] = record.to_dict()
        self.store.set("stats", raw)
        return record
