"""Tests for the JSON store, settings, stats, tasks and plans."""

import datetime as dt
import json

import pytest

from focusbar.errors import ConfigError, StoreError, TaskNotFoundError
from focusbar.settings import Settings, SettingsStore
from focusbar.stats import StatsRecorder
from focusbar.store import JsonStore
from focusbar.tasks import DailyPlan, PlanStore, TaskStore


class TestJsonStore:
    def test_defaults_in_memory(self):
        store = JsonStore()
        assert store.get("tasks") == {}
        assert store.get("missing", "fallback") == "fallback"

    def test_persists_to_file(self, tmp_path):
        path = tmp_path / "data" / "store.json"
        JsonStore(path).set("settings", {"workDuration": 600})

        assert json.loads(path.read_text())["settings"] == {"workDuration": 600}
        assert JsonStore(path).get("settings") == {"workDuration": 600}

    def test_returns_copies(self):
        store = JsonStore()
        store.set("tasks", {"a": {"title": "x"}})
        store.get("tasks")["a"]["title"] = "changed"
        assert store.get("tasks")["a"]["title"] == "x"

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("{not json")
        with pytest.raises(StoreError):
            JsonStore(path)

    def test_undecodable_file(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_bytes(b'{"settings": "\xff\xfe"}')
        with pytest.raises(StoreError):
            JsonStore(path)

    def test_delete(self, tmp_path):
        path = tmp_path / "store.json"
        store = JsonStore(path)
        store.set("extra", 1)
        store.delete("extra")
        assert "extra" not in json.loads(path.read_text())


class TestSettings:
    def test_defaults(self, store):
        settings = SettingsStore(store).get()
        assert settings == Settings()
        assert settings.work_duration == 25 * 60
        assert settings.auto_start_breaks is True
        assert settings.auto_start_pomodoros is False

    def test_update_with_stored_keys(self, store):
        settings = SettingsStore(store)
        updated = settings.update({"workDuration": 50 * 60, "soundEnabled": False})
        assert updated.work_duration == 50 * 60
        assert store.get("settings")["soundEnabled"] is False
        assert settings.get() == updated

    def test_update_with_attribute_names(self, store):
        updated = SettingsStore(store).update(cycles_before_long_break=2)
        assert updated.cycles_before_long_break == 2
        assert updated.to_dict()["cyclesBeforeLongBreak"] == 2

    def test_unknown_key_rejected(self, store):
        with pytest.raises(ConfigError):
            SettingsStore(store).update({"theme": "dark"})
        with pytest.raises(ConfigError):
            SettingsStore(store).update(volume=3)

    @pytest.mark.parametrize(
        "changes",
        [
            {"work_duration": 0},
            {"short_break_duration": -60},
            {"long_break_duration": "15"},
            {"cycles_before_long_break": 0},
            {"auto_start_breaks": "yes"},
        ],
    )
    def test_invalid_values_rejected(self, store, changes):
        settings = SettingsStore(store)
        with pytest.raises(ConfigError):
            settings.update(**changes)
        assert settings.get() == Settings()

    def test_ignores_unknown_stored_keys(self, store):
        store.set("settings", {"workDuration": 60, "legacyFlag": True})
        assert SettingsStore(store).get().work_duration == 60

    def test_invalid_stored_values_rejected(self, store):
        store.set("settings", {"workDuration": 1, "cyclesBeforeLongBreak": "4"})
        with pytest.raises(ConfigError):
            SettingsStore(store).get()

    def test_update_repairs_invalid_stored_values(self, store):
        store.set("settings", {"cyclesBeforeLongBreak": "4"})
        settings = SettingsStore(store)
        settings.update(cycles_before_long_break=4)
        assert settings.get().cycles_before_long_break == 4


class TestStats:
    def test_record_accumulates_per_day(self, store):
        day = [dt.date(2024, 5, 1)]
        stats = StatsRecorder(store, today=lambda: day[0])
        stats.record_completed_pomodoro(25)
        stats.record_completed_pomodoro(25)
        day[0] = dt.date(2024, 5, 2)
        stats.record_completed_pomodoro(50)

        records = stats.get_stats()
        assert records["2024-05-01"].completed_pomodoros == 2
        assert records["2024-05-01"].total_work_minutes == 50
        assert records["2024-05-02"].completed_pomodoros == 1
        assert store.get("stats")["2024-05-02"] == {
            "date": "2024-05-02",
            "completedPomodoros": 1,
            "totalWorkMinutes": 50,
        }

    def test_today_defaults_to_empty_record(self, store):
        stats = StatsRecorder(store, today=lambda: dt.date(2024, 5, 1))
        today = stats.get_today_stats()
        assert today.date == "2024-05-01"
        assert today.completed_pomodoros == 0


class TestTasks:
    def test_create_and_get(self, tasks):
        task = tasks.create_task("Write docs", priority="P1", energy_level="high")
        assert task.status == "inbox"
        assert task.completed_pomodoros == 0
        assert tasks.get_task(task.id) == task
        assert tasks.get_task("nope") is None

    def test_create_requires_title(self, tasks):
        with pytest.raises(ValueError):
            tasks.create_task("   ")

    def test_invalid_priority(self, tasks):
        with pytest.raises(ValueError):
            tasks.create_task("Bad", priority="P0")

    def test_list_newest_first(self, tasks, store):
        store.set(
            "tasks",
            {
                "old": {"id": "old", "title": "Old", "createdAt": "2024-01-01T00:00:00+00:00"},
                "new": {"id": "new", "title": "New", "createdAt": "2024-02-01T00:00:00+00:00"},
            },
        )
        assert [t.id for t in tasks.list_tasks()] == ["new", "old"]

    def test_update(self, tasks):
        task = tasks.create_task("Review")
        updated = tasks.update_task(task.id, title="Review PR", status="completed", id="hijack")
        assert updated.id == task.id
        assert updated.title == "Review PR"
        assert updated.completed_at is not None

    def test_update_unknown_task(self, tasks):
        with pytest.raises(TaskNotFoundError) as excinfo:
            tasks.update_task("missing", title="x")
        assert str(excinfo.value) == "Task missing not found"

    def test_increment_pomodoro(self, tasks):
        task = tasks.create_task("Deep work")
        tasks.increment_task_pomodoro(task.id)
        assert tasks.increment_task_pomodoro(task.id).completed_pomodoros == 2

    def test_increment_unknown_task(self, tasks):
        with pytest.raises(TaskNotFoundError):
            tasks.increment_task_pomodoro("missing")

    def test_delete(self, tasks):
        task = tasks.create_task("Throwaway")
        tasks.delete_task(task.id)
        tasks.delete_task(task.id)
        assert tasks.get_task(task.id) is None

    def test_round_trip_uses_camel_case(self, tasks, store):
        task = tasks.create_task("Estimate", time_estimate_minutes=50)
        raw = store.get("tasks")[task.id]
        assert raw["timeEstimateMinutes"] == 50
        assert "description" not in raw


class TestPlans:
    def test_save_and_get(self, store):
        plans = PlanStore(store, today=lambda: dt.date(2024, 5, 1))
        plan = DailyPlan(date="2024-05-01", scheduled_task_ids=["a", "b"], active_task_id="a")
        plans.save_daily_plan(plan)

        assert plans.get_daily_plan("2024-05-01") == plan
        assert plans.get_today_plan() == plan
        assert plans.get_daily_plan("2024-05-02") is None
        assert store.get("dailyPlans")["2024-05-01"]["scheduledTaskIds"] == ["a", "b"]

    def test_invalid_date(self, store):
        with pytest.raises(ValueError):
            PlanStore(store).save_daily_plan(DailyPlan(date="tomorrow"))
