"""Shared fixtures: a fake clock scheduler and recording collaborators."""

import datetime as dt

import pytest

from focusbar.active_task import ActiveTaskRegistry
from focusbar.events import Broadcaster
from focusbar.scheduler import TimerEngine
from focusbar.settings import SettingsStore
from focusbar.stats import StatsRecorder
from focusbar.store import JsonStore
from focusbar.tasks import TaskStore

TODAY = dt.date(2024, 3, 1)


class FakeTimer:
    def __init__(self, scheduler, callback):
        self.scheduler = scheduler
        self.callback = callback
        self.stopped = False

    def stop(self):
        self.stopped = True


class FakeScheduler:
    """Interval scheduler driven by ``advance`` instead of wall-clock time."""

    def __init__(self):
        self.timers = []

    def set_interval(self, interval, callback):
        timer = FakeTimer(self, callback)
        self.timers.append(timer)
        return timer

    @property
    def active(self):
        return [t for t in self.timers if not t.stopped]

    def advance(self, seconds=1):
        for _ in range(seconds):
            # Timers created during this second first fire on the next one.
            for timer in list(self.active):
                if not timer.stopped:
                    timer.callback()


class FakeNotifier:
    def __init__(self):
        self.calls = []

    def notify(self, title, message, sound=True):
        self.calls.append((title, message, sound))


@pytest.fixture
def store():
    return JsonStore()


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def broadcaster():
    return Broadcaster()


@pytest.fixture
def settings(store):
    settings = SettingsStore(store)
    settings.update(
        work_duration=3,
        short_break_duration=2,
        long_break_duration=4,
        cycles_before_long_break=4,
        auto_start_breaks=False,
        auto_start_pomodoros=False,
    )
    return settings


@pytest.fixture
def stats(store):
    return StatsRecorder(store, today=lambda: TODAY)


@pytest.fixture
def tasks(store):
    return TaskStore(store)


@pytest.fixture
def active_task(broadcaster):
    return ActiveTaskRegistry(broadcaster)


@pytest.fixture
def engine(scheduler, settings, stats, tasks, notifier, broadcaster, active_task):
    return TimerEngine(
        scheduler=scheduler,
        settings=settings,
        stats=stats,
        tasks=tasks,
        notifier=notifier,
        broadcaster=broadcaster,
        active_task=active_task,
    )
