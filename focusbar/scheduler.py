"""Pomodoro timer state machine and phase-transition engine."""

import logging
from typing import Any, Callable, Optional, Protocol

from .display import tray_title as format_tray_title
from .events import ACTIVE_TASK_CHANGE, TIMER_UPDATE, TRAY_TITLE, Broadcaster
from .state import Phase, Status, TimerState

logger = logging.getLogger(__name__)

TICK_INTERVAL = 1.0


class TickHandle(Protocol):
    def stop(self) -> None: ...


class IntervalScheduler(Protocol):
    """Anything that can call a function repeatedly until stopped.

    A textual ``App`` or ``Widget`` satisfies this.
    """

    def set_interval(self, interval: float, callback: Callable[[], Any]) -> TickHandle: ...


class TimerEngine:
    """Pomodoro timer state machine.

    Owns the timer state, drives phase transitions from a one-second tick
    and invokes the stats, task and notification collaborators at phase
    boundaries. Every change is published on the broadcaster.
    """

    def __init__(
        self,
        scheduler: IntervalScheduler,
        settings,
        stats,
        tasks,
        notifier,
        broadcaster: Broadcaster,
        active_task,
    ):
        """Initialize the engine in the idle work phase.

        Args:
            scheduler: Source of the periodic tick.
            settings: Provider with ``get() -> Settings``.
            stats: Recorder with ``record_completed_pomodoro(minutes)``.
            tasks: Store with ``get_task(id)`` and ``increment_task_pomodoro(id)``.
            notifier: Sink with ``notify(title, message, sound)``.
            broadcaster: Presentation event hub.
            active_task: Registry of the active task id.
        """
        self.scheduler = scheduler
        self.settings = settings
        self.stats = stats
        self.tasks = tasks
        self.notifier = notifier
        self.broadcaster = broadcaster
        self.active_task = active_task

        self._ticker: Optional[TickHandle] = None
        self._status = Status.IDLE
        self._phase = Phase.WORK
        self._cycle_count = 0
        self._phase_duration = self.settings.get().work_duration
        self._remaining = self._phase_duration

        self.broadcaster.subscribe(ACTIVE_TASK_CHANGE, lambda _task_id: self._update_tray())
        self._update_tray()

    @property
    def phase(self) -> Phase:
        """Current phase."""
        return self._phase

    @property
    def status(self) -> Status:
        """Current status."""
        return self._status

    @property
    def remaining_seconds(self) -> int:
        """Seconds remaining in current phase."""
        return self._remaining

    @property
    def cycle_count(self) -> int:
        """Work phases completed since the last long break."""
        return self._cycle_count

    @property
    def phase_duration(self) -> int:
        """Duration of the current phase as snapshotted when it began."""
        return self._phase_duration

    @property
    def progress(self) -> float:
        """Progress through current phase (0.0 to 1.0)."""
        if self._phase_duration <= 0:
            return 1.0
        return min(1.0, 1.0 - (self._remaining / self._phase_duration))

    def get_state(self) -> TimerState:
        return TimerState(
            status=self._status,
            phase=self._phase,
            remaining_seconds=self._remaining,
            cycle_count=self._cycle_count,
        )

    # ----- Commands -----

    def start(self) -> None:
        """Start counting down. No-op if already running."""
        if self._status == Status.RUNNING:
            return
        self._status = Status.RUNNING
        self._schedule_tick()
        self._broadcast()

    def pause(self) -> None:
        """Pause the countdown. No-op unless running."""
        if self._status != Status.RUNNING:
            return
        self._stop_tick()
        self._status = Status.PAUSED
        self._broadcast()

    def toggle(self) -> None:
        """Toggle between running and paused."""
        if self._status == Status.RUNNING:
            self.pause()
        else:
            self.start()

    def reset(self) -> None:
        """Stop and return to a fresh work phase with a new cycle."""
        self._stop_tick()
        self._status = Status.IDLE
        self._cycle_count = 0
        self._enter_phase(Phase.WORK, self.settings.get().work_duration)
        self._update_tray()
        self._broadcast()

    def skip_phase(self) -> None:
        """Move to the next phase without completing the current one.

        Never records stats or task progress and always leaves the timer
        idle, whatever the auto-start settings say.
        """
        self._stop_tick()
        was_work = self._phase == Phase.WORK
        settings = self.settings.get()

        if was_work:
            # cycle_count is not incremented on skip, hence N - 1.
            if self._cycle_count >= settings.cycles_before_long_break - 1:
                self._enter_phase(Phase.LONG_BREAK, settings.long_break_duration)
            else:
                self._enter_phase(Phase.SHORT_BREAK, settings.short_break_duration)
        else:
            if self._phase == Phase.LONG_BREAK:
                self._cycle_count = 0
            self._enter_phase(Phase.WORK, settings.work_duration)
        self._status = Status.IDLE
        logger.info("Skipped to %s", self._phase.value)
        self._update_tray()

        if was_work:
            self._notify("Focus session skipped", "Time for a break.", settings.sound_enabled)
        else:
            self._notify("Break skipped", "Ready to focus?", settings.sound_enabled)
        self._broadcast()

    def tick(self) -> bool:
        """Advance the countdown by one second if running.

        Returns:
            True if the phase completed on this tick, False otherwise.
        """
        if self._status != Status.RUNNING:
            return False

        self._remaining -= 1
        self._update_tray()

        completed = False
        if self._remaining <= 0:
            self._complete_phase()
            completed = True

        self._broadcast()
        return completed

    # ----- Phase transitions -----

    def _complete_phase(self) -> None:
        self._stop_tick()
        self._status = Status.IDLE
        settings = self.settings.get()

        if self._phase == Phase.WORK:
            self._record_work_session(settings.work_duration / 60)
            self._cycle_count += 1
            self._notify("Focus session complete!", "Time for a break.", settings.sound_enabled)

            if self._cycle_count >= settings.cycles_before_long_break:
                self._enter_phase(Phase.LONG_BREAK, settings.long_break_duration)
                self._cycle_count = 0
            else:
                self._enter_phase(Phase.SHORT_BREAK, settings.short_break_duration)
            auto_start = settings.auto_start_breaks
        else:
            self._notify("Break complete!", "Ready to focus?", settings.sound_enabled)
            self._enter_phase(Phase.WORK, settings.work_duration)
            auto_start = settings.auto_start_pomodoros

        if auto_start:
            self._status = Status.RUNNING
            self._schedule_tick()
        else:
            self._status = Status.IDLE
        logger.info("Phase complete, now %s (%s)", self._phase.value, self._status.value)
        self._update_tray()

    def _enter_phase(self, phase: Phase, duration: int) -> None:
        self._phase = phase
        self._phase_duration = duration
        self._remaining = duration

    def _record_work_session(self, minutes: float) -> None:
        try:
            self.stats.record_completed_pomodoro(minutes)
        except OSError:
            logger.exception("Could not record completed pomodoro")

        task_id = self.active_task.get()
        if not task_id:
            return
        if self.tasks.get_task(task_id) is None:
            logger.debug("Active task %s no longer exists", task_id)
            return
        try:
            self.tasks.increment_task_pomodoro(task_id)
        except OSError:
            logger.exception("Could not update pomodoro count for task %s", task_id)

    # ----- Tick source -----

    def _schedule_tick(self) -> None:
        self._stop_tick()
        self._ticker = self.scheduler.set_interval(TICK_INTERVAL, self.tick)

    def _stop_tick(self) -> None:
        if self._ticker is not None:
            self._ticker.stop()
            self._ticker = None

    # ----- Side effects -----

    def _notify(self, title: str, message: str, sound: bool) -> None:
        try:
            self.notifier.notify(title, message, sound=sound)
        except Exception:
            logger.exception("Notifier failed for %r", title)

    def tray_title(self) -> str:
        """Compact label for the tray, including the active task if it exists."""
        task_title = None
        task_id = self.active_task.get()
        if task_id and self._phase == Phase.WORK:
            task = self.tasks.get_task(task_id)
            if task is not None:
                task_title = task.title
        return format_tray_title(self.get_state(), task_title)

    def _update_tray(self) -> None:
        self.broadcaster.publish(TRAY_TITLE, self.tray_title())

    def _broadcast(self) -> None:
        self.broadcaster.publish(TIMER_UPDATE, self.get_state())
