"""Textual-based UI for focusbar."""

from typing import Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Vertical
from textual.widgets import Footer, Header, ProgressBar, Static

from .display import PHASE_LABELS, STATUS_LABELS, cycle_display, format_time, truncate_title
from .events import ACTIVE_TASK_CHANGE, TIMER_UPDATE, TRAY_TITLE
from .notifications import Notifier
from .scheduler import TimerEngine
from .service import FocusbarService
from .state import Phase, Status, TimerState
from .store import JsonStore


# Big digit representations (7 lines tall, 6 chars wide)
BIG_DIGITS = {
    "0": [
        " ████ ",
        "██  ██",
        "██  ██",
        "██  ██",
        "██  ██",
        "██  ██",
        " ████ ",
    ],
    "1": [
        "  ██  ",
        " ███  ",
        "  ██  ",
        "  ██  ",
        "  ██  ",
        "  ██  ",
        " ████ ",
    ],
    "2": [
        " ████ ",
        "██  ██",
        "    ██",
        "  ██  ",
        " ██   ",
        "██    ",
        "██████",
    ],
    "3": [
        " ████ ",
        "██  ██",
        "    ██",
        "  ███ ",
        "    ██",
        "██  ██",
        " ████ ",
    ],
    "4": [
        "██  ██",
        "██  ██",
        "██  ██",
        "██████",
        "    ██",
        "    ██",
        "    ██",
    ],
    "5": [
        "██████",
        "██    ",
        "██    ",
        "█████ ",
        "    ██",
        "██  ██",
        " ████ ",
    ],
    "6": [
        " ████ ",
        "██    ",
        "██    ",
        "█████ ",
        "██  ██",
        "██  ██",
        " ████ ",
    ],
    "7": [
        "██████",
        "    ██",
        "   ██ ",
        "  ██  ",
        "  ██  ",
        "  ██  ",
        "  ██  ",
    ],
    "8": [
        " ████ ",
        "██  ██",
        "██  ██",
        " ████ ",
        "██  ██",
        "██  ██",
        " ████ ",
    ],
    "9": [
        " ████ ",
        "██  ██",
        "██  ██",
        " █████",
        "    ██",
        "    ██",
        " ████ ",
    ],
    ":": [
        "      ",
        "  ██  ",
        "  ██  ",
        "      ",
        "  ██  ",
        "  ██  ",
        "      ",
    ],
}


def render_big_time(seconds: int) -> str:
    """Render time as big ASCII digits."""
    time_str = format_time(seconds)

    lines = []
    for line_num in range(7):
        line_parts = []
        for char in time_str:
            if char in BIG_DIGITS:
                line_parts.append(BIG_DIGITS[char][line_num])
            else:
                line_parts.append("      ")
        lines.append(" ".join(line_parts))

    return "\n".join(lines)


class BigTimer(Static):
    """Big ASCII timer display."""

    def update_display(self, state: TimerState) -> None:
        self.update(render_big_time(state.remaining_seconds))


class PhaseLabel(Static):
    """Phase label with cycle counter."""

    def update_display(self, state: TimerState, cycle_size: int) -> None:
        self.update(f"─── {PHASE_LABELS[state.phase]} {cycle_display(state, cycle_size)} ───")


class StatusBadge(Static):
    """Status indicator badge."""

    def update_display(self, state: TimerState) -> None:
        icon = "▶" if state.status == Status.RUNNING else "⏸"
        self.update(f"{icon} {STATUS_LABELS[state.status]}")
        for status in Status:
            self.set_class(status == state.status, status.value)


class TaskLabel(Static):
    """Title of the active task, if any."""

    def update_display(self, title: Optional[str]) -> None:
        self.update(f"📋 {truncate_title(title, 40)}" if title else "No active task")


class FocusbarApp(App):
    """Focusbar timer application."""

    CSS_PATH = "focusbar.tcss"
    TITLE = "focusbar"

    BINDINGS = [
        Binding("space", "toggle", "Start/Pause"),
        Binding("s", "stop", "Stop"),
        Binding("r", "reset", "Reset"),
        Binding("n", "skip", "Skip"),
        Binding("t", "next_task", "Task"),
        Binding("q", "quit", "Quit"),
    ]

    def __init__(self, store: JsonStore, notifier=None) -> None:
        super().__init__()
        if notifier is None:
            # stdout belongs to textual, so ring the bell through the app.
            notifier = Notifier(bell=self.ring_bell)
        # The app is the tick source: the engine calls self.set_interval.
        self.service = FocusbarService(store, scheduler=self, notifier=notifier)
        self._unsubscribe = []

    @property
    def engine(self) -> TimerEngine:
        return self.service.engine

    def ring_bell(self) -> None:
        """Ring the terminal bell from a notification thread."""
        self.call_from_thread(self.bell)

    def compose(self) -> ComposeResult:
        yield Header()
        with Container(id="main"):
            with Vertical(id="timer-container"):
                yield PhaseLabel(id="phase-label")
                yield BigTimer(id="big-timer")
                yield StatusBadge(id="status-badge")
                yield TaskLabel(id="task-label")
                yield ProgressBar(id="progress", show_eta=False, show_percentage=False)
        yield Footer()

    def on_mount(self) -> None:
        self._unsubscribe = [
            self.service.subscribe(TIMER_UPDATE, self._refresh_display),
            self.service.subscribe(ACTIVE_TASK_CHANGE, self._refresh_task),
            self.service.subscribe(TRAY_TITLE, self._set_tray_title),
        ]
        self._set_tray_title(self.engine.tray_title())
        self._refresh_task(self.service.get_active_task())
        self._refresh_display(self.engine.get_state())

    def on_unmount(self) -> None:
        for unsubscribe in self._unsubscribe:
            unsubscribe()
        self.engine.pause()

    def _set_tray_title(self, title: str) -> None:
        self.sub_title = title

    def _refresh_display(self, state: TimerState) -> None:
        """Update all display elements."""
        cycle_size = self.service.settings.get().cycles_before_long_break
        self.query_one("#big-timer", BigTimer).update_display(state)
        self.query_one("#phase-label", PhaseLabel).update_display(state, cycle_size)
        self.query_one("#status-badge", StatusBadge).update_display(state)
        self.query_one("#progress", ProgressBar).update(total=100, progress=self.engine.progress * 100)
        self._update_phase_class(state.phase)

    def _refresh_task(self, task_id: Optional[str]) -> None:
        task = self.service.tasks.get_task(task_id) if task_id else None
        self.query_one("#task-label", TaskLabel).update_display(task.title if task else None)

    def _update_phase_class(self, phase: Phase) -> None:
        """Update CSS class based on current phase."""
        container = self.query_one("#timer-container")
        container.remove_class("work", "short-break", "long-break")

        if phase == Phase.WORK:
            container.add_class("work")
        elif phase == Phase.SHORT_BREAK:
            container.add_class("short-break")
        else:
            container.add_class("long-break")

    def action_toggle(self) -> None:
        """Toggle timer start/pause."""
        self.service.shortcut("toggle-timer")

    def action_stop(self) -> None:
        """Pause the timer."""
        self.service.shortcut("stop-timer")

    def action_reset(self) -> None:
        """Reset to a fresh work phase."""
        self.service.shortcut("reset-timer")

    def action_skip(self) -> None:
        """Skip to next phase."""
        self.service.skip_phase()

    def action_next_task(self) -> None:
        """Cycle the active task through open tasks."""
        ids = [None] + [t.id for t in self.service.tasks.list_tasks() if t.status != "completed"]
        current = self.service.get_active_task()
        index = ids.index(current) if current in ids else 0
        self.service.set_active_task(ids[(index + 1) % len(ids)])


def run_ui(store: JsonStore) -> None:
    """Run the focusbar UI.

    Args:
        store: Backing store for settings, stats and tasks.
    """
    app = FocusbarApp(store)
    app.run()
