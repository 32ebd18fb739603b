"""Text formatting for the timer and the tray title."""

from typing import Optional

from .state import Phase, Status, TimerState

TITLE_BUDGET = 15

PHASE_LABELS = {
    Phase.WORK: "Focus",
    Phase.SHORT_BREAK: "Short Break",
    Phase.LONG_BREAK: "Long Break",
}

STATUS_LABELS = {
    Status.IDLE: "IDLE",
    Status.RUNNING: "RUNNING",
    Status.PAUSED: "PAUSED",
}

WORK_GLYPH = "🍅"
BREAK_GLYPH = "☕"
TASK_GLYPH = "📋"


def format_time(seconds: int) -> str:
    """Render seconds as zero-padded MM:SS."""
    seconds = max(0, int(seconds))
    mins, secs = divmod(seconds, 60)
    return f"{mins:02d}:{secs:02d}"


def truncate_title(title: str, budget: int = TITLE_BUDGET) -> str:
    if len(title) > budget:
        return title[:budget] + "..."
    return title


def tray_title(state: TimerState, task_title: Optional[str] = None) -> str:
    """Compact status label for the tray.

    The task title is only shown during a work phase.
    """
    time_str = format_time(state.remaining_seconds)
    if state.phase == Phase.WORK and task_title:
        return f"{TASK_GLYPH} {truncate_title(task_title)} {time_str}"
    glyph = WORK_GLYPH if state.phase == Phase.WORK else BREAK_GLYPH
    return f"{glyph} {time_str}"


def cycle_display(state: TimerState, cycle_size: int) -> str:
    """Cycle counter such as '2/4'."""
    if state.phase == Phase.WORK:
        current = state.cycle_count + 1
    elif state.phase == Phase.LONG_BREAK:
        current = cycle_size
    else:
        current = max(state.cycle_count, 1)
    return f"{current}/{cycle_size}"
