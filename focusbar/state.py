"""Timer phase, status and state snapshot types."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


class Phase(Enum):
    """Timer phase types."""
    WORK = "work"
    SHORT_BREAK = "shortBreak"
    LONG_BREAK = "longBreak"


class Status(Enum):
    """Timer running status."""
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


@dataclass(frozen=True)
class TimerState:
    """Immutable snapshot of the timer."""

    status: Status
    phase: Phase
    remaining_seconds: int
    cycle_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "phase": self.phase.value,
            "remainingSeconds": self.remaining_seconds,
            "cycleCount": self.cycle_count,
        }
