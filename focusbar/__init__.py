"""Menu-bar style Pomodoro timer with a lightweight daily task planner."""

__version__ = "0.1.0"
