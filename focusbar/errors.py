"""Exception types raised by focusbar."""


class FocusbarError(Exception):
    """Base class for all focusbar errors."""


class ConfigError(FocusbarError):
    """Invalid settings value or configuration."""


class StoreError(FocusbarError):
    """The backing store could not be read."""


class TaskNotFoundError(FocusbarError, KeyError):
    """A task mutation referenced an unknown task id."""

    def __init__(self, task_id: str):
        super().__init__(task_id)
        self.task_id = task_id

    def __str__(self) -> str:
        return f"Task {self.task_id} not found"


class UnknownCommandError(FocusbarError):
    """A command channel has no handler."""
