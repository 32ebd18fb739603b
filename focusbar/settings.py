"""Timer settings and their persistence."""

from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict, Optional

from .errors import ConfigError
from .store import JsonStore

# Stored key -> attribute name.
_WIRE_KEYS = {
    "workDuration": "work_duration",
    "shortBreakDuration": "short_break_duration",
    "longBreakDuration": "long_break_duration",
    "cyclesBeforeLongBreak": "cycles_before_long_break",
    "soundEnabled": "sound_enabled",
    "autoStartBreaks": "auto_start_breaks",
    "autoStartPomodoros": "auto_start_pomodoros",
}
_ATTR_KEYS = {attr: key for key, attr in _WIRE_KEYS.items()}


@dataclass(frozen=True)
class Settings:
    """Timer configuration. Durations are in seconds."""

    work_duration: int = 25 * 60
    short_break_duration: int = 5 * 60
    long_break_duration: int = 15 * 60
    cycles_before_long_break: int = 4
    sound_enabled: bool = True
    auto_start_breaks: bool = True
    auto_start_pomodoros: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Settings":
        """Build settings from stored camelCase keys, ignoring unknown ones."""
        values = {_WIRE_KEYS[k]: v for k, v in data.items() if k in _WIRE_KEYS}
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        return {_ATTR_KEYS[k]: v for k, v in asdict(self).items()}

    def validate(self) -> None:
        """Raise ConfigError if any value is out of range."""
        for name in ("work_duration", "short_break_duration", "long_break_duration"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConfigError(f"{name} must be a positive number of seconds, got {value!r}")
        cycles = self.cycles_before_long_break
        if isinstance(cycles, bool) or not isinstance(cycles, int) or cycles < 1:
            raise ConfigError(f"cycles_before_long_break must be at least 1, got {cycles!r}")
        for name in ("sound_enabled", "auto_start_breaks", "auto_start_pomodoros"):
            if not isinstance(getattr(self, name), bool):
                raise ConfigError(f"{name} must be a boolean")


class SettingsStore:
    """Reads and updates settings kept under the ``settings`` store key."""

    def __init__(self, store: JsonStore):
        self.store = store

    def get(self) -> Settings:
        """Return the stored settings, raising ConfigError if they are invalid."""
        settings = self._stored()
        settings.validate()
        return settings

    def _stored(self) -> Settings:
        return Settings.from_dict(self.store.get("settings") or {})

    def update(self, partial: Optional[Dict[str, Any]] = None, **changes: Any) -> Settings:
        """Merge changes into the current settings and persist them.

        Accepts either stored camelCase keys in ``partial`` or attribute
        names as keyword arguments.
        """
        valid = {f.name for f in fields(Settings)}
        values: Dict[str, Any] = {}
        for key, value in (partial or {}).items():
            if key not in _WIRE_KEYS:
                raise ConfigError(f"Unknown setting: {key}")
            values[_WIRE_KEYS[key]] = value
        for name, value in changes.items():
            if name not in valid:
                raise ConfigError(f"Unknown setting: {name}")
            values[name] = value

        updated = replace(self._stored(), **values)
        updated.validate()
        self.store.set("settings", updated.to_dict())
        return updated
