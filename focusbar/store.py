"""JSON-file backed key-value store."""

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from .errors import StoreError

logger = logging.getLogger(__name__)

DEFAULT_DOCUMENT: Dict[str, Any] = {
    "settings": {},
    "stats": {},
    "tasks": {},
    "dailyPlans": {},
}


class JsonStore:
    """Whole-document JSON store with top-level keys.

    Every ``set`` rewrites the file. Passing ``path=None`` keeps the data
    in memory only.
    """

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path is not None else None
        self._data = copy.deepcopy(DEFAULT_DOCUMENT)
        if self.path is not None and self.path.exists():
            self._data.update(self._load(self.path))

    @staticmethod
    def _load(path: Path) -> Dict[str, Any]:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except ValueError as exc:
            # JSONDecodeError and UnicodeDecodeError are both ValueErrors.
            raise StoreError(f"Invalid JSON in {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise StoreError(f"Expected a JSON object in {path}")
        return data

    def get(self, key: str, default: Any = None) -> Any:
        """Return a deep copy of the value stored under ``key``."""
        if key not in self._data:
            return default
        return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)
        self._flush()

    def delete(self, key: str) -> None:
        if self._data.pop(key, None) is not None:
            self._flush()

    def _flush(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(self._data, indent=2), encoding="utf-8")
        os.replace(tmp, self.path)
        logger.debug("Wrote store to %s", self.path)
