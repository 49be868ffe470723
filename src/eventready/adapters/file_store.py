"""Key-value storage adapters."""

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class FileKeyValueStore:
    """
    File-based key-value storage.

    Implements KeyValueStore protocol. All keys live in one JSON document.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text())
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring unreadable state file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: dict[str, str]) -> None:
        self.path.write_text(json.dumps(data, indent=2, sort_keys=True))

    def get(self, key: str) -> str | None:
        """Read a value. Returns None if not set."""
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        """Write/overwrite a value."""
        data = self._load()
        data[key] = value
        self._save(data)

    def delete(self, key: str) -> None:
        """Remove a value if present."""
        data = self._load()
        if data.pop(key, None) is not None:
            self._save(data)


class InMemoryKeyValueStore:
    """Dict-backed KeyValueStore for tests and short-lived processes."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)
