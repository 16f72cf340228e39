"""Client-local key-value storage persisted to a JSON file (a stand-in for browser localStorage).

Values are strings, as in localStorage; callers JSON-encode what they store. Every write
rewrites the whole file.
"""

import json
from pathlib import Path

from email_writer.utils.logger import get_logger

logger = get_logger("email_writer.history.storage")


class LocalStorage:
    """String key-value store backed by one JSON object on disk."""

    def __init__(self, path: str | Path):
        self._path = Path(path)
        self._items: dict[str, str] = {}
        self._load()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> None:
        """Load state from disk. Missing or corrupt files read as empty storage."""
        if not self._path.exists():
            return
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except Exception as e:
            logger.warning("storage.load_error", path=str(self._path), error=str(e))
            return
        if not isinstance(data, dict):
            logger.warning("storage.load_error", path=str(self._path), error="top-level value is not an object")
            return
        self._items = {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _save(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(self._items, indent=2), encoding="utf-8")

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value
        self._save()
        logger.debug("storage.set_item", key=key, chars=len(value))

    def remove_item(self, key: str) -> None:
        if self._items.pop(key, None) is not None:
            self._save()

    def clear(self) -> None:
        self._items = {}
        self._save()

    def keys(self) -> list[str]:
        return list(self._items)
