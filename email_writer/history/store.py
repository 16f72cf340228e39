"""History list operations and their persistence under the ``emailHistory`` key.

The list is an immutable tuple ordered most-recent-first. Operations return a new tuple
and never mutate items.
"""

import json

from pydantic import TypeAdapter, ValidationError

from email_writer.history.storage import LocalStorage
from email_writer.models.email import ALL_TONES, HistoryItem
from email_writer.utils.logger import get_logger

logger = get_logger("email_writer.history.store")

HISTORY_KEY = "emailHistory"
DARK_MODE_KEY = "darkMode"

History = tuple[HistoryItem, ...]

_history_adapter = TypeAdapter(list[HistoryItem])


def append(history: History, item: HistoryItem, max_items: int = 0) -> History:
    """Prepend item. No dedup; max_items > 0 drops the oldest entries beyond the cap."""
    updated = (item, *history)
    if max_items > 0:
        updated = updated[:max_items]
    return updated


def remove_one(history: History, item_id: str) -> History:
    """Drop the entry with this id; unchanged (same tuple) when absent."""
    if not any(item.id == item_id for item in history):
        return history
    return tuple(item for item in history if item.id != item_id)


def clear_all(history: History) -> History:
    return ()


def find(history: History, item_id: str) -> HistoryItem | None:
    for item in history:
        if item.id == item_id:
            return item
    return None


def search(history: History, query: str = "", tone_filter: str = ALL_TONES) -> History:
    """Case-insensitive substring match on source description or subject line, optionally by tone."""
    needle = query.lower()
    return tuple(
        item
        for item in history
        if (needle in item.source_description.lower() or needle in item.subject_line.lower())
        and (tone_filter == ALL_TONES or item.tone == tone_filter)
    )


def serialize(history: History) -> str:
    return _history_adapter.dump_json(list(history)).decode("utf-8")


def deserialize(raw: str) -> History:
    return tuple(_history_adapter.validate_json(raw))


class HistoryRepository:
    """Loads and saves history and the dark-mode flag in client-local storage."""

    def __init__(self, storage: LocalStorage):
        self._storage = storage

    def load_history(self) -> History:
        """Return stored history; a malformed value is logged and treated as no history."""
        raw = self._storage.get_item(HISTORY_KEY)
        if not raw:
            return ()
        try:
            history = deserialize(raw)
        except ValidationError as e:
            logger.warning("history.load_error", error=str(e), error_count=e.error_count())
            return ()
        logger.debug("history.loaded", count=len(history))
        return history

    def save_history(self, history: History) -> None:
        self._storage.set_item(HISTORY_KEY, serialize(history))
        logger.debug("history.saved", count=len(history))

    def load_dark_mode(self) -> bool:
        raw = self._storage.get_item(DARK_MODE_KEY)
        if not raw:
            return False
        try:
            value = json.loads(raw)
        except ValueError as e:
            logger.warning("settings.dark_mode_load_error", error=str(e))
            return False
        return value if isinstance(value, bool) else False

    def save_dark_mode(self, dark_mode: bool) -> None:
        self._storage.set_item(DARK_MODE_KEY, json.dumps(dark_mode))
