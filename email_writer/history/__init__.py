"""History of generated emails and the client-local storage it lives in."""

from email_writer.history.storage import LocalStorage
from email_writer.history.store import (
    DARK_MODE_KEY,
    HISTORY_KEY,
    History,
    HistoryRepository,
    append,
    clear_all,
    find,
    remove_one,
    search,
)

__all__ = [
    "DARK_MODE_KEY",
    "HISTORY_KEY",
    "History",
    "HistoryRepository",
    "LocalStorage",
    "append",
    "clear_all",
    "find",
    "remove_one",
    "search",
]
