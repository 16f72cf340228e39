"""AppStore: holds the current AppState, applies actions, runs persistence effects."""

from collections.abc import Callable

from email_writer.history.storage import LocalStorage
from email_writer.history.store import HistoryRepository
from email_writer.utils.logger import get_logger
from email_writer.workflow.state import Action, AppState, reduce

logger = get_logger("email_writer.workflow.store")

Listener = Callable[[AppState, Action], None]


class AppStore:
    """Single-writer state container. All mutations go through dispatch()."""

    def __init__(self, state: AppState | None = None, repository: HistoryRepository | None = None):
        self._state = state or AppState()
        self._repository = repository
        self._listeners: list[Listener] = []

    @classmethod
    def load(cls, storage: LocalStorage) -> "AppStore":
        """Build a store whose history and dark-mode flag come from storage."""
        repository = HistoryRepository(storage)
        state = AppState(
            history=repository.load_history(),
            dark_mode=repository.load_dark_mode(),
        )
        logger.debug("store.loaded", history_count=len(state.history), dark_mode=state.dark_mode)
        return cls(state=state, repository=repository)

    @property
    def state(self) -> AppState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register listener(state, action), called after every dispatch. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, action: Action) -> AppState:
        previous = self._state
        self._state = reduce(previous, action)
        self._persist(previous, self._state)
        for listener in list(self._listeners):
            listener(self._state, action)
        return self._state

    def _persist(self, previous: AppState, current: AppState) -> None:
        """Write-through on the transitions that change persisted state, and only those."""
        if self._repository is None:
            return
        if current.history is not previous.history:
            self._repository.save_history(current.history)
        if current.dark_mode != previous.dark_mode:
            self._repository.save_dark_mode(current.dark_mode)
