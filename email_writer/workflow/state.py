"""Application state, actions and the reducer that moves between states.

State is immutable: every action produces a new ``AppState``. Each independent async
action (email generation, subject generation) has its own status slot holding one of
``Idle | Generating | SubjectGenerating | Failed``.
"""

from collections.abc import Callable
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field

from email_writer.catalog import find_template
from email_writer.history import store as history_store
from email_writer.models.email import (
    GenerationRequest,
    HistoryItem,
    Length,
    Tone,
)

APOLOGY = "Sorry, there was an error generating your email. Please try again."

View = Literal["compose", "history"]


# --- Action statuses (tagged union) ---


class Idle(BaseModel):
    kind: Literal["idle"] = "idle"
    model_config = {"frozen": True}


class Generating(BaseModel):
    kind: Literal["generating"] = "generating"
    total: int = 1
    completed: int = 0
    model_config = {"frozen": True}


class SubjectGenerating(BaseModel):
    kind: Literal["subject_generating"] = "subject_generating"
    model_config = {"frozen": True}


class Failed(BaseModel):
    kind: Literal["error"] = "error"
    reason: str
    model_config = {"frozen": True}


ActionStatus = Annotated[
    Union[Idle, Generating, SubjectGenerating, Failed],
    Field(discriminator="kind"),
]


class AppState(BaseModel):
    """Everything the composer, results pane and history view render from."""

    free_text: str = ""
    template_id: Optional[str] = None
    tone: Tone = "professional"
    length: Length = "standard"
    variation_count: int = 1
    original_email: str = ""
    thread_context: str = ""
    show_original_email: bool = False
    show_thread: bool = False
    subject_line: str = ""

    results: tuple[str, ...] = ()
    selected_variation: int = 0
    generation: ActionStatus = Idle()
    subject: ActionStatus = Idle()

    history: history_store.History = ()
    dark_mode: bool = False
    view: View = "compose"

    model_config = {"frozen": True}

    @property
    def has_content(self) -> bool:
        """A generation may start: free text is non-blank or a template is selected."""
        return bool(self.free_text.strip()) or self.template_id is not None

    @property
    def is_generating(self) -> bool:
        return isinstance(self.generation, Generating)

    @property
    def is_generating_subject(self) -> bool:
        return isinstance(self.subject, SubjectGenerating)

    def to_request(self) -> GenerationRequest:
        template = find_template(template_id=self.template_id) if self.template_id else None
        return GenerationRequest(
            source_content=self.free_text,
            tone=self.tone,
            length=self.length,
            variation_count=self.variation_count,
            original_email=self.original_email or None,
            thread_context=self.thread_context or None,
            template=template,
        )


# --- Actions ---


class Action(BaseModel):
    model_config = {"frozen": True}


class SetFreeText(Action):
    text: str


class SelectTemplate(Action):
    """Select a template by id; None clears the selection. Free text is kept either way."""

    template_id: Optional[str] = None


class SetTone(Action):
    tone: Tone


class SetLength(Action):
    length: Length


class SetVariationCount(Action):
    count: int


class SetOriginalEmail(Action):
    text: str


class SetThreadContext(Action):
    text: str


class ImportThreadFile(Action):
    content: str


class SetSubjectLine(Action):
    text: str


class SelectVariation(Action):
    index: int


class SetView(Action):
    view: View


class ToggleDarkMode(Action):
    pass


class GenerationStarted(Action):
    total: int


class VariationCompleted(Action):
    index: int


class GenerationSucceeded(Action):
    item: HistoryItem
    max_history: int = 0


class GenerationFailed(Action):
    reason: str


class SubjectStarted(Action):
    pass


class SubjectSucceeded(Action):
    subject_line: str


class SubjectFailed(Action):
    reason: str


class HistoryItemRemoved(Action):
    item_id: str


class HistoryCleared(Action):
    pass


class HistoryRestored(Action):
    item: HistoryItem


# --- Reducer ---

Handler = Callable[[AppState, Action], AppState]
_HANDLERS: dict[type[Action], Handler] = {}


def handles(action_type: type[Action]):
    """Decorator to register the reducer branch for one action type."""

    def decorator(fn: Handler) -> Handler:
        _HANDLERS[action_type] = fn
        return fn

    return decorator


def reduce(state: AppState, action: Action) -> AppState:
    """Return the state after applying action. Raises ValueError for unregistered actions."""
    handler = _HANDLERS.get(type(action))
    if handler is None:
        raise ValueError(f"Unknown action: {type(action).__name__}. Registered: {[t.__name__ for t in _HANDLERS]}")
    return handler(state, action)


def _update(state: AppState, **changes) -> AppState:
    return state.model_copy(update=changes)


@handles(SetFreeText)
def _set_free_text(state: AppState, action: SetFreeText) -> AppState:
    return _update(state, free_text=action.text)


@handles(SelectTemplate)
def _select_template(state: AppState, action: SelectTemplate) -> AppState:
    if action.template_id is not None and find_template(template_id=action.template_id) is None:
        raise ValueError(f"Unknown template {action.template_id!r}")
    return _update(state, template_id=action.template_id)


@handles(SetTone)
def _set_tone(state: AppState, action: SetTone) -> AppState:
    return _update(state, tone=action.tone)


@handles(SetLength)
def _set_length(state: AppState, action: SetLength) -> AppState:
    return _update(state, length=action.length)


@handles(SetVariationCount)
def _set_variation_count(state: AppState, action: SetVariationCount) -> AppState:
    if action.count < 1:
        raise ValueError(f"variation count must be at least 1, got {action.count}")
    return _update(state, variation_count=action.count)


@handles(SetOriginalEmail)
def _set_original_email(state: AppState, action: SetOriginalEmail) -> AppState:
    return _update(state, original_email=action.text, show_original_email=True)


@handles(SetThreadContext)
def _set_thread_context(state: AppState, action: SetThreadContext) -> AppState:
    return _update(state, thread_context=action.text)


@handles(ImportThreadFile)
def _import_thread_file(state: AppState, action: ImportThreadFile) -> AppState:
    return _update(state, thread_context=action.content, show_thread=True)


@handles(SetSubjectLine)
def _set_subject_line(state: AppState, action: SetSubjectLine) -> AppState:
    return _update(state, subject_line=action.text)


@handles(SelectVariation)
def _select_variation(state: AppState, action: SelectVariation) -> AppState:
    if not 0 <= action.index < len(state.results):
        return state
    return _update(state, selected_variation=action.index)


@handles(SetView)
def _set_view(state: AppState, action: SetView) -> AppState:
    return _update(state, view=action.view)


@handles(ToggleDarkMode)
def _toggle_dark_mode(state: AppState, action: ToggleDarkMode) -> AppState:
    return _update(state, dark_mode=not state.dark_mode)


@handles(GenerationStarted)
def _generation_started(state: AppState, action: GenerationStarted) -> AppState:
    return _update(state, results=(), selected_variation=0, generation=Generating(total=action.total))


@handles(VariationCompleted)
def _variation_completed(state: AppState, action: VariationCompleted) -> AppState:
    if not isinstance(state.generation, Generating):
        return state
    progress = state.generation.model_copy(update={"completed": action.index + 1})
    return _update(state, generation=progress)


@handles(GenerationSucceeded)
def _generation_succeeded(state: AppState, action: GenerationSucceeded) -> AppState:
    return _update(
        state,
        results=action.item.emails,
        selected_variation=0,
        generation=Idle(),
        history=history_store.append(state.history, action.item, max_items=action.max_history),
    )


@handles(GenerationFailed)
def _generation_failed(state: AppState, action: GenerationFailed) -> AppState:
    return _update(state, results=(APOLOGY,), selected_variation=0, generation=Failed(reason=action.reason))


@handles(SubjectStarted)
def _subject_started(state: AppState, action: SubjectStarted) -> AppState:
    return _update(state, subject=SubjectGenerating())


@handles(SubjectSucceeded)
def _subject_succeeded(state: AppState, action: SubjectSucceeded) -> AppState:
    return _update(state, subject=Idle(), subject_line=action.subject_line)


@handles(SubjectFailed)
def _subject_failed(state: AppState, action: SubjectFailed) -> AppState:
    return _update(state, subject=Failed(reason=action.reason))


@handles(HistoryItemRemoved)
def _history_item_removed(state: AppState, action: HistoryItemRemoved) -> AppState:
    history = history_store.remove_one(state.history, action.item_id)
    if history is state.history:
        return state
    return _update(state, history=history)


@handles(HistoryCleared)
def _history_cleared(state: AppState, action: HistoryCleared) -> AppState:
    return _update(state, history=history_store.clear_all(state.history))


@handles(HistoryRestored)
def _history_restored(state: AppState, action: HistoryRestored) -> AppState:
    item = action.item
    template = None
    if item.template_id or item.template_name:
        template = find_template(template_id=item.template_id, name=item.template_name)
    return _update(
        state,
        free_text="" if item.template_name else item.source_description,
        template_id=template.id if template else None,
        tone=item.tone,
        length=item.length,
        results=item.emails,
        subject_line=item.subject_line,
        selected_variation=0,
        view="compose",
    )
