"""Shared CLI helpers: console and themes, store/completer construction, rendering."""

import shlex
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.theme import Theme

from email_writer.config import LOCAL_STORAGE_PATH, PROXY_URL
from email_writer.history.storage import LocalStorage
from email_writer.history.store import History
from email_writer.llm.client import LocalCompletionClient, ProxyCompletionClient
from email_writer.llm.protocol import Completer
from email_writer.models.email import LENGTHS, NO_SUBJECT, TONES, HistoryItem
from email_writer.utils.logger import get_logger
from email_writer.workflow.state import AppState
from email_writer.workflow.store import AppStore

console = Console()
logger = get_logger("email_writer.cli")

LIGHT_THEME = Theme({"title": "bold blue", "muted": "dim", "accent": "magenta", "ok": "green", "error": "bold red"})
DARK_THEME = Theme({"title": "bold cyan", "muted": "grey62", "accent": "bright_magenta", "ok": "bright_green", "error": "bold bright_red"})


def open_store(storage_path: Path | None = None) -> AppStore:
    """Load the app store from client-local storage and apply the persisted theme."""
    store = AppStore.load(LocalStorage(storage_path or LOCAL_STORAGE_PATH))
    apply_theme(store.state.dark_mode)
    return store


def apply_theme(dark_mode: bool) -> None:
    console.push_theme(DARK_THEME if dark_mode else LIGHT_THEME)


def make_completer(direct: bool = False, proxy_url: str | None = None) -> Completer:
    """In-process provider client with --direct, otherwise the local proxy."""
    if direct:
        return LocalCompletionClient()
    return ProxyCompletionClient(base_url=proxy_url or PROXY_URL)


def validate_tone(value: str) -> str:
    if value not in TONES:
        raise typer.BadParameter(f"Unknown tone {value!r}. Choose from: {', '.join(TONES)}")
    return value


def validate_length(value: str) -> str:
    if value not in LENGTHS:
        raise typer.BadParameter(f"Unknown length {value!r}. Choose from: {', '.join(LENGTHS)}")
    return value


def read_text_file(path: Path) -> str:
    """Import a plain-text file verbatim (no parsing, no size limit)."""
    if path.suffix.lower() != ".txt":
        raise typer.BadParameter(f"{path} is not a plain-text (.txt) file")
    return path.read_text(encoding="utf-8")


def resolve_item(history: History, item_id: str) -> HistoryItem:
    """Find a history entry by full id or unique id prefix; exits 1 when not found."""
    matches = [item for item in history if item.id == item_id]
    if not matches:
        matches = [item for item in history if item.id.startswith(item_id)]
    if len(matches) != 1:
        reason = "No history entry" if not matches else "Ambiguous id prefix"
        console.print(f"[error]{reason}: {item_id}[/error]")
        logger.warning("cli.history.resolve_failed", item_id=item_id, matches=len(matches))
        raise typer.Exit(1)
    return matches[0]


def format_for_copy(body: str, subject_line: str = "") -> str:
    """Text placed on the clipboard / exported: optional "Subject:" header then the body."""
    if subject_line and subject_line != NO_SUBJECT:
        return f"Subject: {subject_line}\n\n{body}"
    return body


def print_results(state: AppState) -> None:
    """Render the subject line and every variation, highlighting the selected one."""
    if state.subject_line:
        console.print(f"[title]Subject:[/title] {state.subject_line}")
    total = len(state.results)
    for index, body in enumerate(state.results):
        title = f"Variation {index + 1} of {total}" if total > 1 else "Email"
        style = "accent" if index == state.selected_variation else "muted"
        console.print(Panel(body, title=title, border_style=style))


def history_table(history: History, title: str = "History") -> Table:
    table = Table(title=title)
    table.add_column("ID", style="accent", no_wrap=True)
    table.add_column("When", style="muted", no_wrap=True)
    table.add_column("Tone")
    table.add_column("Length")
    table.add_column("#", justify="right")
    table.add_column("Subject")
    table.add_column("Source")
    for item in history:
        source = item.source_description
        source = source[:50] + ("..." if len(source) > 50 else "")
        table.add_row(
            item.id[:8],
            item.timestamp.astimezone().strftime("%Y-%m-%d %H:%M"),
            item.tone,
            item.length,
            str(item.variation_count),
            item.subject_line,
            source,
        )
    return table


def compose_command(state: AppState) -> str:
    """The `compose` invocation that regenerates from the composer inputs in state."""
    parts = ["email-writer", "compose"]
    if state.free_text:
        parts.append(shlex.quote(state.free_text))
    if state.template_id:
        parts += ["--template", state.template_id]
    parts += ["--tone", state.tone, "--length", state.length]
    if state.variation_count > 1:
        parts += ["-n", str(state.variation_count)]
    return " ".join(parts)
