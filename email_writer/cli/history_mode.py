"""History commands: list/search, show, restore, delete, clear, export."""

from pathlib import Path

import typer
from rich.panel import Panel

from email_writer.models.email import ALL_TONES, TONES
from email_writer.history.store import search
from email_writer.workflow.state import HistoryCleared, HistoryItemRemoved, HistoryRestored, SelectVariation

from .shared import (
    compose_command,
    console,
    format_for_copy,
    history_table,
    logger,
    open_store,
    print_results,
    resolve_item,
)

app = typer.Typer(help="Browse and manage previously generated emails")


def _validate_tone_filter(value: str) -> str:
    if value != ALL_TONES and value not in TONES:
        raise typer.BadParameter(f"Unknown tone {value!r}. Choose 'all' or one of: {', '.join(TONES)}")
    return value


@app.command("list")
def list_history(
    query: str = typer.Option("", "--search", "-q", help="Case-insensitive text in source or subject"),
    tone: str = typer.Option(ALL_TONES, "--tone", callback=_validate_tone_filter, help="Tone filter or 'all'"),
) -> None:
    """List history entries, most recent first."""
    store = open_store()
    items = search(store.state.history, query, tone)
    logger.debug("history.list", query=query, tone=tone, total=len(store.state.history), matched=len(items))
    if not items:
        console.print("[muted]No history entries.[/muted]")
        return
    console.print(history_table(items, title=f"History ({len(items)} of {len(store.state.history)})"))


@app.command()
def show(item_id: str = typer.Argument(..., help="Entry id or unique prefix")) -> None:
    """Show every variation of one history entry."""
    store = open_store()
    item = resolve_item(store.state.history, item_id)
    console.print(f"[title]{item.source_description}[/title]")
    console.print(f"[muted]{item.tone} · {item.length} · {item.timestamp.astimezone():%Y-%m-%d %H:%M}[/muted]")
    console.print(f"[title]Subject:[/title] {item.subject_line}")
    for index, body in enumerate(item.emails):
        console.print(Panel(body, title=f"Variation {index + 1} of {item.variation_count}"))


@app.command()
def restore(
    item_id: str = typer.Argument(..., help="Entry id or unique prefix"),
    variation: int = typer.Option(1, "--variation", "-v", min=1, help="Variation to select"),
) -> None:
    """Load an entry back into the composer, show it and print the matching compose command."""
    store = open_store()
    item = resolve_item(store.state.history, item_id)
    store.dispatch(HistoryRestored(item=item))
    store.dispatch(SelectVariation(index=variation - 1))
    state = store.state
    template = state.template_id or "(none)"
    console.print(f"[muted]Restored {item.id[:8]}: tone={state.tone} length={state.length} template={template}[/muted]")
    if state.free_text:
        console.print(f"[title]Thoughts:[/title] {state.free_text}")
    print_results(state)
    console.print("[title]Regenerate with:[/title]")
    console.print(compose_command(state), markup=False, highlight=False, soft_wrap=True)
    logger.info("history.restored", history_id=item.id, template_id=state.template_id)


@app.command()
def delete(item_id: str = typer.Argument(..., help="Entry id or unique prefix")) -> None:
    """Delete one history entry."""
    store = open_store()
    item = resolve_item(store.state.history, item_id)
    store.dispatch(HistoryItemRemoved(item_id=item.id))
    console.print(f"[ok]Deleted {item.id[:8]}.[/ok]")
    logger.info("history.deleted", history_id=item.id)


@app.command()
def clear(yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation")) -> None:
    """Delete all history entries."""
    store = open_store()
    count = len(store.state.history)
    if not yes and not typer.confirm(f"Delete all {count} history entries?"):
        raise typer.Exit(0)
    store.dispatch(HistoryCleared())
    console.print(f"[ok]Cleared {count} entries.[/ok]")
    logger.info("history.cleared", count=count)


@app.command()
def export(
    item_id: str = typer.Argument(..., help="Entry id or unique prefix"),
    variation: int = typer.Option(1, "--variation", "-v", min=1, help="Variation to export"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write to this file instead of stdout"),
) -> None:
    """Export one variation as ready-to-send text (with a Subject: header)."""
    store = open_store()
    item = resolve_item(store.state.history, item_id)
    if variation > item.variation_count:
        console.print(f"[error]Entry {item.id[:8]} has only {item.variation_count} variation(s).[/error]")
        raise typer.Exit(1)
    text = format_for_copy(item.emails[variation - 1], item.subject_line)
    if output is None:
        console.print(text, markup=False, highlight=False)
        return
    output.write_text(text, encoding="utf-8")
    console.print(f"[ok]Wrote {output}[/ok]")
    logger.info("history.exported", history_id=item.id, path=str(output))
