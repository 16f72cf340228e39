"""Compose mode: build a draft from thoughts or a template and generate it."""

import asyncio
from pathlib import Path

import typer

from email_writer.catalog import find_template
from email_writer.config import PROXY_URL
from email_writer.models.email import MAX_VARIATIONS
from email_writer.utils.logger import bind_context, clear_context
from email_writer.workflow.generation import generate_emails, generate_subject_line
from email_writer.workflow.state import (
    AppState,
    Failed,
    ImportThreadFile,
    SelectTemplate,
    SetFreeText,
    SetLength,
    SetOriginalEmail,
    SetTone,
    SetVariationCount,
    VariationCompleted,
)
from email_writer.workflow.store import AppStore

from .shared import (
    console,
    logger,
    make_completer,
    open_store,
    print_results,
    read_text_file,
    validate_length,
    validate_tone,
)


async def _run(store: AppStore, completer, with_subject: bool):
    # Subject first so the history entry records it.
    if with_subject:
        await generate_subject_line(store, completer)
    return await generate_emails(store, completer)


def compose(
    thoughts: str = typer.Argument("", help="Raw thoughts to turn into an email"),
    template: str | None = typer.Option(None, "--template", "-t", help="Template id (see `templates`)"),
    tone: str = typer.Option("professional", "--tone", callback=validate_tone, help="Tone of the email"),
    length: str = typer.Option("standard", "--length", "-l", callback=validate_length, help="brief | standard | detailed"),
    variations: int = typer.Option(1, "--variations", "-n", min=1, max=MAX_VARIATIONS, help="Number of drafts"),
    original_email: Path | None = typer.Option(
        None, "--original-email", "-r", exists=True, dir_okay=False, help="Email being replied to (.txt)"
    ),
    thread: Path | None = typer.Option(
        None, "--thread", exists=True, dir_okay=False, help="Email thread transcript to import (.txt)"
    ),
    subject: bool = typer.Option(False, "--subject", "-s", help="Also generate a subject line"),
    direct: bool = typer.Option(False, "--direct", help="Call the LLM provider in-process instead of the proxy"),
    proxy_url: str = typer.Option(PROXY_URL, "--proxy-url", help="Base URL of the local proxy"),
) -> None:
    """Generate one or more email drafts from raw thoughts or a template."""
    log = logger.bind(command="compose", tone=tone, length=length, variations=variations, template=template)
    log.info("compose.start")
    store = open_store()

    if template is not None and find_template(template_id=template) is None:
        console.print(f"[error]Unknown template {template!r}. Run `templates` to list them.[/error]")
        log.warning("compose.unknown_template")
        raise typer.Exit(1)

    store.dispatch(SetFreeText(text=thoughts))
    store.dispatch(SelectTemplate(template_id=template))
    store.dispatch(SetTone(tone=tone))
    store.dispatch(SetLength(length=length))
    store.dispatch(SetVariationCount(count=variations))
    if original_email is not None:
        store.dispatch(SetOriginalEmail(text=read_text_file(original_email)))
    if thread is not None:
        store.dispatch(ImportThreadFile(content=read_text_file(thread)))

    if not store.state.has_content:
        console.print("[muted]Nothing to write: pass some thoughts or --template.[/muted]")
        log.info("compose.no_content")
        raise typer.Exit(1)

    completer = make_completer(direct=direct, proxy_url=proxy_url)
    bind_context(command="compose")
    with console.status("Generating...") as status:

        def on_progress(state: AppState, action) -> None:
            if isinstance(action, VariationCompleted):
                status.update(f"Generating... {action.index + 1}/{variations} done")

        unsubscribe = store.subscribe(on_progress)
        try:
            item = asyncio.run(_run(store, completer, subject))
        finally:
            unsubscribe()
            clear_context()

    state = store.state
    if subject and isinstance(state.subject, Failed):
        console.print("[error]Could not generate a subject line.[/error]")
    print_results(state)
    if item is None:
        log.warning("compose.failed", reason=getattr(state.generation, "reason", None))
        raise typer.Exit(1)
    console.print(f"[muted]Saved to history as {item.id[:8]}[/muted]")
    log.info("compose.complete", history_id=item.id)
