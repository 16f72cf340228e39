"""Catalog and settings commands: templates, validate-catalog, theme."""

import typer
from rich.table import Table

from email_writer.catalog import list_templates, reload_catalog
from email_writer.workflow.state import ToggleDarkMode

from .shared import apply_theme, console, logger, open_store


def templates() -> None:
    """List the built-in email templates."""
    open_store()
    table = Table(title="Templates")
    table.add_column("ID", style="accent", no_wrap=True)
    table.add_column("Name", style="title")
    table.add_column("Category")
    table.add_column("Description", style="muted")
    for template in list_templates():
        table.add_row(template.id, template.name, template.category, template.description)
    console.print(table)


def validate_catalog() -> None:
    """Load the template catalog from disk and report problems."""
    log = logger.bind(command="validate-catalog")
    try:
        loaded = reload_catalog()
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Catalog error: {e}[/red]")
        log.error("validate_catalog.fail", error=str(e))
        raise typer.Exit(1) from e
    console.print(f"[green]Catalog valid. {len(loaded)} templates.[/green]")
    log.info("validate_catalog.ok", templates=len(loaded))


def theme(
    mode: str | None = typer.Argument(None, help="dark | light; toggles when omitted"),
) -> None:
    """Show or switch the dark-mode setting."""
    store = open_store()
    if mode is not None and mode not in ("dark", "light"):
        raise typer.BadParameter("mode must be 'dark' or 'light'")
    wanted = (not store.state.dark_mode) if mode is None else mode == "dark"
    if wanted != store.state.dark_mode:
        store.dispatch(ToggleDarkMode())
        apply_theme(store.state.dark_mode)
        logger.info("settings.theme_changed", dark_mode=store.state.dark_mode)
    console.print(f"[title]Theme:[/title] {'dark' if store.state.dark_mode else 'light'}")
