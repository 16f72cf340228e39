"""CLI commands: one module per concern (compose, history, settings, serve)."""

from typer import Typer

from email_writer.cli import compose_mode, history_mode, serve_mode, settings_mode

app = Typer(help="AI email writer: turn raw thoughts into polished email drafts")


def register_commands() -> None:
    """Register all CLI commands on the global app."""
    app.command()(compose_mode.compose)
    app.command()(settings_mode.templates)
    app.command()(settings_mode.theme)
    app.command(name="validate-catalog")(settings_mode.validate_catalog)
    app.command()(serve_mode.serve)
    app.add_typer(history_mode.app, name="history")


register_commands()
