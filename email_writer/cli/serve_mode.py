"""Serve mode: run the local generation proxy."""

import sys

import typer
import uvicorn

from email_writer.config import LLM_API_KEY, LLM_BASE_URL, LLM_MODEL, PROXY_HOST, PROXY_PORT
from email_writer.proxy.server import create_app

from .shared import console, logger


def serve(
    port: int = typer.Option(PROXY_PORT, "--port", "-p", help="Port for the proxy"),
    host: str = typer.Option(PROXY_HOST, "--host", "-h", help="Bind host"),
) -> None:
    """Start the proxy that forwards prompts to the LLM provider."""
    log = logger.bind(command="serve", port=port, host=host)
    log.info("serve.start", model=LLM_MODEL, base_url=LLM_BASE_URL)

    if not LLM_API_KEY:
        console.print("[yellow]LLM_API_KEY (or GROQ_API_KEY) is not set; /api/generate will return 500.[/yellow]")
        log.warning("serve.missing_api_key")

    app = create_app()
    console.print(f"[green]Starting proxy on http://{host}:{port}[/green]")
    console.print("[dim]Endpoints: POST /api/generate, GET /health[/dim]")
    try:
        uvicorn.run(app, host=host, port=port, log_level="info")
    except KeyboardInterrupt:
        console.print("\n[dim]Shutting down...[/dim]")
        sys.exit(0)
