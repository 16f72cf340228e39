"""Logging helpers shared by the proxy, workflow and CLI."""

from email_writer.utils.logger import bind_context, clear_context, get_logger

__all__ = [
    "bind_context",
    "clear_context",
    "get_logger",
]
