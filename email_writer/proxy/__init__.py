"""Local HTTP proxy that keeps the provider credential server-side."""

from email_writer.proxy.server import create_app

__all__ = ["create_app"]
