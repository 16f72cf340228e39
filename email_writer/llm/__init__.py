"""LLM access: provider client (used by the proxy) and workflow-facing completers."""

from email_writer.llm.client import LocalCompletionClient, ProxyCompletionClient
from email_writer.llm.protocol import Completer
from email_writer.llm.provider import ChatCompletionClient

__all__ = [
    "ChatCompletionClient",
    "Completer",
    "LocalCompletionClient",
    "ProxyCompletionClient",
]
