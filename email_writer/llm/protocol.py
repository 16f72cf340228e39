"""Completer protocol: the one seam the generation workflow calls through."""

from typing import Protocol


class Completer(Protocol):
    """Turns a prompt into generated text."""

    async def generate(self, prompt: str) -> str:
        """Return generated text. Raises GenerationError on any failure."""
        ...
