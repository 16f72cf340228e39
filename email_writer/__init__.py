"""AI email writer: prompt compiler, generation proxy, workflow and history."""

__version__ = "0.1.0"
