"""Composer state, reducer and the generation workflow."""

from email_writer.workflow.generation import generate_emails, generate_subject_line
from email_writer.workflow.state import APOLOGY, AppState
from email_writer.workflow.store import AppStore

__all__ = [
    "APOLOGY",
    "AppState",
    "AppStore",
    "generate_emails",
    "generate_subject_line",
]
