"""Pydantic models for the email writer."""

from email_writer.models.api import ErrorResponse, GenerateRequest, GenerateResponse
from email_writer.models.email import (
    ALL_TONES,
    LENGTHS,
    MAX_VARIATIONS,
    NO_SUBJECT,
    TONES,
    GenerationRequest,
    HistoryItem,
    Length,
    Template,
    Tone,
)

__all__ = [
    "ALL_TONES",
    "LENGTHS",
    "MAX_VARIATIONS",
    "NO_SUBJECT",
    "TONES",
    "ErrorResponse",
    "GenerateRequest",
    "GenerateResponse",
    "GenerationRequest",
    "HistoryItem",
    "Length",
    "Template",
    "Tone",
]
