"""Tones, lengths, templates, generation requests and history entries."""

import uuid
from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import BaseModel, Field, model_validator

Tone = Literal["professional", "warm", "concise", "casual", "persuasive", "empathetic"]
Length = Literal["brief", "standard", "detailed"]

TONES: dict[str, tuple[str, str]] = {
    "professional": ("Professional", "Formal and business-appropriate"),
    "warm": ("Warm", "Friendly and approachable"),
    "concise": ("Concise", "Brief and to-the-point"),
    "casual": ("Casual", "Relaxed and informal"),
    "persuasive": ("Persuasive", "Compelling and influential"),
    "empathetic": ("Empathetic", "Understanding and compassionate"),
}

LENGTHS: dict[str, tuple[str, str]] = {
    "brief": ("Brief", "2-3 sentences"),
    "standard": ("Standard", "1-2 paragraphs"),
    "detailed": ("Detailed", "3+ paragraphs"),
}

ALL_TONES = "all"
MAX_VARIATIONS = 3
NO_SUBJECT = "No subject"


class Template(BaseModel):
    """A pre-written email skeleton from the static catalog."""

    id: str
    name: str
    category: str
    description: str
    content: str

    model_config = {"frozen": True}


class GenerationRequest(BaseModel):
    """Inputs for one click of "generate"; built from the composer state."""

    source_content: str = ""
    tone: Tone = "professional"
    length: Length = "standard"
    variation_count: int = Field(1, ge=1)
    original_email: Optional[str] = None
    thread_context: Optional[str] = None
    template: Optional[Template] = None

    @property
    def effective_content(self) -> str:
        """Template content when a template is selected, otherwise the free text."""
        if self.template is not None:
            return self.template.content
        return self.source_content

    @property
    def source_description(self) -> str:
        if self.template is not None:
            return f"Template: {self.template.name}"
        return self.source_content


def _new_history_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HistoryItem(BaseModel):
    """A persisted record of one completed generation (all variations)."""

    id: str = Field(default_factory=_new_history_id)
    timestamp: datetime = Field(default_factory=_utcnow)
    source_description: str
    tone: Tone
    length: Length
    variation_count: int = Field(..., ge=1)
    emails: tuple[str, ...]
    subject_line: str = NO_SUBJECT
    template_name: Optional[str] = None
    template_id: Optional[str] = None

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _emails_match_variations(self) -> "HistoryItem":
        if len(self.emails) != self.variation_count:
            raise ValueError(
                f"emails has {len(self.emails)} entries but variation_count is {self.variation_count}"
            )
        return self

    @classmethod
    def from_request(
        cls,
        request: GenerationRequest,
        emails: list[str],
        subject_line: str = "",
    ) -> "HistoryItem":
        template = request.template
        return cls(
            source_description=request.source_description,
            tone=request.tone,
            length=request.length,
            variation_count=len(emails),
            emails=tuple(emails),
            subject_line=subject_line or NO_SUBJECT,
            template_name=template.name if template else None,
            template_id=template.id if template else None,
        )
