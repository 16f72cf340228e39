"""Prompt construction for email drafts and subject lines."""

from email_writer.models.email import GenerationRequest

LENGTH_INSTRUCTIONS = {
    "brief": "Keep it very brief - 2-3 sentences maximum.",
    "standard": "Write a standard length email - 1-2 paragraphs.",
    "detailed": "Write a detailed email - 3 or more paragraphs with comprehensive information.",
}

EMAIL_PROMPT = """Transform the following into a well-written email with a {tone} tone. {length_instruction}{variation_note}

Content: "{content}"{context}

Please respond with ONLY the email body content, no subject line, no additional commentary. The email should be complete and ready to send."""

VARIATION_NOTE = (
    "\n\nThis is variation {index} of {total}. Make this version slightly different in approach "
    "or phrasing while maintaining the same core message."
)

SUBJECT_PROMPT = """Generate a clear, compelling email subject line for the following email content. The subject should be professional, specific, and encourage the recipient to open the email. Respond with ONLY the subject line, no quotes or additional text.

Email content: "{content}"

Tone: {tone}"""

_QUOTES = "\"'"


def _context_blocks(request: GenerationRequest) -> str:
    blocks = ""
    if request.original_email and request.original_email.strip():
        blocks += f'\n\nOriginal email being responded to:\n"{request.original_email}"'
    if request.thread_context and request.thread_context.strip():
        blocks += f'\n\nEmail thread context:\n"{request.thread_context}"'
    if request.template is not None:
        blocks += (
            f"\n\nUsing template: {request.template.name}"
            f'\nTemplate content: "{request.template.content}"'
        )
    return blocks


def build_email_prompt(request: GenerationRequest, variation_index: int = 0) -> str:
    """Prompt for one variation (0-based index); only the variation note differs between calls."""
    variation_note = ""
    if request.variation_count > 1:
        variation_note = VARIATION_NOTE.format(index=variation_index + 1, total=request.variation_count)
    return EMAIL_PROMPT.format(
        tone=request.tone,
        length_instruction=LENGTH_INSTRUCTIONS[request.length],
        variation_note=variation_note,
        content=request.effective_content,
        context=_context_blocks(request),
    )


def build_subject_prompt(content: str, tone: str) -> str:
    return SUBJECT_PROMPT.format(content=content, tone=tone)


def clean_subject_line(text: str) -> str:
    """Strip whitespace and one surrounding quote character from each end."""
    cleaned = text.strip()
    if cleaned[:1] in _QUOTES:
        cleaned = cleaned[1:]
    if cleaned[-1:] in _QUOTES:
        cleaned = cleaned[:-1]
    return cleaned
