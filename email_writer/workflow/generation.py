"""Generation workflow: N sequential completions per click, all-or-nothing history."""

from email_writer.config import HISTORY_MAX_ITEMS
from email_writer.errors import GenerationError
from email_writer.llm.protocol import Completer
from email_writer.models.email import HistoryItem
from email_writer.prompts import build_email_prompt, build_subject_prompt, clean_subject_line
from email_writer.utils.logger import get_logger
from email_writer.workflow.state import (
    GenerationFailed,
    GenerationStarted,
    GenerationSucceeded,
    SubjectFailed,
    SubjectStarted,
    SubjectSucceeded,
    VariationCompleted,
)
from email_writer.workflow.store import AppStore

logger = get_logger("email_writer.workflow.generation")


async def generate_emails(
    store: AppStore,
    completer: Completer,
    max_history: int = HISTORY_MAX_ITEMS,
) -> HistoryItem | None:
    """Generate every requested variation, one call after another.

    Returns the new history item, or None when the guard refused to start or a call
    failed (the state then shows the apology and no history is written).
    """
    state = store.state
    if not state.has_content or state.is_generating:
        logger.debug(
            "generation.refused",
            has_content=state.has_content,
            in_flight=state.is_generating,
        )
        return None

    request = state.to_request()
    subject_line = state.subject_line
    total = request.variation_count
    log = logger.bind(
        tone=request.tone,
        length=request.length,
        variations=total,
        template=request.template.id if request.template else None,
    )
    store.dispatch(GenerationStarted(total=total))
    log.info("generation.start")

    emails: list[str] = []
    try:
        for index in range(total):
            response = await completer.generate(build_email_prompt(request, variation_index=index))
            emails.append(response.strip())
            store.dispatch(VariationCompleted(index=index))
            log.debug("generation.variation_complete", variation=index + 1)
    except GenerationError as e:
        log.error("generation.failed", completed=len(emails), error=str(e))
        store.dispatch(GenerationFailed(reason=str(e)))
        return None
    except Exception as e:
        log.exception("generation.unexpected_error", completed=len(emails), error=str(e))
        store.dispatch(GenerationFailed(reason=str(GenerationError())))
        return None

    item = HistoryItem.from_request(request, emails, subject_line=subject_line)
    store.dispatch(GenerationSucceeded(item=item, max_history=max_history))
    log.info("generation.complete", history_id=item.id)
    return item


async def generate_subject_line(store: AppStore, completer: Completer) -> str | None:
    """Generate a subject line for the current content; independent of generate_emails."""
    state = store.state
    if not state.has_content or state.is_generating_subject:
        logger.debug("subject.refused", has_content=state.has_content, in_flight=state.is_generating_subject)
        return None

    request = state.to_request()
    store.dispatch(SubjectStarted())
    try:
        response = await completer.generate(build_subject_prompt(request.effective_content, request.tone))
    except GenerationError as e:
        logger.error("subject.failed", error=str(e))
        store.dispatch(SubjectFailed(reason=str(e)))
        return None
    except Exception as e:
        logger.exception("subject.unexpected_error", error=str(e))
        store.dispatch(SubjectFailed(reason=str(GenerationError())))
        return None

    subject_line = clean_subject_line(response)
    store.dispatch(SubjectSucceeded(subject_line=subject_line))
    logger.info("subject.complete", subject_line=subject_line)
    return subject_line
