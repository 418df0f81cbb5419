from __future__ import annotations
import logging

from essay_annotator.errors import EssayTooShortError
from essay_annotator.llm.client import CorrectionClient
from essay_annotator.session import EditingSession

logger = logging.getLogger(__name__)

DEFAULT_MIN_ESSAY_CHARS = 50


def check_essay_length(text: str, minimum: int = DEFAULT_MIN_ESSAY_CHARS) -> None:
    length = len(text.strip())
    if length < minimum:
        raise EssayTooShortError(length, minimum)


def run_correction(
    session: EditingSession,
    client: CorrectionClient,
    min_essay_chars: int = DEFAULT_MIN_ESSAY_CHARS,
) -> bool:
    """
    Run one correction pass for the session's current document.

    Provider errors propagate and leave the session as it was. Returns
    False if a newer pass was started while this one was in flight.
    """
    check_essay_length(session.document, min_essay_chars)
    ticket = session.begin_correction()
    logger.info(f"Requesting correction pass {ticket.generation} ({len(ticket.document)} chars)")
    result = client.correct(ticket.document)
    return session.install_correction(ticket, result)
