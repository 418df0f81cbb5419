from __future__ import annotations
from typing import Optional, TYPE_CHECKING
import time
import logging

from essay_annotator.annotations import CorrectionResult
from essay_annotator.config import AnnotatorConfig
from essay_annotator.errors import CorrectionServiceError
from essay_annotator.feedback import parse_correction_text
from essay_annotator.llm.prompts import SYSTEM_PROMPT, build_correction_prompt

if TYPE_CHECKING:
    import anthropic

logger = logging.getLogger(__name__)


def _is_rate_limit(error: Exception) -> bool:
    error_str = str(error).lower()
    return (
        "rate" in error_str or
        "429" in error_str or
        "too many requests" in error_str or
        "overloaded" in error_str
    )


class CorrectionClient:
    """Thin wrapper around Anthropic's Claude API for essay correction."""

    def __init__(self, config: AnnotatorConfig):
        self.config = config
        self._client: Optional["anthropic.Anthropic"] = None

    @property
    def client(self) -> "anthropic.Anthropic":
        """Lazy initialization of Anthropic client."""
        if self._client is None:
            if not self.config.api_key:
                raise CorrectionServiceError("No API key configured (set ANTHROPIC_API_KEY)")
            import anthropic
            self._client = anthropic.Anthropic(api_key=self.config.api_key)
        return self._client

    def _complete(self, user_prompt: str) -> str:
        """Send one prompt, retrying rate-limit errors with exponential backoff."""
        last_error: Optional[Exception] = None
        for attempt in range(self.config.max_retries + 1):
            try:
                time.sleep(self.config.min_request_interval)

                message = self.client.messages.create(
                    model=self.config.model,
                    max_tokens=self.config.max_tokens,
                    temperature=self.config.temperature,
                    system=SYSTEM_PROMPT,
                    messages=[{"role": "user", "content": user_prompt}],
                )

                reply = ""
                for block in message.content:
                    if hasattr(block, "text"):
                        reply += block.text
                return reply.strip()

            except CorrectionServiceError:
                raise
            except Exception as e:
                last_error = e
                if _is_rate_limit(e) and attempt < self.config.max_retries:
                    # 2s, 4s, 8s
                    backoff = 2 ** (attempt + 1)
                    logger.warning(f"Rate limit hit, retry {attempt+1}/{self.config.max_retries} in {backoff}s")
                    time.sleep(backoff)
                    continue
                break

        logger.error(f"Correction request failed: {type(last_error).__name__}: {last_error}")
        raise CorrectionServiceError(str(last_error)) from last_error

    def correct(self, essay: str) -> CorrectionResult:
        """
        Ask the model to grade and annotate an essay.

        Raises CorrectionServiceError when the API keeps failing and
        CorrectionFormatError when the reply does not match the schema.
        """
        start_time = time.time()
        reply = self._complete(build_correction_prompt(essay))
        result = parse_correction_text(reply)
        elapsed = time.time() - start_time
        logger.info(f"Correction received in {elapsed:.1f}s: {len(result.annotations)} annotations")
        return result
