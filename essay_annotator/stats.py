from __future__ import annotations
import math

DEFAULT_WORDS_PER_MINUTE = 180


def word_count(text: str) -> int:
    return len(text.split())


def reading_minutes(text: str, words_per_minute: int = DEFAULT_WORDS_PER_MINUTE) -> int:
    """Estimated reading time, never less than one minute."""
    return max(1, math.ceil(word_count(text) / words_per_minute))
