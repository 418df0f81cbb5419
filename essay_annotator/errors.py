from __future__ import annotations

SERVICE_UNAVAILABLE_MESSAGE = "AI 批改服务暂时不可用，请稍后重试"
ESSAY_TOO_SHORT_MESSAGE = "文章内容太短，请至少输入 50 个字符"


class AnnotatorError(Exception):
    """Base class for all essay annotator errors."""


class ConfigError(AnnotatorError):
    """Configuration file is unreadable or has invalid values."""


class CorrectionFormatError(AnnotatorError):
    """Correction provider returned a payload that does not match the schema."""


class CorrectionServiceError(AnnotatorError):
    """Correction provider could not be reached or kept failing."""

    def __init__(self, detail: str = "", user_message: str = SERVICE_UNAVAILABLE_MESSAGE):
        super().__init__(detail or user_message)
        self.detail = detail
        self.user_message = user_message


class EssayTooShortError(AnnotatorError):
    """Essay is too short to be worth a correction pass."""

    def __init__(self, length: int, minimum: int):
        super().__init__(f"Essay has {length} characters, at least {minimum} required")
        self.length = length
        self.minimum = minimum
        self.user_message = ESSAY_TOO_SHORT_MESSAGE


class UnknownAnnotationError(AnnotatorError, KeyError):
    """Annotation id is not part of the current correction pass."""

    def __str__(self) -> str:
        return f"Unknown annotation: {self.args[0] if self.args else ''}"
