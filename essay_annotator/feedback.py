"""
Correction payload schema

Validates the JSON returned by the correction provider before any of it
reaches the editing session. A payload either parses completely into a
CorrectionResult or raises CorrectionFormatError; nothing partial is
ever installed.
"""
from __future__ import annotations
from typing import Any, List, Literal
import json
import logging
import re

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from essay_annotator.annotations import Annotation, CorrectionResult, ScoreBreakdown
from essay_annotator.errors import CorrectionFormatError

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL)


class ProviderAnnotation(BaseModel):
    """One annotation as the provider sends it."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    type: Literal["grammar", "vocabulary", "logic"]
    original_text: str = Field(alias="originalText", description="Verbatim text from the essay")
    suggestion: str = Field(description="Replacement text, empty for a deletion")
    reason: str = ""

    @field_validator("id", "original_text")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    def to_annotation(self) -> Annotation:
        return Annotation(
            id=self.id,
            type=self.type,
            original_text=self.original_text,
            suggestion=self.suggestion,
            reason=self.reason,
        )


class ProviderBreakdown(BaseModel):
    label: str
    value: float = Field(strict=True)


class ProviderPayload(BaseModel):
    """Full provider reply: band score, summary, per-dimension scores, annotations."""
    score: float = Field(strict=True, ge=0, le=9)
    summary: str
    breakdown: List[ProviderBreakdown]
    annotations: List[ProviderAnnotation]

    @model_validator(mode="after")
    def unique_annotation_ids(self) -> "ProviderPayload":
        seen = set()
        for a in self.annotations:
            if a.id in seen:
                raise ValueError(f"duplicate annotation id {a.id!r}")
            seen.add(a.id)
        return self

    def to_result(self) -> CorrectionResult:
        return CorrectionResult(
            score=float(self.score),
            summary=self.summary,
            breakdown=[ScoreBreakdown(label=b.label, value=float(b.value)) for b in self.breakdown],
            annotations=[a.to_annotation() for a in self.annotations],
        )


def parse_correction(data: Any) -> CorrectionResult:
    """Validate a decoded provider payload and build a CorrectionResult."""
    try:
        payload = ProviderPayload.model_validate(data)
    except ValidationError as e:
        raise CorrectionFormatError(f"invalid correction payload: {e}") from e
    return payload.to_result()


def extract_json_text(text: str) -> str:
    """
    Pull the JSON object out of a model reply.

    Models asked for bare JSON still sometimes wrap it in a code fence or
    add a sentence before it.
    """
    text = text.strip()
    if text.startswith("{"):
        try:
            json.loads(text)
            return text
        except json.JSONDecodeError:
            pass
    m = _FENCE_RE.search(text)
    if m:
        return m.group(1).strip()
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        raise CorrectionFormatError("reply contains no JSON object")
    return text[start:end + 1]


def parse_correction_text(text: str) -> CorrectionResult:
    """Decode a raw provider reply and validate it."""
    body = extract_json_text(text)
    try:
        payload = ProviderPayload.model_validate_json(body)
    except ValidationError as e:
        logger.debug(f"Rejected reply: {body[:200]}")
        raise CorrectionFormatError(f"invalid correction reply: {e}") from e
    return payload.to_result()


def load_correction(path: str) -> CorrectionResult:
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise CorrectionFormatError(f"{path}: not valid JSON: {e}") from e
    return parse_correction(data)


def save_correction(path: str, result: CorrectionResult) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(result.to_dict(), f, ensure_ascii=False, indent=2)
