from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional, Literal

AnnotationType = Literal["grammar", "vocabulary", "logic"]
Resolution = Literal["unresolved", "accepted", "rejected"]

# Display labels used by the original workbench
TYPE_LABELS: Dict[str, str] = {
    "grammar": "语法",
    "vocabulary": "词汇",
    "logic": "逻辑",
}


@dataclass(frozen=True)
class Annotation:
    id: str
    type: AnnotationType
    original_text: str           # verbatim snippet the provider claims is in the essay
    suggestion: str              # empty means delete
    reason: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "originalText": self.original_text,
            "suggestion": self.suggestion,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class Span:
    start: int
    end: int                     # half-open


@dataclass(frozen=True)
class TextMatch:
    annotation_id: str
    start: int
    end: int
    type: AnnotationType


@dataclass(frozen=True)
class Segment:
    text: str
    start: int
    end: int
    annotation_id: Optional[str] = None
    type: Optional[AnnotationType] = None

    @property
    def highlighted(self) -> bool:
        return self.annotation_id is not None


@dataclass(frozen=True)
class ScoreBreakdown:
    label: str
    value: float


@dataclass
class CorrectionResult:
    """One correction pass as returned by the provider."""
    score: float
    summary: str
    breakdown: List[ScoreBreakdown] = field(default_factory=list)
    annotations: List[Annotation] = field(default_factory=list)

    def annotation(self, annotation_id: str) -> Optional[Annotation]:
        for a in self.annotations:
            if a.id == annotation_id:
                return a
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "summary": self.summary,
            "breakdown": [{"label": b.label, "value": b.value} for b in self.breakdown],
            "annotations": [a.to_dict() for a in self.annotations],
        }
