"""
Essay Annotator

Aligns AI correction annotations with the live essay text, tracks which
suggestions were accepted or rejected, and splits the essay into
highlighted segments for display.
"""
from essay_annotator.annotations import (
    Annotation,
    CorrectionResult,
    ScoreBreakdown,
    Segment,
    Span,
    TextMatch,
)
from essay_annotator.feedback import parse_correction, parse_correction_text
from essay_annotator.locate import locate_span
from essay_annotator.matches import build_matches, build_segments, segment_document
from essay_annotator.session import CorrectionTicket, EditingSession

__all__ = [
    "Annotation",
    "CorrectionResult",
    "ScoreBreakdown",
    "Segment",
    "Span",
    "TextMatch",
    "parse_correction",
    "parse_correction_text",
    "locate_span",
    "build_matches",
    "build_segments",
    "segment_document",
    "CorrectionTicket",
    "EditingSession",
]
