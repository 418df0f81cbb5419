from __future__ import annotations
from typing import AbstractSet, Iterable, List
import logging

from essay_annotator.annotations import Annotation, TextMatch, Segment
from essay_annotator.locate import locate_span

logger = logging.getLogger(__name__)


def build_matches(
    document: str,
    annotations: Iterable[Annotation],
    resolved_ids: AbstractSet[str] = frozenset(),
) -> List[TextMatch]:
    """
    Locate every unresolved annotation in the document.

    Annotations that cannot be located are left out. Output is sorted by
    start offset and never overlaps: when two spans collide the one that
    starts first is kept.
    """
    located: List[TextMatch] = []
    for ann in annotations:
        if ann.id in resolved_ids:
            continue
        span = locate_span(document, ann.original_text)
        if span is None:
            logger.debug(f"No match for {ann.id}: {ann.original_text[:50]}...")
            continue
        located.append(TextMatch(annotation_id=ann.id, start=span.start, end=span.end, type=ann.type))

    located.sort(key=lambda m: (m.start, m.end))

    kept: List[TextMatch] = []
    for m in located:
        if kept and m.start < kept[-1].end:
            logger.debug(f"Dropping {m.annotation_id}, overlaps {kept[-1].annotation_id}")
            continue
        kept.append(m)
    return kept


def segment_document(document: str, matches: List[TextMatch]) -> List[Segment]:
    """Split the document into alternating plain and highlighted segments."""
    segments: List[Segment] = []
    cursor = 0
    for m in matches:
        if m.start < cursor:
            continue
        if m.start > cursor:
            segments.append(Segment(text=document[cursor:m.start], start=cursor, end=m.start))
        segments.append(Segment(
            text=document[m.start:m.end],
            start=m.start,
            end=m.end,
            annotation_id=m.annotation_id,
            type=m.type,
        ))
        cursor = m.end
    if cursor < len(document):
        segments.append(Segment(text=document[cursor:], start=cursor, end=len(document)))
    return segments


def build_segments(
    document: str,
    annotations: Iterable[Annotation],
    resolved_ids: AbstractSet[str] = frozenset(),
) -> List[Segment]:
    return segment_document(document, build_matches(document, annotations, resolved_ids))
