from __future__ import annotations
from typing import List, Optional, Tuple

from essay_annotator.annotations import Span


def normalize_whitespace(text: str) -> Tuple[str, List[int]]:
    """
    Collapse every run of whitespace to a single space.

    Returns the normalized text and a map with one entry per normalized
    character giving its offset in the original text. A collapsed run maps
    to its first whitespace character.
    """
    chars: List[str] = []
    index_map: List[int] = []
    in_space = False
    for i, ch in enumerate(text):
        if ch.isspace():
            if in_space:
                continue
            chars.append(" ")
            index_map.append(i)
            in_space = True
        else:
            chars.append(ch)
            index_map.append(i)
            in_space = False
    return "".join(chars), index_map


def _normalize_needle(needle: str) -> str:
    return " ".join(needle.split())


def locate_span(document: str, needle: str) -> Optional[Span]:
    """
    Find where an annotation's original text sits in the document.

    Tries a literal search first, then a search that ignores differences in
    whitespace run length. Returns None when neither finds it.
    """
    if not needle or not needle.strip():
        return None

    idx = document.find(needle)
    if idx != -1:
        return Span(idx, idx + len(needle))

    norm_needle = _normalize_needle(needle)
    norm_doc, index_map = normalize_whitespace(document)
    n_idx = norm_doc.find(norm_needle)
    if n_idx == -1:
        return None

    # norm_needle is trimmed, so its last character maps to a real
    # non-space character of the document
    start = index_map[n_idx]
    end = index_map[n_idx + len(norm_needle) - 1] + 1
    return Span(start, end)
