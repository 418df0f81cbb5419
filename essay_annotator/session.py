"""
Editing Session

Owns the document text, the annotations of the current correction pass,
and their resolution state. One session per essay being edited; there is
no module-level state.

Resolution per annotation is unresolved -> accepted or unresolved ->
rejected. Both end states are final until a new correction pass replaces
the annotation set.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet, List, Optional, Union
import logging

from essay_annotator.annotations import (
    Annotation,
    CorrectionResult,
    Resolution,
    Segment,
    TextMatch,
)
from essay_annotator.errors import UnknownAnnotationError
from essay_annotator.matches import build_matches, segment_document

logger = logging.getLogger(__name__)

AnnotationRef = Union[Annotation, str]
Listener = Callable[["EditingSession"], None]


@dataclass(frozen=True)
class CorrectionTicket:
    """Issued when a correction pass starts; only the latest one may install."""
    generation: int
    document: str                # text sent to the provider


class EditingSession:

    def __init__(self, document: str = "", result: Optional[CorrectionResult] = None):
        self._document = document
        self._result: Optional[CorrectionResult] = None
        self._resolutions: Dict[str, Resolution] = {}
        self._selected_id: Optional[str] = None
        self._generation = 0
        self._listeners: List[Listener] = []
        if result is not None:
            self._install(result)

    # -- observers ---------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call listener(session) after every state change. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    # -- document ----------------------------------------------------------

    @property
    def document(self) -> str:
        return self._document

    def set_document(self, text: str) -> None:
        if text == self._document:
            return
        self._document = text
        self._notify()

    # -- correction passes -------------------------------------------------

    @property
    def result(self) -> Optional[CorrectionResult]:
        return self._result

    @property
    def annotations(self) -> List[Annotation]:
        return list(self._result.annotations) if self._result else []

    def begin_correction(self) -> CorrectionTicket:
        """Start a correction pass. Any earlier ticket becomes stale."""
        self._generation += 1
        logger.debug(f"Correction pass {self._generation} started")
        return CorrectionTicket(generation=self._generation, document=self._document)

    def is_current(self, ticket: CorrectionTicket) -> bool:
        return ticket.generation == self._generation

    def install_correction(self, ticket: CorrectionTicket, result: CorrectionResult) -> bool:
        """
        Swap in the annotations of a finished pass.

        Returns False and leaves the session untouched when a newer pass
        has been started since the ticket was issued.
        """
        if not self.is_current(ticket):
            logger.warning(
                f"Discarding stale correction pass {ticket.generation} (latest is {self._generation})"
            )
            return False
        self._install(result)
        logger.info(
            f"Installed correction pass {ticket.generation}: "
            f"score={result.score}, {len(result.annotations)} annotations"
        )
        self._notify()
        return True

    def load_result(self, result: CorrectionResult) -> None:
        """Install a previously saved pass, superseding anything in flight."""
        self._generation += 1
        self._install(result)
        self._notify()

    def _install(self, result: CorrectionResult) -> None:
        self._result = result
        self._resolutions = {}
        self._selected_id = result.annotations[0].id if result.annotations else None

    # -- lookup ------------------------------------------------------------

    def annotation(self, annotation_id: str) -> Annotation:
        found = self._result.annotation(annotation_id) if self._result else None
        if found is None:
            raise UnknownAnnotationError(annotation_id)
        return found

    def _find(self, ref: AnnotationRef) -> Optional[Annotation]:
        annotation_id = ref.id if isinstance(ref, Annotation) else ref
        found = self._result.annotation(annotation_id) if self._result else None
        if found is None:
            logger.debug(f"Ignoring unknown annotation {annotation_id}")
            return None
        # ids repeat across passes; an annotation object must be this pass's own
        if isinstance(ref, Annotation) and found != ref:
            logger.debug(f"Ignoring annotation {annotation_id} from an earlier pass")
            return None
        return found

    # -- resolution --------------------------------------------------------

    def resolution(self, annotation_id: str) -> Resolution:
        return self._resolutions.get(annotation_id, "unresolved")

    def is_resolved(self, annotation_id: str) -> bool:
        return annotation_id in self._resolutions

    @property
    def resolved_ids(self) -> FrozenSet[str]:
        return frozenset(self._resolutions)

    @property
    def resolutions(self) -> Dict[str, Resolution]:
        return dict(self._resolutions)

    def pending(self) -> List[Annotation]:
        return [a for a in self.annotations if a.id not in self._resolutions]

    def accept(self, ref: AnnotationRef) -> bool:
        """
        Apply the suggestion to the first literal occurrence of the original text.

        The annotation is marked accepted even if the text is no longer in
        the document. Returns True if the session changed.
        """
        ann = self._find(ref)
        if ann is None or ann.id in self._resolutions:
            return False

        # text first, then the resolution record
        if ann.original_text in self._document:
            self._document = self._document.replace(ann.original_text, ann.suggestion, 1)
        else:
            logger.debug(f"Accepted {ann.id} but its text is no longer in the document")
        self._resolutions[ann.id] = "accepted"
        self._notify()
        return True

    def reject(self, ref: AnnotationRef) -> bool:
        ann = self._find(ref)
        if ann is None or ann.id in self._resolutions:
            return False
        self._resolutions[ann.id] = "rejected"
        self._notify()
        return True

    def accept_all(self) -> int:
        """Accept every pending annotation in order. Returns how many were accepted."""
        return sum(1 for ann in self.pending() if self.accept(ann))

    # -- selection ---------------------------------------------------------

    @property
    def selected(self) -> Optional[Annotation]:
        if self._selected_id is None or self._result is None:
            return None
        return self._result.annotation(self._selected_id)

    def select(self, annotation_id: Optional[str]) -> None:
        """Focus an annotation for detail display. Does not change resolution."""
        if annotation_id is not None and self._find(annotation_id) is None:
            return
        if annotation_id == self._selected_id:
            return
        self._selected_id = annotation_id
        self._notify()

    # -- rendering ---------------------------------------------------------

    def matches(self) -> List[TextMatch]:
        return build_matches(self._document, self.annotations, self.resolved_ids)

    def segments(self) -> List[Segment]:
        return segment_document(self._document, self.matches())
