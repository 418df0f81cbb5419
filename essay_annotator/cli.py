from __future__ import annotations
import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from essay_annotator.config import load_config
from essay_annotator.errors import AnnotatorError, CorrectionServiceError, EssayTooShortError
from essay_annotator.export import export_docx, render_report
from essay_annotator.feedback import load_correction, save_correction
from essay_annotator.llm import CorrectionClient
from essay_annotator.service import run_correction
from essay_annotator.session import EditingSession
from essay_annotator.stats import reading_minutes, word_count

logger = logging.getLogger(__name__)


def _read_essay(path: str) -> str:
    return Path(path).read_text(encoding="utf-8")


def _load_session(args) -> EditingSession:
    return EditingSession(_read_essay(args.essay), load_correction(args.feedback))


def _print_annotations(session: EditingSession) -> None:
    located = {m.annotation_id for m in session.matches()}
    for a in session.annotations:
        flag = "" if a.id in located or session.is_resolved(a.id) else " (not found in text)"
        print(f"[{a.id}] {a.type} / {session.resolution(a.id)}{flag}")
        print(f"  - {a.original_text}")
        print(f"  + {a.suggestion}")
        if a.reason:
            print(f"    {a.reason}")


def cmd_correct(args) -> None:
    config = load_config(args.config)
    session = EditingSession(_read_essay(args.essay))
    client = CorrectionClient(config)
    run_correction(session, client, min_essay_chars=config.min_essay_chars)

    result = session.result
    print(f"Band score: {result.score:g}")
    print(result.summary)
    for b in result.breakdown:
        print(f"  {b.label}: {b.value:g}")
    print()
    _print_annotations(session)

    if args.save_feedback:
        save_correction(args.save_feedback, result)
        print(f"\nFeedback saved to {args.save_feedback}")


def cmd_review(args) -> None:
    session = _load_session(args)

    # validate ids before touching the text
    for annotation_id in (args.accept or []) + (args.reject or []):
        session.annotation(annotation_id)

    for annotation_id in args.accept or []:
        session.accept(annotation_id)
    for annotation_id in args.reject or []:
        session.reject(annotation_id)
    if args.accept_all:
        session.accept_all()

    if args.out:
        Path(args.out).write_text(session.document, encoding="utf-8")
        logger.info(f"Wrote revised essay to {args.out}")
    else:
        print(session.document)

    if args.report:
        Path(args.report).write_text(
            render_report(args.title or Path(args.essay).stem, session.document, session.result, session.resolutions),
            encoding="utf-8",
        )

    summary = {
        "accepted": sum(1 for r in session.resolutions.values() if r == "accepted"),
        "rejected": sum(1 for r in session.resolutions.values() if r == "rejected"),
        "pending": [a.id for a in session.pending()],
    }
    print(json.dumps(summary, ensure_ascii=False), file=sys.stderr)


def cmd_highlight(args) -> None:
    session = _load_session(args)
    out: List[str] = []
    for seg in session.segments():
        if seg.highlighted:
            out.append(f"[[{seg.annotation_id}:{seg.type}|{seg.text}]]")
        else:
            out.append(seg.text)
    print("".join(out))


def cmd_export(args) -> None:
    session = _load_session(args)
    export_docx(
        args.docx,
        args.title or Path(args.essay).stem,
        session.document,
        session.result,
        include_score=not args.no_score,
        include_annotations=not args.no_annotations,
    )
    print(f"Exported {args.docx}")


def cmd_stats(args) -> None:
    config = load_config(args.config)
    text = _read_essay(args.essay)
    print(json.dumps({
        "words": word_count(text),
        "reading_minutes": reading_minutes(text, config.words_per_minute),
    }))


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="essay-annotate",
        description="AI essay correction with inline annotations",
    )
    ap.add_argument("--config", help="Path to YAML config file")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("correct", help="Run an AI correction pass on an essay")
    p.add_argument("essay", help="Path to essay text file")
    p.add_argument("--save-feedback", help="Write the correction JSON here")
    p.set_defaults(func=cmd_correct)

    p = sub.add_parser("review", help="Accept or reject annotations and write the revised essay")
    p.add_argument("essay")
    p.add_argument("--feedback", required=True, help="Correction JSON from 'correct --save-feedback'")
    p.add_argument("--accept", action="append", metavar="ID", help="Accept an annotation (repeatable)")
    p.add_argument("--reject", action="append", metavar="ID", help="Reject an annotation (repeatable)")
    p.add_argument("--accept-all", action="store_true", help="Accept every remaining annotation")
    p.add_argument("--out", help="Write the revised essay here instead of stdout")
    p.add_argument("--report", help="Write a plain-text review report here")
    p.add_argument("--title", help="Essay title for the report")
    p.set_defaults(func=cmd_review)

    p = sub.add_parser("highlight", help="Print the essay with annotation markers")
    p.add_argument("essay")
    p.add_argument("--feedback", required=True)
    p.set_defaults(func=cmd_highlight)

    p = sub.add_parser("export", help="Export essay and feedback to Word")
    p.add_argument("essay")
    p.add_argument("--feedback", required=True)
    p.add_argument("--docx", required=True, help="Output .docx path")
    p.add_argument("--title")
    p.add_argument("--no-score", action="store_true")
    p.add_argument("--no-annotations", action="store_true")
    p.set_defaults(func=cmd_export)

    p = sub.add_parser("stats", help="Word count and reading time")
    p.add_argument("essay")
    p.set_defaults(func=cmd_stats)

    return ap


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        args.func(args)
    except (CorrectionServiceError, EssayTooShortError) as e:
        logger.debug(f"{type(e).__name__}: {e}")
        print(f"error: {e.user_message}", file=sys.stderr)
        return 1
    except AnnotatorError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
