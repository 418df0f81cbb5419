from __future__ import annotations
from typing import Dict, List, Optional
import logging

from docx import Document
from docx.shared import Pt, RGBColor

from essay_annotator.annotations import CorrectionResult, Resolution, TYPE_LABELS
from essay_annotator.stats import word_count

logger = logging.getLogger(__name__)

TYPE_COLORS = {
    "grammar": (0xC0, 0x39, 0x2B),
    "vocabulary": (0x29, 0x80, 0xB9),
    "logic": (0xD3, 0x84, 0x00),
}


def _paragraphs(document: str) -> List[str]:
    return [p.strip() for p in document.split("\n") if p.strip()]


def render_report(
    title: str,
    document: str,
    result: Optional[CorrectionResult],
    resolutions: Optional[Dict[str, Resolution]] = None,
) -> str:
    resolutions = resolutions or {}
    lines: List[str] = []
    lines.append(title or "Untitled essay")
    lines.append(f"Words: {word_count(document)}")
    lines.append("")
    lines.append(document.strip())
    lines.append("")
    if result is None:
        lines.append("No correction feedback.")
        return "\n".join(lines)

    lines.append(f"Band score: {result.score:g}")
    if result.summary:
        lines.append(f"Summary: {result.summary}")
    for b in result.breakdown:
        lines.append(f"- {b.label}: {b.value:g}")
    lines.append("")
    if result.annotations:
        lines.append("Annotations")
        for a in result.annotations:
            status = resolutions.get(a.id, "unresolved")
            lines.append(f"- [{status}] {a.id} ({a.type}): {a.original_text}")
            lines.append(f"    -> {a.suggestion or '[delete]'}")
            if a.reason:
                lines.append(f"    {a.reason}")
    return "\n".join(lines)


def export_docx(
    path: str,
    title: str,
    document: str,
    result: Optional[CorrectionResult] = None,
    include_score: bool = True,
    include_annotations: bool = True,
) -> None:
    """Write the essay and its correction feedback to a Word document."""
    doc = Document()
    doc.add_heading(title or "Untitled essay", level=1)

    for text in _paragraphs(document):
        doc.add_paragraph(text)

    meta = doc.add_paragraph()
    run = meta.add_run(f"{word_count(document)} words")
    run.font.size = Pt(9)
    run.font.color.rgb = RGBColor(0x80, 0x80, 0x80)

    if result is not None and include_score:
        doc.add_heading("AI 评分", level=2)
        doc.add_paragraph(f"Band {result.score:g}")
        if result.summary:
            doc.add_paragraph(result.summary)
        if result.breakdown:
            table = doc.add_table(rows=1, cols=2)
            table.style = "Table Grid"
            header = table.rows[0].cells
            header[0].text = "维度"
            header[1].text = "分数"
            for b in result.breakdown:
                cells = table.add_row().cells
                cells[0].text = b.label
                cells[1].text = f"{b.value:g}"

    if result is not None and include_annotations and result.annotations:
        doc.add_heading("批改建议", level=2)
        for i, a in enumerate(result.annotations, start=1):
            p = doc.add_paragraph()
            label = p.add_run(f"{i}. [{TYPE_LABELS.get(a.type, a.type)}] ")
            label.bold = True
            label.font.color.rgb = RGBColor(*TYPE_COLORS.get(a.type, (0, 0, 0)))
            p.add_run(a.original_text)

            p = doc.add_paragraph()
            p.add_run("→ ").bold = True
            p.add_run(a.suggestion or "[delete]")

            if a.reason:
                reason = doc.add_paragraph().add_run(a.reason)
                reason.italic = True
                reason.font.size = Pt(10)

    doc.save(path)
    logger.info(f"Exported {path}")
