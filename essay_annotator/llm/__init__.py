from __future__ import annotations

from essay_annotator.llm.client import CorrectionClient
from essay_annotator.llm.prompts import build_correction_prompt

__all__ = ["CorrectionClient", "build_correction_prompt"]
