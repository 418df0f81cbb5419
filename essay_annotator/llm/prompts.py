"""
Prompt templates for essay correction.
"""

SYSTEM_PROMPT = """You are an expert IELTS/TOEFL essay examiner. You analyze student essays and return structured feedback as JSON. You never add commentary outside the JSON object."""

CORRECTION_PROMPT_TEMPLATE = '''Analyze the following essay and provide detailed feedback.

Essay to analyze:
"""
{essay}
"""

Instructions:
1. Provide an overall IELTS band score (0-9, can use decimals like 7.5)
2. Give a brief summary in Chinese about the essay quality
3. Break down scores into 4 dimensions: 词汇 (Vocabulary), 语法 (Grammar), 逻辑 (Logic), 连贯性 (Coherence)
4. Identify {min_issues}-{max_issues} specific issues in the essay with:
   - The EXACT original text that needs correction (must be verbatim from the essay)
   - Suggested replacement
   - Reason in Chinese explaining the improvement
5. Categorize each issue as: "grammar" (grammatical errors), "vocabulary" (word choice improvements), or "logic" (logical flow issues)
6. Generate unique IDs for each annotation in format "ann-1", "ann-2", etc.

Focus on the most impactful improvements that would help a student improve their writing.

IMPORTANT: You MUST respond with ONLY a valid JSON object in exactly this format, no other text:
{{
  "score": <number between 0-9>,
  "summary": "<brief summary in Chinese>",
  "breakdown": [
    {{"label": "词汇", "value": <number>}},
    {{"label": "语法", "value": <number>}},
    {{"label": "逻辑", "value": <number>}},
    {{"label": "连贯性", "value": <number>}}
  ],
  "annotations": [
    {{
      "id": "ann-1",
      "type": "grammar|vocabulary|logic",
      "originalText": "<exact text from essay>",
      "suggestion": "<improved text>",
      "reason": "<explanation in Chinese>"
    }}
  ]
}}'''


def build_correction_prompt(essay: str, min_issues: int = 3, max_issues: int = 5) -> str:
    return CORRECTION_PROMPT_TEMPLATE.format(
        essay=essay,
        min_issues=min_issues,
        max_issues=max_issues,
    )
