"""
Prompt-Template für die Rubrik-Bewertung eines Lebenslaufs.

Der Prompt erzwingt striktes JSON-Output mit festem Schema.
"""

import json
from typing import Sequence

from resume_judge.models.pydantic import Criterion

INSUFFICIENT_EVIDENCE = "insufficient evidence"
MIN_SCORE = 1.0
MAX_SCORE = 10.0


def build_rubric_prompt(resume_text: str, criteria: Sequence[Criterion]) -> str:
    """
    Baut Prompt für die Bewertung eines Lebenslaufs gegen die Rubrik.

    Input: Lebenslauf-Text + komplette Rubrik (id, name, description, weight)
    Output: JSON mit scores (1-10 pro Kriterium, evidence) und notes
    """
    rubric_json = json.dumps(
        [c.model_dump() for c in criteria],
        ensure_ascii=False,
    )

    header = f"""
You are an experienced technical recruiter scoring a candidate's resume against a weighted rubric.

For EVERY criterion listed under CRITERIA below:
- assign an integer score from {int(MIN_SCORE)} (no fit) to {int(MAX_SCORE)} (excellent fit)
- quote short passages from the resume as evidence
- if the resume contains no supporting evidence, the score MUST be {int(MIN_SCORE)} and evidence MUST contain "{INSUFFICIENT_EVIDENCE}"

Return ONLY a valid JSON object with exactly this shape:

{{
  "scores": [
    {{"id": "<criterion id>", "score": 7, "evidence": ["short quote from the resume"]}}
  ],
  "notes": ["short overall remark"]
}}

Rules:
- Use the criterion ids exactly as given.
- Do not add any text outside the JSON. No comments, no markdown, no prose.

CRITERIA:
{rubric_json}

RESUME:
"""

    # Lebenslauf-Text unverändert anhängen, auch wenn er leer ist
    return header.lstrip() + resume_text
