"""
LLM-as-a-Judge Modul für die Rubrik-Bewertung von Lebensläufen.

Unterstützt:
- Rubrik-Prompt mit Strict JSON Output
- Schema-Validierung der Antwort (fail closed)
- Score-Normalisierung auf [1, 10]
"""

from resume_judge.services.judges.llm_judge import LLMJudge, resolve_credential
from resume_judge.services.judges.parsing import normalize_score, parse_judge_response

__all__ = ["LLMJudge", "normalize_score", "parse_judge_response", "resolve_credential"]
