"""
Striktes Parsing von LLM-Judge-Outputs.

Features:
- Strict JSON parsing (ein umschließender Markdown-Codeblock wird entfernt)
- Minimales Schema via pydantic, strukturell falsche Payloads schlagen fehl
- Normalisierung der Scores auf [1, 10]
"""

import json
import re
from typing import Annotated, Any, List, Optional

from pydantic import AllowInfNan, BaseModel, ConfigDict, Field, Strict, ValidationError, field_validator

from resume_judge.core.errors import MalformedJudgeResponse
from resume_judge.models.pydantic import JudgeResponse, ScoreEntry
from resume_judge.services.judges.prompts import INSUFFICIENT_EVIDENCE, MAX_SCORE, MIN_SCORE

_CODE_FENCE = re.compile(r"^```(?:json)?\s*\n(?P<body>.*)\n\s*```$", re.DOTALL | re.IGNORECASE)


class _ScorePayload(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    # nur echte JSON-Zahlen, keine Strings oder Booleans
    score: Optional[Annotated[float, Strict(), AllowInfNan(False)]] = None
    evidence: List[str] = Field(default_factory=list)

    @field_validator("evidence", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class _JudgePayload(BaseModel):
    scores: List[_ScorePayload] = Field(default_factory=list)
    notes: List[str] = Field(default_factory=list)

    @field_validator("scores", "notes", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


def _unwrap_code_fence(text: str) -> str:
    match = _CODE_FENCE.match(text)
    return match.group("body") if match else text


def load_judge_json(raw_text: str) -> Any:
    """
    Parst die Rohantwort als JSON.

    Raises:
        MalformedJudgeResponse: leer oder kein gültiges JSON
    """
    text = (raw_text or "").strip()
    if not text:
        raise MalformedJudgeResponse("LLM did not return any text", raw_text=raw_text)
    try:
        return json.loads(_unwrap_code_fence(text))
    except json.JSONDecodeError as exc:
        raise MalformedJudgeResponse(
            f"Judge response is not valid JSON: {exc.msg}",
            raw_text=raw_text,
        ) from exc


def normalize_score(score: float | None) -> tuple[float, bool]:
    """
    Klemmt den Score auf [MIN_SCORE, MAX_SCORE].

    Returns:
        (score, changed): changed=True, wenn geklemmt oder fehlend
    """
    if score is None:
        return MIN_SCORE, True
    if score < MIN_SCORE:
        return MIN_SCORE, True
    if score > MAX_SCORE:
        return MAX_SCORE, True
    return float(score), False


def parse_judge_response(raw_text: str) -> JudgeResponse:
    """
    Validiert und normalisiert die Antwort des Judges.

    - fehlende scores/notes -> leere Liste
    - fehlender Score -> MIN_SCORE + "insufficient evidence"
    - Score außerhalb [1, 10] -> geklemmt, Hinweis in notes
    - IDs außerhalb der Rubrik bleiben erhalten

    Raises:
        MalformedJudgeResponse: kein JSON oder Struktur passt nicht zum Schema
    """
    data = load_judge_json(raw_text)
    if not isinstance(data, dict):
        raise MalformedJudgeResponse(
            f"Judge response must be a JSON object, got {type(data).__name__}",
            raw_text=raw_text,
        )

    try:
        payload = _JudgePayload.model_validate(data)
    except ValidationError as exc:
        raise MalformedJudgeResponse(
            f"Judge response does not match schema: {exc.error_count()} error(s), "
            f"first: {exc.errors()[0]['msg']}",
            raw_text=raw_text,
        ) from exc

    notes = list(payload.notes)
    scores: list[ScoreEntry] = []
    for item in payload.scores:
        score, changed = normalize_score(item.score)
        evidence = list(item.evidence)
        if item.score is None:
            if INSUFFICIENT_EVIDENCE not in evidence:
                evidence.append(INSUFFICIENT_EVIDENCE)
        elif changed:
            notes.append(f"score for '{item.id}' clamped from {item.score:g} to {score:g}")
        scores.append(ScoreEntry(criterion_id=item.id, score=score, evidence=evidence))

    return JudgeResponse(scores=scores, notes=notes)
