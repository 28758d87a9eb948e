"""
LLM-as-a-Judge für die Rubrik-Bewertung von Lebensläufen.

Ein Aufruf pro Dokument, kein Retry: transiente Provider-Fehler werden als
JudgeUnavailable an den Orchestrator gereicht, der über Retries entscheidet.
"""

import logging
from typing import Sequence

from resume_judge.core.errors import MissingCredential
from resume_judge.llm.llm_client import LLMClient
from resume_judge.models.pydantic import Criterion, JudgeResponse
from resume_judge.services.judges.parsing import parse_judge_response
from resume_judge.services.judges.prompts import build_rubric_prompt

logger = logging.getLogger(__name__)


def resolve_credential(explicit: str | None, default: str | None) -> str:
    """Expliziter Key hat Vorrang vor dem konfigurierten Default."""
    credential = explicit or default
    if not credential:
        raise MissingCredential()
    return credential


class LLMJudge:
    """
    Bewertet einen Lebenslauf-Text gegen eine Rubrik.
    """

    def __init__(
        self,
        llm_client: LLMClient,
        default_model: str = "gpt-4.1-mini",
        default_credential: str | None = None,
        default_temperature: float = 0.0,
    ):
        self.llm = llm_client
        self.default_model = default_model
        self.default_credential = default_credential
        self.default_temperature = default_temperature

    async def judge(
        self,
        resume_text: str,
        criteria: Sequence[Criterion],
        credential: str | None = None,
        *,
        model: str | None = None,
    ) -> JudgeResponse:
        """
        Führt die Bewertung durch.

        Args:
            resume_text: Extrahierter Text (darf leer sein)
            criteria: Rubrik
            credential: Expliziter API-Key (default: self.default_credential)
            model: LLM-Modell (default: self.default_model)

        Returns:
            JudgeResponse mit normalisierten Scores und Notes

        Raises:
            MissingCredential: weder expliziter noch Default-Key (vor jedem Netzwerk-Call)
            JudgeUnavailable: Provider-/Netzwerkfehler
            MalformedJudgeResponse: Antwort ist kein gültiges JSON oder passt nicht zum Schema
        """
        api_key = resolve_credential(credential, self.default_credential)
        model = model or self.default_model

        prompt = build_rubric_prompt(resume_text, criteria)
        logger.debug("Judge prompt: %d chars, %d criteria, model=%s", len(prompt), len(criteria), model)

        raw_text = await self.llm.complete(
            prompt,
            api_key=api_key,
            model=model,
            temperature=self.default_temperature,
        )
        return parse_judge_response(raw_text)
