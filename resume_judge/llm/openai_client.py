import logging
from typing import Any

import openai
from openai import AsyncOpenAI

from resume_judge.core.errors import JudgeUnavailable
from resume_judge.llm.llm_client import LLMClient

logger = logging.getLogger(__name__)


class OpenAIClient(LLMClient):
    def __init__(self, timeout: float = 60.0, max_tokens: int = 2000):
        self.timeout = timeout
        self.max_tokens = max_tokens

    async def complete(self, prompt: str, *, api_key: str, model: str, **kwargs: Any) -> str:
        # Ein Client pro Call, da der Key pro Request wechseln kann.
        # max_retries=0: Retry-Politik liegt beim Orchestrator.
        async with AsyncOpenAI(api_key=api_key, timeout=self.timeout, max_retries=0) as client:
            try:
                response = await client.chat.completions.create(
                    model=model,
                    messages=[{"role": "user", "content": prompt}],
                    temperature=kwargs.get("temperature", 0.0),
                    max_tokens=kwargs.get("max_tokens", self.max_tokens),
                    response_format={"type": "json_object"},
                )
            except (openai.APITimeoutError, openai.APIConnectionError) as exc:
                raise JudgeUnavailable(f"LLM provider unreachable: {exc}", transient=True) from exc
            except openai.RateLimitError as exc:
                raise JudgeUnavailable(f"LLM provider rate limit: {exc}", transient=True) from exc
            except openai.APIStatusError as exc:
                transient = exc.status_code >= 500
                logger.warning("LLM provider returned status %s", exc.status_code)
                raise JudgeUnavailable(
                    f"LLM provider error {exc.status_code}: {exc.message}",
                    transient=transient,
                ) from exc

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""
