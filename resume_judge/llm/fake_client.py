import json
from typing import Any

from resume_judge.llm.llm_client import LLMClient


class FakeLLMClient(LLMClient):
    """
    Deterministischer Client für TEST_MODE=1.
    Liest die Kriterien-IDs aus dem Prompt und vergibt überall den Minimalwert.
    """

    def __init__(self):
        self.prompts: list[str] = []

    async def complete(self, prompt: str, *, api_key: str, model: str, **kwargs: Any) -> str:
        self.prompts.append(prompt)
        return json.dumps(
            {
                "scores": [
                    {"id": criterion_id, "score": 1, "evidence": ["insufficient evidence"]}
                    for criterion_id in _criterion_ids(prompt)
                ],
                "notes": ["fake judge"],
            }
        )


def _criterion_ids(prompt: str) -> list[str]:
    start = prompt.find("CRITERIA:\n")
    end = prompt.find("\n\nRESUME:\n", start)
    if start == -1 or end == -1:
        return []
    try:
        criteria = json.loads(prompt[start + len("CRITERIA:"):end])
    except json.JSONDecodeError:
        return []
    return [str(c.get("id")) for c in criteria if isinstance(c, dict)]
