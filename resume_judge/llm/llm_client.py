from abc import ABC, abstractmethod
from typing import Any


class LLMClient(ABC):
    @abstractmethod
    async def complete(self, prompt: str, *, api_key: str, model: str, **kwargs: Any) -> str:
        """Sendet Prompt an ein LLM und gibt nur den Text-Output zurück."""
        raise NotImplementedError
