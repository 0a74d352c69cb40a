from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List, Sequence

from reminder_ai.models import Message


class LLMProvider(ABC):
    @abstractmethod
    async def generate(
        self,
        *,
        messages: Sequence[Message],
        model: str,
        temperature: float,
        max_tokens: int,
    ) -> str:
        """
        Must return the model output as TEXT (the extraction layer parses/validates JSON).
        """
        raise NotImplementedError

    async def list_models(self) -> List[str]:
        return []
