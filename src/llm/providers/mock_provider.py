from __future__ import annotations
import json
from datetime import date, timedelta
from typing import List, Sequence

from reminder_ai.models import Message
from llm.providers.base import LLMProvider


class MockProvider(LLMProvider):
    async def generate(
        self,
        *,
        messages: Sequence[Message],
        model: str = "mock",
        temperature: float = 0.0,
        max_tokens: int = 0,
    ) -> str:
        """
        Returns dummy responses based on the prompt content.
        """
        last = messages[-1] if messages else None
        tomorrow = (date.today() + timedelta(days=1)).isoformat()

        # Document-attached request
        if last is not None and not isinstance(last.content, str):
            return json.dumps([
                {
                    "title": "Invoice #100 - Example Customer",
                    "dueDate": tomorrow,
                    "amount": -250.0,
                    "notes": "Payable - Example Customer",
                }
            ])

        user_text = last.content if last is not None else ""

        if "Extract tasks" in user_text or "Extract the invoice" in user_text:
            return "```json\n" + json.dumps([
                {"title": "Call dentist", "dueDate": tomorrow},
            ]) + "\n```"

        # Quick actions and free-form prompts: echo the input back
        return user_text.split("\n\n", 1)[-1]

    async def list_models(self) -> List[str]:
        return ["mock"]
