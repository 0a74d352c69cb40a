import asyncio
import logging
import os
from typing import List, Optional, Sequence

from llm.providers.base import LLMProvider
from reminder_ai.files import LARGE_FILE_BYTES, file_size, to_data_uri
from reminder_ai.models import ImageUrl, ImageUrlPart, Message, Preferences, TextPart

logger = logging.getLogger(__name__)


def _default_provider(prefs: Preferences) -> LLMProvider:
    name = os.getenv("LLM_PROVIDER", "jan").strip().lower()
    if name == "mock":
        from llm.providers.mock_provider import MockProvider

        return MockProvider()
    from llm.providers.jan_provider import JanProvider

    return JanProvider.from_preferences(prefs)


class LLMClient:
    """One request/response cycle against the configured chat endpoint.

    No retries happen here; callers decide whether a failure is worth another
    attempt.
    """

    def __init__(
        self,
        provider: Optional[LLMProvider] = None,
        preferences: Optional[Preferences] = None,
    ):
        self.preferences = preferences or Preferences()
        self.provider = provider or _default_provider(self.preferences)

    @property
    def model(self) -> str:
        return self.preferences.default_model

    async def complete(
        self,
        messages: Sequence[Message],
        *,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> str:
        """Text-only call. Returns the first choice's text."""
        return await self.provider.generate(
            messages=list(messages),
            model=model or self.model,
            temperature=self.preferences.temperature if temperature is None else temperature,
            max_tokens=max_tokens or self.preferences.max_tokens,
        )

    async def complete_with_document(
        self,
        path: str,
        user_prompt: str,
        system_prompt: Optional[str] = None,
        *,
        model: Optional[str] = None,
    ) -> str:
        """Attach a document to a single user turn as a base64 data URI."""
        logger.info(f"Processing document: {path}")

        size = await asyncio.to_thread(file_size, path)
        if size > LARGE_FILE_BYTES:
            logger.warning(f"Large document detected: {size / 1024 / 1024:.2f}MB")

        data_uri = await asyncio.to_thread(to_data_uri, path)

        messages: List[Message] = []
        if system_prompt:
            messages.append(Message.system(system_prompt))
        messages.append(
            Message(
                role="user",
                content=[
                    TextPart(text=user_prompt),
                    ImageUrlPart(image_url=ImageUrl(url=data_uri)),
                ],
            )
        )

        logger.info("Sending document to model endpoint...")
        text = await self.complete(messages, model=model)
        logger.info("Document request succeeded")
        return text

    async def list_models(self) -> List[str]:
        return await self.provider.list_models()
