from __future__ import annotations
import logging
import os
from typing import List, Optional, Sequence

import httpx
from pydantic import ValidationError

from llm.errors import LLMAPIError, LLMConnectionError, LLMEmptyResponseError, LLMError
from llm.schemas import ChatCompletionResponse, ModelList
from reminder_ai.models import Message, Preferences
from .base import LLMProvider

logger = logging.getLogger(__name__)

LLM_TIMEOUT_S = float(os.getenv("LLM_TIMEOUT_S", "120"))


class JanProvider(LLMProvider):
    """OpenAI-compatible chat-completions endpoint (Jan.ai, llama.cpp server...)."""

    def __init__(
        self,
        api_url: str,
        api_key: str = "",
        models_url: Optional[str] = None,
        timeout_s: float = LLM_TIMEOUT_S,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_url = api_url
        self.api_key = api_key
        self.models_url = models_url
        self.timeout_s = timeout_s
        self._transport = transport

    @classmethod
    def from_preferences(cls, prefs: Preferences, **kwargs) -> "JanProvider":
        return cls(prefs.api_url, prefs.api_key, models_url=prefs.models_url, **kwargs)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout_s, transport=self._transport)

    async def generate(
        self,
        *,
        messages: Sequence[Message],
        model: str,
        temperature: float,
        max_tokens: int,
    ) -> str:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "messages": [m.model_dump() for m in messages],
            "temperature": temperature,
            "max_tokens": max_tokens,
            "model": model,
            "stream": False,
        }

        try:
            async with self._client() as client:
                r = await client.post(self.api_url, headers=headers, json=payload)
        except (httpx.ConnectError, httpx.ConnectTimeout) as e:
            logger.error(f"Cannot reach model endpoint {self.api_url}: {e}")
            raise LLMConnectionError() from e
        except httpx.TransportError as e:
            raise LLMError(f"Request to Jan.ai failed: {e}") from e

        if r.is_error:
            raise LLMAPIError(r.status_code, r.reason_phrase, r.text)

        try:
            data = ChatCompletionResponse.model_validate(r.json())
        except (ValueError, ValidationError) as e:
            raise LLMError("Invalid JSON response from Jan.ai API") from e

        if not data.choices:
            raise LLMEmptyResponseError("No response from Jan.ai")

        choice = data.choices[0]
        logger.debug(f"Finish reason: {choice.finish_reason}")
        if choice.finish_reason == "length":
            logger.warning("Response truncated (finish_reason=length)")

        text = choice.message.effective_text()
        if not text.strip():
            raise LLMEmptyResponseError()

        if data.usage is not None:
            logger.debug(
                f"Token usage: prompt={data.usage.prompt_tokens} completion={data.usage.completion_tokens}"
            )
        return text

    async def list_models(self) -> List[str]:
        if not self.models_url:
            return []
        try:
            async with self._client() as client:
                r = await client.get(
                    self.models_url, headers={"Authorization": f"Bearer {self.api_key}"}
                )
            if r.is_error:
                return []
            return [m.id for m in ModelList.model_validate(r.json()).data]
        except (httpx.HTTPError, ValueError, ValidationError) as e:
            logger.warning(f"Model listing unavailable: {e}")
            return []
