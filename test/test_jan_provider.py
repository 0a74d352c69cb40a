import json

import httpx
import pytest

from llm.errors import LLMAPIError, LLMConnectionError, LLMEmptyResponseError, LLMError
from llm.providers.jan_provider import JanProvider
from reminder_ai.models import Message

API_URL = "http://localhost:1337/v1/chat/completions"


def _provider(handler) -> JanProvider:
    return JanProvider(
        API_URL,
        api_key="secret",
        models_url="http://localhost:1337/v1/models",
        transport=httpx.MockTransport(handler),
    )


def _completion(content=None, reasoning=None, finish_reason="stop") -> dict:
    return {
        "choices": [
            {
                "message": {"role": "assistant", "content": content, "reasoning_content": reasoning},
                "finish_reason": finish_reason,
            }
        ],
        "usage": {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15},
    }


async def _generate(provider: JanProvider) -> str:
    return await provider.generate(
        messages=[Message.user("hi")], model="m1", temperature=0.1, max_tokens=50
    )


async def test_request_shape_and_content():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=_completion(content="hello"))

    assert await _generate(_provider(handler)) == "hello"
    assert seen["auth"] == "Bearer secret"
    assert seen["body"] == {
        "messages": [{"role": "user", "content": "hi"}],
        "temperature": 0.1,
        "max_tokens": 50,
        "model": "m1",
        "stream": False,
    }


async def test_reasoning_content_used_when_content_blank():
    def handler(request):
        return httpx.Response(200, json=_completion(content="  ", reasoning='[{"title":"A"}]'))

    assert await _generate(_provider(handler)) == '[{"title":"A"}]'


async def test_truncated_response_still_returned(caplog):
    def handler(request):
        return httpx.Response(200, json=_completion(content="partial", finish_reason="length"))

    assert await _generate(_provider(handler)) == "partial"
    assert "truncated" in caplog.text


async def test_http_error_carries_status_and_body():
    def handler(request):
        return httpx.Response(500, text="boom")

    with pytest.raises(LLMAPIError) as exc:
        await _generate(_provider(handler))
    assert exc.value.status_code == 500
    assert "Jan.ai API error: 500" in str(exc.value)
    assert "boom" in str(exc.value)


async def test_connect_error_maps_to_connection_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(LLMConnectionError, match="ensure Jan.ai is running"):
        await _generate(_provider(handler))


async def test_empty_and_invalid_responses():
    def no_choices(request):
        return httpx.Response(200, json={"choices": []})

    def empty(request):
        return httpx.Response(200, json=_completion(content=""))

    def not_json(request):
        return httpx.Response(200, text="<html>")

    with pytest.raises(LLMEmptyResponseError):
        await _generate(_provider(no_choices))
    with pytest.raises(LLMEmptyResponseError):
        await _generate(_provider(empty))
    with pytest.raises(LLMError, match="Invalid JSON"):
        await _generate(_provider(not_json))


async def test_list_models():
    def handler(request):
        assert request.url.path == "/v1/models"
        return httpx.Response(200, json={"data": [{"id": "llama"}, {"id": "qwen"}]})

    assert await _provider(handler).list_models() == ["llama", "qwen"]


async def test_list_models_unreachable_is_empty():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    assert await _provider(handler).list_models() == []
