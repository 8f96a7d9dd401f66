import json

import httpx
import pytest

from ai_orch.common.errors import RateLimitedError, RequestFailedError
from ai_orch.common.models import Message
from ai_orch.providers.google import GoogleAdapter

API_BASE = "https://generativelanguage.googleapis.com/v1beta"

MESSAGES = [
    Message(role="system", content="You are an expert programmer."),
    Message(role="user", content="Hi"),
    Message(role="assistant", content="Hello"),
    Message(role="user", content="Explain asyncio"),
]


def _adapter(handler, requests=None, generation=None):
    def _record(request):
        if requests is not None:
            requests.append(request)
        return handler(request)

    return GoogleAdapter(
        api_key="AIzaSyTestKey",
        api_base=API_BASE,
        generation=generation if generation is not None else {"temperature": 0.2, "max_output_tokens": 1024},
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(_record)),
    )


def _candidate(*parts, finish_reason="STOP"):
    return {
        "candidates": [
            {"content": {"role": "model", "parts": list(parts)}, "finishReason": finish_reason}
        ]
    }


@pytest.mark.asyncio
async def test_returns_text_and_sends_expected_request():
    requests = []
    adapter = _adapter(lambda r: httpx.Response(200, json=_candidate({"text": "Event loop."})), requests)

    assert await adapter.ask(MESSAGES, "gemini-2.5-flash") == "Event loop."

    assert len(requests) == 1
    request = requests[0]
    assert str(request.url) == f"{API_BASE}/models/gemini-2.5-flash:generateContent"
    assert request.headers["x-goog-api-key"] == "AIzaSyTestKey"
    assert "key=" not in str(request.url)

    body = json.loads(request.content)
    assert body["systemInstruction"] == {"parts": [{"text": "You are an expert programmer."}]}
    assert [c["role"] for c in body["contents"]] == ["user", "model", "user"]
    assert body["generationConfig"] == {"temperature": 0.2, "maxOutputTokens": 1024}


@pytest.mark.asyncio
async def test_no_generation_config_when_empty():
    requests = []
    adapter = _adapter(lambda r: httpx.Response(200, json=_candidate({"text": "ok"})), requests, generation={})

    await adapter.ask(MESSAGES[1:2], "gemini-2.5-flash")

    body = json.loads(requests[0].content)
    assert "generationConfig" not in body
    assert "systemInstruction" not in body


@pytest.mark.asyncio
async def test_joins_parts_and_skips_thoughts():
    body = _candidate({"text": "thinking...", "thought": True}, {"text": "Part 1. "}, {"text": "Part 2."})
    adapter = _adapter(lambda r: httpx.Response(200, json=body))

    assert await adapter.ask(MESSAGES, "m") == "Part 1. Part 2."


@pytest.mark.asyncio
async def test_resource_exhausted_is_rate_limited():
    body = {"error": {"code": 429, "message": "Quota exceeded", "status": "RESOURCE_EXHAUSTED"}}
    adapter = _adapter(lambda r: httpx.Response(429, json=body))

    with pytest.raises(RateLimitedError) as exc_info:
        await adapter.ask(MESSAGES, "m")
    assert "Quota exceeded" in str(exc_info.value)


@pytest.mark.asyncio
async def test_resource_exhausted_status_without_429():
    body = {"error": {"message": "Quota", "status": "RESOURCE_EXHAUSTED"}}
    adapter = _adapter(lambda r: httpx.Response(403, json=body))

    with pytest.raises(RateLimitedError):
        await adapter.ask(MESSAGES, "m")


@pytest.mark.asyncio
async def test_bad_request_is_request_failed():
    body = {"error": {"code": 400, "message": "API key not valid", "status": "INVALID_ARGUMENT"}}
    adapter = _adapter(lambda r: httpx.Response(400, json=body))

    with pytest.raises(RequestFailedError) as exc_info:
        await adapter.ask(MESSAGES, "m")
    assert "API key not valid" in str(exc_info.value)


@pytest.mark.asyncio
async def test_blocked_prompt():
    body = {"promptFeedback": {"blockReason": "SAFETY"}}
    adapter = _adapter(lambda r: httpx.Response(200, json=body))

    with pytest.raises(RequestFailedError) as exc_info:
        await adapter.ask(MESSAGES, "m")
    assert "SAFETY" in str(exc_info.value)


@pytest.mark.asyncio
async def test_no_candidates():
    adapter = _adapter(lambda r: httpx.Response(200, json={"candidates": []}))

    with pytest.raises(RequestFailedError):
        await adapter.ask(MESSAGES, "m")


@pytest.mark.asyncio
async def test_candidate_without_text():
    adapter = _adapter(lambda r: httpx.Response(200, json=_candidate(finish_reason="MAX_TOKENS")))

    with pytest.raises(RequestFailedError) as exc_info:
        await adapter.ask(MESSAGES, "m")
    assert "MAX_TOKENS" in str(exc_info.value)


@pytest.mark.asyncio
async def test_network_error_is_request_failed():
    def _fail(request):
        raise httpx.ConnectError("unreachable", request=request)

    with pytest.raises(RequestFailedError):
        await _adapter(_fail).ask(MESSAGES, "m")
