from __future__ import annotations

import json

import httpx
import pytest

from pr_summarizer.llm.client import ChatMessage
from pr_summarizer.llm.client import OpenAICompatLLMClient


def _completion(choices: list[dict[str, object]]) -> dict[str, object]:
    return {"id": "chatcmpl-1", "object": "chat.completion", "created": 0, "model": "m", "choices": choices}


def _client(handler) -> OpenAICompatLLMClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return OpenAICompatLLMClient(api_key="k", base_url="https://llm.test", http_client=http_client, model="m")


MESSAGES = [ChatMessage(role="system", content="sys"), ChatMessage(role="user", content="usr")]


@pytest.mark.anyio
async def test_complete_text_sends_sampling_params() -> None:
    seen: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["json"] = json.loads(request.content)
        message = {"role": "assistant", "content": "SUMMARY:\n* ok"}
        return httpx.Response(200, json=_completion([{"index": 0, "message": message, "finish_reason": "stop"}]))

    text = await _client(handler).complete_text(messages=MESSAGES, max_tokens=100, temperature=0.5)

    assert text == "SUMMARY:\n* ok"
    assert seen["path"] == "/v1/chat/completions"
    body = seen["json"]
    assert body["model"] == "m"
    assert body["max_tokens"] == 100
    assert body["temperature"] == 0.5
    assert body["messages"] == [{"role": "system", "content": "sys"}, {"role": "user", "content": "usr"}]


@pytest.mark.anyio
async def test_complete_text_no_choices_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=_completion([]))

    with pytest.raises(RuntimeError):
        await _client(handler).complete_text(messages=MESSAGES)


@pytest.mark.anyio
async def test_complete_text_none_content_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        message = {"role": "assistant", "content": None}
        return httpx.Response(200, json=_completion([{"index": 0, "message": message, "finish_reason": "stop"}]))

    with pytest.raises(RuntimeError):
        await _client(handler).complete_text(messages=MESSAGES)


@pytest.mark.anyio
async def test_complete_text_does_not_retry_server_errors() -> None:
    calls: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(1)
        return httpx.Response(500, json={"error": {"message": "boom"}})

    with pytest.raises(Exception):
        await _client(handler).complete_text(messages=MESSAGES)

    assert len(calls) == 1
