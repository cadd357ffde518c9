"""
Unit tests for the OpenAI-compatible completion client, using an httpx mock transport instead of the network.
"""

import json

import httpx
import pytest

from portfolio_assistant.chat_service.types.knowledge import PromptMessage
from portfolio_assistant.chat_service.errors import CompletionRequestError
from portfolio_assistant.chat_service.prompting.system_prompts.portfolio_prompts import FALLBACK_ANSWER
from portfolio_assistant.common.services.llm_service.llm_client import ChatCompletionClient, CompletionProvider
from portfolio_assistant.common.services.llm_service.llm_client.openai_compatible_client import AsyncOpenAICompatibleClient
from portfolio_assistant.common.services.llm_service.llm_client.protocols import ProvidesProviderInfo

MESSAGES = [
    PromptMessage(role="system", content="You are a portfolio assistant."),
    PromptMessage(role="user", content="User question:\nWhat is Moodly?"),
]


def _completion_body(content):
    return {
        "id": "chatcmpl-1",
        "object": "chat.completion",
        "created": 1700000000,
        "model": "llama-3.1-8b-instant",
        "choices": [
            {"index": 0, "finish_reason": "stop", "message": {"role": "assistant", "content": content}},
        ],
    }


def _client(handler) -> AsyncOpenAICompatibleClient:
    return AsyncOpenAICompatibleClient(
        api_key="test-key",
        base_url="https://completion.test/v1",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


@pytest.mark.asyncio
async def test_sends_prompt_with_budget_and_bearer_key():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["auth"] = request.headers.get("authorization")
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, json=_completion_body("Moodly is a journal app."))

    answer = await _client(handler).acomplete(MESSAGES, temperature=0.3, max_tokens=120)

    assert answer == "Moodly is a journal app."
    assert captured["url"] == "https://completion.test/v1/chat/completions"
    assert captured["auth"] == "Bearer test-key"
    assert captured["body"]["model"] == "llama-3.1-8b-instant"
    assert captured["body"]["temperature"] == 0.3
    assert captured["body"]["max_tokens"] == 120
    assert captured["body"]["messages"] == [m.model_dump() for m in MESSAGES]


@pytest.mark.asyncio
async def test_non_success_status_carries_raw_body_and_is_not_retried():
    calls = []
    raw_body = '{"error": {"message": "Invalid API Key", "type": "invalid_request_error"}}'

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(401, text=raw_body, headers={"content-type": "application/json"})

    with pytest.raises(CompletionRequestError) as exc_info:
        await _client(handler).acomplete(MESSAGES, temperature=0.3, max_tokens=120)

    assert exc_info.value.message == "Completion request failed"
    assert exc_info.value.details == raw_body
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_server_error_is_not_retried():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(503, text="upstream overloaded")

    with pytest.raises(CompletionRequestError) as exc_info:
        await _client(handler).acomplete(MESSAGES, temperature=0.3, max_tokens=120)

    assert exc_info.value.details == "upstream overloaded"
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_transport_failure_becomes_completion_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(CompletionRequestError):
        await _client(handler).acomplete(MESSAGES, temperature=0.3, max_tokens=120)


@pytest.mark.asyncio
@pytest.mark.parametrize("content", [None, "", "   "])
async def test_empty_answer_falls_back(content):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=_completion_body(content))

    answer = await _client(handler).acomplete(MESSAGES, temperature=0.3, max_tokens=120)

    assert answer == FALLBACK_ANSWER


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {"choices": []},
        {"choices": "x"},
        {"choices": 3},
        {"choices": [None]},
        {"choices": [{}]},
        {"choices": [{"message": {}}]},
        {"choices": [{"message": {"content": 42}}]},
        {},
    ],
)
async def test_malformed_choices_fall_back(body):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=body)

    answer = await _client(handler).acomplete(MESSAGES, temperature=0.3, max_tokens=120)

    assert answer == FALLBACK_ANSWER


@pytest.mark.asyncio
async def test_timeout_becomes_completion_error_without_retry():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        raise httpx.ReadTimeout("read timed out", request=request)

    with pytest.raises(CompletionRequestError) as exc_info:
        await _client(handler).acomplete(MESSAGES, temperature=0.3, max_tokens=120)

    assert exc_info.value.message == "Completion request failed"
    assert len(calls) == 1


def test_calls_are_bounded_by_default_timeout():
    client = AsyncOpenAICompatibleClient(api_key="test-key")

    assert client.client.timeout == 20.0
    assert client.client.max_retries == 0


def test_client_exposes_provider_info():
    client = AsyncOpenAICompatibleClient(api_key="test-key", model_name="llama-3.3-70b-versatile")

    assert isinstance(client, ProvidesProviderInfo)
    assert client.provider is CompletionProvider.GROQ
    assert client.model == "llama-3.3-70b-versatile"


@pytest.mark.asyncio
async def test_dispatcher_forwards_to_provider_client():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=_completion_body("ParkIQ finds parking spots."))

    client = ChatCompletionClient(provider=CompletionProvider.GROQ, client=_client(handler))

    assert await client.acomplete(MESSAGES, temperature=0.3, max_tokens=300) == "ParkIQ finds parking spots."
