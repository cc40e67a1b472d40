from __future__ import annotations

import json

import httpx
import pytest

from core import FALLBACK_TIER, PRIMARY_TIER
from feed.endpoint_client import ResponsesEndpointClient, extract_output_text
from utils.exceptions import ConfigurationError, EndpointError


def _client(handler, *, api_key: str = "sk-test") -> ResponsesEndpointClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ResponsesEndpointClient(
        api_key=api_key,
        model="gpt-4o",
        base_url="https://api.example.com/v1/",
        http_client=http_client,
    )


def test_extract_output_text_prefers_flattened_field() -> None:
    envelope = {
        "output_text": '{"topic": "x"}',
        "output": [{"content": [{"type": "output_text", "text": "ignored"}]}],
    }
    assert extract_output_text(envelope) == '{"topic": "x"}'


def test_extract_output_text_concatenates_nested_text_in_order() -> None:
    envelope = {
        "output_text": "   ",
        "output": [
            {"type": "web_search_call", "status": "completed"},
            {
                "type": "message",
                "content": [
                    {"type": "output_text", "text": '{"topic": '},
                    {"type": "refusal", "refusal": "nope"},
                    {"type": "output_text", "text": '"x"}'},
                ],
            },
        ],
    }
    assert extract_output_text(envelope) == '{"topic": "x"}'


def test_extract_output_text_returns_none_when_empty() -> None:
    assert extract_output_text({}) is None
    assert extract_output_text({"output": [{"content": [{"type": "output_text", "text": ""}]}]}) is None
    assert extract_output_text(["not", "a", "dict"]) is None


@pytest.mark.asyncio
async def test_request_posts_schema_constrained_payload() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("Authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"output_text": '{"topic": "robots"}'})

    client = _client(handler)
    text = await client.request("robots", PRIMARY_TIER.counts, PRIMARY_TIER.max_output_tokens)

    assert text == '{"topic": "robots"}'
    assert seen["url"] == "https://api.example.com/v1/responses"
    assert seen["auth"] == "Bearer sk-test"

    body = seen["body"]
    assert body["model"] == "gpt-4o"
    assert body["temperature"] == 0.2
    assert body["max_output_tokens"] == 4000
    assert body["tools"] == [{"type": "web_search", "search_context_size": "high"}]
    assert [msg["role"] for msg in body["input"]] == ["system", "user"]
    assert '"robots"' in body["input"][1]["content"]
    assert body["text"]["format"]["type"] == "json_schema"
    assert body["text"]["format"]["strict"] is True
    assert body["text"]["format"]["name"] == "news_feed"


@pytest.mark.asyncio
async def test_request_non_success_status_carries_code_and_body() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, text='{"error": "Invalid schema for response_format"}')

    client = _client(handler)
    with pytest.raises(EndpointError) as exc_info:
        await client.request("robots", FALLBACK_TIER.counts, FALLBACK_TIER.max_output_tokens)

    assert exc_info.value.status_code == 400
    assert "Invalid schema" in exc_info.value.body


@pytest.mark.asyncio
async def test_request_empty_output_raises_endpoint_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"output": [{"type": "message", "content": []}]})

    client = _client(handler)
    with pytest.raises(EndpointError, match="empty output"):
        await client.request("robots", PRIMARY_TIER.counts, 4000)


@pytest.mark.asyncio
async def test_request_transport_error_becomes_endpoint_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler)
    with pytest.raises(EndpointError) as exc_info:
        await client.request("robots", PRIMARY_TIER.counts, 4000)

    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
async def test_missing_api_key_fails_before_network() -> None:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={"output_text": "{}"})

    client = _client(handler, api_key="")
    with pytest.raises(ConfigurationError):
        await client.request("robots", PRIMARY_TIER.counts, 4000)
    assert calls == []
