"""Tests for the generation client and phrase parsing."""

import httpx
import pytest

from phrase_studio.core.errors import (
    GenerationNotConfiguredError,
    MalformedGenerationError,
    UpstreamError,
)
from phrase_studio.services.generation import (
    GenerationClient,
    GenerationConfig,
    parse_phrases,
    requested_phrase_count,
)
from tests.conftest import SAMPLE_COMPLETION, FakeProvider


def _config(api_key: str | None = "test-key") -> GenerationConfig:
    return GenerationConfig(
        api_key=api_key,
        base_url="https://provider.test",
        model="claude-3-haiku-20240307",
        max_tokens=1000,
        api_version="2023-06-01",
        timeout_seconds=5.0,
    )


@pytest.mark.parametrize(
    ("prompt", "expected"),
    [
        ("Generate 5 completely independent thumbnail phrases.", 5),
        ("generate 2 COMPLETELY independent phrases", 2),
        ("- Number of phrases to generate: 4 phrases", 4),
        ("Write something catchy", 3),
        ("Generate 0 completely independent phrases", 3),
    ],
)
def test_requested_phrase_count(prompt: str, expected: int) -> None:
    assert requested_phrase_count(prompt) == expected


def test_parse_phrases_strips_labels_and_blank_blocks() -> None:
    text = (
        "**Phrase 1:** Alpha\nline two\n\n\n"
        "Phrase 2: Beta\n\n"
        "**Phrase 3**: Gamma\n\n   \n"
    )
    assert parse_phrases(text, 5) == ["Alpha\nline two", "Beta", "Gamma"]


def test_parse_phrases_truncates_to_limit() -> None:
    assert parse_phrases("a\n\nb\n\nc\n\nd", 2) == ["a", "b"]


def test_parse_phrases_keeps_short_results() -> None:
    assert parse_phrases("only one", 3) == ["only one"]


@pytest.mark.asyncio
async def test_generate_phrases_sends_messages_request() -> None:
    provider = FakeProvider()
    client = GenerationClient(_config(), transport=provider.transport)
    try:
        phrases = await client.generate_phrases("Generate 2 completely independent phrases")
    finally:
        await client.close()

    assert phrases == ["First line\nSecond line\nThird line", "Another start\nmiddle\nend"]
    body = provider.requests[0]
    assert body["model"] == "claude-3-haiku-20240307"
    assert body["max_tokens"] == 1000
    assert body["messages"] == [
        {"role": "user", "content": "Generate 2 completely independent phrases"}
    ]
    assert provider.headers[0]["x-api-key"] == "test-key"
    assert provider.headers[0]["anthropic-version"] == "2023-06-01"


@pytest.mark.asyncio
async def test_missing_api_key_is_upstream_error() -> None:
    client = GenerationClient(_config(api_key=None))
    with pytest.raises(GenerationNotConfiguredError):
        await client.generate_phrases("prompt")


@pytest.mark.asyncio
async def test_provider_error_status_raises_upstream_error() -> None:
    provider = FakeProvider(status_code=529)
    client = GenerationClient(_config(), transport=provider.transport)
    with pytest.raises(UpstreamError) as excinfo:
        await client.generate_phrases("prompt")
    assert "529" in str(excinfo.value)
    assert "provider exploded" in str(excinfo.value)
    assert excinfo.value.payload() == {
        "error": "Failed to generate phrases.",
        "code": "GENERATION_FAILED",
    }


@pytest.mark.asyncio
async def test_transport_failure_raises_upstream_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = GenerationClient(_config(), transport=httpx.MockTransport(handler))
    with pytest.raises(UpstreamError):
        await client.generate_phrases("prompt")


@pytest.mark.asyncio
async def test_malformed_payload_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"content": []})

    client = GenerationClient(_config(), transport=httpx.MockTransport(handler))
    with pytest.raises(MalformedGenerationError):
        await client.generate_phrases("prompt")


@pytest.mark.asyncio
async def test_empty_completion_raises() -> None:
    provider = FakeProvider(text="\n\n   \n\n")
    client = GenerationClient(_config(), transport=provider.transport)
    with pytest.raises(MalformedGenerationError):
        await client.generate_phrases("prompt")


def test_sample_completion_has_three_phrases() -> None:
    assert len(parse_phrases(SAMPLE_COMPLETION, 10)) == 3


@pytest.mark.asyncio
async def test_invalid_base_url_raises_upstream_error(mocker) -> None:
    mocker.patch(
        "phrase_studio.services.generation.httpx.AsyncClient",
        side_effect=httpx.InvalidURL("Invalid URL 'http://[bad'"),
    )
    client = GenerationClient(_config())
    with pytest.raises(UpstreamError):
        await client.generate_phrases("prompt")
