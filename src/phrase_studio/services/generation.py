"""Client for the third-party text-generation API.

This module provides the GenerationClient class that sends a prompt to the
Anthropic Messages API and turns the reply into a list of candidate phrases.
It includes:

- Lazily created HTTP client with provider authentication headers
- Reduction of every provider failure to an UpstreamError
- Parsing helpers that split, clean and cap the returned phrases
"""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass
from typing import Any, Final

import httpx

from phrase_studio.core.errors import (
    GenerationNotConfiguredError,
    MalformedGenerationError,
    UpstreamError,
)
from phrase_studio.core.settings import Settings

# Configure logger for this module
logger = logging.getLogger(__name__)

DEFAULT_PHRASE_COUNT: Final[int] = 3
MESSAGES_PATH: Final[str] = "/v1/messages"

_GENERATE_COUNT = re.compile(r"Generate\s+(\d+)\s+completely\s+independent", re.IGNORECASE)
_LABELLED_COUNT = re.compile(r"Number of phrases to generate:\s*(\d+)", re.IGNORECASE)
_PHRASE_LABELS = (
    re.compile(r"^\*\*Phrase\s+\d+:\*\*\s*", re.IGNORECASE | re.MULTILINE),
    re.compile(r"^\*\*?Phrase\s+\d+\*\*?:\s*", re.IGNORECASE | re.MULTILINE),
    re.compile(r"^Phrase\s+\d+:\s*", re.IGNORECASE | re.MULTILINE),
)
_BLANK_LINE = re.compile(r"\n\s*\n")


def requested_phrase_count(prompt: str, default: int = DEFAULT_PHRASE_COUNT) -> int:
    """Read how many phrases the prompt asks for.

    Recognises "Generate N completely independent ..." first and
    "Number of phrases to generate: N" second; anything else, including a
    zero count, falls back to ``default``.
    """
    for pattern in (_GENERATE_COUNT, _LABELLED_COUNT):
        match = pattern.search(prompt)
        if match:
            return int(match.group(1)) or default
    return default


def parse_phrases(text: str, limit: int) -> list[str]:
    """Split a completion into phrases separated by blank lines.

    ``Phrase N:`` style labels are stripped, empty blocks dropped and the
    result capped at ``limit``. Fewer phrases than ``limit`` are returned
    unchanged.
    """
    phrases: list[str] = []
    for block in _BLANK_LINE.split(text):
        cleaned = block
        for label in _PHRASE_LABELS:
            cleaned = label.sub("", cleaned)
        cleaned = cleaned.strip()
        if cleaned:
            phrases.append(cleaned)
    return phrases[:limit]


@dataclass(frozen=True)
class GenerationConfig:
    """Immutable configuration for provider calls."""

    api_key: str | None
    base_url: str
    model: str
    max_tokens: int
    api_version: str
    timeout_seconds: float


def load_generation_config(settings: Settings) -> GenerationConfig:
    """Build configuration object from application settings."""

    return GenerationConfig(
        api_key=settings.api_key,
        base_url=settings.generation_base_url,
        model=settings.generation_model,
        max_tokens=settings.generation_max_tokens,
        api_version=settings.generation_api_version,
        timeout_seconds=float(settings.generation_timeout_seconds),
    )


class GenerationClient:
    """HTTP client wrapper for the text-generation provider."""

    def __init__(
        self,
        config: GenerationConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._client_lock = asyncio.Lock()

    @property
    def configured(self) -> bool:
        return bool(self.config.api_key)

    async def _ensure_client(self) -> httpx.AsyncClient:
        if not self.configured:
            raise GenerationNotConfiguredError("Generation API key is not set")

        async with self._client_lock:
            if self._client is None:
                try:
                    self._client = httpx.AsyncClient(
                        base_url=self.config.base_url,
                        timeout=httpx.Timeout(self.config.timeout_seconds),
                        transport=self._transport,
                    )
                except httpx.InvalidURL as exc:
                    raise UpstreamError(f"Invalid generation base URL: {exc}") from exc
        return self._client

    def _build_headers(self) -> dict[str, str]:
        return {
            "content-type": "application/json",
            "x-api-key": self.config.api_key or "",
            "anthropic-version": self.config.api_version,
        }

    async def complete(self, prompt: str) -> str:
        """Send ``prompt`` and return the text of the first content block."""
        client = await self._ensure_client()
        body = {
            "model": self.config.model,
            "max_tokens": self.config.max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }

        try:
            response = await client.post(MESSAGES_PATH, json=body, headers=self._build_headers())
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise UpstreamError(f"Generation request failed: {exc}") from exc

        if response.is_error:
            raise UpstreamError(
                f"Generation API error: {response.status_code} - {_error_message(response)}"
            )

        try:
            payload = response.json()
            text = payload["content"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise MalformedGenerationError(f"Unexpected generation payload: {exc!r}") from exc
        if not isinstance(text, str):
            raise MalformedGenerationError("Generation payload text is not a string")
        return text

    async def generate_phrases(self, prompt: str) -> list[str]:
        """Return up to the requested number of phrases for ``prompt``.

        Raises:
            UpstreamError: If the provider call fails or yields no phrases.
        """
        text = await self.complete(prompt)
        limit = requested_phrase_count(prompt)
        phrases = parse_phrases(text, limit)
        if not phrases:
            raise MalformedGenerationError("Generation response contained no phrases")
        if len(phrases) < limit:
            logger.info("Provider returned %d of %d requested phrases", len(phrases), limit)
        return phrases

    async def close(self) -> None:
        """Close the underlying HTTP client if one was opened."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None


def _error_message(response: httpx.Response) -> str:
    try:
        payload: Any = response.json()
    except ValueError:
        return "Unknown error"
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return "Unknown error"
