"""Schemas for the phrase generation endpoint."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from phrase_studio.schemas.usage import UsageOut


class GeneratePhrasesRequest(BaseModel):
    """Prompt built by the browser wizard plus an optional session token."""

    prompt: str | None = Field(None, description="Fully constructed generation prompt")
    token: str | None = Field(None, description="Session token from /api/login")

    @field_validator("token", mode="before")
    @classmethod
    def non_string_token_is_absent(cls, value: Any) -> str | None:
        # anything that cannot be an issued token is metered as no token
        return value if isinstance(value, str) else None


class GeneratePhrasesResponse(BaseModel):
    """Candidate phrases and the caller's usage after this generation."""

    success: bool = True
    phrases: list[str]
    count: int = Field(..., ge=0, description="Number of phrases returned")
    usage: UsageOut
