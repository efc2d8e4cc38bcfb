"""Schemas for password login and session teardown."""

from typing import Any

from pydantic import BaseModel, Field, field_validator


def _string_or_none(value: Any) -> str | None:
    return value if isinstance(value, str) else None


class LoginRequest(BaseModel):
    """Password submitted to obtain a premium session token."""

    password: str | None = Field(None, description="Shared access password")

    coerce_password = field_validator("password", mode="before")(_string_or_none)


class LoginResponse(BaseModel):
    success: bool = True
    token: str = Field(..., description="Opaque session token for premium usage")


class LogoutRequest(BaseModel):
    """Optional body form of the session token; the header takes precedence."""

    token: str | None = Field(None, description="Session token to invalidate")

    coerce_token = field_validator("token", mode="before")(_string_or_none)


class LogoutResponse(BaseModel):
    success: bool = True
