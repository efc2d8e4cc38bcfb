"""Pydantic schemas for request and response payloads."""

from .auth import LoginRequest, LoginResponse, LogoutRequest, LogoutResponse
from .phrases import GeneratePhrasesRequest, GeneratePhrasesResponse
from .usage import UsageOut

__all__ = [
    "GeneratePhrasesRequest",
    "GeneratePhrasesResponse",
    "LoginRequest",
    "LoginResponse",
    "LogoutRequest",
    "LogoutResponse",
    "UsageOut",
]
