"""Error taxonomy for the Phrase Studio service.

Every error carries an HTTP status, a machine-readable ``code`` and a short
human-readable message. The API layer renders them as ``{error, code}``
bodies; quota errors also attach the usage snapshot that was current when
the request was rejected.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from fastapi import status

if TYPE_CHECKING:
    from phrase_studio.services.quota import QuotaRecord


class PhraseStudioError(RuntimeError):
    """Base exception for failures that are reported back to the caller."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"
    message: str = "Internal server error."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.message
        super().__init__(self.message)

    def payload(self) -> dict[str, Any]:
        """Return the JSON body sent to the client."""
        return {"error": self.message, "code": self.code}


class AuthError(PhraseStudioError):
    """Raised for bad passwords and stale or unknown session tokens."""

    status_code = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHORIZED"
    message = "Authentication failed."


class InvalidPasswordError(AuthError):
    code = "INVALID_PASSWORD"
    message = "Incorrect password."


class InvalidSessionError(AuthError):
    code = "INVALID_SESSION"
    message = "Session is invalid or has expired. Please log in again."


class QuotaExceededError(PhraseStudioError):
    """Raised when the caller's applicable ledger is already at its limit."""

    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    code = "USAGE_EXCEEDED"
    message = "Usage limit reached."

    def __init__(self, usage: QuotaRecord, message: str | None = None) -> None:
        super().__init__(message)
        self.usage = usage

    def payload(self) -> dict[str, Any]:
        body = super().payload()
        body["usage"] = self.usage.as_dict()
        return body


class FreeUsageExceededError(QuotaExceededError):
    code = "FREE_USAGE_EXCEEDED"
    message = "Free usage completed. Please enter password to continue."


class PremiumUsageExceededError(QuotaExceededError):
    code = "PREMIUM_USAGE_EXCEEDED"
    message = "Today's usage limit has been reached. Please try again tomorrow."


class UpstreamError(PhraseStudioError):
    """Raised when the text-generation provider fails or returns unusable data.

    The message given to the constructor is kept for logs only; the client
    always receives the generic message below.
    """

    code = "GENERATION_FAILED"
    message = "Failed to generate phrases."

    def __init__(self, detail: str | None = None) -> None:
        super().__init__()
        self.detail = detail or self.message

    def __str__(self) -> str:
        return self.detail


class GenerationNotConfiguredError(UpstreamError):
    """Raised when no provider API key is configured."""


class MalformedGenerationError(UpstreamError):
    """Raised when the provider answered but no phrases could be parsed."""


class InputValidationError(PhraseStudioError):
    """Raised when required input is missing from a request."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "INVALID_REQUEST"
    message = "Invalid request."


class PromptRequiredError(InputValidationError):
    code = "PROMPT_REQUIRED"
    message = "Prompt is required."
