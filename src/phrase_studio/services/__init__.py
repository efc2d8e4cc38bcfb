"""Business logic services for Phrase Studio."""

from .container import ServiceContainer, build_container
from .gate import AuthorizationDecision, ClientIdentity, GenerationOutcome, RequestGate
from .generation import GenerationClient, parse_phrases, requested_phrase_count
from .quota import QuotaClass, QuotaLedger, QuotaRecord
from .rollover import DailyResetScheduler
from .sessions import SessionTokenStore

__all__ = [
    "AuthorizationDecision",
    "ClientIdentity",
    "DailyResetScheduler",
    "GenerationClient",
    "GenerationOutcome",
    "QuotaClass",
    "QuotaLedger",
    "QuotaRecord",
    "RequestGate",
    "ServiceContainer",
    "SessionTokenStore",
    "build_container",
    "parse_phrases",
    "requested_phrase_count",
]
