"""Per-request authorization and metering for phrase generation.

The gate decides which ledger applies to a caller, refuses the request when
that ledger is exhausted, and charges usage only after the generation call
has succeeded. A token that is present but unknown is not an error: the
caller is metered as anonymous on the free tier.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from phrase_studio.core.errors import (
    FreeUsageExceededError,
    PremiumUsageExceededError,
    UpstreamError,
)
from phrase_studio.services.quota import (
    QuotaClass,
    QuotaLedger,
    QuotaRecord,
    free_key,
    premium_key,
)
from phrase_studio.services.rollover import Clock
from phrase_studio.services.sessions import SessionTokenStore

logger = logging.getLogger(__name__)

PhraseGenerator = Callable[[str], Awaitable[list[str]]]


class IdentityKind(str, Enum):
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"


@dataclass(frozen=True)
class ClientIdentity:
    """Who is asking, as far as quotas are concerned."""

    kind: IdentityKind
    ip: str
    token: str | None = None

    @classmethod
    def anonymous(cls, ip: str) -> ClientIdentity:
        return cls(kind=IdentityKind.ANONYMOUS, ip=ip)

    @classmethod
    def authenticated(cls, token: str, ip: str) -> ClientIdentity:
        return cls(kind=IdentityKind.AUTHENTICATED, ip=ip, token=token)

    @property
    def is_authenticated(self) -> bool:
        return self.kind is IdentityKind.AUTHENTICATED


@dataclass(frozen=True)
class AuthorizationDecision:
    """Ledger selection and usage snapshot for an admitted request."""

    identity: ClientIdentity
    ledger: QuotaLedger
    key: str
    usage: QuotaRecord


@dataclass(frozen=True)
class GenerationOutcome:
    """Phrases produced for a request and the usage after charging it."""

    identity: ClientIdentity
    phrases: list[str]
    usage: QuotaRecord


class RequestGate:
    """Routes callers to the free or premium ledger and meters generations."""

    def __init__(
        self,
        free_ledger: QuotaLedger,
        premium_ledger: QuotaLedger,
        sessions: SessionTokenStore,
        clock: Clock = datetime.now,
    ) -> None:
        if free_ledger is premium_ledger:
            raise ValueError("Free and premium usage must be tracked by separate ledgers")
        self.free_ledger = free_ledger
        self.premium_ledger = premium_ledger
        self.sessions = sessions
        self.clock = clock

    def today(self) -> date:
        return self.clock().date()

    def resolve_identity(self, ip: str, token: str | None) -> ClientIdentity:
        """Return Authenticated only for tokens the session store recognises."""
        if token and self.sessions.is_valid(token):
            return ClientIdentity.authenticated(token, ip)
        return ClientIdentity.anonymous(ip)

    def _select(self, identity: ClientIdentity) -> tuple[QuotaLedger, str]:
        if identity.is_authenticated and identity.token:
            return self.premium_ledger, premium_key(identity.token, self.today())
        return self.free_ledger, free_key(identity.ip)

    def usage_for(self, identity: ClientIdentity) -> QuotaRecord:
        ledger, key = self._select(identity)
        return ledger.check(key)

    def usage(self, ip: str, token: str | None) -> QuotaRecord:
        """Usage snapshot for whoever ``ip``/``token`` resolve to."""
        return self.usage_for(self.resolve_identity(ip, token))

    def authorize(self, ip: str, token: str | None) -> AuthorizationDecision:
        """Admit the caller or raise the class-specific quota error.

        Raises:
            FreeUsageExceededError: Anonymous caller used up the lifetime quota.
            PremiumUsageExceededError: Token used up today's quota.
        """
        identity = self.resolve_identity(ip, token)
        ledger, key = self._select(identity)
        usage = ledger.check(key)
        if usage.exceeded:
            if usage.quota_class is QuotaClass.PREMIUM:
                raise PremiumUsageExceededError(usage)
            raise FreeUsageExceededError(usage)
        return AuthorizationDecision(identity=identity, ledger=ledger, key=key, usage=usage)

    def record_success(self, decision: AuthorizationDecision) -> QuotaRecord:
        """Charge one generation to the decision's ledger and return fresh usage."""
        decision.ledger.increment(decision.key)
        return decision.ledger.check(decision.key)

    async def generate(
        self,
        ip: str,
        token: str | None,
        prompt: str,
        generator: PhraseGenerator,
    ) -> GenerationOutcome:
        """Authorize, call the generator, then charge usage on success only.

        Failed generations are free: any error from ``generator`` surfaces
        as an UpstreamError without touching either ledger.
        """
        decision = self.authorize(ip, token)
        logger.info(
            "Generating phrases (ip=%s, authenticated=%s, usage=%d/%d)",
            ip,
            decision.identity.is_authenticated,
            decision.usage.used + 1,
            decision.usage.limit,
        )
        try:
            phrases = await generator(prompt)
        except UpstreamError as exc:
            logger.error("Phrase generation failed for %s: %s", ip, exc)
            raise
        except Exception as exc:
            logger.exception("Unexpected error while generating phrases for %s", ip)
            raise UpstreamError(str(exc)) from exc
        usage = self.record_success(decision)
        return GenerationOutcome(identity=decision.identity, phrases=phrases, usage=usage)
