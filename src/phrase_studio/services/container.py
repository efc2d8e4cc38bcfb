"""Wiring of the stateful services owned by one application instance."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

import httpx

from phrase_studio.core.settings import Settings
from phrase_studio.services.gate import RequestGate
from phrase_studio.services.generation import GenerationClient, load_generation_config
from phrase_studio.services.quota import QuotaClass, QuotaLedger
from phrase_studio.services.rollover import Clock, DailyResetScheduler
from phrase_studio.services.sessions import SessionTokenStore


@dataclass
class ServiceContainer:
    """Ledgers, session store and collaborators for one app instance.

    Nothing here is module-global, so independent containers can coexist
    (one per test app, for instance).
    """

    settings: Settings
    free_ledger: QuotaLedger
    premium_ledger: QuotaLedger
    sessions: SessionTokenStore
    gate: RequestGate
    scheduler: DailyResetScheduler
    generation: GenerationClient

    async def startup(self) -> None:
        if self.settings.rollover_enabled:
            await self.scheduler.start()

    async def shutdown(self) -> None:
        await self.scheduler.stop()
        await self.generation.close()


def build_container(
    settings: Settings,
    *,
    clock: Clock = datetime.now,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ServiceContainer:
    """Create a fresh set of services from ``settings``."""
    free_ledger = QuotaLedger(QuotaClass.FREE, settings.free_usage_limit)
    premium_ledger = QuotaLedger(QuotaClass.PREMIUM, settings.premium_usage_limit)
    sessions = SessionTokenStore(capacity=settings.session_token_capacity)
    return ServiceContainer(
        settings=settings,
        free_ledger=free_ledger,
        premium_ledger=premium_ledger,
        sessions=sessions,
        gate=RequestGate(free_ledger, premium_ledger, sessions, clock=clock),
        scheduler=DailyResetScheduler(premium_ledger, clock=clock),
        generation=GenerationClient(load_generation_config(settings), transport=transport),
    )
