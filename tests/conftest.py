# tests/conftest.py
from __future__ import annotations

import json
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from phrase_studio.core.settings import Settings
from phrase_studio.main import create_app
from phrase_studio.services.container import ServiceContainer
from phrase_studio.services.gate import RequestGate
from phrase_studio.services.quota import QuotaClass, QuotaLedger
from phrase_studio.services.sessions import SessionTokenStore

TEST_PASSWORD = "family2024"
CLIENT_IP = "10.0.0.5"

SAMPLE_COMPLETION = (
    "**Phrase 1:** First line\nSecond line\nThird line\n\n"
    "**Phrase 2:** Another start\nmiddle\nend\n\n"
    "**Phrase 3:** Last one\nstill going\ndone"
)


class FakeClock:
    """Settable wall clock for date-keyed ledgers."""

    def __init__(self, now: datetime | None = None) -> None:
        self.now = now or datetime(2024, 5, 17, 15, 30)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@dataclass
class FakeProvider:
    """Stand-in for the Messages API, served through httpx.MockTransport."""

    text: str = SAMPLE_COMPLETION
    status_code: int = 200
    requests: list[dict[str, Any]] = field(default_factory=list)
    headers: list[httpx.Headers] = field(default_factory=list)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(json.loads(request.content))
        self.headers.append(request.headers)
        if self.status_code >= 400:
            return httpx.Response(
                self.status_code,
                json={"error": {"type": "api_error", "message": "provider exploded"}},
            )
        return httpx.Response(
            self.status_code,
            json={"content": [{"type": "text", "text": self.text}]},
        )

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture()
def test_settings() -> Settings:
    return Settings(
        access_password=TEST_PASSWORD,
        api_key="test-key",
        generation_base_url="https://provider.test",
        rollover_enabled=False,
        trust_forwarded_for=True,
        _env_file=None,
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture()
def app(test_settings: Settings, clock: FakeClock, provider: FakeProvider) -> FastAPI:
    return create_app(test_settings, clock=clock, transport=provider.transport)


@pytest.fixture()
def services(app: FastAPI) -> ServiceContainer:
    return app.state.services


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test", headers={"x-forwarded-for": CLIENT_IP}) as test_client:
        yield test_client


@pytest.fixture()
def login(client: TestClient) -> Callable[[], str]:
    def _login() -> str:
        response = client.post("/api/login", json={"password": TEST_PASSWORD})
        assert response.status_code == 200
        return response.json()["token"]

    return _login


@pytest.fixture()
def ledgers() -> tuple[QuotaLedger, QuotaLedger]:
    return QuotaLedger(QuotaClass.FREE, 3), QuotaLedger(QuotaClass.PREMIUM, 100)


@pytest.fixture()
def sessions() -> SessionTokenStore:
    return SessionTokenStore(capacity=10)


@pytest.fixture()
def gate(
    ledgers: tuple[QuotaLedger, QuotaLedger],
    sessions: SessionTokenStore,
    clock: FakeClock,
) -> RequestGate:
    free_ledger, premium_ledger = ledgers
    return RequestGate(free_ledger, premium_ledger, sessions, clock=clock)
