from __future__ import annotations

import os
import sys
from collections.abc import AsyncIterator
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

os.environ.setdefault("MESSAGING_PROVIDER", "logging")

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(PROJECT_ROOT))

# ruff: noqa: E402
from push_broadcast.application.errors import ProviderError
from push_broadcast.config.settings import Settings
from push_broadcast.domain.models.messaging import BatchResponse, MulticastMessage, SendResponse
from push_broadcast.domain.ports.messaging_provider import MessagingProvider
from push_broadcast.interfaces.http.main import create_app


class StubProvider(MessagingProvider):
    """Records every multicast and replies with a preset batch (or raises)."""

    def __init__(self) -> None:
        self.sent: list[MulticastMessage] = []
        self.responses: list[SendResponse] | None = None
        self.error: Exception | None = None
        self.closed = False

    async def send_multicast(self, message: MulticastMessage) -> BatchResponse:
        self.sent.append(message)
        if self.error is not None:
            raise self.error
        if self.responses is None:
            return BatchResponse(responses=[SendResponse.delivered() for _ in message.tokens])
        return BatchResponse(responses=list(self.responses))

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture()
def test_settings() -> Settings:
    return Settings.model_validate(
        {
            "log_level": "INFO",
            "environment": "test",
            "messaging_provider": "logging",
        }
    )


@pytest.fixture()
def provider() -> StubProvider:
    return StubProvider()


@pytest.fixture()
def failing_provider(provider: StubProvider) -> StubProvider:
    provider.error = ProviderError("Quota exceeded")
    return provider


@pytest.fixture()
def app(test_settings: Settings, provider: StubProvider):
    return create_app(settings=test_settings, messaging_provider=provider)


@pytest.fixture()
async def client(app) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
