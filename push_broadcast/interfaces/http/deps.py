from __future__ import annotations

from fastapi import Request

from push_broadcast.config.settings import Settings, get_settings
from push_broadcast.domain.ports.messaging_provider import MessagingProvider


def get_app_settings(request: Request) -> Settings:
    return getattr(request.app.state, "settings", None) or get_settings()


def get_messaging_provider(request: Request) -> MessagingProvider:
    provider = getattr(request.app.state, "messaging_provider", None)
    if provider is None:
        raise RuntimeError("Messaging provider not configured")
    return provider
