from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI

from push_broadcast.config.settings import Settings, get_settings
from push_broadcast.domain.ports.messaging_provider import MessagingProvider
from push_broadcast.infrastructure.messaging.factory import build_messaging_provider
from push_broadcast.interfaces.http.deps import get_app_settings
from push_broadcast.interfaces.http.routers import broadcast
from push_broadcast.interfaces.middleware.cors import BroadcastCORSMiddleware
from push_broadcast.interfaces.middleware.error_handler import register_error_handlers

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        yield
    finally:
        provider = getattr(app.state, "messaging_provider", None)
        if provider is not None:
            await provider.aclose()


def _configure_logging(level_name: str) -> None:
    level = getattr(logging, level_name.upper(), logging.INFO)
    root = logging.getLogger()
    # Avoid adding duplicate handlers on reload
    if not any(isinstance(h, logging.StreamHandler) for h in root.handlers):
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        )
        handler.setFormatter(formatter)
        root.addHandler(handler)
    root.setLevel(level)
    # Align common libraries
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access", "httpx"):
        logging.getLogger(name).setLevel(level)


def create_app(
    *,
    settings: Settings | None = None,
    messaging_provider: MessagingProvider | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    _configure_logging(settings.log_level)
    app = FastAPI(
        title="Push Broadcast",
        version="0.1.0",
        description="Forwards broadcast notifications to a push messaging provider",
        lifespan=lifespan,
    )
    app.state.settings = settings
    # One provider per process, shared by every request
    app.state.messaging_provider = messaging_provider or build_messaging_provider(settings)
    logger.info(
        "Messaging provider ready: %s (environment=%s)",
        type(app.state.messaging_provider).__name__,
        settings.environment,
    )
    register_error_handlers(app)

    app.include_router(broadcast.router)

    @app.get("/health", tags=["health"])
    async def health(_: Settings = Depends(get_app_settings)) -> dict[str, str]:  # noqa: ANN001
        return {"status": "ok"}

    app.add_middleware(BroadcastCORSMiddleware, broadcast_path=broadcast.BROADCAST_PATH)
    return app


app = create_app()
