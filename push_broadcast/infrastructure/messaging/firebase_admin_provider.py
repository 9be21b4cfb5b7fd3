"""
FCM delivery through the Firebase Admin SDK.

The SDK app is initialised explicitly under its own name instead of relying on
the process-wide default app, so several providers can coexist (and tests can
swap one in).
"""

from __future__ import annotations

import asyncio
import json
import logging

import firebase_admin
from firebase_admin import credentials, exceptions, messaging

from push_broadcast.application.errors import ConfigurationError, ProviderError
from push_broadcast.domain.models.messaging import BatchResponse, MulticastMessage, SendResponse
from push_broadcast.domain.ports.messaging_provider import MessagingProvider

logger = logging.getLogger(__name__)

APP_NAME = "push-broadcast"


class FirebaseAdminProvider(MessagingProvider):
    def __init__(
        self,
        *,
        service_account_json: str,
        project_id: str | None = None,
        dry_run: bool = False,
        app: firebase_admin.App | None = None,
    ) -> None:
        self.dry_run = dry_run
        self._owns_app = app is None
        self._app = app or _initialize_app(service_account_json, project_id)

    async def send_multicast(self, message: MulticastMessage) -> BatchResponse:
        try:
            # The SDK rejects more than 500 tokens when building the message
            multicast = messaging.MulticastMessage(
                tokens=list(message.tokens),
                notification=messaging.Notification(
                    title=message.notification.title, body=message.notification.body
                ),
                data=dict(message.data),
            )
            sdk_response = await asyncio.to_thread(
                messaging.send_each_for_multicast,
                multicast,
                dry_run=self.dry_run,
                app=self._app,
            )
        except (exceptions.FirebaseError, ValueError) as exc:
            logger.error("Firebase multicast failed: %s", exc)
            raise ProviderError(str(exc)) from exc

        responses = [_to_send_response(item) for item in sdk_response.responses]
        batch = BatchResponse(responses=responses)
        logger.info(
            "Firebase multicast: tokens=%d success=%d failure=%d",
            len(message.tokens),
            batch.success_count,
            batch.failure_count,
        )
        return batch

    async def aclose(self) -> None:
        if self._owns_app:
            firebase_admin.delete_app(self._app)


def _initialize_app(service_account_json: str, project_id: str | None) -> firebase_admin.App:
    try:
        cred = credentials.Certificate(json.loads(service_account_json))
    except ValueError as exc:
        raise ConfigurationError(f"Invalid Firebase service account: {exc}") from exc
    options = {"projectId": project_id} if project_id else None
    return firebase_admin.initialize_app(cred, options, name=APP_NAME)


def _to_send_response(item) -> SendResponse:
    if item.success:
        return SendResponse.delivered(item.message_id)
    exc = item.exception
    code = getattr(exc, "code", None)
    message = str(exc) if exc is not None else ""
    return SendResponse.failed(message, code=code)
