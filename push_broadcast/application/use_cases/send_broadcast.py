from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from push_broadcast.application.errors import ProviderError, ValidationError
from push_broadcast.domain.models.broadcast import BroadcastRequest, BroadcastResult, TokenError
from push_broadcast.domain.models.messaging import BatchResponse, Notification
from push_broadcast.domain.ports.messaging_provider import MessagingProvider

logger = logging.getLogger(__name__)

UNKNOWN_ERROR = "Unknown error"


def _valid_text(value: Any) -> bool:
    return isinstance(value, str) and value != ""


def parse_request(body: Any) -> BroadcastRequest:
    """Validate a decoded JSON body and build a BroadcastRequest.

    Checks run in order (tokens, notification, data) so the first failing
    field determines the error message.
    """
    if not isinstance(body, Mapping):
        body = {}

    tokens = body.get("tokens")
    if (
        not isinstance(tokens, list)
        or not tokens
        or not all(_valid_text(token) for token in tokens)
    ):
        raise ValidationError("No valid tokens provided")

    notification = body.get("notification")
    if (
        not isinstance(notification, Mapping)
        or not _valid_text(notification.get("title"))
        or not _valid_text(notification.get("body"))
    ):
        raise ValidationError("Invalid notification format")

    data = body.get("data") or {}
    if not isinstance(data, Mapping) or not all(
        isinstance(key, str) and isinstance(value, str) for key, value in data.items()
    ):
        raise ValidationError("Invalid data format")

    return BroadcastRequest(
        tokens=list(tokens),
        notification=Notification(title=notification["title"], body=notification["body"]),
        data=dict(data),
    )


def aggregate_result(tokens: Sequence[str], batch: BatchResponse) -> BroadcastResult:
    if len(batch.responses) != len(tokens):
        raise ProviderError(
            f"Provider returned {len(batch.responses)} responses for {len(tokens)} tokens"
        )
    errors = [
        TokenError(
            token=token,
            error=(response.error.message if response.error else None) or UNKNOWN_ERROR,
        )
        for token, response in zip(tokens, batch.responses)
        if not response.success
    ]
    return BroadcastResult(
        success=batch.success_count,
        failure=batch.failure_count,
        errors=errors,
    )


async def execute(provider: MessagingProvider, body: Any) -> BroadcastResult:
    request = parse_request(body)
    message = request.to_message()
    try:
        batch = await provider.send_multicast(message)
    except ProviderError:
        raise
    except Exception as exc:
        raise ProviderError(str(exc)) from exc
    result = aggregate_result(message.tokens, batch)
    logger.info(
        "Broadcast sent: tokens=%d success=%d failure=%d",
        len(message.tokens),
        result.success,
        result.failure,
    )
    return result
