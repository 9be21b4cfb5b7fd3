from __future__ import annotations

import logging
from uuid import uuid4

from push_broadcast.domain.models.messaging import BatchResponse, MulticastMessage, SendResponse
from push_broadcast.domain.ports.messaging_provider import MessagingProvider

logger = logging.getLogger(__name__)


class LoggingMessagingProvider(MessagingProvider):
    """Development provider: logs the multicast and reports every token delivered."""

    async def send_multicast(self, message: MulticastMessage) -> BatchResponse:
        logger.info(
            "Sending multicast (logging provider): title=%s tokens=%d data_keys=%s",
            message.notification.title,
            len(message.tokens),
            ",".join(sorted(message.data)),
        )
        logger.debug("Multicast payload: %s", message.to_dict())
        return BatchResponse(
            responses=[SendResponse.delivered(f"logging/{uuid4()}") for _ in message.tokens]
        )
