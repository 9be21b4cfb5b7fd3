from __future__ import annotations

from abc import ABC, abstractmethod

from push_broadcast.domain.models.messaging import BatchResponse, MulticastMessage


class MessagingProvider(ABC):
    """Push delivery backend.

    ``send_multicast`` must return exactly one response per token, in the same
    order as ``message.tokens``. Failures of the call as a whole are raised as
    ``ProviderError``; individual undeliverable tokens are failed responses.
    """

    @abstractmethod
    async def send_multicast(self, message: MulticastMessage) -> BatchResponse: ...

    async def aclose(self) -> None:
        return None
