from __future__ import annotations

from dataclasses import dataclass, field

from push_broadcast.domain.models.messaging import MulticastMessage, Notification


@dataclass(slots=True)
class BroadcastRequest:
    tokens: list[str]
    notification: Notification
    data: dict[str, str] = field(default_factory=dict)

    def to_message(self) -> MulticastMessage:
        return MulticastMessage(
            notification=Notification(
                title=self.notification.title, body=self.notification.body
            ),
            data=dict(self.data),
            tokens=list(self.tokens),
        )


@dataclass(slots=True, frozen=True)
class TokenError:
    token: str
    error: str


@dataclass(slots=True)
class BroadcastResult:
    success: int
    failure: int
    errors: list[TokenError] = field(default_factory=list)
