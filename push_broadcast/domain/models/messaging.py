from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True, frozen=True)
class Notification:
    title: str
    body: str


@dataclass(slots=True)
class MulticastMessage:
    """One notification payload addressed to many device tokens."""

    notification: Notification
    tokens: list[str]
    data: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "notification": {"title": self.notification.title, "body": self.notification.body},
            "data": dict(self.data),
            "tokens": list(self.tokens),
        }


@dataclass(slots=True, frozen=True)
class SendError:
    message: str
    code: str | None = None


@dataclass(slots=True, frozen=True)
class SendResponse:
    success: bool
    message_id: str | None = None
    error: SendError | None = None

    @classmethod
    def delivered(cls, message_id: str | None = None) -> SendResponse:
        return cls(success=True, message_id=message_id)

    @classmethod
    def failed(cls, message: str, *, code: str | None = None) -> SendResponse:
        return cls(success=False, error=SendError(message=message, code=code))


@dataclass(slots=True)
class BatchResponse:
    # Positionally aligned with MulticastMessage.tokens
    responses: list[SendResponse]

    @property
    def success_count(self) -> int:
        return sum(1 for response in self.responses if response.success)

    @property
    def failure_count(self) -> int:
        return len(self.responses) - self.success_count
