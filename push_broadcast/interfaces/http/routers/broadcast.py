from __future__ import annotations

import json

from fastapi import APIRouter, Depends, Request

from push_broadcast.application.use_cases import send_broadcast
from push_broadcast.domain.ports.messaging_provider import MessagingProvider
from push_broadcast.interfaces.http.deps import get_messaging_provider
from push_broadcast.interfaces.http.schemas.broadcast import (
    BroadcastResponse,
    ErrorResponse,
)

router = APIRouter(tags=["broadcast"])

# Other methods on this path are refused by BroadcastCORSMiddleware.
BROADCAST_PATH = "/"


async def _read_body(request: Request) -> object:
    raw = await request.body()
    if not raw:
        return {}
    try:
        return json.loads(raw)
    except ValueError:
        return {}


@router.post(
    BROADCAST_PATH,
    response_model=BroadcastResponse,
    responses={500: {"model": ErrorResponse}},
)
async def send_broadcast_message(
    request: Request,
    provider: MessagingProvider = Depends(get_messaging_provider),
) -> BroadcastResponse:
    body = await _read_body(request)
    result = await send_broadcast.execute(provider, body)
    return BroadcastResponse.model_validate(result)
