from __future__ import annotations

import logging

from fastapi import Request
from starlette import status
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from push_broadcast.application.errors import ValidationError
from push_broadcast.interfaces.http.responses import ALLOW_ORIGIN, error_response

logger = logging.getLogger(__name__)

ALLOW_METHODS = "POST"
ALLOW_HEADERS = "Content-Type, Authorization"


class BroadcastCORSMiddleware(BaseHTTPMiddleware):
    """Open CORS: any origin, preflight answered directly with 204.

    On the broadcast path every method other than POST and OPTIONS is refused
    here, before routing, so unknown verbs get the same answer as GET or PUT.
    """

    def __init__(self, app, *, broadcast_path: str = "/") -> None:
        super().__init__(app)
        self.broadcast_path = broadcast_path

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.method == "OPTIONS":
            return Response(
                status_code=status.HTTP_204_NO_CONTENT,
                headers={
                    "Access-Control-Allow-Origin": ALLOW_ORIGIN,
                    "Access-Control-Allow-Methods": ALLOW_METHODS,
                    "Access-Control-Allow-Headers": ALLOW_HEADERS,
                },
            )
        if request.url.path == self.broadcast_path and request.method != "POST":
            error = ValidationError("Only POST requests are accepted")
            logger.error(
                "Error sending broadcast: %s - %s",
                error.code,
                error.message,
                extra={"path": request.url.path, "method": request.method},
            )
            return error_response(error.status_code, error.message)
        response = await call_next(request)
        response.headers["Access-Control-Allow-Origin"] = ALLOW_ORIGIN
        return response
