from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException

from push_broadcast.application.errors import AppError
from push_broadcast.interfaces.http.responses import error_response

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:  # noqa: WPS430
        logger.error(
            "Error sending broadcast: %s - %s",
            exc.code,
            exc.message,
            extra={"path": request.url.path, "method": request.method},
        )
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:  # noqa: WPS430
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:  # noqa: WPS430
        logger.exception(
            "Error sending broadcast: unexpected failure",
            extra={"path": request.url.path, "method": request.method},
        )
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))
