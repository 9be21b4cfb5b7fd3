from __future__ import annotations

from fastapi.responses import JSONResponse

ALLOW_ORIGIN = "*"
DEFAULT_ERROR_MESSAGE = "Internal server error"


def error_response(status_code: int, message: str | None) -> JSONResponse:
    # Also reached from outside the CORS middleware for unhandled exceptions
    return JSONResponse(
        status_code=status_code,
        content={"error": message or DEFAULT_ERROR_MESSAGE},
        headers={"Access-Control-Allow-Origin": ALLOW_ORIGIN},
    )
