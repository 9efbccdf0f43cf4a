"""Response headers, preflight handling and error rendering."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from domain.errors import ErrorKind, MovieServiceError
from domain.schemas import ErrorEnvelope

logger = logging.getLogger(__name__)

SECURITY_HEADERS: dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Accept",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Content-Security-Policy": "default-src 'none'; img-src 'self'",
}

ENDPOINT_NOT_FOUND = "Endpoint not found"


def error_response(status_code: int, message: str) -> JSONResponse:
    envelope = ErrorEnvelope(message=message)
    return JSONResponse(status_code=status_code, content=envelope.model_dump())


async def security_headers(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Answer CORS preflights and stamp the fixed headers on every response."""
    if request.method == "OPTIONS":
        response: Response = Response(status_code=200)
    else:
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("Unhandled error for %s %s", request.method, request.url.path)
            response = error_response(500, "Internal server error")

    for name, value in SECURITY_HEADERS.items():
        response.headers[name] = value
    return response


async def handle_service_error(request: Request, exc: MovieServiceError) -> JSONResponse:
    if exc.kind in (ErrorKind.VALIDATION, ErrorKind.NOT_FOUND):
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc.message)
    else:
        logger.error("Error: %s (%s)", exc.message, exc.kind.value)
    return JSONResponse(status_code=exc.status_code, content=exc.to_envelope().model_dump())


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code in (404, 405):
        return error_response(404, ENDPOINT_NOT_FOUND)
    return error_response(exc.status_code, str(exc.detail))


async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(400, "Invalid request")


def install_error_handling(app: FastAPI) -> None:
    app.add_exception_handler(MovieServiceError, handle_service_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.middleware("http")(security_headers)
