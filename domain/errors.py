"""Error taxonomy shared by the upstream clients, services and routers.

Every failure raised inside the application is a :class:`MovieServiceError`
tagged with an :class:`ErrorKind`. Callers decide whether to propagate or
reclassify an error by looking at ``kind`` and the router renders whatever
reaches it as an error envelope using ``status_code``.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from domain.schemas.errors import ErrorEnvelope


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    API = "api"
    UPSTREAM = "upstream"
    NETWORK = "network"
    TIMEOUT = "timeout"
    PARSE = "parse"


class MovieServiceError(Exception):
    """Base class for every failure surfaced to API clients."""

    kind: ErrorKind = ErrorKind.API
    default_status: int = 500

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        self.message = message
        self.status_code = status_code or self.default_status
        super().__init__(message)

    def to_envelope(self) -> ErrorEnvelope:
        return ErrorEnvelope(message=self.message)


class ValidationError(MovieServiceError):
    """Caller supplied input that can never succeed."""

    kind = ErrorKind.VALIDATION
    default_status = 400


class NotFoundError(MovieServiceError):
    kind = ErrorKind.NOT_FOUND
    default_status = 404


class APIError(MovieServiceError):
    """Upstream failure reported to the caller, 500 unless told otherwise."""

    kind = ErrorKind.API

    def __init__(self, message: str, status_code: int = 500) -> None:
        super().__init__(message, status_code=status_code)


class UpstreamError(MovieServiceError):
    """An upstream API answered, but not with what was asked for."""

    kind = ErrorKind.UPSTREAM

    def __init__(self, message: str, *, upstream_status: Optional[int] = None) -> None:
        self.upstream_status = upstream_status
        super().__init__(message)


class NetworkError(MovieServiceError):
    kind = ErrorKind.NETWORK


class UpstreamTimeoutError(MovieServiceError):
    kind = ErrorKind.TIMEOUT


class ResponseParseError(MovieServiceError):
    kind = ErrorKind.PARSE


def is_kind(exc: BaseException, *kinds: ErrorKind) -> bool:
    """Return True when ``exc`` is a tagged error of one of ``kinds``."""
    return isinstance(exc, MovieServiceError) and exc.kind in kinds


__all__ = [
    "APIError",
    "ErrorKind",
    "MovieServiceError",
    "NetworkError",
    "NotFoundError",
    "ResponseParseError",
    "UpstreamError",
    "UpstreamTimeoutError",
    "ValidationError",
    "is_kind",
]
