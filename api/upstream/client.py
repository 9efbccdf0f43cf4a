from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx

from app.settings import HttpSettings
from domain.errors import NetworkError, UpstreamError, UpstreamTimeoutError

logger = logging.getLogger(__name__)

_REDIRECT_STATUSES = frozenset({301, 302, 303, 307, 308})


@dataclass(slots=True, frozen=True)
class UpstreamRequest:
    """Describes a single call to one of the upstream APIs."""

    host: str
    path: str
    method: str = "GET"
    headers: dict[str, str] = field(default_factory=dict)
    params: dict[str, Any] = field(default_factory=dict)
    scheme: str = "https"

    @property
    def url(self) -> str:
        return f"{self.scheme}://{self.host}{self.path}"


class UpstreamClient:
    """Shared HTTP client for the metadata and streaming APIs.

    Every request is bounded by a single timeout and is never retried.
    """

    def __init__(
        self,
        settings: HttpSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the upstream client.

        Args:
            settings: HTTP settings (timeout, user agent)
            transport: Optional transport override, used by tests
        """
        self.settings = settings or HttpSettings()
        self._client = httpx.AsyncClient(
            timeout=self.settings.timeout_seconds,
            transport=transport,
            follow_redirects=False,
        )

    async def request(self, target: UpstreamRequest) -> Any:
        """Perform ``target`` and return its parsed body.

        Returns:
            The decoded JSON body, or the raw bytes when the body is not JSON.

        Raises:
            UpstreamError: upstream answered with a status other than 200
            UpstreamTimeoutError: no complete response within the timeout
            NetworkError: DNS, connection or other transport failure
        """
        logger.info("Making request to: %s%s", target.host, target.path)

        try:
            response = await self._client.request(
                target.method,
                target.url,
                headers=target.headers,
                params=target.params or None,
            )
        except httpx.TimeoutException as e:
            logger.error(
                "Request timed out after %sms", int(self.settings.timeout_seconds * 1000)
            )
            raise UpstreamTimeoutError("Request timeout") from e
        except httpx.RequestError as e:
            logger.error("Request error for %s: %s", target.host, e)
            raise NetworkError(f"Network error: {e}") from e

        logger.debug("Response status code: %s", response.status_code)

        try:
            parsed: Any = response.json()
        except ValueError:
            parsed = None
            if response.status_code == 200:
                # Not JSON: hand the raw bytes back (image responses)
                return response.content

        if response.status_code != 200:
            error_message = "Unknown error"
            if isinstance(parsed, dict) and parsed.get("message"):
                error_message = str(parsed["message"])
            logger.error("API Error Response (%s): %s", response.status_code, parsed)
            raise UpstreamError(
                f"API Error ({response.status_code}): {error_message}",
                upstream_status=response.status_code,
            )

        return parsed

    async def fetch_binary(
        self, url: str, headers: Optional[dict[str, str]] = None
    ) -> bytes:
        """Download ``url`` as raw bytes, following at most one redirect."""
        request_headers = {"User-Agent": self.settings.user_agent, **(headers or {})}

        response = await self._get_binary(url, request_headers)
        if response.status_code in _REDIRECT_STATUSES:
            location = response.headers.get("location")
            if not location:
                raise UpstreamError(
                    f"Failed to fetch poster: HTTP {response.status_code}",
                    upstream_status=response.status_code,
                )
            redirect_url = str(response.url.join(location))
            logger.info("Following redirect to: %s", redirect_url)
            response = await self._get_binary(redirect_url, request_headers)
            if response.status_code != 200:
                raise UpstreamError(
                    f"Failed to fetch poster after redirect: HTTP {response.status_code}",
                    upstream_status=response.status_code,
                )

        if response.status_code != 200:
            logger.error("Poster fetch failed with status: %s", response.status_code)
            raise UpstreamError(
                f"Failed to fetch poster: HTTP {response.status_code}",
                upstream_status=response.status_code,
            )
        if not response.content:
            raise UpstreamError("Received empty poster data")
        return response.content

    async def _get_binary(self, url: str, headers: dict[str, str]) -> httpx.Response:
        try:
            return await self._client.get(url, headers=headers)
        except httpx.TimeoutException as e:
            raise UpstreamTimeoutError("Poster request timeout") from e
        except httpx.RequestError as e:
            raise NetworkError(f"Poster request failed: {e}") from e

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> UpstreamClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
