from __future__ import annotations

import logging
from typing import Any

from api.upstream import UpstreamClient, UpstreamRequest
from app.settings import OMDbSettings
from domain.errors import ResponseParseError, UpstreamError

logger = logging.getLogger(__name__)


class OMDbClient:
    """Client for the OMDb metadata API.

    Documentation: https://www.omdbapi.com/
    """

    def __init__(self, upstream: UpstreamClient, settings: OMDbSettings | None = None) -> None:
        self.settings = settings or OMDbSettings()
        self._upstream = upstream

    async def get_title(self, imdb_id: str) -> dict[str, Any]:
        """Fetch the raw OMDb record for ``imdb_id``.

        The payload is returned as-is, including ``{"Response": "False"}``
        answers for identifiers OMDb does not know about.
        """
        target = UpstreamRequest(
            host=self.settings.host,
            path="/",
            params={"i": imdb_id, "apikey": self.settings.api_key},
        )
        payload = await self._upstream.request(target)
        if not isinstance(payload, dict):
            raise ResponseParseError("Failed to parse response: OMDb returned an unexpected body")
        return payload

    async def require_title(self, imdb_id: str) -> dict[str, Any]:
        """Fetch the OMDb record for ``imdb_id``, failing when OMDb reports an error."""
        payload = await self.get_title(imdb_id)
        if payload.get("Error") or payload.get("Response") == "False":
            error = payload.get("Error") or "Incorrect IMDb ID."
            logger.debug("OMDb rejected %s: %s", imdb_id, error)
            raise UpstreamError(f"OMDb API error: {error}")
        return payload
