from __future__ import annotations

import logging
from typing import Any

from api.upstream import UpstreamClient, UpstreamRequest
from app.settings import StreamingSettings
from domain.errors import ResponseParseError

logger = logging.getLogger(__name__)


class StreamingAvailabilityClient:
    """Client for the Streaming Availability API (RapidAPI).

    Documentation: https://docs.movieofthenight.com/
    """

    def __init__(
        self, upstream: UpstreamClient, settings: StreamingSettings | None = None
    ) -> None:
        self.settings = settings or StreamingSettings()
        self._upstream = upstream

    def _get_headers(self) -> dict[str, str]:
        """Get RapidAPI authentication headers."""
        return {
            "X-RapidAPI-Key": self.settings.api_key,
            "X-RapidAPI-Host": self.settings.host,
            "Content-Type": "application/json",
        }

    async def get_show(self, imdb_id: str) -> dict[str, Any]:
        """Get streaming details for a single title.

        Args:
            imdb_id: IMDb identifier (``tt`` followed by digits)

        Returns:
            The show object, including ``imageSet``, ``rating`` and ``streamingOptions``
        """
        target = UpstreamRequest(
            host=self.settings.host,
            path=f"/shows/{imdb_id}",
            headers=self._get_headers(),
            params={"country": self.settings.country},
        )
        payload = await self._upstream.request(target)
        if not isinstance(payload, dict):
            raise ResponseParseError("Failed to parse response: unexpected show payload")
        return payload

    async def search_title(self, title: str) -> list[dict[str, Any]]:
        """Search movies by title.

        Args:
            title: Movie title to search for

        Returns:
            List of matching show objects (possibly empty)
        """
        logger.info("Searching for movie title: %s", title)
        target = UpstreamRequest(
            host=self.settings.host,
            path="/shows/search/title",
            headers=self._get_headers(),
            params={
                "title": title,
                "country": self.settings.country,
                "show_type": "movie",
                "output_language": self.settings.output_language,
            },
        )
        payload = await self._upstream.request(target)
        if not isinstance(payload, list):
            raise ResponseParseError("Failed to parse response: unexpected search payload")

        shows = [item for item in payload if isinstance(item, dict)]
        logger.info("Found %d movies", len(shows))
        return shows
