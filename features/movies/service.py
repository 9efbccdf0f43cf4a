from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

from fastapi import Request

from api.metadata.omdb import OMDbClient
from api.metadata.streaming import StreamingAvailabilityClient
from api.upstream import UpstreamClient
from domain.errors import (
    APIError,
    ErrorKind,
    NotFoundError,
    ValidationError,
    is_kind,
)
from domain.identifiers import MISSING_IMDB_ID_MESSAGE, is_valid_imdb_id, require_imdb_id
from domain.schemas import MovieRecord

logger = logging.getLogger(__name__)

INVALID_DETAIL_MESSAGE = "The remote detail server returned an invalid response"
SUBSCRIPTION_MESSAGE = "API subscription error"
POSTER_UNAVAILABLE_MESSAGE = "The image could not be found or could not be read"

_OMDB_MISSING = {"", "N/A"}


def select_poster_url(show: dict[str, Any], metadata: dict[str, Any]) -> Optional[str]:
    """Pick the best poster URL, preferring large streaming posters over OMDb's."""
    image_set = show.get("imageSet") or {}
    vertical = image_set.get("verticalPoster") or {}
    horizontal = image_set.get("horizontalPoster") or {}

    candidates = [
        vertical.get("w720"),
        vertical.get("w480"),
        vertical.get("w360"),
        horizontal.get("w720"),
    ]
    for candidate in candidates:
        if candidate:
            return candidate

    omdb_poster = metadata.get("Poster")
    if omdb_poster and omdb_poster not in _OMDB_MISSING:
        return omdb_poster
    return None


class MovieService:
    """Combine OMDb metadata with streaming availability data."""

    def __init__(
        self,
        omdb_client: OMDbClient,
        streaming_client: StreamingAvailabilityClient,
        upstream: UpstreamClient,
    ) -> None:
        self.omdb_client = omdb_client
        self.streaming_client = streaming_client
        self.upstream = upstream

    async def search_by_title(self, title: Optional[str]) -> list[MovieRecord]:
        if not title or not title.strip():
            raise ValidationError("You must supply a title!")

        try:
            matches = await self.streaming_client.search_title(title)
            if not matches:
                logger.info("No movies found in response for '%s'", title)
                raise NotFoundError(f"No movies found with title: {title}")

            records = await asyncio.gather(*(self._merge_match(match) for match in matches))
        except Exception as e:
            if is_kind(e, ErrorKind.VALIDATION, ErrorKind.NOT_FOUND):
                raise
            logger.error("Search error for '%s': %s", title, e)
            raise APIError(INVALID_DETAIL_MESSAGE) from e

        results = [record for record in records if record is not None]
        if not results:
            raise NotFoundError(f"No movies found with title: {title}")
        return results

    async def _merge_match(self, match: dict[str, Any]) -> Optional[MovieRecord]:
        imdb_id = match.get("imdbId")
        try:
            if not is_valid_imdb_id(imdb_id):
                raise ValidationError(f"Invalid IMDb ID in search match: {imdb_id!r}")
            metadata = await self.omdb_client.require_title(imdb_id)
            return MovieRecord.merge(metadata, match)
        except Exception as e:  # noqa: BLE001
            # TODO: report dropped matches to the caller instead of only logging them
            logger.warning("Failed to get OMDb data for %s: %s", imdb_id, e)
            return None

    async def get_by_id(self, imdb_id: Optional[str]) -> MovieRecord:
        imdb_id = require_imdb_id(imdb_id)

        show, metadata = await asyncio.gather(
            self.streaming_client.get_show(imdb_id),
            self.omdb_client.get_title(imdb_id),
            return_exceptions=True,
        )

        if isinstance(metadata, dict) and metadata.get("Response") == "False":
            raise ValidationError(metadata.get("Error") or "Incorrect IMDb ID.")

        for outcome in (show, metadata):
            if isinstance(outcome, BaseException):
                if is_kind(outcome, ErrorKind.VALIDATION):
                    raise outcome
                raise self._classify_detail_error(outcome) from outcome

        try:
            return MovieRecord.merge(metadata, show)
        except Exception as e:  # noqa: BLE001
            raise self._classify_detail_error(e) from e

    @staticmethod
    def _classify_detail_error(exc: BaseException) -> APIError:
        logger.error("Detail lookup failed: %s", exc)
        if "not subscribed" in str(exc):
            return APIError(SUBSCRIPTION_MESSAGE, 403)
        return APIError(INVALID_DETAIL_MESSAGE)

    async def get_poster(self, imdb_id: Optional[str]) -> bytes:
        if not imdb_id or not imdb_id.strip():
            raise ValidationError(MISSING_IMDB_ID_MESSAGE)
        imdb_id = imdb_id.strip()
        if not is_valid_imdb_id(imdb_id):
            logger.error("Refusing poster lookup for malformed id %r", imdb_id)
            raise APIError(POSTER_UNAVAILABLE_MESSAGE)

        try:
            show, metadata = await asyncio.gather(
                self.streaming_client.get_show(imdb_id),
                self.omdb_client.require_title(imdb_id),
                return_exceptions=True,
            )
            for outcome in (show, metadata):
                if isinstance(outcome, BaseException):
                    raise outcome

            poster_url = select_poster_url(show, metadata)
            if not poster_url:
                raise APIError(f"No poster available for movie with IMDB ID: {imdb_id}")

            logger.info("Attempting to fetch poster from: %s", poster_url)
            return await self.upstream.fetch_binary(poster_url, headers=_poster_headers(poster_url))
        except Exception as e:
            if is_kind(e, ErrorKind.VALIDATION):
                raise
            logger.error("Poster lookup failed for %s: %s", imdb_id, e)
            raise APIError(POSTER_UNAVAILABLE_MESSAGE) from e


def _poster_headers(poster_url: str) -> dict[str, str]:
    referer = (
        "https://streaming-availability.p.rapidapi.com/"
        if "rapidapi" in poster_url
        else "http://www.omdbapi.com/"
    )
    return {
        "Accept": "image/webp,image/apng,image/*,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.9",
        "Referer": referer,
    }


def get_movie_service(request: Request) -> MovieService:
    return request.app.state.movie_service
