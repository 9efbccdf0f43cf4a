from __future__ import annotations

import logging
from pathlib import Path

from fastapi import Request

from api.metadata.omdb import OMDbClient
from domain.errors import APIError, ValidationError
from domain.identifiers import is_valid_imdb_id, require_imdb_id
from features.movies.service import MovieService

logger = logging.getLogger(__name__)


class PosterStore:
    """Poster images on local disk, falling back to the upstream APIs."""

    def __init__(
        self,
        poster_dir: Path,
        movie_service: MovieService,
        omdb_client: OMDbClient,
    ) -> None:
        self.poster_dir = poster_dir
        self.movie_service = movie_service
        self.omdb_client = omdb_client

    def path_for(self, imdb_id: str) -> Path:
        return self.poster_dir / f"{imdb_id}.jpg"

    def exists(self, imdb_id: str) -> bool:
        return is_valid_imdb_id(imdb_id) and self.path_for(imdb_id).is_file()

    async def get(self, imdb_id: str) -> bytes:
        """Return the stored poster, or fetch it upstream without storing it."""
        logger.info("Getting poster for movie: %s", imdb_id)
        if self.exists(imdb_id):
            logger.info("Serving locally stored poster")
            return self.path_for(imdb_id).read_bytes()

        logger.info("Fetching poster from API")
        return await self.movie_service.get_poster(imdb_id)

    async def put(self, imdb_id: str, data: bytes) -> Path:
        """Store ``data`` as the poster for ``imdb_id`` after checking OMDb knows it."""
        imdb_id = require_imdb_id(imdb_id)
        try:
            await self.omdb_client.require_title(imdb_id)
        except Exception as e:  # noqa: BLE001
            raise ValidationError(f"Failed to get OMDb data: {e}") from e

        destination = self.path_for(imdb_id)
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_bytes(data)
        except OSError as e:
            logger.error("Failed to write poster %s: %s", destination, e)
            raise APIError("Failed to store poster") from e

        logger.info("Stored poster for %s (%d bytes)", imdb_id, len(data))
        return destination


def get_poster_store(request: Request) -> PosterStore:
    return request.app.state.poster_store
