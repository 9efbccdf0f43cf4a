"""
Movie API - FastAPI application.

Provides endpoints for:
- Searching movies by title (OMDb + Streaming Availability)
- Fetching combined movie details by IMDb identifier
- Uploading and serving poster images
"""
from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from api.metadata.omdb import OMDbClient
from api.metadata.streaming import StreamingAvailabilityClient
from api.upstream import UpstreamClient
from app.middleware import install_error_handling
from app.settings import AppSettings, get_settings
from features.movies.router import router as movies_router
from features.movies.service import MovieService
from features.posters.router import router as posters_router
from features.posters.store import PosterStore

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def create_app(
    settings: AppSettings | None = None,
    *,
    upstream: UpstreamClient | None = None,
) -> FastAPI:
    """Build the application.

    Args:
        settings: Application settings (defaults to the environment)
        upstream: Optional pre-built upstream client, used by tests
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        settings.ensure_directories()
        client = upstream or UpstreamClient(settings.http)
        omdb_client = OMDbClient(client, settings.omdb)
        streaming_client = StreamingAvailabilityClient(client, settings.streaming)
        movie_service = MovieService(omdb_client, streaming_client, client)

        app.state.settings = settings
        app.state.movie_service = movie_service
        app.state.poster_store = PosterStore(
            settings.server.poster_dir, movie_service, omdb_client
        )
        logger.info("Posters directory: %s", settings.server.poster_dir.resolve())
        yield
        # Shutdown
        await client.close()

    app = FastAPI(
        title="Movie API",
        description="Movie search, details and posters combined from OMDb and Streaming Availability",
        version="0.1.0",
        lifespan=lifespan,
    )
    install_error_handling(app)
    app.include_router(movies_router)
    app.include_router(posters_router)
    return app


def main() -> None:
    settings = get_settings()
    configure_logging(settings.server.log_level)
    logger.info("Server running at http://%s:%s/", settings.server.host, settings.server.port)
    uvicorn.run(
        "app.main:create_app",
        factory=True,
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.server.reload,
        log_level=settings.server.log_level.lower(),
    )


if __name__ == "__main__":
    main()
