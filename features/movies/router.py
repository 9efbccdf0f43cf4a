from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from domain.schemas import ErrorEnvelope, MovieRecord
from features.movies.service import MovieService, get_movie_service

router = APIRouter(prefix="/movies", tags=["movies"])

_ERROR_RESPONSES = {
    400: {"model": ErrorEnvelope},
    403: {"model": ErrorEnvelope},
    404: {"model": ErrorEnvelope},
    500: {"model": ErrorEnvelope},
}


@router.get("/search/{title:path}", response_model=list[MovieRecord], responses=_ERROR_RESPONSES)
async def search_movies(
    title: str,
    response: Response,
    movie_service: MovieService = Depends(get_movie_service),
) -> list[MovieRecord]:
    """Search movies by title across the streaming and metadata APIs"""
    results = await movie_service.search_by_title(title)
    response.headers["Cache-Control"] = "no-cache"
    return results


@router.get("/data/{imdb_id:path}", response_model=MovieRecord, responses=_ERROR_RESPONSES)
async def get_movie_data(
    imdb_id: str,
    response: Response,
    movie_service: MovieService = Depends(get_movie_service),
) -> MovieRecord:
    """Fetch combined metadata and streaming details for an IMDb identifier"""
    record = await movie_service.get_by_id(imdb_id)
    response.headers["Cache-Control"] = "no-cache"
    return record
