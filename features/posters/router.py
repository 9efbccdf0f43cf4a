from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, Response

from domain.errors import ErrorKind, ValidationError, is_kind
from domain.identifiers import require_imdb_id
from domain.schemas import ErrorEnvelope, PosterUploadResponse
from features.posters.multipart import extract_image_payload
from features.posters.store import PosterStore, get_poster_store

router = APIRouter(prefix="/posters", tags=["posters"])


@router.post(
    "/add/{imdb_id:path}",
    response_model=PosterUploadResponse,
    responses={400: {"model": ErrorEnvelope}, 500: {"model": ErrorEnvelope}},
)
async def upload_poster(
    imdb_id: str,
    request: Request,
    poster_store: PosterStore = Depends(get_poster_store),
) -> PosterUploadResponse:
    """Upload a JPEG poster for a movie as multipart/form-data"""
    content_type = request.headers.get("content-type", "")
    if "image/jpeg" not in content_type and "multipart/form-data" not in content_type:
        raise ValidationError("Only JPG images are supported")
    imdb_id = require_imdb_id(imdb_id)

    try:
        body = await request.body()
        image_data = extract_image_payload(body, content_type)
        await poster_store.put(imdb_id, image_data)
    except Exception as e:
        if is_kind(e, ErrorKind.VALIDATION, ErrorKind.API):
            raise
        raise ValidationError(str(e)) from e

    return PosterUploadResponse(path=f"/posters/{imdb_id}")


@router.get(
    "/{imdb_id:path}",
    response_class=Response,
    responses={
        200: {"content": {"image/jpeg": {}}},
        400: {"model": ErrorEnvelope},
        500: {"model": ErrorEnvelope},
    },
)
async def get_poster(
    imdb_id: str,
    poster_store: PosterStore = Depends(get_poster_store),
) -> Response:
    """Serve a stored poster, or stream one fetched from the upstream APIs"""
    if imdb_id == "add" or imdb_id.startswith("add/"):
        raise HTTPException(status_code=404)
    poster = await poster_store.get(imdb_id)
    return Response(content=poster, media_type="image/jpeg")
