from domain.schemas.errors import ErrorEnvelope
from domain.schemas.movies import MovieRecord, StreamingFragment
from domain.schemas.posters import PosterUploadResponse

__all__ = [
    "ErrorEnvelope",
    "MovieRecord",
    "PosterUploadResponse",
    "StreamingFragment",
]
