from __future__ import annotations

import re
from typing import Optional

from domain.errors import ValidationError

IMDB_ID_PATTERN = re.compile(r"^tt\d+$")

MISSING_IMDB_ID_MESSAGE = "You must supply an imdbID!"
INVALID_IMDB_ID_MESSAGE = 'Invalid IMDb ID format. Must be "tt" followed by digits'


def is_valid_imdb_id(value: Optional[str]) -> bool:
    return bool(value) and IMDB_ID_PATTERN.match(value) is not None


def require_imdb_id(value: Optional[str]) -> str:
    """Return the stripped identifier or raise a ValidationError."""
    if not value or not value.strip():
        raise ValidationError(MISSING_IMDB_ID_MESSAGE)
    imdb_id = value.strip()
    if not is_valid_imdb_id(imdb_id):
        raise ValidationError(INVALID_IMDB_ID_MESSAGE)
    return imdb_id
