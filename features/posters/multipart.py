"""Extraction of a single uploaded image from a ``multipart/form-data`` body."""

from __future__ import annotations

import logging
from typing import Optional

from domain.errors import ValidationError

logger = logging.getLogger(__name__)

_HEADER_SEPARATOR = b"\r\n\r\n"
_IMAGE_OCTET_STREAM = "application/octet-stream"


def parse_boundary(content_type: Optional[str]) -> str:
    """Return the boundary token declared in a multipart content type."""
    content_type = content_type or ""
    if "multipart/form-data" not in content_type.lower():
        raise ValidationError("Invalid content type. Must be multipart/form-data")

    for param in content_type.split(";")[1:]:
        name, _, value = param.strip().partition("=")
        if name.strip().lower() == "boundary":
            boundary = value.strip().strip('"')
            if boundary:
                return boundary
    raise ValidationError("No boundary found in content type")


def _part_content_type(header_block: bytes) -> str:
    for line in header_block.decode("latin-1").split("\r\n"):
        name, _, value = line.partition(":")
        if name.strip().lower() == "content-type":
            return value.strip().lower()
    return ""


def _is_image_part(content_type: str) -> bool:
    return content_type.startswith("image/") or content_type.startswith(_IMAGE_OCTET_STREAM)


def extract_image_payload(body: bytes, content_type: Optional[str]) -> bytes:
    """Return the raw bytes of the first image part in ``body``.

    Args:
        body: Complete request body
        content_type: Value of the request's ``Content-Type`` header

    Returns:
        Payload bytes exactly as uploaded

    Raises:
        ValidationError: the body is not multipart, has no image part, or the
            image part cannot be delimited
    """
    boundary = parse_boundary(content_type)
    delimiter = b"--" + boundary.encode("latin-1")
    closing = b"\r\n" + delimiter

    position = body.find(delimiter)
    while position != -1:
        headers_start = position + len(delimiter)
        if body.startswith(b"--", headers_start):
            # closing delimiter: no parts left
            break

        headers_end = body.find(_HEADER_SEPARATOR, headers_start)
        if headers_end == -1:
            if _is_image_part(_part_content_type(body[headers_start:].lstrip(b"\r\n"))):
                raise ValidationError("Could not locate image data in request")
            break

        header_block = body[headers_start:headers_end].lstrip(b"\r\n")
        if _is_image_part(_part_content_type(header_block)):
            data_start = headers_end + len(_HEADER_SEPARATOR)
            data_end = body.find(closing, data_start)
            if data_end == -1:
                raise ValidationError("Could not locate image data in request")

            payload = body[data_start:data_end]
            if not payload:
                raise ValidationError("No image data found")
            logger.debug("Extracted %d byte image payload", len(payload))
            return payload

        next_part = body.find(closing, headers_end)
        position = next_part + 2 if next_part != -1 else -1

    raise ValidationError("No image file found in request")
