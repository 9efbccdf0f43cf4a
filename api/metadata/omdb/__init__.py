"""OMDb (Open Movie Database) API client module."""

from api.metadata.omdb.client import OMDbClient

__all__ = ["OMDbClient"]
