"""Schemas for aggregated movie records."""

from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class StreamingFragment(BaseModel):
    """Streaming availability details attached to a movie record."""

    poster: Optional[str] = Field(None, description="Vertical poster URL (w720)")
    rating: Optional[Union[int, float]] = Field(None, description="Streaming provider rating")
    options: Optional[Any] = Field(
        None, description="Per-provider streaming options, as returned upstream"
    )

    @classmethod
    def from_show(cls, show: dict[str, Any]) -> "StreamingFragment":
        image_set = show.get("imageSet") or {}
        vertical = image_set.get("verticalPoster") or {}
        return cls(
            poster=vertical.get("w720"),
            rating=show.get("rating"),
            options=show.get("streamingOptions"),
        )


class MovieRecord(BaseModel):
    """Metadata API record merged with its streaming fragment.

    Metadata fields (``Title``, ``Year``, ``Genre``, ``Ratings`` ...) are kept
    exactly as the metadata API names them.
    """

    model_config = ConfigDict(
        extra="allow",
        json_schema_extra={
            "example": {
                "Title": "Inception",
                "Year": "2010",
                "imdbID": "tt1375666",
                "Genre": "Action, Adventure, Sci-Fi",
                "Poster": "https://m.media-amazon.com/images/M/poster.jpg",
                "Response": "True",
                "streaming": {
                    "poster": "https://cdn.movieofthenight.com/poster/w720.jpg",
                    "rating": 87,
                    "options": {"us": [{"service": {"id": "netflix"}, "type": "subscription"}]},
                },
            }
        },
    )

    streaming: StreamingFragment

    @classmethod
    def merge(cls, metadata: dict[str, Any], show: dict[str, Any]) -> "MovieRecord":
        fields = {key: value for key, value in metadata.items() if key != "streaming"}
        return cls(**fields, streaming=StreamingFragment.from_show(show))
