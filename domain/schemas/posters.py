"""Schemas for poster endpoints."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class PosterUploadResponse(BaseModel):
    """Response returned after a poster upload."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": True,
                "message": "Poster uploaded successfully",
                "path": "/posters/tt1375666",
            }
        }
    )

    success: bool = Field(default=True)
    message: str = Field(default="Poster uploaded successfully")
    path: str = Field(..., description="Path the poster can be fetched from")
