"""Schema for failure responses."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ErrorEnvelope(BaseModel):
    """Body returned for every failed request."""

    error: bool = Field(default=True, description="Always true for failures")
    message: str = Field(..., description="Human readable failure reason")
