"""Streaming Availability API client module."""

from api.metadata.streaming.client import StreamingAvailabilityClient

__all__ = ["StreamingAvailabilityClient"]
