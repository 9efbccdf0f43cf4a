"""HTTP transport shared by the upstream API clients."""

from api.upstream.client import UpstreamClient, UpstreamRequest

__all__ = ["UpstreamClient", "UpstreamRequest"]
