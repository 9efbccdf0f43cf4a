from __future__ import annotations

from typing import Callable

import httpx
import pytest

from api.upstream import UpstreamClient
from app.settings import AppSettings, ServerSettings
from factories import OMDB_HOST, STREAMING_HOST, FakeUpstream


@pytest.fixture
def settings(tmp_path) -> AppSettings:
    settings = AppSettings(server=ServerSettings(poster_dir=tmp_path / "posters"))
    settings.omdb.api_key = "omdb-key"
    settings.omdb.host = OMDB_HOST
    settings.streaming.api_key = "streaming-key"
    settings.streaming.host = STREAMING_HOST
    return settings


@pytest.fixture
def fake_upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def upstream_factory(
    settings: AppSettings, fake_upstream: FakeUpstream
) -> Callable[[], UpstreamClient]:
    def factory() -> UpstreamClient:
        return UpstreamClient(settings.http, transport=httpx.MockTransport(fake_upstream))

    return factory
