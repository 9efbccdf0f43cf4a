from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict


load_dotenv()

_DEFAULT_POSTER_DIR = Path(
    os.getenv("MOVIEAPI_POSTER_DIR")
    or os.getenv("POSTERS_DIR")
    or "posters"
)


class ServerSettings(BaseModel):
    host: str = "127.0.0.1"
    port: int = 3000
    reload: bool = False
    log_level: str = "INFO"
    poster_dir: Path = _DEFAULT_POSTER_DIR


class HttpSettings(BaseModel):
    timeout_seconds: float = 10.0
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
    )


class OMDbSettings(BaseModel):
    api_key: str = ""
    host: str = "www.omdbapi.com"


class StreamingSettings(BaseModel):
    api_key: str = ""
    host: str = "streaming-availability.p.rapidapi.com"
    country: str = "us"
    output_language: str = "en"


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="MOVIEAPI_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    server: ServerSettings = ServerSettings()
    http: HttpSettings = HttpSettings()
    omdb: OMDbSettings = OMDbSettings()
    streaming: StreamingSettings = StreamingSettings()

    def ensure_directories(self) -> None:
        self.server.poster_dir.mkdir(parents=True, exist_ok=True)


@lru_cache()
def get_settings() -> AppSettings:
    settings = AppSettings()

    # Fallback to the environment variable names used by older deployments
    if not settings.omdb.api_key:
        legacy_omdb_key = os.getenv("OMDB_API_KEY")
        if legacy_omdb_key:
            settings.omdb.api_key = legacy_omdb_key
    if not settings.streaming.api_key:
        legacy_streaming_key = os.getenv("STREAMING_API_KEY")
        if legacy_streaming_key:
            settings.streaming.api_key = legacy_streaming_key
    legacy_streaming_host = os.getenv("STREAMING_API_HOST")
    if legacy_streaming_host and "MOVIEAPI_STREAMING__HOST" not in os.environ:
        settings.streaming.host = legacy_streaming_host
    legacy_port = os.getenv("PORT")
    if legacy_port and legacy_port.isdigit() and "MOVIEAPI_SERVER__PORT" not in os.environ:
        settings.server.port = int(legacy_port)

    settings.ensure_directories()
    return settings
