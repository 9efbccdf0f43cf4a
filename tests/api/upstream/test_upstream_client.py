from __future__ import annotations

import asyncio

import httpx
import pytest

from api.upstream import UpstreamClient, UpstreamRequest
from app.settings import HttpSettings
from domain.errors import ErrorKind, NetworkError, UpstreamError, UpstreamTimeoutError


def _run(handler, coro_fn):
    async def runner():
        async with UpstreamClient(HttpSettings(), transport=httpx.MockTransport(handler)) as client:
            return await coro_fn(client)

    return asyncio.run(runner())


def test_request_returns_parsed_json_and_sends_target() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"Title": "Inception"})

    target = UpstreamRequest(
        host="api.test",
        path="/shows/tt1375666",
        headers={"X-RapidAPI-Key": "secret"},
        params={"country": "us"},
    )
    result = _run(handler, lambda client: client.request(target))

    assert result == {"Title": "Inception"}
    request = seen[0]
    assert request.method == "GET"
    assert str(request.url) == "https://api.test/shows/tt1375666?country=us"
    assert request.headers["X-RapidAPI-Key"] == "secret"


def test_request_non_200_carries_status_and_message() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, json={"message": "You are not subscribed to this API."})

    with pytest.raises(UpstreamError) as exc_info:
        _run(handler, lambda client: client.request(UpstreamRequest(host="api.test", path="/")))

    assert exc_info.value.upstream_status == 403
    assert exc_info.value.kind is ErrorKind.UPSTREAM
    assert "not subscribed" in exc_info.value.message
    assert exc_info.value.message.startswith("API Error (403)")


def test_request_non_200_without_message_reports_unknown_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, content=b"<html>bad gateway</html>")

    with pytest.raises(UpstreamError) as exc_info:
        _run(handler, lambda client: client.request(UpstreamRequest(host="api.test", path="/")))

    assert exc_info.value.message == "API Error (502): Unknown error"


def test_request_passes_non_json_body_through_as_bytes() -> None:
    payload = b"\xff\xd8\xff\xe0binary-jpeg"

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=payload, headers={"content-type": "image/jpeg"})

    result = _run(handler, lambda client: client.request(UpstreamRequest(host="img.test", path="/p.jpg")))

    assert result == payload


def test_request_timeout_raises_timeout_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(UpstreamTimeoutError) as exc_info:
        _run(handler, lambda client: client.request(UpstreamRequest(host="api.test", path="/")))

    assert exc_info.value.message == "Request timeout"
    assert exc_info.value.kind is ErrorKind.TIMEOUT


def test_request_transport_failure_raises_network_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("name resolution failed", request=request)

    with pytest.raises(NetworkError) as exc_info:
        _run(handler, lambda client: client.request(UpstreamRequest(host="api.test", path="/")))

    assert exc_info.value.message.startswith("Network error:")
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


def test_fetch_binary_follows_single_redirect() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/old.jpg":
            return httpx.Response(302, headers={"location": "/new.jpg"})
        return httpx.Response(200, content=b"poster-bytes")

    result = _run(handler, lambda client: client.fetch_binary("https://img.test/old.jpg"))

    assert result == b"poster-bytes"


def test_fetch_binary_rejects_second_redirect() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(301, headers={"location": "https://img.test/again.jpg"})

    with pytest.raises(UpstreamError, match="after redirect"):
        _run(handler, lambda client: client.fetch_binary("https://img.test/start.jpg"))


def test_fetch_binary_rejects_empty_body() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"")

    with pytest.raises(UpstreamError, match="empty poster data"):
        _run(handler, lambda client: client.fetch_binary("https://img.test/empty.jpg"))


def test_fetch_binary_sends_browser_headers() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, content=b"jpeg")

    _run(
        handler,
        lambda client: client.fetch_binary("https://img.test/a.jpg", headers={"Referer": "http://www.omdbapi.com/"}),
    )

    assert seen[0].headers["Referer"] == "http://www.omdbapi.com/"
    assert seen[0].headers["User-Agent"].startswith("Mozilla/5.0")
