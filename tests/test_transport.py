from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

import aiohttp
import pytest
from aiohttp import test_utils, web

from pyweatherfetch._cancel import CancellationToken
from pyweatherfetch._transport import HttpTransport, parse_body, raise_for_status, redact_params
from pyweatherfetch.config import WeatherConfig
from pyweatherfetch.exceptions import (
    WeatherAuthenticationError,
    WeatherHttpError,
    WeatherLocationNotFoundError,
    WeatherParseError,
    WeatherRateLimitError,
    WeatherRequestAbortedError,
    WeatherServerError,
    WeatherTransportError,
)

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


async def _start_server(handler: Handler) -> test_utils.TestServer:
    app = web.Application()
    app.router.add_get("/data/2.5/weather", handler)
    server = test_utils.TestServer(app)
    await server.start_server()
    return server


def _config(server: test_utils.TestServer) -> WeatherConfig:
    return WeatherConfig(api_key="test-key", base_url=str(server.make_url("/")), request_timeout=5)


@pytest.mark.parametrize(
    ("status", "error_cls", "message"),
    [
        (401, WeatherAuthenticationError, "Invalid API key"),
        (404, WeatherLocationNotFoundError, "Location not found"),
        (429, WeatherRateLimitError, "Too many requests, try again later"),
        (500, WeatherServerError, "Server error"),
        (503, WeatherHttpError, "Failed to fetch weather data"),
        (302, WeatherHttpError, "Failed to fetch weather data"),
    ],
)
def test_raise_for_status_taxonomy(status: int, error_cls: type[Exception], message: str) -> None:
    with pytest.raises(error_cls) as exc_info:
        raise_for_status(status, body="nope")

    assert str(exc_info.value) == message
    assert exc_info.value.status_code == status  # type: ignore[attr-defined]


def test_raise_for_status_accepts_2xx() -> None:
    raise_for_status(200)
    raise_for_status(204)


def test_parse_body_rejects_invalid_json() -> None:
    with pytest.raises(WeatherParseError) as exc_info:
        parse_body(b"<html>oops</html>")
    assert str(exc_info.value) == "Failed to fetch weather data"


def test_parse_body_rejects_invalid_utf8() -> None:
    with pytest.raises(WeatherParseError) as exc_info:
        parse_body(b'{"name": "\xff\xfe"}')
    assert str(exc_info.value) == "Failed to fetch weather data"


def test_redact_params_masks_api_key_only() -> None:
    params = {"q": "Berlin", "appid": "0123456789abcdef", "units": "metric"}

    redacted = redact_params(params)

    assert redacted == {"q": "Berlin", "appid": "<redacted>", "units": "metric"}
    assert params["appid"] == "0123456789abcdef"


@pytest.mark.asyncio
async def test_fetch_current_sends_query_and_returns_json() -> None:
    seen: dict[str, str] = {}

    async def _handler(request: web.Request) -> web.Response:
        seen.update(request.query)
        return web.json_response({"name": "São Paulo", "main": {"temp": 25.0}})

    server = await _start_server(_handler)
    try:
        async with aiohttp.ClientSession() as http:
            transport = HttpTransport(_config(server), http)
            payload = await transport.fetch_current("São Paulo", CancellationToken())
    finally:
        await server.close()

    assert payload["name"] == "São Paulo"
    assert seen == {"q": "São Paulo", "appid": "test-key", "units": "metric"}


@pytest.mark.asyncio
async def test_fetch_current_maps_error_status() -> None:
    async def _handler(_request: web.Request) -> web.Response:
        return web.json_response({"cod": "404", "message": "city not found"}, status=404)

    server = await _start_server(_handler)
    try:
        async with aiohttp.ClientSession() as http:
            transport = HttpTransport(_config(server), http)
            with pytest.raises(WeatherLocationNotFoundError) as exc_info:
                await transport.fetch_current("Nowhereville", CancellationToken())
    finally:
        await server.close()

    assert exc_info.value.status_code == 404
    assert "city not found" in exc_info.value.detail


@pytest.mark.asyncio
async def test_fetch_current_rejects_non_json_body() -> None:
    async def _handler(_request: web.Request) -> web.Response:
        return web.Response(text="definitely not json")

    server = await _start_server(_handler)
    try:
        async with aiohttp.ClientSession() as http:
            transport = HttpTransport(_config(server), http)
            with pytest.raises(WeatherParseError):
                await transport.fetch_current("Berlin", CancellationToken())
    finally:
        await server.close()


@pytest.mark.asyncio
async def test_fetch_current_rejects_non_utf8_body() -> None:
    async def _handler(_request: web.Request) -> web.Response:
        return web.Response(body=b"\xff\xfe\x00{", content_type="application/json")

    server = await _start_server(_handler)
    try:
        async with aiohttp.ClientSession() as http:
            transport = HttpTransport(_config(server), http)
            with pytest.raises(WeatherParseError):
                await transport.fetch_current("Berlin", CancellationToken())
    finally:
        await server.close()


@pytest.mark.asyncio
async def test_cancelling_token_aborts_request() -> None:
    release = asyncio.Event()
    arrived = asyncio.Event()

    async def _handler(_request: web.Request) -> web.Response:
        arrived.set()
        await release.wait()
        return web.json_response({"name": "late"})

    server = await _start_server(_handler)
    try:
        async with aiohttp.ClientSession() as http:
            transport = HttpTransport(_config(server), http)
            token = CancellationToken()
            task = asyncio.create_task(transport.fetch_current("Berlin", token))
            await asyncio.wait_for(arrived.wait(), timeout=5)

            token.cancel()
            with pytest.raises(WeatherRequestAbortedError):
                await asyncio.wait_for(task, timeout=5)
    finally:
        release.set()
        await server.close()


@pytest.mark.asyncio
async def test_cancelled_token_never_dispatches() -> None:
    calls = 0

    async def _handler(_request: web.Request) -> web.Response:
        nonlocal calls
        calls += 1
        return web.json_response({})

    server = await _start_server(_handler)
    token = CancellationToken()
    token.cancel()
    try:
        async with aiohttp.ClientSession() as http:
            transport = HttpTransport(_config(server), http)
            with pytest.raises(WeatherRequestAbortedError):
                await transport.fetch_current("Berlin", token)
    finally:
        await server.close()

    assert calls == 0


@pytest.mark.asyncio
async def test_connection_failure_is_transport_error() -> None:
    async def _handler(_request: web.Request) -> web.Response:
        return web.json_response({})

    server = await _start_server(_handler)
    config = _config(server)
    await server.close()

    async with aiohttp.ClientSession() as http:
        transport = HttpTransport(config, http)
        with pytest.raises(WeatherTransportError) as exc_info:
            await transport.fetch_current("Berlin", CancellationToken())

    assert str(exc_info.value) == "Failed to fetch weather data"
    assert exc_info.value.status_code is None
