"""Tests for the HTTP snapshot source against a local aiohttp server."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

import aiohttp
import pytest
from aiohttp import web
from aiohttp import test_utils

from pyfleet._transport import HttpSnapshotSource
from pyfleet.config import FleetConfig
from pyfleet.exceptions import FleetProtocolError, FleetTimeoutError, FleetTransportError
from pyfleet.models.position import Position

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


async def _fetch(handler: Handler, *, fetch_timeout: float = 1.5):
    app = web.Application()
    app.router.add_get("/status", handler)
    async with test_utils.TestServer(app) as server, aiohttp.ClientSession() as http:
        config = FleetConfig(status_url=str(server.make_url("/status")), fetch_timeout=fetch_timeout)
        return await HttpSnapshotSource(config, http).fetch_snapshot()


@pytest.mark.asyncio
async def test_fetch_snapshot_parses_records() -> None:
    async def handler(_request: web.Request) -> web.Response:
        return web.json_response(
            {
                "V1": {"lat": 28.6139, "lon": 77.209, "speed": 35, "eta": 12, "distance": 2.3},
                "V2": {"lat": 28.6239},
            }
        )

    snapshot = await _fetch(handler)

    assert list(snapshot) == ["V1", "V2"]
    assert snapshot["V1"].position == Position(28.6139, 77.209)
    assert snapshot["V1"].speed == 35
    assert not snapshot["V2"].has_position


@pytest.mark.asyncio
async def test_non_200_raises_transport_error() -> None:
    async def handler(_request: web.Request) -> web.Response:
        return web.Response(status=503, text="maintenance")

    with pytest.raises(FleetTransportError) as exc_info:
        await _fetch(handler)

    assert exc_info.value.status_code == 503
    assert "maintenance" in str(exc_info.value)
    assert exc_info.value.url.endswith("/status")


@pytest.mark.asyncio
async def test_invalid_json_raises_protocol_error() -> None:
    async def handler(_request: web.Request) -> web.Response:
        return web.Response(text="<html>oops</html>")

    with pytest.raises(FleetProtocolError):
        await _fetch(handler)


@pytest.mark.asyncio
async def test_non_utf8_body_raises_protocol_error() -> None:
    async def handler(_request: web.Request) -> web.Response:
        return web.Response(
            body=b'{"A": {"lat": 1, "lon": 2, "x": "\xff\xfe"}}',
            content_type="application/json",
        )

    with pytest.raises(FleetProtocolError) as exc_info:
        await _fetch(handler)

    assert exc_info.value.url.endswith("/status")


@pytest.mark.asyncio
async def test_non_object_json_raises_protocol_error() -> None:
    async def handler(_request: web.Request) -> web.Response:
        return web.json_response([{"lat": 1, "lon": 2}])

    with pytest.raises(FleetProtocolError):
        await _fetch(handler)


@pytest.mark.asyncio
async def test_slow_endpoint_raises_timeout_error() -> None:
    async def handler(_request: web.Request) -> web.Response:
        await asyncio.sleep(0.5)
        return web.json_response({})

    with pytest.raises(FleetTimeoutError) as exc_info:
        await _fetch(handler, fetch_timeout=0.05)

    assert isinstance(exc_info.value, TimeoutError)
    assert isinstance(exc_info.value, FleetTransportError)


@pytest.mark.asyncio
async def test_connection_refused_raises_transport_error() -> None:
    async with test_utils.TestServer(web.Application()) as server:
        url = str(server.make_url("/status"))
    # Server is closed now; nothing listens on that port.
    async with aiohttp.ClientSession() as http:
        source = HttpSnapshotSource(FleetConfig(status_url=url), http)
        with pytest.raises(FleetTransportError) as exc_info:
            await source.fetch_snapshot()

    assert exc_info.value.status_code is None
