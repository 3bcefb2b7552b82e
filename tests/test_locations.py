"""Tests for the fleet and simulated location providers."""

from __future__ import annotations

import asyncio
import random
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from typing import Any

import pytest
from aiohttp import ClientSession, ClientTimeout, web
from aiohttp import test_utils

from yardaudit._transport import HttpTransport
from yardaudit.audit import start_session
from yardaudit.exceptions import LocationSyncError, TransportError
from yardaudit.geofence import resolve_units_in_yard
from yardaudit.locations import (
    FleetLocationProvider,
    SimulatedLocationProvider,
    build_location_provider,
    parse_locations_response,
)
from yardaudit.models.unit import Unit
from yardaudit.roster import UNITS, YARD_GEOFENCES
from yardaudit.workflows import sync_locations

_T = datetime(2026, 1, 1, tzinfo=UTC)

SAMPLE_BODY: dict[str, Any] = {
    "vehicles": [
        {
            "id": "212014918",
            "name": "GST 01-01",
            "location": {"latitude": 37.0122, "longitude": -122.1966, "time": "2026-01-01T00:00:00Z"},
        },
        {
            "id": 212014919,
            "name": "GHM 08-01",
            "location": {"lat": 32.0, "lng": -105.0, "time": 1767225600000},
        },
    ]
}


class _FakeTransport:
    def __init__(self, body: Any = None, error: Exception | None = None) -> None:
        self._body = body
        self._error = error
        self.calls: list[tuple[str, dict[str, str]]] = []

    async def get_json(self, endpoint: str, *, headers: Mapping[str, str] | None = None) -> Any:
        self.calls.append((endpoint, dict(headers or {})))
        if self._error is not None:
            raise self._error
        return self._body


class _ScriptedRandom:
    """Returns pre-set draws in order."""

    def __init__(self, draws: Iterable[float]) -> None:
        self._draws = iter(draws)

    def random(self) -> float:
        return next(self._draws)


def _units(count: int) -> list[Unit]:
    return [Unit(id=f"U-{index}", category="Test") for index in range(count)]


class TestParseLocationsResponse:
    def test_nested_location_is_flattened(self) -> None:
        locations = parse_locations_response(SAMPLE_BODY)
        first, second = locations
        assert first.id == "212014918"
        assert first.name == "GST 01-01"
        assert first.latitude == pytest.approx(37.0122)
        assert first.longitude == pytest.approx(-122.1966)
        assert first.time == _T

    def test_short_coordinate_keys_and_epoch_ms(self) -> None:
        second = parse_locations_response(SAMPLE_BODY)[1]
        assert second.id == "212014919"
        assert second.position == (32.0, -105.0)
        assert second.time == _T

    def test_missing_vehicles_key(self) -> None:
        with pytest.raises(LocationSyncError, match="vehicles"):
            parse_locations_response({"data": []})

    def test_missing_location_field(self) -> None:
        with pytest.raises(LocationSyncError):
            parse_locations_response({"vehicles": [{"id": "1", "name": "GST 01-01"}]})


class TestFleetLocationProvider:
    @pytest.mark.asyncio
    async def test_sends_bearer_token(self) -> None:
        transport = _FakeTransport(body=SAMPLE_BODY)
        provider = FleetLocationProvider(transport, "secret-token")

        locations = await provider.fetch_locations()

        assert [location.name for location in locations] == ["GST 01-01", "GHM 08-01"]
        endpoint, headers = transport.calls[0]
        assert endpoint == "/v1/fleet/locations"
        assert headers["authorization"] == "Bearer secret-token"

    @pytest.mark.asyncio
    async def test_transport_error_becomes_sync_error(self) -> None:
        transport = _FakeTransport(error=TransportError("HTTP 401", status_code=401, endpoint="/v1/fleet/locations"))
        provider = FleetLocationProvider(transport, "bad-token")

        with pytest.raises(LocationSyncError) as exc_info:
            await provider.fetch_locations()

        assert isinstance(exc_info.value.__cause__, TransportError)

    @pytest.mark.asyncio
    async def test_malformed_body_is_sync_error(self) -> None:
        provider = FleetLocationProvider(_FakeTransport(body=["not", "a", "dict"]), "token")
        with pytest.raises(LocationSyncError):
            await provider.fetch_locations()


class TestHttpTransport:
    @pytest.mark.asyncio
    async def test_round_trip_against_local_server(self) -> None:
        seen: dict[str, str | None] = {}

        async def handler(request: web.Request) -> web.Response:
            seen["authorization"] = request.headers.get("Authorization")
            return web.json_response(SAMPLE_BODY)

        app = web.Application()
        app.router.add_get("/v1/fleet/locations", handler)
        server = test_utils.TestServer(app)
        await server.start_server()
        try:
            async with ClientSession() as http:
                transport = HttpTransport(str(server.make_url("/")), http)
                provider = FleetLocationProvider(transport, "live-token")
                locations = await provider.fetch_locations()
        finally:
            await server.close()

        assert len(locations) == 2
        assert seen["authorization"] == "Bearer live-token"

    @pytest.mark.asyncio
    async def test_non_2xx_raises_transport_error(self) -> None:
        async def handler(_request: web.Request) -> web.Response:
            return web.Response(status=503, text="maintenance")

        app = web.Application()
        app.router.add_get("/v1/fleet/locations", handler)
        server = test_utils.TestServer(app)
        await server.start_server()
        try:
            async with ClientSession() as http:
                transport = HttpTransport(str(server.make_url("/")), http)
                with pytest.raises(TransportError) as exc_info:
                    await transport.get_json("/v1/fleet/locations")
        finally:
            await server.close()

        assert exc_info.value.status_code == 503
        assert exc_info.value.endpoint == "/v1/fleet/locations"

    @pytest.mark.asyncio
    async def test_invalid_json_raises_transport_error(self) -> None:
        async def handler(_request: web.Request) -> web.Response:
            return web.Response(status=200, text="<html>")

        app = web.Application()
        app.router.add_get("/v1/fleet/locations", handler)
        server = test_utils.TestServer(app)
        await server.start_server()
        try:
            async with ClientSession() as http:
                transport = HttpTransport(str(server.make_url("/")), http)
                with pytest.raises(TransportError, match="Invalid JSON"):
                    await transport.get_json("/v1/fleet/locations")
        finally:
            await server.close()

    @pytest.mark.asyncio
    async def test_undecodable_body_raises_transport_error(self) -> None:
        async def handler(_request: web.Request) -> web.Response:
            return web.Response(
                status=200,
                body=b'{"vehicles": "\xff\xfe"}',
                content_type="application/json",
                charset="utf-8",
            )

        app = web.Application()
        app.router.add_get("/v1/fleet/locations", handler)
        server = test_utils.TestServer(app)
        await server.start_server()
        try:
            async with ClientSession() as http:
                transport = HttpTransport(str(server.make_url("/")), http)
                with pytest.raises(TransportError, match="Invalid JSON") as exc_info:
                    await transport.get_json("/v1/fleet/locations")
                session = start_session("Davenport", now=_T)
                outcome = await sync_locations(session, FleetLocationProvider(transport, "live-token"))
        finally:
            await server.close()

        assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)
        assert not outcome.ok
        assert outcome.session is session

    @pytest.mark.asyncio
    async def test_timeout_raises_transport_error(self) -> None:
        async def handler(_request: web.Request) -> web.Response:
            await asyncio.sleep(0.5)
            return web.json_response(SAMPLE_BODY)

        app = web.Application()
        app.router.add_get("/v1/fleet/locations", handler)
        server = test_utils.TestServer(app)
        await server.start_server()
        try:
            async with ClientSession(timeout=ClientTimeout(total=0.05)) as http:
                transport = HttpTransport(str(server.make_url("/")), http)
                with pytest.raises(TransportError, match="failed") as exc_info:
                    await transport.get_json("/v1/fleet/locations")
        finally:
            await server.close()

        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.__cause__, asyncio.TimeoutError)


class TestSimulatedLocationProvider:
    @pytest.mark.asyncio
    async def test_placement_follows_draws(self) -> None:
        davenport, movie_ranch = YARD_GEOFENCES.values()
        rng = _ScriptedRandom(
            [
                0.1, 0.5, 0.5,  # first yard, no jitter
                0.5, 0.0, 0.75,  # second yard, jittered
                0.9,  # away
            ]
        )
        provider = SimulatedLocationProvider(_units(3), rng=rng, delay=0, clock=lambda: _T)  # type: ignore[arg-type]

        first, second, third = await provider.fetch_locations()

        assert (first.id, first.name) == ("veh-0", "U-0")
        assert first.position == (davenport.latitude, davenport.longitude)
        assert second.latitude == pytest.approx(movie_ranch.latitude - 0.001)
        assert second.longitude == pytest.approx(movie_ranch.longitude + 0.0005)
        assert third.position == (32.0, -105.0)
        assert {location.time for location in (first, second, third)} == {_T}

    @pytest.mark.asyncio
    async def test_jitter_stays_inside_geofence(self) -> None:
        provider = SimulatedLocationProvider(_units(200), rng=random.Random(3), delay=0)
        locations = await provider.fetch_locations()

        in_davenport = set(resolve_units_in_yard(locations, "Davenport"))
        in_movie_ranch = set(resolve_units_in_yard(locations, "Movie Ranch"))
        away = {location.name for location in locations if location.position == (32.0, -105.0)}

        assert in_davenport.isdisjoint(in_movie_ranch)
        assert len(in_davenport) + len(in_movie_ranch) + len(away) == 200

    @pytest.mark.asyncio
    async def test_seeded_runs_are_reproducible(self) -> None:
        first = SimulatedLocationProvider(UNITS, rng=random.Random(42), delay=0, clock=lambda: _T)
        second = SimulatedLocationProvider(UNITS, rng=random.Random(42), delay=0, clock=lambda: _T)

        assert await first.fetch_locations() == await second.fetch_locations()

    @pytest.mark.asyncio
    async def test_share_per_yard(self) -> None:
        provider = SimulatedLocationProvider(_units(4000), rng=random.Random(7), delay=0)
        locations = await provider.fetch_locations()

        davenport = len(resolve_units_in_yard(locations, "Davenport")) / 4000
        movie_ranch = len(resolve_units_in_yard(locations, "Movie Ranch")) / 4000
        assert davenport == pytest.approx(0.4, abs=0.03)
        assert movie_ranch == pytest.approx(0.3, abs=0.03)

    def test_requires_two_yards(self) -> None:
        with pytest.raises(ValueError):
            SimulatedLocationProvider(UNITS, [YARD_GEOFENCES["Davenport"]])


class TestBuildLocationProvider:
    @pytest.mark.parametrize("token", [None, "", "demo", " demo "])
    def test_simulator_for_missing_or_demo_token(self, token: str | None) -> None:
        provider = build_location_provider(token, delay=0)
        assert isinstance(provider, SimulatedLocationProvider)

    def test_live_provider_for_real_token(self) -> None:
        provider = build_location_provider("real-token", transport=_FakeTransport(body=SAMPLE_BODY))
        assert isinstance(provider, FleetLocationProvider)

    def test_live_provider_needs_transport(self) -> None:
        with pytest.raises(ValueError):
            build_location_provider("real-token")
