from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any

import pytest

from routescout._constants import MSG_LOCATION_FAILED, MSG_LOCATION_UNSUPPORTED
from routescout.client import RouteScoutClient
from routescout.config import GeolocationOptions, RouteScoutConfig
from routescout.exceptions import (
    GeolocationError,
    GeolocationErrorCode,
    GeolocationUnsupportedError,
    RouteScoutConfigError,
    TransportError,
)
from routescout.location import FailingLocationProvider, IpLocationProvider, StaticLocationProvider
from routescout.models.geo import Position
from routescout.orchestrator import SearchOrchestrator
from routescout.state.events import NotificationLevel, Stage


class _SequenceProvider:
    def __init__(self, *positions: Position) -> None:
        self._positions = list(positions)
        self.seen_options: list[GeolocationOptions] = []

    async def get_current_position(self, options: GeolocationOptions) -> Position:
        self.seen_options.append(options)
        return self._positions.pop(0)


class _HangingProvider:
    async def get_current_position(self, options: GeolocationOptions) -> Position:
        await asyncio.sleep(10)
        raise AssertionError("should have timed out")


class _UnsupportedProvider:
    async def get_current_position(self, options: GeolocationOptions) -> Position:
        raise GeolocationUnsupportedError("no GPS hardware")


class _FakeTransport:
    def __init__(self, response: Any = None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.calls: list[tuple[str, str]] = []

    async def get_json(self, endpoint: str, url: str, params: Mapping[str, Any]) -> Any:
        self.calls.append((endpoint, url))
        if self.error is not None:
            raise self.error
        return self.response


def _orchestrator(provider: Any, config: RouteScoutConfig | None = None) -> SearchOrchestrator:
    return SearchOrchestrator(RouteScoutClient(config or RouteScoutConfig()), location_provider=provider)


@pytest.mark.asyncio
async def test_locate_success_centers_at_city_zoom() -> None:
    provider = _SequenceProvider(Position(lat=37.7749, lon=-122.4194, accuracy=24.6))
    orchestrator = _orchestrator(provider)

    position = await orchestrator.locate()

    state = orchestrator.store.state
    assert position.is_fallback is False
    assert state.current_position == position
    assert state.view.zoom == 13
    assert state.user_marker is not None
    assert state.user_marker.popup == "You are here (approx. 25m accuracy)"
    assert state.notifications == []
    assert provider.seen_options == [GeolocationOptions(enable_high_accuracy=True, timeout=20.0, maximum_age=0.0)]


@pytest.mark.asyncio
async def test_locate_retry_moves_existing_marker() -> None:
    provider = _SequenceProvider(Position(lat=1.0, lon=1.0, accuracy=5), Position(lat=2.0, lon=2.0, accuracy=7))
    orchestrator = _orchestrator(provider)

    await orchestrator.locate()
    await orchestrator.locate()

    state = orchestrator.store.state
    assert state.current_position is not None
    assert state.current_position.lat == 2.0
    assert state.user_marker is not None
    assert state.user_marker.location.as_tuple() == (2.0, 2.0)
    assert state.user_marker.popup == "You are here (approx. 5m accuracy)"
    assert orchestrator.store.history.count("position_acquired") == 2


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "code",
    [
        GeolocationErrorCode.PERMISSION_DENIED,
        GeolocationErrorCode.POSITION_UNAVAILABLE,
        GeolocationErrorCode.TIMEOUT,
    ],
)
async def test_locate_failure_falls_back(code: GeolocationErrorCode) -> None:
    orchestrator = _orchestrator(FailingLocationProvider(code))

    position = await orchestrator.locate()

    assert (position.lat, position.lon) == (34.0522, -118.2437)
    assert position.is_fallback is True
    state = orchestrator.store.state
    assert state.view.zoom == 10
    assert state.user_marker is not None
    assert state.user_marker.popup == "Default Location (LA) - failed to get your exact location"
    assert len(state.notifications) == 1
    assert state.notifications[0].level == NotificationLevel.WARNING
    assert state.notifications[0].stage == Stage.LOCATE
    assert state.notifications[0].message == MSG_LOCATION_FAILED


@pytest.mark.asyncio
async def test_locate_without_provider_reports_unsupported() -> None:
    orchestrator = _orchestrator(None)

    position = await orchestrator.locate()

    assert position.is_fallback is True
    state = orchestrator.store.state
    assert state.user_marker is not None
    assert state.user_marker.popup == "Default Location (LA) - Geolocation not supported"
    assert [n.message for n in state.notifications] == [MSG_LOCATION_UNSUPPORTED]


@pytest.mark.asyncio
async def test_locate_unsupported_provider_reports_unsupported() -> None:
    orchestrator = _orchestrator(_UnsupportedProvider())
    await orchestrator.locate()
    assert [n.message for n in orchestrator.store.state.notifications] == [MSG_LOCATION_UNSUPPORTED]


@pytest.mark.asyncio
async def test_locate_times_out() -> None:
    config = RouteScoutConfig(geolocation=GeolocationOptions(timeout=0.01))
    orchestrator = _orchestrator(_HangingProvider(), config)

    position = await orchestrator.locate()

    assert position.is_fallback is True
    assert [n.message for n in orchestrator.store.state.notifications] == [MSG_LOCATION_FAILED]


@pytest.mark.asyncio
async def test_locate_custom_fallback_drops_city_label() -> None:
    config = RouteScoutConfig(fallback_latitude=51.5074, fallback_longitude=-0.1278)
    orchestrator = _orchestrator(FailingLocationProvider(), config)

    position = await orchestrator.locate()

    assert (position.lat, position.lon) == (51.5074, -0.1278)
    assert orchestrator.store.state.user_marker is not None
    assert orchestrator.store.state.user_marker.popup.startswith("Default Location - ")


@pytest.mark.asyncio
async def test_static_provider_reports_given_coordinate() -> None:
    position = await StaticLocationProvider(10.0, 20.0, accuracy=3.0).get_current_position(GeolocationOptions())
    assert (position.lat, position.lon, position.accuracy) == (10.0, 20.0, 3.0)


@pytest.mark.parametrize("lat, lon", [(95.0, 0.0), (0.0, 180.5), (-90.1, 10.0)])
def test_static_provider_rejects_out_of_range_coordinate(lat: float, lon: float) -> None:
    with pytest.raises(RouteScoutConfigError, match="out of range"):
        StaticLocationProvider(lat, lon)


@pytest.mark.asyncio
async def test_ip_provider_parses_coordinates() -> None:
    transport = _FakeTransport({"ip": "203.0.113.5", "latitude": 37.7749, "longitude": -122.4194, "city": "SF"})
    provider = IpLocationProvider(RouteScoutConfig(ip_location_url="https://ip.example/json"), transport)

    position = await provider.get_current_position(GeolocationOptions())

    assert (position.lat, position.lon) == (37.7749, -122.4194)
    assert position.accuracy == 5_000.0
    assert transport.calls == [("ip-location", "https://ip.example/json")]


@pytest.mark.asyncio
async def test_ip_provider_maps_failures_to_geolocation_error() -> None:
    provider = IpLocationProvider(RouteScoutConfig(), _FakeTransport(error=TransportError("boom", status_code=429)))
    with pytest.raises(GeolocationError) as excinfo:
        await provider.get_current_position(GeolocationOptions())
    assert excinfo.value.code == GeolocationErrorCode.POSITION_UNAVAILABLE

    empty = IpLocationProvider(RouteScoutConfig(), _FakeTransport({"error": True, "reason": "RateLimited"}))
    with pytest.raises(GeolocationError):
        await empty.get_current_position(GeolocationOptions())
