from __future__ import annotations

import pytest

from routescout.config import GeolocationOptions, RouteScoutConfig
from routescout.exceptions import RouteScoutConfigError


def test_defaults_follow_location_and_route_settings() -> None:
    config = RouteScoutConfig()
    assert config.places_api_key is None
    assert config.geolocation == GeolocationOptions(enable_high_accuracy=True, timeout=20.0, maximum_age=0.0)
    assert (config.fallback_latitude, config.fallback_longitude) == (34.0522, -118.2437)
    assert config.search_radius_m == 10_000
    style = config.route_style
    assert (style.color, style.opacity, style.weight) == ("blue", 0.7, 7)
    assert style.show_alternatives is False
    assert style.route_while_dragging is False
    assert style.fit_selected_routes is True


def test_from_env_reads_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ROUTESCOUT_PLACES_API_KEY", "env-key")
    monkeypatch.setenv("ROUTESCOUT_ROUTING_URL", "http://osrm.local:5000")
    monkeypatch.setenv("ROUTESCOUT_SEARCH_RADIUS_M", "2500")
    monkeypatch.setenv("ROUTESCOUT_GEOLOCATION_TIMEOUT", "5")
    monkeypatch.setenv("ROUTESCOUT_RESTRICT_TO_ROUTE_BOUNDS", "yes")

    config = RouteScoutConfig.from_env()
    assert config.places_api_key == "env-key"
    assert config.routing_url == "http://osrm.local:5000"
    assert config.search_radius_m == 2500
    assert config.geolocation.timeout == 5.0
    assert config.restrict_to_route_bounds is True


def test_from_env_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ROUTESCOUT_PLACES_API_KEY", "env-key")
    monkeypatch.setenv("ROUTESCOUT_SEARCH_RADIUS_M", "2500")

    config = RouteScoutConfig.from_env(places_api_key="explicit", search_radius_m=50, geolocation={"timeout": 1.0})
    assert config.places_api_key == "explicit"
    assert config.search_radius_m == 50
    assert config.geolocation.timeout == 1.0
    assert config.geolocation.enable_high_accuracy is True


def test_from_env_rejects_non_numeric(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ROUTESCOUT_REQUEST_TIMEOUT", "soon")
    with pytest.raises(RouteScoutConfigError, match="ROUTESCOUT_REQUEST_TIMEOUT"):
        RouteScoutConfig.from_env()


def test_require_places_api_key() -> None:
    assert RouteScoutConfig(places_api_key=" k ").require_places_api_key() == "k"
    with pytest.raises(RouteScoutConfigError):
        RouteScoutConfig(places_api_key="  ").require_places_api_key()
