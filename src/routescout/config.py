"""Client configuration for routescout."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from routescout._constants import (
    DEFAULT_SEARCH_RADIUS_M,
    FALLBACK_LATITUDE,
    FALLBACK_LONGITUDE,
    GEOCODE_URL,
    GEOLOCATION_TIMEOUT_S,
    IP_LOCATION_URL,
    PLACES_URL,
    ROUTING_PROFILE,
    ROUTING_URL,
    USER_AGENT,
)
from routescout.exceptions import RouteScoutConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class GeolocationOptions:
    """Options passed to a location provider.

    ``maximum_age=0`` means a cached position must never be reused.
    """

    enable_high_accuracy: bool = True
    timeout: float = GEOLOCATION_TIMEOUT_S
    maximum_age: float = 0.0


@dataclasses.dataclass(frozen=True)
class RouteStyle:
    """Line styling and interaction flags for the drawn route."""

    color: str = "blue"
    opacity: float = 0.7
    weight: int = 7
    route_while_dragging: bool = False
    show_alternatives: bool = False
    add_waypoints: bool = False
    draggable_waypoints: bool = False
    fit_selected_routes: bool = True


@dataclasses.dataclass(frozen=True)
class RouteScoutConfig:
    """Client configuration.

    Parameters
    ----------
    places_api_key : str or None
        Key for the place-search service. Only ever read from the
        environment or passed explicitly; there is no built-in key.
    geocode_url : str
        Nominatim-compatible search endpoint.
    routing_url : str
        Base URL of an OSRM-compatible routing server.
    routing_profile : str
        OSRM profile (``driving``, ``walking``, ...).
    places_url : str
        Places Text Search endpoint.
    ip_location_url : str
        JSON endpoint used by :class:`~routescout.location.IpLocationProvider`.
    user_agent : str
        Sent with every request. Nominatim rejects anonymous clients.
    request_timeout : float
        Total timeout in seconds for a single HTTP request.
    search_radius_m : int
        Radius (meters) around the current position for place search.
    restrict_to_route_bounds : bool
        Drop places that fall outside the route bounding box.
    fallback_latitude, fallback_longitude : float
        Origin used when no device position can be obtained.
    geolocation : GeolocationOptions
        Options handed to the location provider.
    route_style : RouteStyle
        Styling of the drawn route.
    """

    places_api_key: str | None = None
    geocode_url: str = GEOCODE_URL
    routing_url: str = ROUTING_URL
    routing_profile: str = ROUTING_PROFILE
    places_url: str = PLACES_URL
    ip_location_url: str = IP_LOCATION_URL
    user_agent: str = USER_AGENT
    request_timeout: float = 15.0
    search_radius_m: int = DEFAULT_SEARCH_RADIUS_M
    restrict_to_route_bounds: bool = False
    fallback_latitude: float = FALLBACK_LATITUDE
    fallback_longitude: float = FALLBACK_LONGITUDE
    geolocation: GeolocationOptions = dataclasses.field(default_factory=GeolocationOptions)
    route_style: RouteStyle = dataclasses.field(default_factory=RouteStyle)

    def require_places_api_key(self) -> str:
        """Return the place-search key or raise if none is configured."""
        key = (self.places_api_key or "").strip()
        if not key:
            raise RouteScoutConfigError("No place-search key configured (set ROUTESCOUT_PLACES_API_KEY)")
        return key

    @classmethod
    def from_env(cls, **overrides: Any) -> RouteScoutConfig:
        """Create configuration from environment variables.

        Reads optional ``ROUTESCOUT_*`` variables. Explicit keyword
        arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        RouteScoutConfig
            Populated configuration.
        """
        env = os.environ

        geolocation_overrides = overrides.pop("geolocation", None)
        if isinstance(geolocation_overrides, GeolocationOptions):
            geolocation = geolocation_overrides
        else:
            geo_kwargs: dict[str, Any] = {}
            geo_timeout = env.get("ROUTESCOUT_GEOLOCATION_TIMEOUT")
            if geo_timeout is not None:
                try:
                    geo_kwargs["timeout"] = float(geo_timeout)
                except ValueError as exc:
                    raise RouteScoutConfigError(
                        f"ROUTESCOUT_GEOLOCATION_TIMEOUT must be numeric, got {geo_timeout!r}"
                    ) from exc
            if isinstance(geolocation_overrides, dict):
                geo_kwargs.update(geolocation_overrides)
            geolocation = GeolocationOptions(**geo_kwargs)

        _ENV_CONFIG_MAP = {
            "ROUTESCOUT_PLACES_API_KEY": "places_api_key",
            "ROUTESCOUT_GEOCODE_URL": "geocode_url",
            "ROUTESCOUT_ROUTING_URL": "routing_url",
            "ROUTESCOUT_ROUTING_PROFILE": "routing_profile",
            "ROUTESCOUT_PLACES_URL": "places_url",
            "ROUTESCOUT_IP_LOCATION_URL": "ip_location_url",
            "ROUTESCOUT_USER_AGENT": "user_agent",
        }
        config_kwargs: dict[str, Any] = {"geolocation": geolocation}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        # Numeric fields, handled separately
        _ENV_NUMERIC_MAP = {
            "ROUTESCOUT_REQUEST_TIMEOUT": ("request_timeout", float),
            "ROUTESCOUT_SEARCH_RADIUS_M": ("search_radius_m", int),
            "ROUTESCOUT_FALLBACK_LAT": ("fallback_latitude", float),
            "ROUTESCOUT_FALLBACK_LON": ("fallback_longitude", float),
        }
        for env_key, (field_name, cast) in _ENV_NUMERIC_MAP.items():
            val = env.get(env_key)
            if val is None or field_name in overrides:
                continue
            try:
                config_kwargs[field_name] = cast(val)
            except ValueError as exc:
                raise RouteScoutConfigError(f"{env_key} must be numeric, got {val!r}") from exc

        if "restrict_to_route_bounds" not in overrides:
            config_kwargs["restrict_to_route_bounds"] = _env_bool(
                env.get("ROUTESCOUT_RESTRICT_TO_ROUTE_BOUNDS"),
                False,
            )

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
