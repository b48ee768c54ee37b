"""Location providers (the device location capability).

A provider answers :meth:`LocationProvider.get_current_position` with a
:class:`~routescout.models.geo.Position` or raises
:class:`~routescout.exceptions.GeolocationError`.
"""

from __future__ import annotations

import logging
from typing import Protocol

from routescout._normalize import extract_lat_lon, safe_float
from routescout._transport import Transport
from routescout.config import GeolocationOptions, RouteScoutConfig
from routescout.exceptions import GeolocationError, GeolocationErrorCode, RouteScoutConfigError, TransportError
from routescout.models.geo import Position

_logger = logging.getLogger(__name__)

# City-level guess; IP lookups are never better than this.
_IP_LOOKUP_ACCURACY_M = 5_000.0


class LocationProvider(Protocol):
    async def get_current_position(self, options: GeolocationOptions) -> Position:
        ...


class StaticLocationProvider:
    """Always reports the same coordinate (e.g. given on the command line)."""

    def __init__(self, lat: float, lon: float, *, accuracy: float | None = None) -> None:
        if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
            raise RouteScoutConfigError(f"Origin out of range: lat={lat} lon={lon}")
        self._lat = lat
        self._lon = lon
        self._accuracy = accuracy

    async def get_current_position(self, options: GeolocationOptions) -> Position:
        return Position(lat=self._lat, lon=self._lon, accuracy=self._accuracy)


class FailingLocationProvider:
    """Always fails with the given error code."""

    def __init__(self, code: GeolocationErrorCode = GeolocationErrorCode.PERMISSION_DENIED) -> None:
        self.code = code

    async def get_current_position(self, options: GeolocationOptions) -> Position:
        raise GeolocationError(f"Location request failed: {self.code.name}", code=self.code)


class IpLocationProvider:
    """Coarse position from an IP geolocation JSON endpoint.

    The endpoint must answer with ``latitude``/``longitude`` (or
    ``lat``/``lon``) keys, as ipapi.co and ip-api.com do. High-accuracy
    requests cannot be honoured and are logged at DEBUG.
    """

    ENDPOINT = "ip-location"

    def __init__(self, config: RouteScoutConfig, transport: Transport) -> None:
        self._config = config
        self._transport = transport

    async def get_current_position(self, options: GeolocationOptions) -> Position:
        if options.enable_high_accuracy:
            _logger.debug("High accuracy requested; IP lookup only resolves to city level")
        try:
            decoded = await self._transport.get_json(self.ENDPOINT, self._config.ip_location_url, {})
        except TransportError as exc:
            raise GeolocationError(
                f"IP location lookup failed: {exc}",
                code=GeolocationErrorCode.POSITION_UNAVAILABLE,
            ) from exc

        latlon = extract_lat_lon(decoded) if isinstance(decoded, dict) else None
        if latlon is None:
            raise GeolocationError(
                "IP location lookup returned no coordinate",
                code=GeolocationErrorCode.POSITION_UNAVAILABLE,
            )
        accuracy = safe_float(decoded.get("accuracy")) or _IP_LOOKUP_ACCURACY_M
        return Position(lat=latlon[0], lon=latlon[1], accuracy=accuracy)
