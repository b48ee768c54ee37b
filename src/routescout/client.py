"""High-level async client for the geocoding, routing and place-search services."""

from __future__ import annotations

from typing import Any

import aiohttp

from routescout._api import geocode as _geocode_api
from routescout._api import places as _places_api
from routescout._api import routing as _routing_api
from routescout._constants import MSG_DESTINATION_REQUIRED
from routescout._transport import HttpTransport
from routescout.config import RouteScoutConfig
from routescout.exceptions import MissingPreconditionError, RouteScoutError
from routescout.location import IpLocationProvider
from routescout.models.geo import BoundingBox, LatLng
from routescout.models.geocode import GeocodeMatch
from routescout.models.place import PointOfInterest
from routescout.models.route import Route


class RouteScoutClient:
    """Async client for the three upstream services.

    Each method performs exactly one request and raises on failure; no
    retries are attempted.

    Usage::

        async with RouteScoutClient(config) as client:
            match = await client.geocode("Golden Gate Bridge")
            routes = await client.get_routes(origin, match.location)
    """

    def __init__(
        self,
        config: RouteScoutConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._config = config or RouteScoutConfig.from_env()
        self._external_session = session is not None
        self._http_session = session
        self._transport: HttpTransport | None = None

    @property
    def config(self) -> RouteScoutConfig:
        return self._config

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> RouteScoutClient:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = HttpTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None

    def _require_transport(self) -> HttpTransport:
        if self._transport is None:
            raise RouteScoutError("Client not initialized. Use 'async with RouteScoutClient(...) as client:'")
        return self._transport

    # ------------------------------------------------------------------
    # Services
    # ------------------------------------------------------------------

    async def geocode(self, query: str) -> GeocodeMatch:
        """Resolve free text to the best-matching coordinate.

        An empty *query* raises :class:`MissingPreconditionError` without
        touching the network.
        """
        if not query.strip():
            raise MissingPreconditionError(MSG_DESTINATION_REQUIRED)
        return await _geocode_api.geocode(self._config, self._require_transport(), query)

    async def get_routes(self, start: LatLng, end: LatLng) -> list[Route]:
        """Compute routes between two coordinates (first is the selected one)."""
        return await _routing_api.fetch_routes(
            self._config,
            self._require_transport(),
            LatLng(lat=start.lat, lon=start.lon),
            LatLng(lat=end.lat, lon=end.lon),
        )

    async def search_places(
        self,
        query: str,
        *,
        bias: LatLng,
        bounds: BoundingBox | None = None,
    ) -> list[PointOfInterest]:
        """Find places matching *query* near *bias*."""
        return await _places_api.search_places(
            self._config,
            self._require_transport(),
            query,
            bias=LatLng(lat=bias.lat, lon=bias.lon),
            bounds=bounds,
        )

    def ip_location_provider(self) -> IpLocationProvider:
        """Location provider backed by this client's transport."""
        return IpLocationProvider(self._config, self._require_transport())
