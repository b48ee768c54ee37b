"""Routing endpoint (OSRM ``/route/v1``).

Endpoint:
  - {routing_url}/route/v1/{profile}/{lon},{lat};{lon},{lat}
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import ValidationError

from routescout._transport import Transport
from routescout.config import RouteScoutConfig
from routescout.exceptions import RoutingError, TransportError
from routescout.models.geo import LatLng
from routescout.models.route import Route

_logger = logging.getLogger(__name__)

ENDPOINT = "route"


def build_route_url(config: RouteScoutConfig, start: LatLng, end: LatLng) -> str:
    base = config.routing_url.rstrip("/")
    return f"{base}/route/v1/{config.routing_profile}/{start.as_lon_lat()};{end.as_lon_lat()}"


def build_route_params(config: RouteScoutConfig) -> dict[str, str]:
    return {
        "overview": "full",
        "geometries": "geojson",
        "alternatives": "true" if config.route_style.show_alternatives else "false",
        "steps": "false",
    }


def _error_body(exc: TransportError) -> dict[str, Any] | None:
    if exc.status_code is None or not 400 <= exc.status_code < 500 or not exc.body:
        return None
    try:
        decoded = json.loads(exc.body)
    except json.JSONDecodeError:
        return None
    if not isinstance(decoded, dict) or not decoded.get("code"):
        return None
    return decoded


def _parse_routes(decoded: Any) -> list[Route]:
    if not isinstance(decoded, dict):
        raise RoutingError(f"Unexpected {ENDPOINT} response type: {type(decoded).__name__}")

    code = str(decoded.get("code", ""))
    if code != "Ok":
        message = str(decoded.get("message") or code or "unknown routing failure")
        raise RoutingError(message, code=code)

    routes: list[Route] = []
    for item in decoded.get("routes") or []:
        if not isinstance(item, dict):
            continue
        try:
            route = Route.model_validate(item)
        except ValidationError:
            _logger.debug("Skipping unparseable route object", exc_info=True)
            continue
        if route.coordinates:
            routes.append(route)
    return routes


async def fetch_routes(
    config: RouteScoutConfig,
    transport: Transport,
    start: LatLng,
    end: LatLng,
) -> list[Route]:
    """Request routes from *start* to *end*.

    Returns the ordered route list, which may be empty when the router
    answers ``Ok`` without a usable geometry.

    Raises
    ------
    TransportError
        Network failure or non-2xx status.
    RoutingError
        The router answered with a non-``Ok`` code, either in a 200 body
        or in the JSON body of a 4xx answer (OSRM sends ``NoRoute`` as 400).
    """
    url = build_route_url(config, start, end)
    try:
        decoded = await transport.get_json(ENDPOINT, url, build_route_params(config))
    except TransportError as exc:
        decoded = _error_body(exc)
        if decoded is None:
            raise
    routes = _parse_routes(decoded)
    _logger.debug(
        "Route %s -> %s: %d route(s), first has %d points",
        start.as_tuple(),
        end.as_tuple(),
        len(routes),
        len(routes[0].coordinates) if routes else 0,
    )
    return routes
