"""Place-search endpoint (Places Text Search)."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from routescout._constants import PLACES_OK_STATUSES
from routescout._transport import Transport
from routescout.config import RouteScoutConfig
from routescout.exceptions import PlacesApiError, TransportError
from routescout.models.geo import BoundingBox, LatLng
from routescout.models.place import PlaceSearchResponse, PointOfInterest

_logger = logging.getLogger(__name__)

ENDPOINT = "places"


def build_places_params(
    config: RouteScoutConfig,
    query: str,
    bias: LatLng,
) -> dict[str, str]:
    return {
        "query": query,
        "location": f"{bias.lat},{bias.lon}",
        "radius": str(config.search_radius_m),
        "key": config.require_places_api_key(),
    }


async def search_places(
    config: RouteScoutConfig,
    transport: Transport,
    query: str,
    *,
    bias: LatLng,
    bounds: BoundingBox | None = None,
) -> list[PointOfInterest]:
    """Search for *query* around *bias*.

    Places without any usable coordinate are skipped. When
    ``config.restrict_to_route_bounds`` is set and *bounds* is given,
    places outside the box are skipped too.

    Raises
    ------
    RouteScoutConfigError
        No place-search key is configured.
    TransportError
        Network failure, non-2xx status or an unexpected body.
    PlacesApiError
        The service reported a status other than ``OK``/``ZERO_RESULTS``.
    """
    params = build_places_params(config, query, bias)
    decoded = await transport.get_json(ENDPOINT, config.places_url, params)
    if not isinstance(decoded, dict):
        raise TransportError(
            f"Unexpected {ENDPOINT} response type: {type(decoded).__name__}",
            endpoint=ENDPOINT,
        )

    try:
        response = PlaceSearchResponse.model_validate(decoded)
    except ValidationError as exc:
        raise TransportError(f"Malformed {ENDPOINT} response: {exc}", endpoint=ENDPOINT) from exc

    if response.status not in PLACES_OK_STATUSES:
        raise PlacesApiError(
            f"{ENDPOINT} failed: status={response.status} message={response.error_message or ''}",
            status=response.status,
            endpoint=ENDPOINT,
        )

    pois: list[PointOfInterest] = []
    for place in response.results:
        poi = place.to_poi()
        if poi is None:
            _logger.debug("Skipping place without coordinates: %s", place.name)
            continue
        if config.restrict_to_route_bounds and bounds is not None and not bounds.contains(poi.location):
            _logger.debug("Skipping place outside route bounds: %s", poi.name)
            continue
        pois.append(poi)

    _logger.debug("Place search %r: %d result(s), %d usable", query, len(response.results), len(pois))
    return pois
