"""Geocoding endpoint (Nominatim ``/search``)."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from routescout._transport import Transport
from routescout.config import RouteScoutConfig
from routescout.exceptions import DestinationNotFoundError, TransportError
from routescout.models.geocode import GeocodeMatch

_logger = logging.getLogger(__name__)

ENDPOINT = "geocode"


def build_geocode_params(query: str, *, limit: int = 1) -> dict[str, str]:
    return {"q": query, "format": "json", "limit": str(limit)}


async def geocode(
    config: RouteScoutConfig,
    transport: Transport,
    query: str,
) -> GeocodeMatch:
    """Resolve *query* to its best match.

    The first hit is authoritative; no disambiguation is attempted.

    Raises
    ------
    TransportError
        Network failure, non-2xx status, or a body that is not a list.
    DestinationNotFoundError
        The service returned no usable match.
    """
    decoded = await transport.get_json(ENDPOINT, config.geocode_url, build_geocode_params(query))
    if not isinstance(decoded, list):
        raise TransportError(
            f"Unexpected {ENDPOINT} response type: {type(decoded).__name__}",
            endpoint=ENDPOINT,
        )

    for item in decoded:
        if not isinstance(item, dict):
            continue
        try:
            match = GeocodeMatch.model_validate(item)
        except ValidationError:
            _logger.debug("Skipping unusable geocode hit: %s", item.get("display_name"))
            continue
        _logger.debug("Geocoded %r -> %s (%s, %s)", query, match.display_name, match.lat, match.lon)
        return match

    raise DestinationNotFoundError(query)
