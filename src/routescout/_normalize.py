"""Normalization helpers.

Centralizes defensive parsing of loosely typed upstream JSON.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any


def safe_float(value: Any) -> float | None:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def safe_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text if text else None


def extract_lat_lon(value: Any) -> tuple[float, float] | None:
    """Pull a ``(lat, lon)`` pair out of the shapes place services use.

    Accepts ``{"lat": .., "lng": ..}``, ``{"lat": .., "lon": ..}``,
    ``{"latitude": .., "longitude": ..}`` and GeoJSON-ordered
    ``[lon, lat]`` sequences. Returns ``None`` for anything else.
    """
    if isinstance(value, Mapping):
        lat = safe_float(value.get("lat", value.get("latitude")))
        lon = safe_float(value.get("lng", value.get("lon", value.get("longitude"))))
    elif isinstance(value, (list, tuple)) and len(value) >= 2:
        lon = safe_float(value[0])
        lat = safe_float(value[1])
    else:
        return None
    if lat is None or lon is None:
        return None
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
        return None
    return lat, lon
