"""Route models (OSRM ``/route`` response)."""

from __future__ import annotations

from typing import Any

from pydantic import Field, model_validator

from routescout._normalize import extract_lat_lon, safe_float
from routescout.models._base import RouteScoutModel
from routescout.models.geo import BoundingBox, LatLng


class Route(RouteScoutModel):
    """A single computed route.

    Parameters
    ----------
    coordinates : list[LatLng]
        Ordered path from start to destination.
    distance_m : float or None
        Route length in meters.
    duration_s : float or None
        Expected travel time in seconds.
    summary : str
        Short description (road names) when the router supplies one.
    """

    coordinates: list[LatLng] = Field(default_factory=list)
    distance_m: float | None = None
    duration_s: float | None = None
    summary: str = ""

    @model_validator(mode="before")
    @classmethod
    def _from_osrm(cls, values: Any) -> Any:
        """Accept an OSRM route object with a GeoJSON ``geometry``."""
        if not isinstance(values, dict) or "coordinates" in values:
            return values
        merged = dict(values)
        geometry = values.get("geometry")
        points: list[dict[str, float]] = []
        if isinstance(geometry, dict):
            for pair in geometry.get("coordinates") or []:
                latlon = extract_lat_lon(pair)
                if latlon is not None:
                    points.append({"lat": latlon[0], "lon": latlon[1]})
        merged["coordinates"] = points
        merged["distance_m"] = safe_float(values.get("distance"))
        merged["duration_s"] = safe_float(values.get("duration"))
        legs = values.get("legs")
        if isinstance(legs, list):
            summaries = [str(leg.get("summary")) for leg in legs if isinstance(leg, dict) and leg.get("summary")]
            merged["summary"] = ", ".join(summaries)
        merged.setdefault("raw", values)
        return merged

    @property
    def bounds(self) -> BoundingBox:
        """Bounding rectangle of the path.

        Raises :class:`ValueError` for a route without coordinates.
        """
        return BoundingBox.from_points(self.coordinates)

    @property
    def start(self) -> LatLng | None:
        return self.coordinates[0] if self.coordinates else None

    @property
    def end(self) -> LatLng | None:
        return self.coordinates[-1] if self.coordinates else None
