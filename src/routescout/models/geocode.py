"""Geocoding (Nominatim search) response model."""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator

from routescout._normalize import safe_float
from routescout.models._base import RouteScoutModel
from routescout.models.geo import LatLng


class GeocodeMatch(RouteScoutModel):
    """One geocoding hit.

    Nominatim sends ``lat``/``lon`` as strings; they are coerced here and
    a hit without a usable coordinate fails validation.
    """

    lat: float = Field(..., ge=-90.0, le=90.0)
    lon: float = Field(..., ge=-180.0, le=180.0)
    display_name: str = ""
    place_id: int | str | None = None
    osm_type: str | None = None
    category: str | None = Field(default=None, alias="class")
    type: str | None = None
    importance: float | None = None

    @field_validator("lat", "lon", mode="before")
    @classmethod
    def _coerce_coordinate(cls, value: Any) -> float:
        parsed = safe_float(value)
        if parsed is None:
            raise ValueError(f"not a number: {value!r}")
        return parsed

    @field_validator("importance", mode="before")
    @classmethod
    def _coerce_importance(cls, value: Any) -> float | None:
        return safe_float(value)

    @property
    def location(self) -> LatLng:
        return LatLng(lat=self.lat, lon=self.lon)

    @property
    def label(self) -> str:
        """Display label, falling back to the coordinate when unnamed."""
        return self.display_name or f"{self.lat:.5f}, {self.lon:.5f}"
