"""Place-search response models."""

from __future__ import annotations

from html import escape
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from routescout._normalize import extract_lat_lon, safe_str
from routescout.models._base import RouteScoutModel
from routescout.models.geo import LatLng


class Place(RouteScoutModel):
    """One raw place returned by the place-search service.

    Coordinates come from ``geometry.location`` (Places Text Search) or,
    when that is missing, from a ``center`` field (``[lon, lat]`` or a
    ``{lat, lon}`` mapping) as other place services send it.
    """

    name: str | None = None
    formatted_address: str | None = Field(
        default=None,
        description="Full address; some services call it ``address`` or ``place_name``.",
    )
    address: str | None = None
    place_name: str | None = None
    types: list[str] = Field(default_factory=list)
    place_id: str | None = None
    rating: float | None = None
    geometry: dict[str, Any] = Field(default_factory=dict)
    center: Any = None

    @field_validator("name", "formatted_address", "address", "place_name", "place_id", mode="before")
    @classmethod
    def _coerce_str(cls, value: Any) -> str | None:
        return safe_str(value)

    @field_validator("types", mode="before")
    @classmethod
    def _coerce_types(cls, value: Any) -> list[str]:
        if isinstance(value, str):
            return [value]
        if isinstance(value, list):
            return [str(item) for item in value if item]
        return []

    @field_validator("geometry", mode="before")
    @classmethod
    def _coerce_geometry(cls, value: Any) -> dict[str, Any]:
        return value if isinstance(value, dict) else {}

    @field_validator("rating", mode="before")
    @classmethod
    def _coerce_rating(cls, value: Any) -> float | None:
        try:
            return float(value)
        except (TypeError, ValueError):
            return None

    @property
    def location(self) -> LatLng | None:
        """Direct coordinate, then ``center`` fallback, else ``None``."""
        latlon = extract_lat_lon(self.geometry.get("location"))
        if latlon is None:
            latlon = extract_lat_lon(self.center)
        if latlon is None:
            return None
        return LatLng(lat=latlon[0], lon=latlon[1])

    @property
    def category_label(self) -> str | None:
        if not self.types:
            return None
        return self.types[0].replace("_", " ")

    def to_poi(self) -> PointOfInterest | None:
        """Convert to a displayable POI, or ``None`` if it has no coordinate."""
        location = self.location
        if location is None:
            return None
        category = self.category_label
        return PointOfInterest(
            name=self.name or category or "Unnamed",
            address=self.formatted_address or self.address or self.place_name or category or "Address not available",
            location=location,
            category=category,
            place_id=self.place_id,
            rating=self.rating,
        )


class PointOfInterest(BaseModel):
    """A place ready for display as a marker and a list entry."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    address: str
    location: LatLng
    category: str | None = None
    place_id: str | None = None
    rating: float | None = None

    @property
    def popup_html(self) -> str:
        return f"<b>{escape(self.name)}</b><br>{escape(self.address)}"


class PlaceSearchResponse(RouteScoutModel):
    """Envelope of a Places Text Search response."""

    status: str = "OK"
    results: list[Place] = Field(default_factory=list)
    error_message: str | None = None
    next_page_token: str | None = None

    @field_validator("results", mode="before")
    @classmethod
    def _only_objects(cls, value: Any) -> list[Any]:
        if not isinstance(value, list):
            return []
        return [item for item in value if isinstance(item, dict)]
