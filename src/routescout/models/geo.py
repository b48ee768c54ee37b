"""Coordinate, bounding box and position models."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator


class LatLng(BaseModel):
    """A WGS84 coordinate in decimal degrees."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    lat: float = Field(..., ge=-90.0, le=90.0)
    lon: float = Field(..., ge=-180.0, le=180.0)

    def as_tuple(self) -> tuple[float, float]:
        """``(lat, lon)`` ordering, as map libraries expect."""
        return (self.lat, self.lon)

    def as_lon_lat(self) -> str:
        """``"lon,lat"`` ordering, as OSRM path segments expect."""
        return f"{self.lon},{self.lat}"


class BoundingBox(BaseModel):
    """Rectangle enclosing a set of coordinates.

    Parameters
    ----------
    south, west, north, east : float
        Coordinate extremes in decimal degrees.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    south: float = Field(..., ge=-90.0, le=90.0)
    west: float = Field(..., ge=-180.0, le=180.0)
    north: float = Field(..., ge=-90.0, le=90.0)
    east: float = Field(..., ge=-180.0, le=180.0)

    @model_validator(mode="after")
    def _check_order(self) -> BoundingBox:
        if self.south > self.north:
            raise ValueError(f"south ({self.south}) must not exceed north ({self.north})")
        if self.west > self.east:
            raise ValueError(f"west ({self.west}) must not exceed east ({self.east})")
        return self

    @classmethod
    def from_points(cls, points: Iterable[LatLng]) -> BoundingBox:
        """Smallest box containing every point.

        Raises :class:`ValueError` when *points* is empty.
        """
        pts = list(points)
        if not pts:
            raise ValueError("cannot compute bounds of an empty coordinate sequence")
        lats = [p.lat for p in pts]
        lons = [p.lon for p in pts]
        return cls(south=min(lats), west=min(lons), north=max(lats), east=max(lons))

    @property
    def center(self) -> LatLng:
        return LatLng(lat=(self.south + self.north) / 2, lon=(self.west + self.east) / 2)

    def contains(self, point: LatLng) -> bool:
        return self.south <= point.lat <= self.north and self.west <= point.lon <= self.east

    def as_param(self) -> str:
        """``"south,west,north,east"`` string form."""
        return f"{self.south},{self.west},{self.north},{self.east}"


class Position(LatLng):
    """The user's current position.

    Parameters
    ----------
    accuracy : float or None
        Accuracy radius in meters, when the provider reports one.
    is_fallback : bool
        ``True`` when this is the fixed default, not a real fix.
    acquired_at : datetime
        When the position was produced (UTC).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    accuracy: float | None = Field(default=None, ge=0.0)
    is_fallback: bool = False
    acquired_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def to_latlng(self) -> LatLng:
        return LatLng(lat=self.lat, lon=self.lon)
