"""Data models for geocoding, routing and place-search responses."""

from routescout.models._base import RouteScoutModel
from routescout.models.geo import BoundingBox, LatLng, Position
from routescout.models.geocode import GeocodeMatch
from routescout.models.place import Place, PlaceSearchResponse, PointOfInterest
from routescout.models.route import Route

__all__ = [
    "BoundingBox",
    "GeocodeMatch",
    "LatLng",
    "Place",
    "PlaceSearchResponse",
    "PointOfInterest",
    "Position",
    "Route",
    "RouteScoutModel",
]
