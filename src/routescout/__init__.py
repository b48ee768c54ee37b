"""routescout - Async destination search: geocode, route and find places along the way."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("routescout")
except PackageNotFoundError:
    __version__ = "0+local"
from routescout.client import RouteScoutClient
from routescout.config import GeolocationOptions, RouteScoutConfig, RouteStyle
from routescout.exceptions import (
    DestinationNotFoundError,
    EmptyResultError,
    GeolocationError,
    GeolocationErrorCode,
    GeolocationUnsupportedError,
    MissingPreconditionError,
    PlacesApiError,
    RouteScoutConfigError,
    RouteScoutError,
    RoutingError,
    TransportError,
)
from routescout.location import (
    FailingLocationProvider,
    IpLocationProvider,
    LocationProvider,
    StaticLocationProvider,
)
from routescout.models import (
    BoundingBox,
    GeocodeMatch,
    LatLng,
    Place,
    PointOfInterest,
    Position,
    Route,
)
from routescout.orchestrator import (
    RouteEvent,
    RouteEventKind,
    SearchOrchestrator,
    SearchOutcome,
    SearchStatus,
)
from routescout.state.events import Notification, NotificationLevel, Stage
from routescout.state.store import MapState, MapStore

__all__ = [
    "__version__",
    "BoundingBox",
    "DestinationNotFoundError",
    "EmptyResultError",
    "FailingLocationProvider",
    "GeocodeMatch",
    "GeolocationError",
    "GeolocationErrorCode",
    "GeolocationOptions",
    "GeolocationUnsupportedError",
    "IpLocationProvider",
    "LatLng",
    "LocationProvider",
    "MapState",
    "MapStore",
    "MissingPreconditionError",
    "Notification",
    "NotificationLevel",
    "Place",
    "PlacesApiError",
    "PointOfInterest",
    "Position",
    "Route",
    "RouteEvent",
    "RouteEventKind",
    "RouteScoutClient",
    "RouteScoutConfig",
    "RouteScoutConfigError",
    "RouteScoutError",
    "RouteStyle",
    "RoutingError",
    "SearchOrchestrator",
    "SearchOutcome",
    "SearchStatus",
    "Stage",
    "StaticLocationProvider",
    "TransportError",
]
