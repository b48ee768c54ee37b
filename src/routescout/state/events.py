"""Map state transitions.

Every change to the map (position, route, markers, results list,
notifications) is expressed as one of these events. Only the
state/store layer is allowed to apply them.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from routescout.models.geo import BoundingBox, LatLng, Position
from routescout.models.place import PointOfInterest
from routescout.models.route import Route


class Stage(StrEnum):
    LOCATE = "locate"
    VALIDATE = "validate"
    GEOCODE = "geocode"
    ROUTE = "route"
    POI = "poi"


class NotificationLevel(StrEnum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class MarkerKind(StrEnum):
    USER = "user"
    DESTINATION = "destination"
    POI = "poi"


class Notification(BaseModel):
    """A user-visible message (the library's stand-in for an alert box)."""

    model_config = ConfigDict(frozen=True)

    level: NotificationLevel
    message: str
    stage: Stage
    search_id: int | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class Marker(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: MarkerKind
    location: LatLng
    popup: str = ""
    open_popup: bool = False


class MapView(BaseModel):
    """Viewport: either a center/zoom pair or a box to fit."""

    model_config = ConfigDict(frozen=True)

    center: LatLng
    zoom: int | None = None
    fit_bounds: BoundingBox | None = None


class StateEvent(BaseModel):
    """Base class for state transitions.

    ``search_id`` is set on transitions produced by a search; the store
    drops them once a newer search has started.
    """

    model_config = ConfigDict(frozen=True)

    name: ClassVar[str] = "event"

    search_id: int | None = None


class PositionAcquired(StateEvent):
    name: ClassVar[str] = "position_acquired"

    position: Position
    zoom: int
    popup: str


class RouteCleared(StateEvent):
    name: ClassVar[str] = "route_cleared"


class RouteDrawn(StateEvent):
    name: ClassVar[str] = "route_drawn"

    route: Route
    destination: LatLng
    destination_label: str
    fit_view: bool = True


class PoisCleared(StateEvent):
    name: ClassVar[str] = "pois_cleared"


class PoisLoaded(StateEvent):
    """Replace the POI layer and results list.

    An empty ``pois`` list renders the single ``empty_message`` entry.
    """

    name: ClassVar[str] = "pois_loaded"

    pois: list[PointOfInterest] = Field(default_factory=list)
    empty_message: str = ""


class NotificationRaised(StateEvent):
    name: ClassVar[str] = "notification"

    notification: Notification
