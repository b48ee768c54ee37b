"""In-memory map state store.

This is the only component allowed to mutate map state. Every change
arrives as a :mod:`routescout.state.events` transition and is applied
in order on the event loop, so no locking is needed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from pydantic import BaseModel, ConfigDict, Field

from routescout.models.geo import LatLng, Position
from routescout.models.place import PointOfInterest
from routescout.models.route import Route
from routescout.state.events import (
    MapView,
    Marker,
    MarkerKind,
    Notification,
    NotificationRaised,
    PoisCleared,
    PoisLoaded,
    PositionAcquired,
    RouteCleared,
    RouteDrawn,
    StateEvent,
)

_logger = logging.getLogger(__name__)

StateListener = Callable[[StateEvent, "MapState"], None]


class MapState(BaseModel):
    """Snapshot of everything the map shows."""

    model_config = ConfigDict(extra="forbid")

    view: MapView
    current_position: Position | None = None
    user_marker: Marker | None = None
    route: Route | None = None
    destination_marker: Marker | None = None
    pois: list[PointOfInterest] = Field(default_factory=list)
    poi_markers: list[Marker] = Field(default_factory=list)
    results: list[str] = Field(default_factory=list)
    notifications: list[Notification] = Field(default_factory=list)

    def visual(self) -> dict[str, object]:
        """The parts of the state that are drawn on screen.

        Two states with equal ``visual()`` look identical on the map,
        regardless of how many searches produced them.
        """
        return self.model_dump(
            include={"view", "user_marker", "route", "destination_marker", "poi_markers", "results"},
            exclude={"route": {"raw"}},
        )


class MapStore:
    """Owns the map state and the search request counter.

    Parameters
    ----------
    initial_view : MapView
        Viewport before any position is known.
    """

    def __init__(self, initial_view: MapView | None = None) -> None:
        self._state = MapState(view=initial_view or MapView(center=LatLng(lat=0.0, lon=0.0), zoom=2))
        self._latest_search_id = 0
        self._listeners: list[StateListener] = []
        self.history: list[str] = []
        """Names of applied transitions, oldest first."""

    # ------------------------------------------------------------------
    # Search request ids
    # ------------------------------------------------------------------

    def begin_search(self) -> int:
        """Issue a new search id; every earlier id becomes stale."""
        self._latest_search_id += 1
        return self._latest_search_id

    @property
    def latest_search_id(self) -> int:
        return self._latest_search_id

    def is_current(self, search_id: int | None) -> bool:
        return search_id is None or search_id == self._latest_search_id

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Call *listener* after every applied transition. Returns an unsubscribe hook."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def apply(self, event: StateEvent) -> bool:
        """Apply a transition. Returns ``False`` if it was stale and dropped."""
        if not self.is_current(event.search_id):
            _logger.debug(
                "Dropping stale %s for search %s (latest %s)",
                event.name,
                event.search_id,
                self._latest_search_id,
            )
            return False

        state = self._state
        match event:
            case PositionAcquired(position=position, zoom=zoom, popup=popup):
                state.current_position = position
                state.view = MapView(center=position.to_latlng(), zoom=zoom)
                # Created once, moved (and relabelled) thereafter.
                state.user_marker = Marker(
                    kind=MarkerKind.USER,
                    location=position.to_latlng(),
                    popup=popup if state.user_marker is None else state.user_marker.popup,
                    open_popup=True,
                )
            case RouteCleared():
                state.route = None
                state.destination_marker = None
            case RouteDrawn(route=route, destination=destination, destination_label=label, fit_view=fit_view):
                state.route = route
                state.destination_marker = Marker(
                    kind=MarkerKind.DESTINATION,
                    location=destination,
                    popup=f"Destination: {label}",
                    open_popup=True,
                )
                if fit_view and route.coordinates:
                    bounds = route.bounds
                    state.view = MapView(center=bounds.center, fit_bounds=bounds)
            case PoisCleared():
                state.pois = []
                state.poi_markers = []
                state.results = []
            case PoisLoaded(pois=pois, empty_message=empty_message):
                state.pois = list(pois)
                state.poi_markers = [
                    Marker(kind=MarkerKind.POI, location=poi.location, popup=poi.popup_html) for poi in pois
                ]
                state.results = [poi.name for poi in pois] if pois else ([empty_message] if empty_message else [])
            case NotificationRaised(notification=notification):
                state.notifications.append(notification)
            case _:
                raise TypeError(f"Unsupported state event: {type(event).__name__}")

        self.history.append(event.name)
        for listener in list(self._listeners):
            listener(event, state)
        return True

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def state(self) -> MapState:
        """Live state. Treat as read-only; mutate through :meth:`apply`."""
        return self._state

    def snapshot(self) -> MapState:
        """Deep copy of the current state."""
        return self._state.model_copy(deep=True)

    @property
    def current_position(self) -> Position | None:
        return self._state.current_position
