"""Destination search orchestrator.

Runs the fixed pipeline behind a single "search" action::

    locate (once)  ->  geocode  ->  route  ->  POI search

Each stage is awaited in turn and only runs when the previous stage
succeeded. Failures are handled at the stage where they occur: they
become a :class:`~routescout.state.events.Notification` and end the
pipeline, except POI failures, which leave the drawn route in place.

Every search takes a fresh id from the store. Results of a search that
has been superseded by a newer one are discarded instead of applied.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from routescout._constants import (
    FALLBACK_LABEL,
    FALLBACK_LATITUDE,
    FALLBACK_LONGITUDE,
    FALLBACK_ZOOM,
    INITIAL_ZOOM,
    LOCATED_ZOOM,
    MSG_DESTINATION_NOT_FOUND,
    MSG_DESTINATION_REQUIRED,
    MSG_GEOCODE_FAILED,
    MSG_LOCATION_FAILED,
    MSG_LOCATION_UNSUPPORTED,
    MSG_NO_RESULTS,
    MSG_NO_ROUTE,
    MSG_POI_FAILED,
    MSG_POSITION_REQUIRED,
)
from routescout.client import RouteScoutClient
from routescout.exceptions import (
    DestinationNotFoundError,
    GeolocationError,
    GeolocationUnsupportedError,
    RouteScoutConfigError,
    RoutingError,
    TransportError,
)
from routescout.location import LocationProvider
from routescout.models.geo import LatLng, Position
from routescout.models.geocode import GeocodeMatch
from routescout.models.place import PointOfInterest
from routescout.models.route import Route
from routescout.state.events import (
    MapView,
    Notification,
    NotificationLevel,
    NotificationRaised,
    PoisCleared,
    PoisLoaded,
    PositionAcquired,
    RouteCleared,
    RouteDrawn,
    Stage,
)
from routescout.state.store import MapStore

_logger = logging.getLogger(__name__)


class SearchStatus(StrEnum):
    COMPLETED = "completed"
    REJECTED = "rejected"
    DESTINATION_NOT_FOUND = "destination_not_found"
    GEOCODE_FAILED = "geocode_failed"
    ROUTING_FAILED = "routing_failed"
    NO_ROUTE = "no_route"
    POI_FAILED = "poi_failed"
    SUPERSEDED = "superseded"


class SearchOutcome(BaseModel):
    """Result of one :meth:`SearchOrchestrator.search` call."""

    model_config = ConfigDict(frozen=True)

    search_id: int | None
    status: SearchStatus
    stage: Stage
    destination: GeocodeMatch | None = None
    route: Route | None = None
    pois: list[PointOfInterest] = Field(default_factory=list)
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == SearchStatus.COMPLETED


class RouteEventKind(StrEnum):
    ROUTES_FOUND = "routesfound"
    ROUTING_ERROR = "routingerror"


class RouteEvent(BaseModel):
    """Terminal outcome of one route request; exactly one fires per request."""

    model_config = ConfigDict(frozen=True)

    kind: RouteEventKind
    search_id: int | None
    routes: list[Route] = Field(default_factory=list)
    message: str | None = None


RouteListener = Callable[[RouteEvent], None]
NotificationCallback = Callable[[Notification], None]


class SearchOrchestrator:
    """Owns the map state and drives the search pipeline.

    Parameters
    ----------
    client : RouteScoutClient
        Initialized client used for all upstream requests.
    location_provider : LocationProvider or None
        Device location capability. ``None`` means the capability is
        absent and :meth:`locate` always falls back.
    store : MapStore or None
        State store; a fresh one is created when omitted.
    on_notification : callable or None
        Called with every user-visible notification.
    """

    def __init__(
        self,
        client: RouteScoutClient,
        *,
        location_provider: LocationProvider | None = None,
        store: MapStore | None = None,
        on_notification: NotificationCallback | None = None,
    ) -> None:
        self._client = client
        self._config = client.config
        self._location_provider = location_provider
        self._store = store or MapStore(MapView(center=LatLng(lat=0.0, lon=0.0), zoom=INITIAL_ZOOM))
        self._on_notification = on_notification
        self._route_listeners: list[RouteListener] = []

    @property
    def store(self) -> MapStore:
        return self._store

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def add_route_listener(self, listener: RouteListener) -> Callable[[], None]:
        """Register for ``routesfound``/``routingerror`` events. Returns an unsubscribe hook."""
        self._route_listeners.append(listener)

        def _remove() -> None:
            if listener in self._route_listeners:
                self._route_listeners.remove(listener)

        return _remove

    def _emit_route_event(self, event: RouteEvent) -> None:
        for listener in list(self._route_listeners):
            listener(event)

    def _notify(
        self,
        level: NotificationLevel,
        message: str,
        stage: Stage,
        search_id: int | None = None,
    ) -> None:
        notification = Notification(level=level, message=message, stage=stage, search_id=search_id)
        if self._store.apply(NotificationRaised(notification=notification, search_id=search_id)):
            if self._on_notification is not None:
                self._on_notification(notification)

    # ------------------------------------------------------------------
    # Location acquirer
    # ------------------------------------------------------------------

    async def locate(self) -> Position:
        """Acquire the current position, falling back to the fixed default.

        Always sets the current position and the user marker; never raises
        for location failures.
        """
        provider = self._location_provider
        options = self._config.geolocation

        if provider is None:
            _logger.debug("No location provider available")
            return self._apply_fallback(MSG_LOCATION_UNSUPPORTED, "Geolocation not supported")

        try:
            async with asyncio.timeout(options.timeout):
                position = await provider.get_current_position(options)
        except TimeoutError:
            _logger.debug("Location request timed out after %.1fs", options.timeout)
            return self._apply_fallback(MSG_LOCATION_FAILED, "failed to get your exact location")
        except GeolocationUnsupportedError:
            _logger.debug("Location provider reports no capability")
            return self._apply_fallback(MSG_LOCATION_UNSUPPORTED, "Geolocation not supported")
        except GeolocationError as exc:
            _logger.debug("Location request failed: code=%s %s", exc.code.name, exc)
            return self._apply_fallback(MSG_LOCATION_FAILED, "failed to get your exact location")

        if position.accuracy is not None:
            popup = f"You are here (approx. {round(position.accuracy)}m accuracy)"
        else:
            popup = "You are here"
        self._store.apply(PositionAcquired(position=position, zoom=LOCATED_ZOOM, popup=popup))
        _logger.debug("Current location: %s, %s (accuracy %s m)", position.lat, position.lon, position.accuracy)
        return position

    def _apply_fallback(self, message: str, reason: str) -> Position:
        position = Position(
            lat=self._config.fallback_latitude,
            lon=self._config.fallback_longitude,
            is_fallback=True,
        )
        is_builtin = (position.lat, position.lon) == (FALLBACK_LATITUDE, FALLBACK_LONGITUDE)
        label = FALLBACK_LABEL if is_builtin else "Default Location"
        self._store.apply(PositionAcquired(position=position, zoom=FALLBACK_ZOOM, popup=f"{label} - {reason}"))
        _logger.warning("Using fallback location %s, %s: %s", position.lat, position.lon, reason)
        self._notify(NotificationLevel.WARNING, message, Stage.LOCATE)
        return position

    # ------------------------------------------------------------------
    # Search pipeline
    # ------------------------------------------------------------------

    async def search(self, destination: str, category: str = "") -> SearchOutcome:
        """Geocode *destination*, route to it and, if *category* is set, list POIs along the way."""
        destination = destination.strip()
        category = (category or "").strip()

        # Rejected searches never take an id, so they cannot supersede one in flight.
        if not destination:
            return self._reject(MSG_DESTINATION_REQUIRED)
        origin = self._store.current_position
        if origin is None:
            return self._reject(MSG_POSITION_REQUIRED)

        search_id = self._store.begin_search()
        _logger.debug("Search %d: destination=%r category=%r", search_id, destination, category)

        # A new search tears down everything the previous one drew.
        self._store.apply(RouteCleared(search_id=search_id))
        self._store.apply(PoisCleared(search_id=search_id))

        match_or_outcome = await self._geocode_stage(search_id, destination)
        if isinstance(match_or_outcome, SearchOutcome):
            return match_or_outcome
        match = match_or_outcome

        route_or_outcome = await self._route_stage(search_id, origin, match)
        if isinstance(route_or_outcome, SearchOutcome):
            return route_or_outcome
        route = route_or_outcome

        if not category:
            return SearchOutcome(
                search_id=search_id,
                status=SearchStatus.COMPLETED,
                stage=Stage.ROUTE,
                destination=match,
                route=route,
            )

        return await self._poi_stage(search_id, origin, match, route, category)

    async def _geocode_stage(self, search_id: int, destination: str) -> GeocodeMatch | SearchOutcome:
        try:
            match = await self._client.geocode(destination)
        except DestinationNotFoundError:
            _logger.debug("Search %d: no geocoding match for %r", search_id, destination)
            return self._fail(search_id, SearchStatus.DESTINATION_NOT_FOUND, Stage.GEOCODE, MSG_DESTINATION_NOT_FOUND)
        except TransportError:
            _logger.debug("Search %d: geocoding request failed", search_id, exc_info=True)
            return self._fail(search_id, SearchStatus.GEOCODE_FAILED, Stage.GEOCODE, MSG_GEOCODE_FAILED)

        if not self._store.is_current(search_id):
            return self._superseded(search_id, Stage.GEOCODE)
        return match

    async def _route_stage(self, search_id: int, origin: Position, match: GeocodeMatch) -> Route | SearchOutcome:
        try:
            routes = await self._client.get_routes(origin, match.location)
        except (RoutingError, TransportError) as exc:
            message = exc.message if isinstance(exc, RoutingError) else str(exc)
            _logger.debug("Search %d: routing failed: %s", search_id, message)
            self._emit_route_event(
                RouteEvent(kind=RouteEventKind.ROUTING_ERROR, search_id=search_id, message=message)
            )
            return self._fail(
                search_id,
                SearchStatus.ROUTING_FAILED,
                Stage.ROUTE,
                f"Routing error: {message}",
                destination=match,
            )

        self._emit_route_event(RouteEvent(kind=RouteEventKind.ROUTES_FOUND, search_id=search_id, routes=routes))
        if not self._store.is_current(search_id):
            return self._superseded(search_id, Stage.ROUTE, destination=match)
        if not routes:
            return self._fail(search_id, SearchStatus.NO_ROUTE, Stage.ROUTE, MSG_NO_ROUTE, destination=match)

        route = routes[0]
        self._store.apply(
            RouteDrawn(
                search_id=search_id,
                route=route,
                destination=match.location,
                destination_label=match.label,
                fit_view=self._config.route_style.fit_selected_routes,
            )
        )
        return route

    async def _poi_stage(
        self,
        search_id: int,
        origin: Position,
        match: GeocodeMatch,
        route: Route,
        category: str,
    ) -> SearchOutcome:
        bounds = route.bounds
        _logger.debug("Search %d: POI search %r in %s", search_id, category, bounds.as_param())

        # Cleared before the request goes out, so a slow earlier response
        # can never be shown next to this search's route.
        self._store.apply(PoisCleared(search_id=search_id))
        try:
            pois = await self._client.search_places(category, bias=origin, bounds=bounds)
        except (TransportError, RouteScoutConfigError):
            _logger.debug("Search %d: place search failed", search_id, exc_info=True)
            return self._fail(
                search_id,
                SearchStatus.POI_FAILED,
                Stage.POI,
                MSG_POI_FAILED,
                destination=match,
                route=route,
            )

        if not self._store.is_current(search_id):
            return self._superseded(search_id, Stage.POI, destination=match, route=route)

        self._store.apply(PoisLoaded(search_id=search_id, pois=pois, empty_message=MSG_NO_RESULTS))
        return SearchOutcome(
            search_id=search_id,
            status=SearchStatus.COMPLETED,
            stage=Stage.POI,
            destination=match,
            route=route,
            pois=pois,
        )

    # ------------------------------------------------------------------
    # Outcome helpers
    # ------------------------------------------------------------------

    def _reject(self, message: str) -> SearchOutcome:
        self._notify(NotificationLevel.ERROR, message, Stage.VALIDATE)
        return SearchOutcome(
            search_id=None,
            status=SearchStatus.REJECTED,
            stage=Stage.VALIDATE,
            message=message,
        )

    def _fail(
        self,
        search_id: int,
        status: SearchStatus,
        stage: Stage,
        message: str,
        *,
        destination: GeocodeMatch | None = None,
        route: Route | None = None,
    ) -> SearchOutcome:
        if not self._store.is_current(search_id):
            return self._superseded(search_id, stage, destination=destination, route=route)
        self._notify(NotificationLevel.ERROR, message, stage, search_id)
        return SearchOutcome(
            search_id=search_id,
            status=status,
            stage=stage,
            destination=destination,
            route=route,
            message=message,
        )

    def _superseded(
        self,
        search_id: int,
        stage: Stage,
        *,
        destination: GeocodeMatch | None = None,
        route: Route | None = None,
    ) -> SearchOutcome:
        _logger.debug("Search %d superseded by %d during %s", search_id, self._store.latest_search_id, stage)
        return SearchOutcome(
            search_id=search_id,
            status=SearchStatus.SUPERSEDED,
            stage=stage,
            destination=destination,
            route=route,
        )
