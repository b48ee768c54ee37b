from __future__ import annotations

import pytest

from routescout.models.geo import LatLng, Position
from routescout.models.place import PointOfInterest
from routescout.models.route import Route
from routescout.state.events import (
    MapView,
    MarkerKind,
    Notification,
    NotificationLevel,
    NotificationRaised,
    PoisCleared,
    PoisLoaded,
    PositionAcquired,
    RouteCleared,
    RouteDrawn,
    Stage,
    StateEvent,
)
from routescout.state.store import MapStore


def _route() -> Route:
    return Route(coordinates=[LatLng(lat=37.0, lon=-122.0), LatLng(lat=37.5, lon=-122.5)], distance_m=100.0)


def _poi(name: str, lat: float = 37.1, lon: float = -122.1) -> PointOfInterest:
    return PointOfInterest(name=name, address=f"{name} street", location=LatLng(lat=lat, lon=lon))


def test_user_marker_created_once_then_moved() -> None:
    store = MapStore()

    store.apply(PositionAcquired(position=Position(lat=1.0, lon=2.0, accuracy=10), zoom=13, popup="first"))
    store.apply(PositionAcquired(position=Position(lat=3.0, lon=4.0), zoom=10, popup="second"))

    marker = store.state.user_marker
    assert marker is not None
    assert marker.kind == MarkerKind.USER
    assert marker.location == LatLng(lat=3.0, lon=4.0)
    assert marker.popup == "first"
    assert store.state.view == MapView(center=LatLng(lat=3.0, lon=4.0), zoom=10)
    assert store.current_position is not None
    assert store.current_position.lat == 3.0


def test_stale_search_transition_is_dropped() -> None:
    store = MapStore()
    old = store.begin_search()
    new = store.begin_search()

    assert store.apply(PoisLoaded(search_id=old, pois=[_poi("stale")])) is False
    assert store.apply(PoisLoaded(search_id=new, pois=[_poi("fresh")])) is True

    assert store.state.results == ["fresh"]
    assert store.history == ["pois_loaded"]


def test_route_drawn_replaces_previous_route_and_fits_view() -> None:
    store = MapStore()
    first = store.begin_search()
    destination = LatLng(lat=37.5, lon=-122.5)
    store.apply(RouteDrawn(search_id=first, route=_route(), destination=destination, destination_label="A"))

    second = store.begin_search()
    store.apply(RouteCleared(search_id=second))
    assert store.state.route is None
    assert store.state.destination_marker is None

    store.apply(RouteDrawn(search_id=second, route=_route(), destination=destination, destination_label="B"))
    assert store.state.destination_marker is not None
    assert store.state.destination_marker.popup == "Destination: B"
    assert store.state.view.fit_bounds is not None
    assert store.state.view.fit_bounds.north == pytest.approx(37.5)


def test_route_drawn_without_fit_keeps_view() -> None:
    store = MapStore(MapView(center=LatLng(lat=1.0, lon=1.0), zoom=5))
    store.apply(
        RouteDrawn(route=_route(), destination=LatLng(lat=37.5, lon=-122.5), destination_label="A", fit_view=False)
    )
    assert store.state.view.zoom == 5


def test_pois_loaded_empty_renders_single_entry() -> None:
    store = MapStore()
    store.apply(PoisLoaded(pois=[], empty_message="No results found."))
    assert store.state.results == ["No results found."]
    assert store.state.poi_markers == []


def test_pois_cleared_empties_layer_and_list() -> None:
    store = MapStore()
    store.apply(PoisLoaded(pois=[_poi("a"), _poi("b")]))
    assert len(store.state.poi_markers) == 2

    store.apply(PoisCleared())
    assert store.state.poi_markers == []
    assert store.state.results == []
    assert store.state.pois == []


def test_stale_notification_is_dropped() -> None:
    store = MapStore()
    old = store.begin_search()
    store.begin_search()
    note = Notification(level=NotificationLevel.ERROR, message="late", stage=Stage.POI, search_id=old)

    assert store.apply(NotificationRaised(notification=note, search_id=old)) is False
    assert store.state.notifications == []


def test_listeners_receive_applied_transitions_only() -> None:
    store = MapStore()
    seen: list[str] = []
    unsubscribe = store.subscribe(lambda event, _state: seen.append(event.name))

    old = store.begin_search()
    store.begin_search()
    store.apply(PoisCleared(search_id=old))
    store.apply(PoisCleared())
    unsubscribe()
    store.apply(PoisCleared())

    assert seen == ["pois_cleared"]


def test_snapshot_is_detached() -> None:
    store = MapStore()
    store.apply(PoisLoaded(pois=[_poi("a")]))
    snapshot = store.snapshot()
    store.apply(PoisCleared())
    assert snapshot.results == ["a"]


def test_unknown_event_type_raises() -> None:
    store = MapStore()
    with pytest.raises(TypeError):
        store.apply(StateEvent())
