"""Export a :class:`~routescout.state.store.MapState` to an HTML map."""

from __future__ import annotations

from pathlib import Path

import folium

from routescout.config import RouteStyle
from routescout.state.events import Marker, MarkerKind
from routescout.state.store import MapState

_ATTRIBUTION = '&copy; <a href="https://www.openstreetmap.org/copyright">OpenStreetMap</a> contributors'

_MARKER_COLORS: dict[MarkerKind, str] = {
    MarkerKind.USER: "blue",
    MarkerKind.DESTINATION: "red",
    MarkerKind.POI: "green",
}


def _add_marker(target: folium.Map | folium.FeatureGroup, marker: Marker) -> None:
    folium.Marker(
        marker.location.as_tuple(),
        popup=folium.Popup(marker.popup, max_width=300, show=marker.open_popup) if marker.popup else None,
        icon=folium.Icon(color=_MARKER_COLORS[marker.kind]),
    ).add_to(target)


def build_map(state: MapState, style: RouteStyle | None = None) -> folium.Map:
    """Build a folium map showing position, route, destination and POIs."""
    style = style or RouteStyle()
    view = state.view
    m = folium.Map(
        location=view.center.as_tuple(),
        zoom_start=view.zoom if view.zoom is not None else 13,
        tiles="https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png",
        attr=_ATTRIBUTION,
    )

    if state.user_marker is not None:
        _add_marker(m, state.user_marker)

    if state.route is not None and state.route.coordinates:
        folium.PolyLine(
            [point.as_tuple() for point in state.route.coordinates],
            color=style.color,
            opacity=style.opacity,
            weight=style.weight,
        ).add_to(m)

    if state.destination_marker is not None:
        _add_marker(m, state.destination_marker)

    poi_group = folium.FeatureGroup(name="Points of interest")
    for marker in state.poi_markers:
        _add_marker(poi_group, marker)
    poi_group.add_to(m)

    if view.fit_bounds is not None:
        box = view.fit_bounds
        m.fit_bounds([[box.south, box.west], [box.north, box.east]])
    return m


def render_map_html(state: MapState, path: str | Path, style: RouteStyle | None = None) -> Path:
    """Write the map to *path* and return it."""
    target = Path(path)
    build_map(state, style).save(str(target))
    return target
