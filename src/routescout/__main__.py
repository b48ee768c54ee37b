"""Command-line front end: ``routescout "Golden Gate Bridge" --category coffee``."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

from routescout.client import RouteScoutClient
from routescout.config import RouteScoutConfig
from routescout.exceptions import GeolocationErrorCode
from routescout.location import FailingLocationProvider, LocationProvider, StaticLocationProvider
from routescout.orchestrator import SearchOrchestrator, SearchOutcome
from routescout.render import render_map_html
from routescout.state.events import Notification


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="routescout",
        description="Route to a destination and list points of interest near the route.",
    )
    parser.add_argument("destination", help="Free-text destination (address or place name)")
    parser.add_argument("--category", "-c", default="", help="POI category to search for, e.g. 'coffee'")
    origin = parser.add_mutually_exclusive_group()
    origin.add_argument("--origin", nargs=2, type=float, metavar=("LAT", "LON"), help="Use a fixed origin")
    origin.add_argument("--ip-location", action="store_true", help="Locate via IP geolocation lookup")
    origin.add_argument("--deny-location", action="store_true", help="Simulate denied location access")
    parser.add_argument("--html", metavar="PATH", help="Write the resulting map to an HTML file")
    parser.add_argument("--json", action="store_true", help="Print the outcome as JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


def _print_notification(notification: Notification) -> None:
    print(f"[{notification.level.value}] {notification.message}", file=sys.stderr)


def _print_outcome(outcome: SearchOutcome, results: list[str]) -> None:
    if outcome.destination is not None:
        print(f"Destination: {outcome.destination.label}")
    if outcome.route is not None:
        distance = outcome.route.distance_m
        if distance is not None:
            print(f"Route: {len(outcome.route.coordinates)} points, {distance / 1000:.1f} km")
        else:
            print(f"Route: {len(outcome.route.coordinates)} points")
    for entry in results:
        print(f"  - {entry}")


async def _run(args: argparse.Namespace) -> int:
    config = RouteScoutConfig.from_env()
    async with RouteScoutClient(config) as client:
        provider: LocationProvider | None
        if args.origin is not None:
            provider = StaticLocationProvider(args.origin[0], args.origin[1])
        elif args.ip_location:
            provider = client.ip_location_provider()
        elif args.deny_location:
            provider = FailingLocationProvider(GeolocationErrorCode.PERMISSION_DENIED)
        else:
            provider = None

        orchestrator = SearchOrchestrator(
            client,
            location_provider=provider,
            on_notification=_print_notification,
        )
        await orchestrator.locate()
        outcome = await orchestrator.search(args.destination, args.category)
        state = orchestrator.store.snapshot()

    if args.json:
        payload: dict[str, Any] = outcome.model_dump(mode="json", exclude={"route": {"raw"}, "destination": {"raw"}})
        payload["results"] = state.results
        print(json.dumps(payload, indent=2))
    else:
        _print_outcome(outcome, state.results)

    if args.html:
        path = render_map_html(state, args.html, config.route_style)
        print(f"Map written to {path}", file=sys.stderr)

    return 0 if outcome.ok else 1


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.origin is not None:
        lat, lon = args.origin
        if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
            parser.error(f"--origin {lat} {lon} is out of range (LAT in [-90, 90], LON in [-180, 180])")
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return asyncio.run(_run(args))


if __name__ == "__main__":
    sys.exit(main())
