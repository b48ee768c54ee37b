"""Custom exception hierarchy for routescout."""

from __future__ import annotations

import enum


class RouteScoutError(Exception):
    """Base exception for all routescout errors."""


class RouteScoutConfigError(RouteScoutError):
    """Invalid or missing configuration."""


class GeolocationErrorCode(enum.IntEnum):
    """Failure codes reported by a location provider.

    Values follow the W3C ``GeolocationPositionError`` codes.
    """

    PERMISSION_DENIED = 1
    POSITION_UNAVAILABLE = 2
    TIMEOUT = 3


class GeolocationError(RouteScoutError):
    """The location provider could not produce a position."""

    def __init__(
        self,
        message: str,
        *,
        code: GeolocationErrorCode = GeolocationErrorCode.POSITION_UNAVAILABLE,
    ) -> None:
        self.code = code
        super().__init__(message)


class GeolocationUnsupportedError(GeolocationError):
    """No location capability is available at all."""


class MissingPreconditionError(RouteScoutError):
    """A search was started without the input it needs.

    Raised for an empty destination or when no current position has
    been acquired yet.  No network call is made in either case.
    """


class TransportError(RouteScoutError):
    """HTTP-level failure (network, non-2xx, invalid JSON).

    ``body`` holds the response text of a non-2xx answer, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
        body: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        self.body = body
        super().__init__(message)


class PlacesApiError(TransportError):
    """Place search answered with a non-success ``status`` field."""

    def __init__(
        self,
        message: str,
        *,
        status: str = "",
        endpoint: str = "",
    ) -> None:
        self.status = status
        super().__init__(message, endpoint=endpoint)


class EmptyResultError(RouteScoutError):
    """An upstream lookup succeeded but returned nothing."""


class DestinationNotFoundError(EmptyResultError):
    """Geocoding returned no match for the destination text."""

    def __init__(self, query: str) -> None:
        self.query = query
        super().__init__(f"No geocoding match for {query!r}")


class RoutingError(RouteScoutError):
    """The routing service could not produce a route."""

    def __init__(self, message: str, *, code: str = "") -> None:
        self.message = message
        self.code = code
        super().__init__(message)
