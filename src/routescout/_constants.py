"""Internal constants shared across the library."""

USER_AGENT = "routescout/0.1 (+https://github.com/routescout/routescout)"

GEOCODE_URL = "https://nominatim.openstreetmap.org/search"
ROUTING_URL = "https://router.project-osrm.org"
ROUTING_PROFILE = "driving"
PLACES_URL = "https://maps.googleapis.com/maps/api/place/textsearch/json"
IP_LOCATION_URL = "https://ipapi.co/json/"

# ------------------------------------------------------------------
# Fallback origin (downtown Los Angeles) used when no device fix exists
# ------------------------------------------------------------------

FALLBACK_LATITUDE = 34.0522
FALLBACK_LONGITUDE = -118.2437
FALLBACK_LABEL = "Default Location (LA)"

# ------------------------------------------------------------------
# Map view zoom levels
# ------------------------------------------------------------------

INITIAL_ZOOM = 2
LOCATED_ZOOM = 13
FALLBACK_ZOOM = 10

DEFAULT_SEARCH_RADIUS_M = 10_000
GEOLOCATION_TIMEOUT_S = 20.0

# Places Text Search statuses that carry a usable (possibly empty) result set.
PLACES_OK_STATUSES: frozenset[str] = frozenset({"OK", "ZERO_RESULTS"})

# ------------------------------------------------------------------
# User-facing notification texts
# ------------------------------------------------------------------

MSG_LOCATION_FAILED = (
    "Could not retrieve your location. Please ensure location services are enabled and granted permission."
)
MSG_LOCATION_UNSUPPORTED = "Geolocation is not supported by your browser."
MSG_DESTINATION_REQUIRED = "Please enter a destination!"
MSG_POSITION_REQUIRED = "Your current location is not available. Please allow location access."
MSG_GEOCODE_FAILED = "An error occurred while geocoding the destination."
MSG_DESTINATION_NOT_FOUND = "Destination not found. Please try a more specific address or place name."
MSG_NO_ROUTE = "Sorry, we could not find a route to that destination."
MSG_POI_FAILED = "An error occurred while searching for points of interest."
MSG_NO_RESULTS = "No results found."
