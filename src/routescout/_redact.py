"""Helpers for safe debug logging.

The place-search service authenticates with a key carried in the query
string. Both the parameter map and the final request URL pass through
here before they reach a DEBUG log line.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

_REDACTED = "<redacted>"

# Compared lowercase.
_SECRET_PARAMS: frozenset[str] = frozenset({"key", "api_key", "apikey", "access_token", "token", "authorization"})


def _is_secret(name: object) -> bool:
    return str(name).lower() in _SECRET_PARAMS


def redact_for_log(value: Any, *, max_string: int = 512) -> Any:
    """Copy of *value* with secret entries masked and long text shortened.

    Mappings are walked key by key, lists and tuples item by item. Other
    scalars are returned unchanged.
    """
    if isinstance(value, str):
        return value if len(value) <= max_string else f"{value[:max_string]}…<truncated>"
    if isinstance(value, Mapping):
        return {
            str(k): _REDACTED if _is_secret(k) else redact_for_log(v, max_string=max_string)
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [redact_for_log(item, max_string=max_string) for item in value]
    return value


def redact_url(url: str) -> str:
    """Return *url* with secret query parameters replaced by ``<redacted>``."""
    parts = urlsplit(url)
    if not parts.query:
        return url
    pairs = [(k, _REDACTED if _is_secret(k) else v) for k, v in parse_qsl(parts.query, keep_blank_values=True)]
    return urlunsplit(parts._replace(query=urlencode(pairs, safe="<>")))
