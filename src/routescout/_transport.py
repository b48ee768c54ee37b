"""HTTP transport for the geocoding, routing and place-search services."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from routescout._redact import redact_for_log, redact_url
from routescout.config import RouteScoutConfig
from routescout.exceptions import TransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles/mocks while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def get_json(self, endpoint: str, url: str, params: Mapping[str, Any]) -> Any:
        ...


class HttpTransport:
    """JSON-over-HTTP GET transport shared by all endpoint modules.

    ``endpoint`` is a short service name (``"geocode"``, ``"route"``,
    ``"places"``) used in error messages and logs.
    """

    def __init__(
        self,
        config: RouteScoutConfig,
        http_session: aiohttp.ClientSession,
    ) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    async def get_json(self, endpoint: str, url: str, params: Mapping[str, Any]) -> Any:
        """GET *url* with query *params* and return the decoded JSON body.

        Raises
        ------
        TransportError
            On network failure, timeout, a non-2xx status, or a body that
            is not JSON.
        """
        headers: dict[str, str] = {
            "accept": "application/json",
            "user-agent": self._config.user_agent,
        }
        query = {k: str(v) for k, v in params.items()}

        _logger.debug("GET %s %s params=%s", endpoint, redact_url(url), redact_for_log(query))

        try:
            async with self._http.get(url, params=query, headers=headers, timeout=self._timeout) as resp:
                text = await resp.text()
                _logger.debug("%s -> HTTP %s %s", endpoint, resp.status, redact_url(str(resp.url)))
                if not 200 <= resp.status < 300:
                    raise TransportError(
                        f"HTTP {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                        body=text,
                    )
        except TransportError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise TransportError(
                f"Request to {endpoint} failed: {exc!r}",
                endpoint=endpoint,
            ) from exc

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise TransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                endpoint=endpoint,
            ) from exc
