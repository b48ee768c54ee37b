from __future__ import annotations

import asyncio
from typing import Any

import aiohttp
import pytest

from routescout._transport import HttpTransport
from routescout.config import RouteScoutConfig
from routescout.exceptions import TransportError


class _FakeResponse:
    def __init__(self, status: int, body: str, url: str) -> None:
        self.status = status
        self._body = body
        self.url = url

    async def text(self) -> str:
        return self._body

    async def __aenter__(self) -> _FakeResponse:
        return self

    async def __aexit__(self, *exc: object) -> None:
        return None


class _FakeSession:
    def __init__(self, *, status: int = 200, body: str = "{}", error: BaseException | None = None) -> None:
        self.status = status
        self.body = body
        self.error = error
        self.requests: list[dict[str, Any]] = []

    def get(self, url: str, **kwargs: Any) -> _FakeResponse:
        self.requests.append({"url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return _FakeResponse(self.status, self.body, url)


def _transport(session: _FakeSession, **config: Any) -> HttpTransport:
    return HttpTransport(RouteScoutConfig(**config), session)  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_get_json_decodes_body_and_sends_headers() -> None:
    session = _FakeSession(body='[{"lat": "1.0", "lon": "2.0"}]')
    transport = _transport(session, user_agent="routescout-tests/1.0", request_timeout=3.0)

    decoded = await transport.get_json("geocode", "https://geo.example/search", {"q": "x", "limit": 1})

    assert decoded == [{"lat": "1.0", "lon": "2.0"}]
    request = session.requests[0]
    assert request["url"] == "https://geo.example/search"
    assert request["params"] == {"q": "x", "limit": "1"}
    assert request["headers"]["user-agent"] == "routescout-tests/1.0"
    assert request["headers"]["accept"] == "application/json"
    assert request["timeout"].total == 3.0


@pytest.mark.asyncio
async def test_non_2xx_status_raises_with_status_code() -> None:
    transport = _transport(_FakeSession(status=503, body="upstream down"))

    with pytest.raises(TransportError) as excinfo:
        await transport.get_json("route", "https://osrm.example/route", {})

    assert excinfo.value.status_code == 503
    assert excinfo.value.endpoint == "route"
    assert excinfo.value.body == "upstream down"
    assert "upstream down" in str(excinfo.value)


@pytest.mark.asyncio
async def test_invalid_json_raises() -> None:
    transport = _transport(_FakeSession(body="<html>nope</html>"))
    with pytest.raises(TransportError, match="Invalid JSON from places"):
        await transport.get_json("places", "https://places.example", {"key": "secret"})


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [aiohttp.ClientConnectionError("refused"), asyncio.TimeoutError()])
async def test_network_failures_are_wrapped(error: BaseException) -> None:
    transport = _transport(_FakeSession(error=error))

    with pytest.raises(TransportError) as excinfo:
        await transport.get_json("geocode", "https://geo.example/search", {})

    assert excinfo.value.status_code is None
    assert excinfo.value.__cause__ is error


@pytest.mark.asyncio
async def test_api_key_is_not_logged(caplog: pytest.LogCaptureFixture) -> None:
    transport = _transport(_FakeSession(body='{"status": "OK", "results": []}'))

    with caplog.at_level("DEBUG", logger="routescout._transport"):
        await transport.get_json("places", "https://places.example?key=AIza-secret", {"key": "AIza-secret"})

    assert caplog.records
    assert "AIza-secret" not in caplog.text
