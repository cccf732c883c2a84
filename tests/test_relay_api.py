from __future__ import annotations

import pytest
import requests
from fastapi.testclient import TestClient

from trends.relay.app import MISSING_BARS_PARAMS, create_app, get_upstream
from trends.relay.upstream import UpstreamHTTPError, UpstreamUnavailable


class FakeUpstream:
    def __init__(self, bars=None, symbols=None, exc=None):
        self.bars = bars
        self.symbols = symbols
        self.exc = exc
        self.calls = []

    def get_bars(self, **kw):
        self.calls.append(("bars", kw))
        if self.exc:
            raise self.exc
        return self.bars

    def get_symbols(self):
        self.calls.append(("symbols", {}))
        if self.exc:
            raise self.exc
        return self.symbols


def _client(fake: FakeUpstream) -> TestClient:
    app = create_app()
    app.dependency_overrides[get_upstream] = lambda: fake
    return TestClient(app)


BARS_PARAMS = {"symbols": "AAPL,TSLA", "start": "2024-10-01T00:00:00Z", "end": "2024-10-03T23:59:59Z", "timeframe": "day"}


def test_healthz():
    r = _client(FakeUpstream()).get("/healthz")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}
    assert r.headers.get("X-Request-ID")


@pytest.mark.parametrize("missing", ["symbols", "start", "end", "timeframe"])
def test_bars_requires_all_params(missing):
    fake = FakeUpstream(bars={"bars": {}})
    params = {k: v for k, v in BARS_PARAMS.items() if k != missing}

    r = _client(fake).get("/api/bars", params=params)
    assert r.status_code == 400
    assert r.json() == {"error": MISSING_BARS_PARAMS}
    assert fake.calls == []


def test_bars_passthrough():
    payload = {"bars": {"AAPL": [{"o": 1, "h": 2, "l": 0.5, "c": 1.5, "v": 100, "n": 3, "t": "2024-10-01T13:30:00Z"}]}, "next_page_token": None}
    fake = FakeUpstream(bars=payload)

    r = _client(fake).get("/api/bars", params=BARS_PARAMS)
    assert r.status_code == 200
    assert r.json() == payload
    assert fake.calls == [("bars", BARS_PARAMS)]


def test_bars_upstream_status_is_forwarded():
    fake = FakeUpstream(exc=UpstreamHTTPError(422, "invalid timeframe"))

    r = _client(fake).get("/api/bars", params=BARS_PARAMS)
    assert r.status_code == 422
    assert r.json() == {"error": "Failed to fetch bars data from Alpaca: invalid timeframe"}


@pytest.mark.parametrize("exc", [requests.ConnectionError("boom"), UpstreamUnavailable("ALPACA_API_KEY not set")])
def test_bars_unexpected_failure_is_generic_500(exc):
    r = _client(FakeUpstream(exc=exc)).get("/api/bars", params=BARS_PARAMS)
    assert r.status_code == 500
    assert r.json() == {"error": "An error occurred while fetching bars data"}


def test_symbols_passthrough_without_filtering():
    payload = {"results": [{"ticker": "AAPL", "name": "Apple"}, {"ticker": "BRK.A", "name": "Berkshire"}]}
    r = _client(FakeUpstream(symbols=payload)).get("/api/symbols")
    assert r.status_code == 200
    assert r.json() == payload


def test_symbols_errors():
    r = _client(FakeUpstream(exc=UpstreamHTTPError(401, "unauthorized"))).get("/api/symbols")
    assert r.status_code == 401
    assert r.json() == {"error": "Failed to fetch symbols from Polygon: unauthorized"}

    r = _client(FakeUpstream(exc=RuntimeError("x"))).get("/api/symbols")
    assert r.status_code == 500
    assert r.json() == {"error": "An error occurred while fetching symbols"}


def test_incoming_request_id_is_kept():
    r = _client(FakeUpstream()).get("/healthz", headers={"X-Request-ID": "abc-123"})
    assert r.headers["X-Request-ID"] == "abc-123"
