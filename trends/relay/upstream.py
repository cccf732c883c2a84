from __future__ import annotations

import os
from typing import Any, Dict, Optional

import requests

from trends.core.config import SETTINGS, Settings
from trends.utils.logging import get_logger

logger = get_logger("upstream")


class UpstreamError(Exception):
    pass


class UpstreamUnavailable(UpstreamError):
    pass


class UpstreamHTTPError(UpstreamError):
    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"upstream returned {status_code}: {body}")
        self.status_code = status_code
        self.body = body


class UpstreamClient:
    """
    Read-only calls to the market-data providers.
    - Bars via Alpaca (credentials in headers)
    - Symbols via Polygon (credential in query string)
    - No retries: one request per call, failures propagate
    """

    def __init__(self, settings: Optional[Settings] = None, session: Optional[requests.Session] = None) -> None:
        self.settings = settings or SETTINGS
        self.session = session or requests.Session()
        self.timeout = int(self.settings.relay_timeout_seconds or 20)

    def get_bars(self, *, symbols: str, start: str, end: str, timeframe: str) -> Dict[str, Any]:
        key_id = os.getenv("ALPACA_API_KEY")
        secret = os.getenv("ALPACA_API_SECRET")
        if not key_id or not secret:
            raise UpstreamUnavailable("ALPACA_API_KEY / ALPACA_API_SECRET not set")

        params = {
            "symbols": symbols,
            "start": start,
            "end": end,
            "timeframe": timeframe,
            "feed": self.settings.alpaca_feed,
        }
        headers = {
            "APCA-API-KEY-ID": key_id,
            "APCA-API-SECRET-KEY": secret,
            "Accept": "application/json",
        }
        return self._get_json(self.settings.alpaca_bars_url, params=params, headers=headers)

    def get_symbols(self) -> Dict[str, Any]:
        api_key = os.getenv("POLYGON_API_KEY")
        if not api_key:
            raise UpstreamUnavailable("POLYGON_API_KEY not set")

        params = {"active": "true", "limit": self.settings.symbols_limit, "apiKey": api_key}
        return self._get_json(self.settings.polygon_tickers_url, params=params)

    # -----------------------------
    # HTTP helper
    # -----------------------------
    def _get_json(self, url: str, *, params: dict, headers: Optional[dict] = None) -> Dict[str, Any]:
        r = self.session.get(url, params=params, headers=headers, timeout=self.timeout)
        if not r.ok:
            raise UpstreamHTTPError(r.status_code, r.text)
        return r.json()
