from __future__ import annotations

import re
import uuid
from typing import Any, Dict, List, Optional

import requests
from pydantic import ValidationError

from trends.core.config import SETTINGS
from trends.core.schemas import Bar, FavoriteQuery, SymbolInfo
from trends.utils.logging import get_logger, set_log_context

logger = get_logger("market_data")

_TICKER_RE = re.compile(r"^[A-Z]+$")


class RelayClientError(Exception):
    """Displayable failure from the relay (message is safe to show to the user)."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def bars_window(query: FavoriteQuery) -> Dict[str, str]:
    """Relay params for a saved query: whole days, UTC."""
    return {
        "symbols": ",".join(query.symbols),
        "start": f"{query.start_date.isoformat()}T00:00:00Z",
        "end": f"{query.end_date.isoformat()}T23:59:59Z",
        "timeframe": query.timeframe,
    }


def flatten_bars(payload: Dict[str, Any]) -> List[Bar]:
    """`{"bars": {"AAPL": [...], "TSLA": [...]}}` -> one list, symbol order kept."""
    if payload is not None and not isinstance(payload, dict):
        raise RelayClientError("Failed to fetch bars data: invalid response")
    by_symbol = (payload or {}).get("bars")
    if not by_symbol:
        raise RelayClientError("No bars data available.")
    if not isinstance(by_symbol, dict):
        raise RelayClientError("Failed to fetch bars data: invalid response")
    try:
        return [Bar.from_alpaca(sym, raw) for sym, rows in by_symbol.items() for raw in (rows or [])]
    except (KeyError, TypeError, AttributeError, ValidationError) as e:
        logger.error(f"bars_malformed err={type(e).__name__}:{e}")
        raise RelayClientError("Failed to fetch bars data: malformed bars") from e


class RelayClient:
    """
    HTTP client for the relay.
    - One request per call, no retries
    - Every failure becomes RelayClientError
    """

    def __init__(self, base_url: Optional[str] = None, session: Optional[requests.Session] = None) -> None:
        self.base_url = (base_url or SETTINGS.relay_base_url).rstrip("/")
        self.session = session or requests.Session()
        self.timeout = int(SETTINGS.relay_timeout_seconds or 20)

    def fetch_symbols(self) -> List[SymbolInfo]:
        failure = "Failed to fetch stock symbols"
        data = self._get_json("/symbols", params=None, failure=failure)
        if not isinstance(data, dict):
            raise RelayClientError(f"{failure}: invalid response")
        rows = data.get("results") or []
        if not isinstance(rows, list):
            raise RelayClientError(f"{failure}: invalid response")

        out: List[SymbolInfo] = []
        for row in rows:
            if not isinstance(row, dict):
                raise RelayClientError(f"{failure}: invalid response")
            ticker = row.get("ticker")
            name = row.get("name")
            if isinstance(ticker, str) and _TICKER_RE.match(ticker):
                out.append(SymbolInfo(ticker=ticker, name=name if isinstance(name, str) else ""))
        return out

    def fetch_bars(self, symbols: str, start: str, end: str, timeframe: str) -> Dict[str, Any]:
        params = {"symbols": symbols, "start": start, "end": end, "timeframe": timeframe}
        return self._get_json("/bars", params=params, failure="Failed to fetch bars data")

    def fetch_favorite_bars(self, query: FavoriteQuery) -> List[Bar]:
        return flatten_bars(self.fetch_bars(**bars_window(query)))

    # -----------------------------
    # HTTP helper
    # -----------------------------
    def _get_json(self, path: str, *, params: Optional[dict], failure: str) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        request_id = str(uuid.uuid4())
        set_log_context(request_id=request_id)
        try:
            r = self.session.get(url, params=params, headers={"X-Request-ID": request_id}, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"relay_unreachable url={url} err={type(e).__name__}:{e}")
            raise RelayClientError(f"{failure}: relay unreachable") from e

        if not r.ok:
            detail = None
            try:
                body = r.json()
                if isinstance(body, dict):
                    detail = body.get("error")
            except ValueError:
                detail = None
            logger.error(f"relay_failed url={url} status={r.status_code} detail={detail}")
            raise RelayClientError(f"{failure}: {detail}" if detail else failure, status_code=r.status_code)

        try:
            return r.json()
        except ValueError as e:
            raise RelayClientError(f"{failure}: invalid response", status_code=r.status_code) from e
