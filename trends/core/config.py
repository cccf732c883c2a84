from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict

import yaml
from dotenv import load_dotenv


@dataclass(frozen=True)
class Settings:
    env: str
    log_level: str

    storage_dir: str
    favorites_key: str

    relay_base_url: str
    relay_host: str
    relay_port: int
    relay_timeout_seconds: int
    allow_origins: str

    alpaca_bars_url: str
    alpaca_feed: str
    polygon_tickers_url: str
    symbols_limit: int


def _deep_get(d: Dict[str, Any], path: str, default=None):
    cur = d
    for part in path.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return default
        cur = cur[part]
    return cur


def load_settings(config_path: str = "config.yaml") -> Settings:
    """
    Loads config.yaml + overrides from .env/environment variables.
    """
    load_dotenv()  # loads .env into env vars

    cfg: Dict[str, Any] = {}
    if os.path.exists(config_path):
        with open(config_path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}

    # Empty env vars count as "not set" so they never shadow config.yaml.
    def _env_or_cfg(key: str, cfg_path: str, default):
        v = os.getenv(key)
        if v is None:
            return _deep_get(cfg, cfg_path, default)
        v = v.strip()
        return _deep_get(cfg, cfg_path, default) if v == "" else v

    env = _env_or_cfg("APP_ENV", "app.env", "dev")
    log_level = _env_or_cfg("LOG_LEVEL", "app.log_level", "INFO")

    storage_dir = _env_or_cfg("FAVORITES_DIR", "favorites.storage_dir", "data")
    favorites_key = _env_or_cfg("FAVORITES_KEY", "favorites.key", "favorites")

    relay_base_url = _env_or_cfg("RELAY_BASE_URL", "relay.base_url", "http://localhost:5000/api")
    relay_host = _env_or_cfg("RELAY_HOST", "relay.host", "0.0.0.0")
    # RELAY_PORT, then PORT (set by hosting platforms), then config.yaml
    port_env = (os.getenv("RELAY_PORT") or os.getenv("PORT") or "").strip()
    relay_port = int(port_env or _deep_get(cfg, "relay.port", 5000))
    relay_timeout_seconds = int(_env_or_cfg("RELAY_TIMEOUT_SECONDS", "relay.timeout_seconds", 20))
    allow_origins = _env_or_cfg("ALLOW_ORIGINS", "relay.allow_origins", "*")

    alpaca_bars_url = _env_or_cfg(
        "ALPACA_BARS_URL", "upstream.alpaca_bars_url", "https://data.alpaca.markets/v2/stocks/bars"
    )
    alpaca_feed = _env_or_cfg("ALPACA_FEED", "upstream.alpaca_feed", "sip")
    polygon_tickers_url = _env_or_cfg(
        "POLYGON_TICKERS_URL", "upstream.polygon_tickers_url", "https://api.polygon.io/v3/reference/tickers"
    )
    symbols_limit = int(_env_or_cfg("SYMBOLS_LIMIT", "upstream.symbols_limit", 100))

    if isinstance(relay_base_url, str):
        relay_base_url = relay_base_url.strip().rstrip("/")
    if isinstance(alpaca_feed, str):
        alpaca_feed = alpaca_feed.strip().lower()

    return Settings(
        env=env,
        log_level=log_level,
        storage_dir=storage_dir,
        favorites_key=favorites_key,
        relay_base_url=relay_base_url,
        relay_host=relay_host,
        relay_port=relay_port,
        relay_timeout_seconds=relay_timeout_seconds,
        allow_origins=allow_origins,
        alpaca_bars_url=alpaca_bars_url,
        alpaca_feed=alpaca_feed,
        polygon_tickers_url=polygon_tickers_url,
        symbols_limit=symbols_limit,
    )


# Optional convenience singleton
SETTINGS = load_settings()
