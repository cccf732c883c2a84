from __future__ import annotations

from trends.core.config import load_settings


def test_yaml_values_and_env_override(tmp_path, monkeypatch):
    cfg = tmp_path / "config.yaml"
    cfg.write_text(
        "favorites:\n  storage_dir: /tmp/favs\n  key: saved\n"
        "relay:\n  base_url: http://relay:9000/api/\n  port: 9000\n",
        encoding="utf-8",
    )
    for var in ("FAVORITES_DIR", "FAVORITES_KEY", "RELAY_BASE_URL", "RELAY_PORT", "PORT"):
        monkeypatch.delenv(var, raising=False)

    s = load_settings(str(cfg))
    assert s.storage_dir == "/tmp/favs"
    assert s.favorites_key == "saved"
    assert s.relay_base_url == "http://relay:9000/api"
    assert s.relay_port == 9000

    monkeypatch.setenv("FAVORITES_KEY", "other")
    monkeypatch.setenv("PORT", "7000")
    monkeypatch.setenv("RELAY_BASE_URL", "   ")  # blank counts as unset
    s = load_settings(str(cfg))
    assert s.favorites_key == "other"
    assert s.relay_port == 7000
    assert s.relay_base_url == "http://relay:9000/api"


def test_defaults_without_config(tmp_path, monkeypatch):
    for var in ("RELAY_PORT", "PORT", "ALPACA_FEED", "SYMBOLS_LIMIT", "FAVORITES_KEY"):
        monkeypatch.delenv(var, raising=False)

    s = load_settings(str(tmp_path / "missing.yaml"))
    assert s.relay_port == 5000
    assert s.alpaca_feed == "sip"
    assert s.symbols_limit == 100
    assert s.favorites_key == "favorites"

    monkeypatch.setenv("PORT", "8080")
    assert load_settings(str(tmp_path / "missing.yaml")).relay_port == 8080
