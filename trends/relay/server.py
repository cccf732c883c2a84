"""Runs the relay with uvicorn.

Usage:
  trends-relay
  python -m trends.relay.server --port 5000
"""
from __future__ import annotations

import argparse

import uvicorn

from trends.core.config import SETTINGS
from trends.utils.logging import get_logger, setup_logging

logger = get_logger("relay.server")


def main() -> None:
    p = argparse.ArgumentParser(prog="trends-relay", description="Market-data relay (Alpaca bars, Polygon symbols)")
    p.add_argument("--host", default=SETTINGS.relay_host)
    p.add_argument("--port", type=int, default=SETTINGS.relay_port)
    p.add_argument("--log-level", default=SETTINGS.log_level)
    args = p.parse_args()

    setup_logging(args.log_level)
    logger.info(f"Server is running on http://{args.host}:{args.port}")
    # log_config=None keeps uvicorn on our root handler
    uvicorn.run("trends.relay.app:app", host=args.host, port=args.port, log_config=None)


if __name__ == "__main__":
    main()
