"""Simple manual smoke test against a running relay.

Usage:
  trends-relay &
  python scripts/relay_smoke.py AAPL 2024-10-01 2024-10-03 day
"""
import sys
from datetime import date

from trends.core.schemas import FavoriteQuery
from trends.utils.market_data import RelayClient


def main():
    symbol = sys.argv[1] if len(sys.argv) > 1 else "AAPL"
    start = date.fromisoformat(sys.argv[2]) if len(sys.argv) > 2 else date.today()
    end = date.fromisoformat(sys.argv[3]) if len(sys.argv) > 3 else start
    timeframe = sys.argv[4] if len(sys.argv) > 4 else "day"

    client = RelayClient()

    symbols = client.fetch_symbols()
    print("Symbols:", len(symbols), [s.ticker for s in symbols[:10]])

    q = FavoriteQuery(primary_symbol=symbol, start_date=start, end_date=end, timeframe=timeframe)
    bars = client.fetch_favorite_bars(q)
    print("Bars:", len(bars))
    for b in bars[:5]:
        print(b.model_dump())


if __name__ == "__main__":
    main()
