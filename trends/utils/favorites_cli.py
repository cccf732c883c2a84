from __future__ import annotations

import argparse
import json
from datetime import date
from typing import List, Optional

from trends.core.config import SETTINGS
from trends.core.schemas import TIMEFRAME_LABELS, FavoriteQuery
from trends.utils.favorites import FavoritesStore
from trends.utils.storage import FileStorage


def _store(args: argparse.Namespace) -> FavoritesStore:
    return FavoritesStore(FileStorage(args.dir or SETTINGS.storage_dir), key=args.key or SETTINGS.favorites_key)


def _query_from_args(args: argparse.Namespace) -> FavoriteQuery:
    return FavoriteQuery(
        primary_symbol=args.symbol.upper(),
        secondary_symbol=args.symbol2.upper() if args.symbol2 else None,
        start_date=args.start,
        end_date=args.end,
        timeframe=args.timeframe,
    )


def cmd_list(args: argparse.Namespace) -> int:
    items = _store(args).favorites
    if args.json:
        print(json.dumps([fav.to_record() for fav in items], indent=2))
        return 0

    if not items:
        print("No favorites yet.")
    for i, fav in enumerate(items):
        syms = ",".join(fav.symbols)
        print(f"[{i}] {syms}  {fav.start_date} -> {fav.end_date}  {fav.timeframe}")
    return 0


def cmd_add(args: argparse.Namespace) -> int:
    store = _store(args)
    store.add_favorite(_query_from_args(args))
    print(f"Added. {len(store)} favorite(s).")
    return 0


def cmd_remove(args: argparse.Namespace) -> int:
    store = _store(args)
    before = len(store)
    store.remove_favorite(args.index)
    if len(store) == before:
        print(f"No favorite at index {args.index}; nothing removed.")
    else:
        print(f"Removed. {len(store)} favorite(s).")
    return 0


def cmd_update(args: argparse.Namespace) -> int:
    store = _store(args)
    in_range = 0 <= args.index < len(store)
    store.update_favorite(args.index, _query_from_args(args))
    if not in_range:
        print(f"No favorite at index {args.index}; nothing updated.")
    else:
        print(f"Updated [{args.index}].")
    return 0


def _add_query_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("symbol")
    p.add_argument("--symbol2", default=None)
    p.add_argument("--start", type=date.fromisoformat, default=date.today())
    p.add_argument("--end", type=date.fromisoformat, default=date.today())
    p.add_argument("--timeframe", choices=list(TIMEFRAME_LABELS), default="day")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="trends-favorites", description="Manage saved chart queries")
    p.add_argument("--dir", default=None, help="storage directory (default from config)")
    p.add_argument("--key", default=None, help="storage key (default from config)")
    sub = p.add_subparsers(dest="cmd", required=True)

    ls = sub.add_parser("list", help="List favorites")
    ls.add_argument("--json", action="store_true")
    ls.set_defaults(func=cmd_list)

    a = sub.add_parser("add", help="Append a favorite")
    _add_query_args(a)
    a.set_defaults(func=cmd_add)

    r = sub.add_parser("remove", help="Remove the favorite at INDEX")
    r.add_argument("index", type=int)
    r.set_defaults(func=cmd_remove)

    u = sub.add_parser("update", help="Replace the favorite at INDEX")
    u.add_argument("index", type=int)
    _add_query_args(u)
    u.set_defaults(func=cmd_update)

    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
