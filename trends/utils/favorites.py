from __future__ import annotations

import json
from typing import Callable, List, Optional

from pydantic import ValidationError

from trends.core.schemas import FavoriteQuery
from trends.utils.logging import get_logger
from trends.utils.storage import StorageBackend

logger = get_logger("favorites")

Listener = Callable[[List[FavoriteQuery]], None]


class FavoritesStore:
    """
    Ordered list of saved chart queries, mirrored to a storage backend.
    - Hydrated from storage on construction
    - Whole list rewritten after every add/remove/update
    - Position is the only identity; bad indices are silent no-ops
    - Never raises on bad input or corrupt storage
    """

    def __init__(self, storage: StorageBackend, key: str = "favorites") -> None:
        self.storage = storage
        self.key = key
        self._items: List[FavoriteQuery] = self.load()
        self._selected: Optional[FavoriteQuery] = None
        self._listeners: List[Listener] = []

    @property
    def favorites(self) -> List[FavoriteQuery]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def load(self) -> List[FavoriteQuery]:
        """
        Reads the durable record. Missing, malformed or partially invalid
        records all read as "no favorites yet".
        """
        try:
            raw = self.storage.read(self.key)
            if raw is None:
                return []
            data = json.loads(raw)
        except (ValueError, RecursionError, OSError) as e:
            # ValueError covers UnicodeDecodeError from a file with bad bytes
            logger.warning(f"favorites_corrupt key={self.key} err={type(e).__name__}:{e}")
            return []

        if not isinstance(data, list):
            logger.warning(f"favorites_corrupt key={self.key} err=expected a list, got {type(data).__name__}")
            return []

        try:
            return [FavoriteQuery.model_validate(rec) for rec in data]
        except ValidationError as e:
            logger.warning(f"favorites_corrupt key={self.key} err={e.error_count()} invalid field(s)")
            return []

    # -----------------------------
    # Mutations
    # -----------------------------
    def add_favorite(self, item: FavoriteQuery) -> None:
        self._items = [*self._items, item]
        self._commit()

    def remove_favorite(self, index: int) -> None:
        if self._in_range(index):
            self._items = [fav for i, fav in enumerate(self._items) if i != index]
        else:
            logger.debug(f"favorites_remove_out_of_range index={index} size={len(self._items)}")
        self._commit()

    def update_favorite(self, index: int, item: FavoriteQuery) -> None:
        if self._in_range(index):
            self._items = [item if i == index else fav for i, fav in enumerate(self._items)]
        else:
            logger.debug(f"favorites_update_out_of_range index={index} size={len(self._items)}")
        self._commit()

    # -----------------------------
    # Queries
    # -----------------------------
    def is_favorite(self, symbol: str) -> bool:
        return any(fav.primary_symbol == symbol for fav in self._items)

    def index_of(self, item: Optional[FavoriteQuery]) -> int:
        """Position of this exact object, or -1. Duplicates resolve to the object passed in."""
        for i, fav in enumerate(self._items):
            if fav is item:
                return i
        return -1

    # -----------------------------
    # Edit selection (transient)
    # -----------------------------
    def select_for_edit(self, item: Optional[FavoriteQuery]) -> None:
        self._selected = item

    def current_selection(self) -> Optional[FavoriteQuery]:
        return self._selected

    # -----------------------------
    # Observers
    # -----------------------------
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Registers `listener` for post-mutation snapshots. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # -----------------------------
    # Internals
    # -----------------------------
    def _in_range(self, index: int) -> bool:
        return 0 <= index < len(self._items)

    def _commit(self) -> None:
        payload = json.dumps([fav.to_record() for fav in self._items])
        self.storage.write(self.key, payload)
        snapshot = self.favorites
        for listener in list(self._listeners):
            listener(snapshot)
