from __future__ import annotations

import os
import tempfile
import threading
from pathlib import Path
from typing import Dict, Optional, Protocol

from trends.utils.logging import get_logger

logger = get_logger("storage")


class StorageBackend(Protocol):
    """Key-value string storage (the local-storage capability the favorites store needs)."""

    def read(self, key: str) -> Optional[str]:
        ...

    def write(self, key: str, value: str) -> None:
        ...


class InMemoryStorage:
    """
    Dict-backed storage.
    - Used by tests and throwaway sessions
    - Lost when the process exits
    """

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._lock = threading.Lock()
        self._store: Dict[str, str] = dict(initial or {})

    def read(self, key: str) -> Optional[str]:
        with self._lock:
            return self._store.get(key)

    def write(self, key: str, value: str) -> None:
        with self._lock:
            self._store[key] = value


# One lock per process: every FileStorage instance shares it, so two Streamlit
# sessions never interleave writes to the same directory.
_WRITE_LOCK = threading.Lock()


class FileStorage:
    """
    One file per key: `<directory>/<key>.json`.
    - Missing file reads as None
    - Writes go to a temp file and are renamed into place (atomic on POSIX and Windows)
    - Across processes the last writer wins
    """

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def read(self, key: str) -> Optional[str]:
        p = self.path_for(key)
        try:
            return p.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def write(self, key: str, value: str) -> None:
        p = self.path_for(key)
        with _WRITE_LOCK:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(prefix=f".{key}.", suffix=".tmp", dir=self.directory)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(value)
                os.replace(tmp, p)
            except BaseException:
                # leave no stray temp files behind, then re-raise
                try:
                    os.unlink(tmp)
                except OSError:
                    pass
                raise
        logger.debug(f"storage_write key={key} path={p} bytes={len(value)}")
