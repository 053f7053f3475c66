"""Backing stores for the response cache.

A store is any string key-value map with get/set. Two flavours are used:
- MemoryStore: session-scoped, gone when the process exits. Used for
  volatile price quotes.
- JsonFileStore: durable, one JSON object on disk. Used for immutable
  metadata and historic prices cached forever.

The cache never deletes entries. Eviction, if any, is the store's own
policy.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class CacheStore(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemoryStore:
    """Session-scoped in-memory store."""

    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set(self, key: str, value: str) -> None:
        self._items[key] = value

    def __len__(self) -> int:
        return len(self._items)


class JsonFileStore:
    """Durable store persisted as a single JSON object.

    The whole map is loaded on construction and rewritten on every set
    via a temporary file and an atomic rename, so a crash mid-write
    leaves the previous file intact.
    """

    def __init__(self, storage_path: Path) -> None:
        self._storage_path = storage_path
        self._items: dict[str, str] = {}
        if storage_path.exists():
            self._load_from_file(storage_path)

    def get(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set(self, key: str, value: str) -> None:
        self._items[key] = value
        self._write_to_file()

    def __len__(self) -> int:
        return len(self._items)

    def _load_from_file(self, path: Path) -> None:
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"Cache file {path} does not contain a JSON object")
        self._items = {str(k): str(v) for k, v in data.items()}

    def _write_to_file(self) -> None:
        self._storage_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._storage_path.with_suffix(self._storage_path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(self._items, f, sort_keys=True, ensure_ascii=False)
        os.replace(tmp_path, self._storage_path)
