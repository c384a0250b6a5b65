"""File-backed document store.

Keeps every collection in one JSON document on disk, rewritten in full after
each mutation. With no path the data only lives in memory, which is also what
the app falls back to when the database cannot be reached at startup.
"""

import asyncio
import copy
import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from userlink.db.gateway import Collection, DocumentStore, Predicate, Record, matches
from userlink.errors import StorageError

logger = logging.getLogger(__name__)


class JsonFileStore(DocumentStore):
    """DocumentStore persisted as a single JSON file (or held in memory)."""

    def __init__(self, path: str | Path | None = None):
        self.path = Path(path) if path else None
        self._data: dict[str, list[Record]] = {}
        self._lock = asyncio.Lock()
        self._loaded = False

    async def init(self) -> None:
        async with self._lock:
            self._load()

    def _load(self) -> None:
        if self._loaded:
            return
        if self.path is not None and self.path.exists():
            try:
                self._data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
            except (OSError, ValueError) as e:
                raise StorageError(f"Failed to read {self.path}: {e}") from e
        for collection in Collection:
            self._data.setdefault(collection.value, [])
        self._loaded = True
        if self.path is not None:
            self._write()
            logger.info("Using JSON document store at %s", self.path)
        else:
            logger.info("Using in-memory document store")

    def _write(self) -> None:
        if self.path is None:
            return
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(self._data, indent=2), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise StorageError(f"Failed to write {self.path}: {e}") from e

    def _rows(self, collection: Collection) -> list[Record]:
        self._load()
        return self._data[Collection(collection).value]

    async def insert(self, collection: Collection, record: Record) -> Record:
        if not record.get("id"):
            raise StorageError("Records must carry a caller-assigned id")
        async with self._lock:
            rows = self._rows(collection)
            if any(row.get("id") == record["id"] for row in rows):
                raise StorageError(f"Duplicate id {record['id']} in {Collection(collection).value}")
            rows.append(copy.deepcopy(record))
            self._write()
        return copy.deepcopy(record)

    async def find_one(self, collection: Collection, predicate: Predicate) -> Record | None:
        async with self._lock:
            for row in self._rows(collection):
                if matches(row, predicate):
                    return copy.deepcopy(row)
        return None

    async def find_many(self, collection: Collection, predicate: Predicate) -> list[Record]:
        async with self._lock:
            return [copy.deepcopy(row) for row in self._rows(collection) if matches(row, predicate)]

    async def update_one(
        self, collection: Collection, predicate: Predicate, patch: Mapping[str, Any]
    ) -> Record | None:
        async with self._lock:
            for row in self._rows(collection):
                if matches(row, predicate):
                    row.update({key: copy.deepcopy(value) for key, value in patch.items() if key != "id"})
                    self._write()
                    return copy.deepcopy(row)
        return None

    async def remove_many(self, collection: Collection, predicate: Predicate) -> int:
        async with self._lock:
            rows = self._rows(collection)
            kept = [row for row in rows if not matches(row, predicate)]
            removed = len(rows) - len(kept)
            if removed:
                rows[:] = kept
                self._write()
        return removed
