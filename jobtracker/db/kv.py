"""Flat key-value adapter.

Each entity kind lives under a single key as one JSON array of full records.
There is no partial-update primitive: every mutation reads the whole
collection, changes it in memory and writes it back.  Mutations of one
collection are serialized inside an adapter; separate processes sharing a
store still resolve conflicts by last write wins.
A missing, unparsable or non-list collection is treated as empty.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path
from typing import Any
from urllib.parse import quote

from jobtracker.core.constants import KV_KEY_PREFIX
from jobtracker.db.base import (
    Predicate,
    Record,
    Scope,
    StorageAdapter,
    matches,
    strip_managed,
    utc_now_iso,
)
from jobtracker.models.enums import EntityKind

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Key-value stores
# ---------------------------------------------------------------------------

class KeyValueStore(ABC):
    """Minimal async string store: one opaque value per key."""

    @abstractmethod
    async def get_item(self, key: str) -> str | None:
        """Return the stored value or ``None``."""

    @abstractmethod
    async def set_item(self, key: str, value: str) -> None:
        """Store *value* under *key*, replacing any previous value."""


class MemoryKeyValueStore(KeyValueStore):
    """Process-local store, used for ephemeral sessions and tests."""

    def __init__(self, items: Mapping[str, str] | None = None) -> None:
        self.items: dict[str, str] = dict(items or {})

    async def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self.items[key] = value


class FileKeyValueStore(KeyValueStore):
    """One file per key inside *directory*; writes replace files atomically."""

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory).expanduser()

    def _path(self, key: str) -> Path:
        return self._directory / f"{quote(key, safe='')}.json"

    def _read(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def _write(self, key: str, value: str) -> None:
        self._directory.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        # Each write gets its own temp file so overlapping writes never share one.
        fd, tmp = tempfile.mkstemp(dir=self._directory, prefix=path.stem, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(value)
            os.replace(tmp, path)
        except OSError:
            Path(tmp).unlink(missing_ok=True)
            raise

    async def get_item(self, key: str) -> str | None:
        return await asyncio.to_thread(self._read, key)

    async def set_item(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._write, key, value)


# ---------------------------------------------------------------------------
# Adapter
# ---------------------------------------------------------------------------

def collection_key(kind: EntityKind) -> str:
    """Storage key holding the collection of *kind*."""
    return f"{KV_KEY_PREFIX}{EntityKind(kind).value}"


class KeyValueAdapter(StorageAdapter):
    """Whole-collection read-modify-write over a ``KeyValueStore``."""

    backend = "kv"

    def __init__(self, store: KeyValueStore) -> None:
        super().__init__()
        self._store = store
        self._locks: dict[EntityKind, asyncio.Lock] = {
            kind: asyncio.Lock() for kind in EntityKind
        }

    async def _setup(self) -> None:
        for kind in EntityKind:
            key = collection_key(kind)
            if await self._store.get_item(key) is None:
                await self._store.set_item(key, "[]")

    async def _load(self, kind: EntityKind) -> list[Record]:
        self._ensure_ready()
        key = collection_key(kind)
        raw = await self._store.get_item(key)
        if raw is None:
            return []
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("kv_collection_corrupt", extra={"key": key})
            return []
        if not isinstance(data, list):
            logger.warning("kv_collection_not_a_list", extra={"key": key})
            return []
        return [item for item in data if isinstance(item, dict)]

    async def _save(self, kind: EntityKind, records: list[Record]) -> None:
        await self._store.set_item(collection_key(kind), json.dumps(records))

    async def insert(self, kind: EntityKind, record: Mapping[str, Any]) -> Record:
        self._ensure_ready()
        stored = self._new_record(record)
        self._check_fields(kind, stored)
        async with self._locks[kind]:
            records = await self._load(kind)
            records.append(stored)
            await self._save(kind, records)
        return dict(stored)

    async def get_by_id(
        self, kind: EntityKind, record_id: str, scope: Scope | None = None
    ) -> Record | None:
        for record in await self._load(kind):
            if record.get("id") == record_id and matches(record, scope):
                return record
        return None

    async def query(
        self,
        kind: EntityKind,
        where: Scope | None = None,
        predicate: Predicate | None = None,
    ) -> list[Record]:
        records = [r for r in await self._load(kind) if matches(r, where)]
        if predicate is not None:
            records = [r for r in records if predicate(r)]
        return records

    async def update(
        self,
        kind: EntityKind,
        record_id: str,
        changes: Mapping[str, Any],
        scope: Scope | None = None,
    ) -> Record | None:
        values = strip_managed(changes)
        self._check_fields(kind, values)
        async with self._locks[kind]:
            records = await self._load(kind)
            for index, record in enumerate(records):
                if record.get("id") == record_id and matches(record, scope):
                    merged = {**record, **values, "updated_at": utc_now_iso()}
                    records[index] = merged
                    await self._save(kind, records)
                    return dict(merged)
        return None

    async def delete(
        self, kind: EntityKind, record_id: str, scope: Scope | None = None
    ) -> bool:
        async with self._locks[kind]:
            records = await self._load(kind)
            remaining = [
                r for r in records
                if not (r.get("id") == record_id and matches(r, scope))
            ]
            if len(remaining) == len(records):
                return False
            await self._save(kind, remaining)
        return True
