"""Remote document adapter backed by Supabase.

Only a single top-level equality filter is ever pushed to the server; every
other condition (scope re-checks, extra equality fields, predicates) is
applied in memory on the fetched rows, so no composite index is required.
The Supabase client is synchronous and is driven through worker threads.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any

from supabase import Client

from jobtracker.db.base import (
    Predicate,
    Record,
    Scope,
    StorageAdapter,
    matches,
    strip_managed,
    utc_now_iso,
)
from jobtracker.db.schema import TABLES, table_for
from jobtracker.db.supabase import get_supabase
from jobtracker.models.enums import EntityKind

logger = logging.getLogger(__name__)


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


class SupabaseAdapter(StorageAdapter):
    """One Supabase table per entity kind."""

    backend = "supabase"

    def __init__(self, client: Client | None = None) -> None:
        super().__init__()
        self._client = client

    async def _execute(self, request: Any) -> list[Record]:
        result = await asyncio.to_thread(request.execute)
        return list(result.data or [])

    async def _setup(self) -> None:
        if self._client is None:
            self._client = get_supabase()
        # Tables are provisioned remotely; verify each one is reachable.
        for spec in TABLES.values():
            await self._execute(self._client.table(spec.name).select("id").limit(1))

    def _table(self, kind: EntityKind) -> Any:
        self._ensure_ready()
        assert self._client is not None
        return self._client.table(table_for(kind).name)

    async def _fetch(self, kind: EntityKind, filters: Scope | None) -> list[Record]:
        """Fetch with at most one server-side equality filter."""
        request = self._table(kind).select("*")
        remaining = dict(filters or {})
        if remaining:
            field = "id" if "id" in remaining else next(iter(remaining))
            value = _plain(remaining.pop(field))
            request = request.is_(field, "null") if value is None else request.eq(field, value)
        rows = await self._execute(request)
        return [row for row in rows if matches(row, remaining)]

    async def insert(self, kind: EntityKind, record: Mapping[str, Any]) -> Record:
        stored = self._new_record(record)
        self._check_fields(kind, stored)
        rows = await self._execute(self._table(kind).insert(stored))
        return rows[0] if rows else stored

    async def get_by_id(
        self, kind: EntityKind, record_id: str, scope: Scope | None = None
    ) -> Record | None:
        rows = await self._fetch(kind, {"id": record_id, **(scope or {})})
        return rows[0] if rows else None

    async def query(
        self,
        kind: EntityKind,
        where: Scope | None = None,
        predicate: Predicate | None = None,
    ) -> list[Record]:
        if where:
            self._check_fields(kind, where)
        rows = await self._fetch(kind, where)
        if predicate is not None:
            rows = [row for row in rows if predicate(row)]
        return rows

    async def update(
        self,
        kind: EntityKind,
        record_id: str,
        changes: Mapping[str, Any],
        scope: Scope | None = None,
    ) -> Record | None:
        values = strip_managed(changes)
        self._check_fields(kind, values)
        existing = await self.get_by_id(kind, record_id, scope)
        if existing is None:
            return None

        values["updated_at"] = utc_now_iso()
        rows = await self._execute(
            self._table(kind).update(values).eq("id", record_id)
        )
        return rows[0] if rows else {**existing, **values}

    async def delete(
        self, kind: EntityKind, record_id: str, scope: Scope | None = None
    ) -> bool:
        existing = await self.get_by_id(kind, record_id, scope)
        if existing is None:
            return False
        rows = await self._execute(self._table(kind).delete().eq("id", record_id))
        logger.debug(
            "supabase_delete",
            extra={"table": table_for(kind).name, "id": record_id, "rows": len(rows)},
        )
        return True
