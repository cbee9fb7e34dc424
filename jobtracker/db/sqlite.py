"""Embedded relational adapter backed by SQLite (``aiosqlite``).

List-valued fields are stored as JSON text and booleans as 0/1 integers;
both are decoded on every read.  Rows carry every column of the table, so a
field the caller never supplied reads back as ``None`` or its column default.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from typing import Any

import aiosqlite

from jobtracker.db.base import (
    Predicate,
    Record,
    Scope,
    StorageAdapter,
    strip_managed,
    utc_now_iso,
)
from jobtracker.db.schema import TABLES, TableSpec, table_for
from jobtracker.models.enums import EntityKind

logger = logging.getLogger(__name__)


def _encode_value(spec: TableSpec, column: str, value: Any) -> Any:
    """Convert one field to its column representation."""
    if isinstance(value, Enum):
        value = value.value
    if value is None:
        return None
    if column in spec.json_columns:
        return json.dumps(value)
    if column in spec.bool_columns:
        return 1 if value else 0
    return value


def _decode_row(spec: TableSpec, row: Mapping[str, Any]) -> Record:
    """Convert a SQLite row back to a JSON-mode record."""
    record = dict(row)
    for column in spec.json_columns:
        raw = record.get(column)
        if raw is not None:
            record[column] = json.loads(raw)
    for column in spec.bool_columns:
        if column in record and record[column] is not None:
            record[column] = bool(record[column])
    return record


def _where_clause(spec: TableSpec, filters: Scope | None) -> tuple[str, list[Any]]:
    """Build an AND-ed equality clause from *filters*."""
    if not filters:
        return "", []
    clauses: list[str] = []
    params: list[Any] = []
    for column, value in filters.items():
        if value is None:
            clauses.append(f'"{column}" IS NULL')
        else:
            clauses.append(f'"{column}" = ?')
            params.append(_encode_value(spec, column, value))
    return " WHERE " + " AND ".join(clauses), params


class SqliteAdapter(StorageAdapter):
    """One SQLite table per entity kind, one long-lived connection."""

    backend = "sqlite"

    def __init__(self, path: str) -> None:
        super().__init__()
        self._path = path
        self._conn: aiosqlite.Connection | None = None

    async def _setup(self) -> None:
        target = self._path
        if target != ":memory:":
            path = Path(target).expanduser()
            path.parent.mkdir(parents=True, exist_ok=True)
            target = str(path)
        conn = await aiosqlite.connect(target)
        conn.row_factory = aiosqlite.Row
        try:
            for spec in TABLES.values():
                for statement in spec.ddl():
                    await conn.execute(statement)
            await conn.commit()
        except Exception:
            await conn.close()
            raise
        self._conn = conn
        logger.debug("sqlite_schema_ready", extra={"path": self._path})

    def _connection(self) -> aiosqlite.Connection:
        self._ensure_ready()
        assert self._conn is not None
        return self._conn

    async def _fetch(
        self, spec: TableSpec, filters: Scope | None
    ) -> list[Record]:
        conn = self._connection()
        clause, params = _where_clause(spec, filters)
        async with conn.execute(f"SELECT * FROM {spec.name}{clause}", params) as cursor:
            rows = await cursor.fetchall()
        return [_decode_row(spec, row) for row in rows]

    async def insert(self, kind: EntityKind, record: Mapping[str, Any]) -> Record:
        spec = table_for(kind)
        conn = self._connection()
        stored = self._new_record(record)
        self._check_fields(kind, stored)

        columns = list(stored)
        placeholders = ", ".join("?" for _ in columns)
        column_list = ", ".join(f'"{c}"' for c in columns)
        await conn.execute(
            f"INSERT INTO {spec.name} ({column_list}) VALUES ({placeholders})",
            [_encode_value(spec, c, stored[c]) for c in columns],
        )
        await conn.commit()
        return stored

    async def get_by_id(
        self, kind: EntityKind, record_id: str, scope: Scope | None = None
    ) -> Record | None:
        spec = table_for(kind)
        if scope:
            self._check_fields(kind, scope)
        rows = await self._fetch(spec, {**(scope or {}), "id": record_id})
        return rows[0] if rows else None

    async def query(
        self,
        kind: EntityKind,
        where: Scope | None = None,
        predicate: Predicate | None = None,
    ) -> list[Record]:
        spec = table_for(kind)
        if where:
            self._check_fields(kind, where)
        rows = await self._fetch(spec, where)
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
        spec = table_for(kind)
        conn = self._connection()
        values = strip_managed(changes)
        self._check_fields(kind, values)

        existing = await self.get_by_id(kind, record_id, scope)
        if existing is None:
            return None

        values["updated_at"] = utc_now_iso()
        assignments = ", ".join(f'"{c}" = ?' for c in values)
        clause, params = _where_clause(spec, {**(scope or {}), "id": record_id})
        await conn.execute(
            f"UPDATE {spec.name} SET {assignments}{clause}",
            [_encode_value(spec, c, v) for c, v in values.items()] + params,
        )
        await conn.commit()

        return {**existing, **values}

    async def delete(
        self, kind: EntityKind, record_id: str, scope: Scope | None = None
    ) -> bool:
        spec = table_for(kind)
        conn = self._connection()
        if scope:
            self._check_fields(kind, scope)
        clause, params = _where_clause(spec, {**(scope or {}), "id": record_id})
        cursor = await conn.execute(f"DELETE FROM {spec.name}{clause}", params)
        await conn.commit()
        return cursor.rowcount > 0

    async def close(self) -> None:
        if self._conn is not None:
            await self._conn.close()
            self._conn = None
        self._initialized = False
