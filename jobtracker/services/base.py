"""Shared plumbing for the business rule services.

Every adapter call made by a service goes through these helpers so raw
driver exceptions always surface as ``BackendUnavailable``.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel

from jobtracker.core.errors import backend_errors
from jobtracker.db.base import Predicate, Record, Scope, StorageAdapter
from jobtracker.models.enums import EntityKind


class ServiceBase:
    """Holds the injected adapter and wraps its calls."""

    def __init__(self, adapter: StorageAdapter) -> None:
        self.adapter = adapter

    async def _insert(self, kind: EntityKind, record: Mapping[str, Any]) -> Record:
        with backend_errors(f"insert {kind.value}"):
            return await self.adapter.insert(kind, record)

    async def _get(
        self, kind: EntityKind, record_id: str, scope: Scope | None = None
    ) -> Record | None:
        with backend_errors(f"get {kind.value}"):
            return await self.adapter.get_by_id(kind, record_id, scope)

    async def _query(
        self,
        kind: EntityKind,
        where: Scope | None = None,
        predicate: Predicate | None = None,
    ) -> list[Record]:
        with backend_errors(f"query {kind.value}"):
            return await self.adapter.query(kind, where, predicate)

    async def _update(
        self,
        kind: EntityKind,
        record_id: str,
        changes: Mapping[str, Any],
        scope: Scope | None = None,
    ) -> Record | None:
        with backend_errors(f"update {kind.value}"):
            return await self.adapter.update(kind, record_id, changes, scope)

    async def _delete(
        self, kind: EntityKind, record_id: str, scope: Scope | None = None
    ) -> bool:
        with backend_errors(f"delete {kind.value}"):
            return await self.adapter.delete(kind, record_id, scope)


def partial_changes(
    update_model: type[BaseModel],
    entity_model: type[BaseModel],
    changes: BaseModel | Mapping[str, Any],
) -> tuple[set[str], Record]:
    """Normalize a partial edit into ``(requested field names, JSON values)``.

    Requested names include keys the update model does not know, so the
    access predicates can reject them.  An explicit ``None`` only survives
    for fields whose stored default is ``None``.
    """
    if isinstance(changes, BaseModel):
        requested = set(changes.model_fields_set)
        payload = changes
    else:
        requested = set(changes)
        payload = update_model.model_validate(changes)

    nullable = {
        name
        for name, info in entity_model.model_fields.items()
        if not info.is_required() and info.default is None
    }
    values = {
        key: value
        for key, value in payload.model_dump(mode="json", exclude_unset=True).items()
        if value is not None or key in nullable
    }
    return requested, values


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so stored and supplied values compare."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
