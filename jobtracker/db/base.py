"""Storage adapter contract.

Every backend exposes the same six coroutines over plain JSON-mode dicts.
Ownership is re-checked at this boundary through *scope* mappings
(``{"user_id": ...}``): a record outside the scope behaves exactly like a
missing one, so reads return ``None``, updates return ``None`` and deletes
return ``False``.

Ordering is never guaranteed; callers sort.

Record shape follows the backend: column-based stores return every column
(unsupplied ones as ``None`` or their column default), document stores
return only the keys that were written.  The services always write full
model dumps, so the difference never reaches them.
"""

from __future__ import annotations

import logging
import secrets
import time
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime, timezone
from typing import Any, ClassVar

from jobtracker.core.constants import ID_ALPHABET, ID_SUFFIX_LENGTH, MANAGED_FIELDS
from jobtracker.core.errors import BackendUnavailable
from jobtracker.db.schema import table_for
from jobtracker.models.enums import EntityKind

logger = logging.getLogger(__name__)

Record = dict[str, Any]
Scope = Mapping[str, Any]
Predicate = Callable[[Record], bool]


def generate_id() -> str:
    """Return a globally unique id: epoch millis plus a random base-36 suffix."""
    suffix = "".join(secrets.choice(ID_ALPHABET) for _ in range(ID_SUFFIX_LENGTH))
    return f"{int(time.time() * 1000)}{suffix}"


def utc_now_iso() -> str:
    """Return the current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


def matches(record: Mapping[str, Any], scope: Scope | None) -> bool:
    """True when every ``scope`` field equals the record's value."""
    if not scope:
        return True
    return all(record.get(key) == value for key, value in scope.items())


def strip_managed(changes: Mapping[str, Any]) -> Record:
    """Drop adapter-managed fields (id / timestamps) from caller input."""
    return {k: v for k, v in changes.items() if k not in MANAGED_FIELDS}


class StorageAdapter(ABC):
    """Common persistence contract implemented once per storage technology."""

    backend: ClassVar[str] = "abstract"

    def __init__(self) -> None:
        self._initialized = False
        self._init_error: Exception | None = None

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def init_error(self) -> Exception | None:
        return self._init_error

    async def initialize(self) -> None:
        """Create schema / namespaces if absent.

        Idempotent.  A failure is logged and leaves the adapter degraded:
        every later data call raises ``BackendUnavailable``.
        """
        if self._initialized:
            return
        try:
            await self._setup()
        except Exception as exc:
            self._init_error = exc
            logger.error(
                "storage_init_failed",
                extra={"backend": self.backend, "error": str(exc)},
            )
            return
        self._initialized = True
        self._init_error = None
        logger.info("storage_initialized", extra={"backend": self.backend})

    def _ensure_ready(self) -> None:
        if not self._initialized:
            detail = f": {self._init_error}" if self._init_error else ""
            raise BackendUnavailable(
                f"{self.backend} storage is not initialized{detail}"
            )

    def _check_fields(self, kind: EntityKind, fields: Iterable[str]) -> None:
        unknown = set(fields) - table_for(kind).field_names
        if unknown:
            raise ValueError(
                f"Unknown {EntityKind(kind).value} fields: {sorted(unknown)}"
            )

    def _new_record(self, record: Mapping[str, Any]) -> Record:
        """Copy *record* and stamp a fresh id plus created/updated timestamps."""
        now = utc_now_iso()
        stored = strip_managed(record)
        stored["id"] = generate_id()
        stored["created_at"] = now
        stored["updated_at"] = now
        return stored

    @abstractmethod
    async def _setup(self) -> None:
        """Backend-specific schema / client creation."""

    @abstractmethod
    async def insert(self, kind: EntityKind, record: Mapping[str, Any]) -> Record:
        """Store a new record and return it with id and timestamps."""

    @abstractmethod
    async def get_by_id(
        self, kind: EntityKind, record_id: str, scope: Scope | None = None
    ) -> Record | None:
        """Return one record, or ``None`` when absent or out of scope."""

    @abstractmethod
    async def query(
        self,
        kind: EntityKind,
        where: Scope | None = None,
        predicate: Predicate | None = None,
    ) -> list[Record]:
        """Return records matching the equality filter and predicate."""

    @abstractmethod
    async def update(
        self,
        kind: EntityKind,
        record_id: str,
        changes: Mapping[str, Any],
        scope: Scope | None = None,
    ) -> Record | None:
        """Merge *changes*, bump ``updated_at`` and return the merged record."""

    @abstractmethod
    async def delete(
        self, kind: EntityKind, record_id: str, scope: Scope | None = None
    ) -> bool:
        """Remove a record; ``False`` when absent or out of scope."""

    async def close(self) -> None:
        """Release connections / clients held by the adapter."""
