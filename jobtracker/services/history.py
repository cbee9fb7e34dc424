"""Application status audit trail.

Writes are best-effort side effects: :meth:`HistoryRecorder.record_transition`
schedules the insert as a task and returns it immediately.  A failed write
is logged inside the task and resolves to ``None``; it never blocks or
rolls back the status update that triggered it.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone

from jobtracker.db.base import StorageAdapter
from jobtracker.models.enums import ApplicationStatus, EntityKind
from jobtracker.models.history import ApplicationHistoryCreate, ApplicationHistoryEntry
from jobtracker.services.base import ServiceBase, as_utc

logger = logging.getLogger(__name__)

HistoryTask = asyncio.Task[ApplicationHistoryEntry | None]


class HistoryRecorder(ServiceBase):
    """Appends and lists ``application_history`` entries."""

    def __init__(self, adapter: StorageAdapter) -> None:
        super().__init__(adapter)
        self._pending: set[HistoryTask] = set()

    def record_transition(
        self,
        application_id: str,
        old_status: ApplicationStatus | None,
        new_status: ApplicationStatus,
        changed_by: str,
        notes: str | None = None,
    ) -> HistoryTask:
        """Queue one history entry; the returned task never raises."""
        entry = ApplicationHistoryCreate(
            application_id=application_id,
            old_status=old_status,
            new_status=new_status,
            changed_by=changed_by,
            changed_at=datetime.now(timezone.utc),
            notes=notes,
        )
        task = asyncio.create_task(self._write(entry))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _write(
        self, entry: ApplicationHistoryCreate
    ) -> ApplicationHistoryEntry | None:
        try:
            row = await self.adapter.insert(
                EntityKind.application_history, entry.model_dump(mode="json")
            )
        except Exception as exc:
            logger.error(
                "history_write_failed",
                extra={
                    "application_id": entry.application_id,
                    "new_status": entry.new_status.value,
                    "error": str(exc),
                },
            )
            return None
        return ApplicationHistoryEntry.model_validate(row)

    async def drain(self) -> None:
        """Wait for every queued history write (shutdown and tests)."""
        if self._pending:
            await asyncio.gather(*list(self._pending))

    async def list_history(self, application_id: str) -> list[ApplicationHistoryEntry]:
        """Return the entries of one application, newest first."""
        rows = await self._query(
            EntityKind.application_history, {"application_id": application_id}
        )
        entries = [ApplicationHistoryEntry.model_validate(row) for row in rows]
        entries.sort(key=lambda e: as_utc(e.changed_at), reverse=True)
        return entries
