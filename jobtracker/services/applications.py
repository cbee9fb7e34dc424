"""Application rules.

An application is owned by one candidate.  The recruiter attached to it
(when it was created from a job) shares read access and may move its status,
nothing else.  A candidate holds at most one application per job; freeform
applications without a job reference are never checked for duplicates.

Every status change queues a history entry through :class:`HistoryRecorder`.
That write is independent of the update itself: ``update_application``
returns the pending task alongside the updated record.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from jobtracker.core.constants import CONTRACT_TYPE_FOR_JOB_TYPE
from jobtracker.core.errors import DuplicateApplication, NotFound, PermissionDenied
from jobtracker.db.base import StorageAdapter, utc_now_iso
from jobtracker.models.actor import Actor
from jobtracker.models.application import (
    Application,
    ApplicationCreate,
    ApplicationFilters,
    ApplicationForm,
    ApplicationUpdate,
)
from jobtracker.models.enums import EntityKind, Role
from jobtracker.models.history import ApplicationHistoryEntry
from jobtracker.models.stats import ApplicationStats
from jobtracker.services.access import (
    application_fields_for,
    can_read_application,
    is_application_owner,
    require_fields,
    require_role,
)
from jobtracker.services.base import ServiceBase, as_utc, partial_changes
from jobtracker.services.history import HistoryRecorder, HistoryTask
from jobtracker.services.jobs import JobService
from jobtracker.services.stats import compute_stats

logger = logging.getLogger(__name__)


@dataclass
class ApplicationUpdateResult:
    """Updated application plus the best-effort audit write, if any."""

    application: Application
    history: HistoryTask | None = None


def filter_applications(
    applications: Iterable[Application], filters: ApplicationFilters | None
) -> list[Application]:
    """Apply listing filters in memory (all conditions AND-ed)."""
    result = list(applications)
    if filters is None:
        return result

    if filters.status is not None:
        result = [a for a in result if a.status == filters.status]
    if filters.contract_type is not None:
        result = [a for a in result if a.contract_type == filters.contract_type]
    if filters.start_date is not None:
        start = as_utc(filters.start_date)
        result = [a for a in result if as_utc(a.application_date) >= start]
    if filters.end_date is not None:
        end = as_utc(filters.end_date)
        result = [a for a in result if as_utc(a.application_date) <= end]
    if filters.search_query:
        needle = filters.search_query.lower()
        result = [
            a for a in result
            if needle in a.title.lower() or needle in a.company.lower()
        ]
    return result


class ApplicationService(ServiceBase):
    """Create, read, edit and delete applications."""

    def __init__(
        self,
        adapter: StorageAdapter,
        jobs: JobService,
        history: HistoryRecorder,
    ) -> None:
        super().__init__(adapter)
        self._jobs = jobs
        self._history = history

    async def _load(self, application_id: str) -> Application:
        row = await self._get(EntityKind.applications, application_id)
        if row is None:
            raise NotFound("application", application_id)
        return Application.model_validate(row)

    async def _ensure_unique(self, candidate_id: str, job_id: str) -> None:
        rows = await self._query(
            EntityKind.applications, {"user_id": candidate_id, "job_id": job_id}
        )
        if rows:
            raise DuplicateApplication(candidate_id, job_id)

    async def _store(self, record: dict[str, Any]) -> Application:
        row = await self._insert(EntityKind.applications, record)
        application = Application.model_validate(row)
        logger.info(
            "application_created",
            extra={
                "application_id": application.id,
                "user_id": application.user_id,
                "job_id": application.job_id,
            },
        )
        return application

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    async def apply_to_job(
        self,
        actor: Actor,
        job_id: str,
        form: ApplicationForm | None = None,
    ) -> Application:
        """Apply to a posted job, snapshotting its title/company/location.

        Raises ``DuplicateApplication`` when the candidate already applied.
        """
        require_role(actor, Role.candidate)
        job = await self._jobs.get_job(job_id, actor)
        await self._ensure_unique(actor.id, job.id)

        form = form or ApplicationForm()
        record = form.model_dump(mode="json")
        record.update(
            title=job.title,
            company=job.company,
            location=job.location,
            job_url=job.job_url,
            job_id=job.id,
            recruiter_id=job.recruiter_id,
            contract_type=(
                record["contract_type"] or CONTRACT_TYPE_FOR_JOB_TYPE[job.type.value]
            ),
            application_date=record["application_date"] or utc_now_iso(),
            user_id=actor.id,
            last_follow_up_at=None,
            follow_up_count=0,
        )
        return await self._store(record)

    async def create_application(
        self, actor: Actor, payload: ApplicationCreate
    ) -> Application:
        """Record an application entered by hand.

        When ``job_id`` is given the job must be visible to the candidate,
        the uniqueness check applies and the job's recruiter gains access.
        """
        require_role(actor, Role.candidate)
        record = payload.model_dump(mode="json")
        record["recruiter_id"] = None
        if payload.job_id:
            job = await self._jobs.get_job(payload.job_id, actor)
            await self._ensure_unique(actor.id, job.id)
            record["recruiter_id"] = job.recruiter_id
        if record["application_date"] is None:
            record["application_date"] = utc_now_iso()
        record.update(user_id=actor.id, last_follow_up_at=None, follow_up_count=0)
        return await self._store(record)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_application(self, application_id: str, actor: Actor) -> Application:
        """Return an application readable by the actor, else ``NotFound``."""
        application = await self._load(application_id)
        if not can_read_application(actor, application):
            raise NotFound("application", application_id)
        return application

    async def list_applications(
        self, actor: Actor, filters: ApplicationFilters | None = None
    ) -> list[Application]:
        """List by role, most recent ``application_date`` first.

        Candidates get their own applications, recruiters the ones attached
        to their jobs, admins every application.
        """
        if actor.role is Role.candidate:
            rows = await self._query(EntityKind.applications, {"user_id": actor.id})
        elif actor.role is Role.recruiter:
            rows = await self._query(
                EntityKind.applications, {"recruiter_id": actor.id}
            )
        else:
            rows = await self._query(EntityKind.applications)

        applications = filter_applications(
            (Application.model_validate(row) for row in rows), filters
        )
        applications.sort(key=lambda a: as_utc(a.application_date), reverse=True)
        return applications

    async def list_history(
        self, application_id: str, actor: Actor
    ) -> list[ApplicationHistoryEntry]:
        await self.get_application(application_id, actor)
        return await self._history.list_history(application_id)

    async def candidate_stats(
        self, actor: Actor, candidate_id: str | None = None
    ) -> ApplicationStats:
        """Statistics over one candidate's applications (self or admin)."""
        candidate_id = candidate_id or actor.id
        if candidate_id != actor.id and not actor.is_admin:
            raise PermissionDenied("Statistics are private to the candidate")
        rows = await self._query(EntityKind.applications, {"user_id": candidate_id})
        return compute_stats(Application.model_validate(row) for row in rows)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def update_application(
        self,
        application_id: str,
        actor: Actor,
        changes: ApplicationUpdate | Mapping[str, Any],
    ) -> ApplicationUpdateResult:
        """Edit an application.

        The owner may change any editable field; the attached recruiter may
        only change ``status``.  Anything else raises ``PermissionDenied``
        and leaves the record untouched.
        """
        current = await self._load(application_id)
        requested, values = partial_changes(ApplicationUpdate, Application, changes)
        require_fields(
            application_fields_for(actor, current), requested, "application"
        )

        if is_application_owner(actor, current):
            scope = {"user_id": actor.id}
        else:
            scope = {"recruiter_id": actor.id}
        row = await self._update(EntityKind.applications, application_id, values, scope)
        if row is None:
            raise NotFound("application", application_id)
        updated = Application.model_validate(row)

        history: HistoryTask | None = None
        if updated.status != current.status:
            history = self._history.record_transition(
                application_id,
                old_status=current.status,
                new_status=updated.status,
                changed_by=actor.id,
            )
            logger.info(
                "application_status_changed",
                extra={
                    "application_id": application_id,
                    "old_status": current.status.value,
                    "new_status": updated.status.value,
                    "actor_id": actor.id,
                },
            )
        return ApplicationUpdateResult(application=updated, history=history)

    async def record_follow_up(self, application_id: str, actor: Actor) -> Application:
        """Note that the candidate followed up on the application."""
        current = await self._load(application_id)
        if not is_application_owner(actor, current):
            raise PermissionDenied("Only the candidate may record a follow-up")
        row = await self._update(
            EntityKind.applications,
            application_id,
            {
                "last_follow_up_at": utc_now_iso(),
                "follow_up_count": current.follow_up_count + 1,
            },
            scope={"user_id": actor.id},
        )
        if row is None:
            raise NotFound("application", application_id)
        return Application.model_validate(row)

    async def delete_application(self, application_id: str, actor: Actor) -> None:
        """Delete an application (owning candidate only)."""
        current = await self._load(application_id)
        if not is_application_owner(actor, current):
            raise PermissionDenied("Only the candidate may delete this application")
        deleted = await self._delete(
            EntityKind.applications, application_id, scope={"user_id": actor.id}
        )
        if not deleted:
            raise NotFound("application", application_id)
        logger.info("application_deleted", extra={"application_id": application_id})
