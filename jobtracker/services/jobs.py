"""Job posting rules.

Jobs belong to exactly one recruiter.  Only that recruiter edits, archives
or deletes them, and deletion is refused while any application still
references the job.  Visibility depends on the actor's role.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from typing import Any

from jobtracker.core.errors import HasDependents, NotFound, PermissionDenied
from jobtracker.db.base import Record, utc_now_iso
from jobtracker.models.actor import Actor
from jobtracker.models.enums import EntityKind, Role
from jobtracker.models.job import Job, JobCreate, JobFilters, JobUpdate
from jobtracker.services.access import (
    is_job_owner,
    job_fields_for,
    require_fields,
    require_role,
)
from jobtracker.services.base import ServiceBase, as_utc, partial_changes

logger = logging.getLogger(__name__)

_SALARY_THOUSANDS = re.compile(r"(\d+)\s*k", re.IGNORECASE)


def parse_min_salary(salary: str | None) -> int | None:
    """Extract the lower bound of a salary string such as ``"50k-70k €"``."""
    if not salary:
        return None
    match = _SALARY_THOUSANDS.search(salary)
    if match is None:
        return None
    return int(match.group(1)) * 1000


def filter_jobs(jobs: Iterable[Job], filters: JobFilters | None) -> list[Job]:
    """Apply listing filters in memory (all conditions AND-ed)."""
    result = list(jobs)
    if filters is None:
        return result

    if filters.query:
        needle = filters.query.lower()
        result = [
            job for job in result
            if needle in job.title.lower()
            or needle in job.company.lower()
            or needle in job.location.lower()
            or needle in job.description.lower()
        ]
    if filters.location:
        place = filters.location.lower()
        result = [job for job in result if place in job.location.lower()]
    if filters.type is not None:
        result = [job for job in result if job.type == filters.type]
    if filters.remote is not None:
        result = [job for job in result if job.remote == filters.remote]
    if filters.source:
        result = [job for job in result if job.source == filters.source]
    if filters.min_salary is not None:
        kept: list[Job] = []
        for job in result:
            salary = parse_min_salary(job.salary)
            if salary is not None and salary >= filters.min_salary:
                kept.append(job)
        result = kept
    return result


def _not_archived(record: Record) -> bool:
    return not record.get("archived")


class JobService(ServiceBase):
    """Create, read, edit, archive and delete job postings."""

    async def _load(self, job_id: str) -> Job:
        row = await self._get(EntityKind.jobs, job_id)
        if row is None:
            raise NotFound("job", job_id)
        return Job.model_validate(row)

    async def create_job(self, actor: Actor, payload: JobCreate) -> Job:
        """Publish a posting owned by the acting recruiter."""
        require_role(actor, Role.recruiter)
        record = payload.model_dump(mode="json")
        if record.get("posted_date") is None:
            record["posted_date"] = utc_now_iso()
        record["recruiter_id"] = actor.id
        record["archived"] = False

        row = await self._insert(EntityKind.jobs, record)
        logger.info(
            "job_created",
            extra={"job_id": row["id"], "recruiter_id": actor.id},
        )
        return Job.model_validate(row)

    async def has_applications(self, job_id: str) -> bool:
        rows = await self._query(EntityKind.applications, {"job_id": job_id})
        return bool(rows)

    async def _has_applied(self, candidate_id: str, job_id: str) -> bool:
        rows = await self._query(
            EntityKind.applications,
            {"job_id": job_id},
            predicate=lambda r: r.get("user_id") == candidate_id,
        )
        return bool(rows)

    async def get_job(self, job_id: str, actor: Actor) -> Job:
        """Return a job the actor may see.

        Owners and admins always see it.  Candidates see non-archived jobs
        and archived jobs they already applied to.
        """
        job = await self._load(job_id)
        if actor.is_admin or is_job_owner(actor, job):
            return job
        if actor.role is Role.candidate:
            if not job.archived or await self._has_applied(actor.id, job_id):
                return job
        raise NotFound("job", job_id)

    async def update_job(
        self,
        job_id: str,
        actor: Actor,
        changes: JobUpdate | Mapping[str, Any],
    ) -> Job:
        """Edit a job; only its owning recruiter may do so."""
        job = await self._load(job_id)
        requested, values = partial_changes(JobUpdate, Job, changes)
        require_fields(job_fields_for(actor, job), requested, "job")

        row = await self._update(
            EntityKind.jobs, job_id, values, scope={"recruiter_id": actor.id}
        )
        if row is None:
            raise NotFound("job", job_id)
        return Job.model_validate(row)

    async def toggle_job_archive(self, job_id: str, actor: Actor, archived: bool) -> Job:
        """Archive or restore a job (owner only)."""
        job = await self.update_job(job_id, actor, {"archived": archived})
        logger.info(
            "job_archive_toggled",
            extra={"job_id": job_id, "archived": archived},
        )
        return job

    async def delete_job(self, job_id: str, actor: Actor) -> None:
        """Delete a job (owner only) unless applications reference it."""
        job = await self._load(job_id)
        if not is_job_owner(actor, job):
            raise PermissionDenied("Only the owning recruiter may delete this job")
        if await self.has_applications(job_id):
            raise HasDependents(f"Job {job_id} still has applications")

        deleted = await self._delete(
            EntityKind.jobs, job_id, scope={"recruiter_id": actor.id}
        )
        if not deleted:
            raise NotFound("job", job_id)
        logger.info("job_deleted", extra={"job_id": job_id})

    async def list_visible_jobs(
        self, actor: Actor, filters: JobFilters | None = None
    ) -> list[Job]:
        """List jobs by role, newest posting first.

        Candidates: every non-archived job.  Recruiters: their own jobs,
        archived included.  Admins: everything.
        """
        if actor.role is Role.candidate:
            rows = await self._query(EntityKind.jobs, predicate=_not_archived)
        elif actor.role is Role.recruiter:
            rows = await self._query(EntityKind.jobs, {"recruiter_id": actor.id})
        else:
            rows = await self._query(EntityKind.jobs)

        jobs = filter_jobs((Job.model_validate(row) for row in rows), filters)
        jobs.sort(key=lambda j: as_utc(j.posted_date), reverse=True)
        return jobs
