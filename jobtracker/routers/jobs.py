"""Job posting endpoints.

Listing visibility depends on the caller's role: candidates see open
postings, recruiters their own, admins everything.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Body, Depends, Query

from jobtracker.models.actor import Actor
from jobtracker.models.application import Application, ApplicationForm
from jobtracker.models.enums import JobType
from jobtracker.models.job import Job, JobCreate, JobFilters, JobUpdate
from jobtracker.routers.deps import get_actor
from jobtracker.services.tracker import Tracker, get_tracker

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=list[Job])
async def list_jobs(
    query: str | None = Query(
        default=None,
        description="Case-insensitive text matched against title, company, location and description",
    ),
    location: str | None = Query(default=None),
    type: JobType | None = Query(default=None),
    remote: bool | None = Query(default=None),
    source: str | None = Query(default=None),
    min_salary: int | None = Query(
        default=None,
        ge=0,
        description="Lower bound compared with the 'NNk' figure of the salary text",
    ),
    actor: Actor = Depends(get_actor),
    tracker: Tracker = Depends(get_tracker),
) -> list[Job]:
    filters = JobFilters(
        query=query,
        location=location,
        type=type,
        remote=remote,
        source=source,
        min_salary=min_salary,
    )
    return await tracker.jobs.list_visible_jobs(actor, filters)


@router.post("", response_model=Job, status_code=201)
async def create_job(
    body: JobCreate,
    actor: Actor = Depends(get_actor),
    tracker: Tracker = Depends(get_tracker),
) -> Job:
    return await tracker.jobs.create_job(actor, body)


@router.get("/{job_id}", response_model=Job)
async def read_job(
    job_id: str,
    actor: Actor = Depends(get_actor),
    tracker: Tracker = Depends(get_tracker),
) -> Job:
    return await tracker.jobs.get_job(job_id, actor)


@router.patch("/{job_id}", response_model=Job)
async def update_job(
    job_id: str,
    body: JobUpdate,
    actor: Actor = Depends(get_actor),
    tracker: Tracker = Depends(get_tracker),
) -> Job:
    return await tracker.jobs.update_job(job_id, actor, body)


@router.put("/{job_id}/archive", response_model=Job)
async def set_job_archived(
    job_id: str,
    archived: bool = Body(..., embed=True),
    actor: Actor = Depends(get_actor),
    tracker: Tracker = Depends(get_tracker),
) -> Job:
    """Archive (``true``) or restore (``false``) a posting."""
    return await tracker.jobs.toggle_job_archive(job_id, actor, archived)


@router.delete("/{job_id}", status_code=204)
async def delete_job(
    job_id: str,
    actor: Actor = Depends(get_actor),
    tracker: Tracker = Depends(get_tracker),
) -> None:
    """Delete a posting; refused with 409 while applications reference it."""
    await tracker.jobs.delete_job(job_id, actor)


@router.post("/{job_id}/apply", response_model=Application, status_code=201)
async def apply_to_job(
    job_id: str,
    body: ApplicationForm | None = None,
    actor: Actor = Depends(get_actor),
    tracker: Tracker = Depends(get_tracker),
) -> Application:
    """Apply to a posting; 409 when the candidate already applied."""
    return await tracker.applications.apply_to_job(actor, job_id, body)
