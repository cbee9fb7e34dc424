"""Pydantic models for the ``jobs`` table and job listing filters."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from jobtracker.models.enums import JobType


class JobCreate(BaseModel):
    """Payload for publishing a job posting.

    The owning recruiter is taken from the acting user, never from the body.
    """
    title: str = Field(..., min_length=1)
    company: str = Field(..., min_length=1)
    location: str
    type: JobType = JobType.full_time
    description: str = ""
    salary: str | None = None
    job_url: str | None = None
    posted_date: datetime | None = None
    source: str | None = None
    remote: bool = False
    requirements: list[str] = []


class JobUpdate(BaseModel):
    """Partial job edit by the owning recruiter."""
    title: str | None = None
    company: str | None = None
    location: str | None = None
    type: JobType | None = None
    description: str | None = None
    salary: str | None = None
    job_url: str | None = None
    posted_date: datetime | None = None
    source: str | None = None
    remote: bool | None = None
    requirements: list[str] | None = None
    archived: bool | None = None


class Job(BaseModel):
    """Full job record returned from storage."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    company: str
    location: str
    type: JobType
    description: str = ""
    salary: str | None = None
    job_url: str | None = None
    posted_date: datetime
    source: str | None = None
    remote: bool = False
    requirements: list[str] = []
    recruiter_id: str
    archived: bool = False
    created_at: datetime
    updated_at: datetime


class JobFilters(BaseModel):
    """Optional filters for job listings (all combined with AND)."""
    query: str | None = None
    location: str | None = None
    type: JobType | None = None
    remote: bool | None = None
    source: str | None = None
    min_salary: int | None = Field(default=None, ge=0)
