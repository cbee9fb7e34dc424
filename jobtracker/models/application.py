"""Pydantic models for the ``applications`` table.

An application keeps a snapshot of the posting's title, company and location
so it stays meaningful after the source job is edited or deleted.
``job_id`` / ``recruiter_id`` are only set when it was created from a job.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from jobtracker.models.enums import ApplicationStatus, ContractType


class ApplicationForm(BaseModel):
    """Fields a candidate fills in when applying to a posted job."""
    contract_type: ContractType | None = None
    application_date: datetime | None = None
    status: ApplicationStatus = ApplicationStatus.to_apply
    notes: str | None = None
    documents: list[str] = []


class ApplicationCreate(ApplicationForm):
    """Freeform application entered manually by a candidate."""
    title: str = Field(..., min_length=1)
    company: str = Field(..., min_length=1)
    location: str = ""
    job_url: str | None = None
    job_id: str | None = None
    contract_type: ContractType = ContractType.other


class ApplicationUpdate(BaseModel):
    """Partial application edit; only explicitly set fields are applied."""
    title: str | None = None
    company: str | None = None
    location: str | None = None
    job_url: str | None = None
    contract_type: ContractType | None = None
    application_date: datetime | None = None
    status: ApplicationStatus | None = None
    notes: str | None = None
    documents: list[str] | None = None


class Application(BaseModel):
    """Full application record returned from storage."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    company: str
    location: str = ""
    job_url: str | None = None
    job_id: str | None = None
    recruiter_id: str | None = None
    contract_type: ContractType
    application_date: datetime
    status: ApplicationStatus
    notes: str | None = None
    documents: list[str] = []
    user_id: str
    last_follow_up_at: datetime | None = None
    follow_up_count: int = 0
    created_at: datetime
    updated_at: datetime


class ApplicationFilters(BaseModel):
    """Optional filters for application listings (all combined with AND)."""
    status: ApplicationStatus | None = None
    contract_type: ContractType | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    search_query: str | None = None
