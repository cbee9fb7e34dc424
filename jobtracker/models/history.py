"""Pydantic models for the append-only ``application_history`` table."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from jobtracker.models.enums import ApplicationStatus


class ApplicationHistoryCreate(BaseModel):
    """Payload for recording one status transition."""
    application_id: str
    old_status: ApplicationStatus | None = None  # None for the first entry
    new_status: ApplicationStatus
    changed_by: str
    changed_at: datetime
    notes: str | None = None


class ApplicationHistoryEntry(ApplicationHistoryCreate):
    """Stored status transition."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: datetime
