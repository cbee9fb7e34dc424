"""Pydantic models for the ``messages`` table (application threads)."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from jobtracker.models.enums import Role


class MessageCreate(BaseModel):
    """Body of a new message; sender fields come from the acting user."""
    body: str = Field(..., min_length=1)


class Message(BaseModel):
    """Stored message."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    application_id: str
    sender_id: str
    sender_role: Role
    body: str
    read: bool = False
    created_at: datetime
    updated_at: datetime
