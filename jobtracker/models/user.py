"""Pydantic models for the ``users`` table.

``User`` is the public view and never carries the credential;
``StoredUser`` is the full row including ``password_hash``.
Candidate-only and recruiter-only profile fields are optional for everyone.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from jobtracker.models.enums import Role


class UserProfile(BaseModel):
    """Optional profile fields, grouped by the role they apply to."""
    phone: str | None = None
    address: str | None = None
    # Candidates
    skills: list[str] | None = None
    experience: str | None = None
    education: str | None = None
    linkedin_url: str | None = None
    # Recruiters
    company_name: str | None = None
    company_sector: str | None = None
    company_website: str | None = None
    company_size: str | None = None


class UserCreate(UserProfile):
    """Signup payload.  The password is hashed before it reaches storage."""
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)
    role: Role = Role.candidate


class UserUpdate(BaseModel):
    """Partial profile edit; only explicitly set fields are applied."""
    name: str | None = None
    email: str | None = None
    role: Role | None = None
    phone: str | None = None
    address: str | None = None
    skills: list[str] | None = None
    experience: str | None = None
    education: str | None = None
    linkedin_url: str | None = None
    company_name: str | None = None
    company_sector: str | None = None
    company_website: str | None = None
    company_size: str | None = None


class User(UserProfile):
    """Public user record returned from storage."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    role: Role
    created_at: datetime
    updated_at: datetime


class StoredUser(User):
    """Full ``users`` row including the bcrypt hash."""
    password_hash: str

    def public(self) -> User:
        return User.model_validate(self.model_dump(exclude={"password_hash"}))
