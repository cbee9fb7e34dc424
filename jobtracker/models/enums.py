"""Enum types shared by every entity and storage adapter."""

from enum import Enum


class Role(str, Enum):
    """Role of an authenticated actor."""
    candidate = "candidate"
    recruiter = "recruiter"
    admin = "admin"


class ApplicationStatus(str, Enum):
    """Lifecycle status of an application.

    Any value may follow any other; the history trail records what happened.
    """
    to_apply = "to-apply"
    sent = "sent"
    interview = "interview"
    refused = "refused"
    accepted = "accepted"


class ContractType(str, Enum):
    """Contract offered for an application."""
    permanent = "permanent"
    fixed_term = "fixed_term"
    internship = "internship"
    apprenticeship = "apprenticeship"
    freelance = "freelance"
    temporary = "temporary"
    other = "other"


class JobType(str, Enum):
    """Kind of position advertised by a job posting."""
    full_time = "full-time"
    part_time = "part-time"
    contract = "contract"
    internship = "internship"
    freelance = "freelance"
    temporary = "temporary"


class EntityKind(str, Enum):
    """Persisted entity kinds; the value is the table / collection name."""
    users = "users"
    jobs = "jobs"
    applications = "applications"
    application_history = "application_history"
    messages = "messages"
