"""Authorization predicates.

Each ``*_fields_for`` function answers one question: which fields may this
actor change on this record?  An empty set means no mutation at all.
Services call :func:`require_fields` before every write so that all entity
types share the same enforcement shape.
"""

from __future__ import annotations

from collections.abc import Iterable

from jobtracker.core.constants import (
    APPLICATION_EDITABLE_FIELDS,
    CANDIDATE_PROFILE_FIELDS,
    COMMON_PROFILE_FIELDS,
    JOB_EDITABLE_FIELDS,
    RECRUITER_APPLICATION_FIELDS,
    RECRUITER_PROFILE_FIELDS,
)
from jobtracker.core.errors import PermissionDenied
from jobtracker.models.actor import Actor
from jobtracker.models.application import Application
from jobtracker.models.enums import Role
from jobtracker.models.job import Job
from jobtracker.models.user import User

NO_FIELDS: frozenset[str] = frozenset()

_ROLE_PROFILE_FIELDS: dict[Role, frozenset[str]] = {
    Role.candidate: CANDIDATE_PROFILE_FIELDS,
    Role.recruiter: RECRUITER_PROFILE_FIELDS,
    Role.admin: NO_FIELDS,
}


# ---------------------------------------------------------------------------
# Applications
# ---------------------------------------------------------------------------

def is_application_owner(actor: Actor, application: Application) -> bool:
    return actor.id == application.user_id


def is_attached_recruiter(actor: Actor, application: Application) -> bool:
    return application.recruiter_id is not None and actor.id == application.recruiter_id


def application_fields_for(actor: Actor, application: Application) -> frozenset[str]:
    """Owner edits everything editable; the attached recruiter only the status."""
    if is_application_owner(actor, application):
        return APPLICATION_EDITABLE_FIELDS
    if is_attached_recruiter(actor, application):
        return RECRUITER_APPLICATION_FIELDS
    return NO_FIELDS


def can_read_application(actor: Actor, application: Application) -> bool:
    return (
        actor.is_admin
        or is_application_owner(actor, application)
        or is_attached_recruiter(actor, application)
    )


def is_thread_party(actor: Actor, application: Application) -> bool:
    """Candidate or recruiter allowed to post on the application thread."""
    return is_application_owner(actor, application) or is_attached_recruiter(
        actor, application
    )


# ---------------------------------------------------------------------------
# Jobs
# ---------------------------------------------------------------------------

def is_job_owner(actor: Actor, job: Job) -> bool:
    return actor.role is Role.recruiter and actor.id == job.recruiter_id


def job_fields_for(actor: Actor, job: Job) -> frozenset[str]:
    return JOB_EDITABLE_FIELDS if is_job_owner(actor, job) else NO_FIELDS


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

def profile_fields_for(actor: Actor, user: User) -> frozenset[str]:
    """Self edits common + own-role fields; admins edit everything and the role."""
    if actor.is_admin:
        return (
            COMMON_PROFILE_FIELDS
            | CANDIDATE_PROFILE_FIELDS
            | RECRUITER_PROFILE_FIELDS
            | {"role"}
        )
    if actor.id == user.id:
        return COMMON_PROFILE_FIELDS | _ROLE_PROFILE_FIELDS[user.role]
    return NO_FIELDS


# ---------------------------------------------------------------------------
# Enforcement
# ---------------------------------------------------------------------------

def require_fields(
    allowed: frozenset[str], requested: Iterable[str], target: str
) -> None:
    """Raise ``PermissionDenied`` unless every requested field is allowed."""
    if not allowed:
        raise PermissionDenied(f"Not allowed to modify {target}")
    forbidden = sorted(set(requested) - allowed)
    if forbidden:
        raise PermissionDenied(
            f"Not allowed to modify {', '.join(forbidden)} on {target}"
        )


def require_role(actor: Actor, *roles: Role) -> None:
    if actor.role not in roles:
        allowed = ", ".join(r.value for r in roles)
        raise PermissionDenied(f"Operation requires role: {allowed}")
