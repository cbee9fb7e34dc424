"""Error taxonomy surfaced by the business rule layer.

Adapters raise whatever their driver raises; the services translate those
into ``BackendUnavailable`` through :func:`backend_errors` so callers only
ever see the classes defined here.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

logger = logging.getLogger(__name__)


class TrackerError(Exception):
    """Base class for every error raised by the tracker core."""


class NotFound(TrackerError):
    """Record is absent or outside the actor's scope.

    Callers cannot tell the two cases apart.
    """

    def __init__(self, kind: str, record_id: str) -> None:
        super().__init__(f"{kind} not found: {record_id}")
        self.kind = kind
        self.record_id = record_id


class PermissionDenied(TrackerError):
    """Actor lacks the role or ownership required for the mutation."""


class DuplicateApplication(TrackerError):
    """A candidate already has an application for this job."""

    def __init__(self, candidate_id: str, job_id: str) -> None:
        super().__init__(
            f"Candidate {candidate_id} already applied to job {job_id}"
        )
        self.candidate_id = candidate_id
        self.job_id = job_id


class DuplicateEmail(TrackerError):
    """Signup with an email that is already registered."""


class HasDependents(TrackerError):
    """Deletion blocked because other records still reference the target."""


class BackendUnavailable(TrackerError):
    """Storage failed to initialize or the underlying I/O raised."""


@contextmanager
def backend_errors(operation: str) -> Iterator[None]:
    """Translate raw adapter exceptions into ``BackendUnavailable``.

    Errors already belonging to the taxonomy pass through untouched.
    """
    try:
        yield
    except TrackerError:
        raise
    except Exception as exc:
        logger.error(
            "backend_error",
            extra={"operation": operation, "error": str(exc)},
        )
        raise BackendUnavailable(f"{operation} failed: {exc}") from exc
