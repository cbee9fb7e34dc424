"""Response models for derived statistics.

These are aggregates computed in Python, not table mappings.
"""

from pydantic import BaseModel

from jobtracker.models.enums import ApplicationStatus, Role


# --- Candidate dashboard ---

class MonthlyCount(BaseModel):
    """Applications submitted in one calendar month (``YYYY-MM``)."""
    month: str
    count: int = 0


class ApplicationStats(BaseModel):
    """Aggregates over one candidate's applications."""
    total: int = 0
    by_status: dict[ApplicationStatus, int] = {}
    interviews: int = 0
    success_rate: float = 0.0
    evolution: list[MonthlyCount] = []


# --- Admin dashboard ---

class AdminStats(BaseModel):
    """Platform-wide counts for administrators."""
    total_users: int = 0
    total_recruiters: int = 0
    total_candidates: int = 0
    total_jobs: int = 0
    total_applications: int = 0
    users_by_role: dict[Role, int] = {}


# --- Demo data ---

class SeedReport(BaseModel):
    """Outcome of loading the demo accounts and applications."""
    users_created: int = 0
    users_existing: int = 0
    applications_created: int = 0
