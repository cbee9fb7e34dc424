"""Derived statistics.

Pure functions over already-loaded records; nothing here touches storage.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable

from jobtracker.models.application import Application
from jobtracker.models.enums import ApplicationStatus, Role
from jobtracker.models.stats import AdminStats, ApplicationStats, MonthlyCount
from jobtracker.models.user import User


def compute_stats(applications: Iterable[Application]) -> ApplicationStats:
    """Aggregate one candidate's applications.

    ``interviews`` counts applications whose *current* status is
    ``interview``.  ``success_rate`` is ``accepted / total`` and 0.0 when
    there are no applications.  ``evolution`` buckets applications by the
    calendar month of ``application_date``, oldest month first.
    """
    apps = list(applications)
    total = len(apps)

    by_status: dict[ApplicationStatus, int] = {status: 0 for status in ApplicationStatus}
    months: Counter[str] = Counter()
    for app in apps:
        by_status[app.status] += 1
        months[app.application_date.strftime("%Y-%m")] += 1

    accepted = by_status[ApplicationStatus.accepted]
    return ApplicationStats(
        total=total,
        by_status=by_status,
        interviews=by_status[ApplicationStatus.interview],
        success_rate=accepted / total if total else 0.0,
        evolution=[
            MonthlyCount(month=month, count=count)
            for month, count in sorted(months.items())
        ],
    )


def compute_admin_stats(
    users: Iterable[User], total_jobs: int, total_applications: int
) -> AdminStats:
    """Platform-wide counts for the admin dashboard."""
    users_by_role: dict[Role, int] = {role: 0 for role in Role}
    total_users = 0
    for user in users:
        users_by_role[user.role] += 1
        total_users += 1

    return AdminStats(
        total_users=total_users,
        total_recruiters=users_by_role[Role.recruiter],
        total_candidates=users_by_role[Role.candidate],
        total_jobs=total_jobs,
        total_applications=total_applications,
        users_by_role=users_by_role,
    )
