"""Unit tests for the pure statistics functions."""

from __future__ import annotations

from datetime import datetime, timezone

from jobtracker.models.application import Application
from jobtracker.models.enums import ApplicationStatus, ContractType, Role
from jobtracker.models.user import User
from jobtracker.services.stats import compute_admin_stats, compute_stats


def _application(status: ApplicationStatus, applied: datetime) -> Application:
    return Application(
        id=f"app-{status.value}-{applied.isoformat()}",
        title="Developer",
        company="Acme",
        contract_type=ContractType.permanent,
        application_date=applied,
        status=status,
        user_id="cand-1",
        created_at=applied,
        updated_at=applied,
    )


def _user(role: Role, index: int) -> User:
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    return User(
        id=f"u{index}",
        name=f"User {index}",
        email=f"u{index}@example.com",
        role=role,
        created_at=now,
        updated_at=now,
    )


class TestComputeStats:
    """Aggregates over one candidate's applications."""

    def test_empty(self) -> None:
        stats = compute_stats([])
        assert stats.total == 0
        assert stats.success_rate == 0.0
        assert stats.interviews == 0
        assert stats.evolution == []
        assert set(stats.by_status) == set(ApplicationStatus)
        assert all(count == 0 for count in stats.by_status.values())

    def test_counts_and_rate(self) -> None:
        jan = datetime(2024, 1, 15, tzinfo=timezone.utc)
        feb = datetime(2024, 2, 3, tzinfo=timezone.utc)
        apps = [
            _application(ApplicationStatus.accepted, jan),
            _application(ApplicationStatus.interview, jan),
            _application(ApplicationStatus.refused, feb),
            _application(ApplicationStatus.sent, feb),
        ]
        stats = compute_stats(apps)

        assert stats.total == 4
        assert stats.interviews == 1
        assert stats.success_rate == 0.25
        assert stats.by_status[ApplicationStatus.refused] == 1
        assert stats.by_status[ApplicationStatus.to_apply] == 0

    def test_interviews_count_current_status_only(self) -> None:
        # An application that went through interview and was then accepted
        # no longer counts as an interview.
        jan = datetime(2024, 1, 15, tzinfo=timezone.utc)
        stats = compute_stats([_application(ApplicationStatus.accepted, jan)])
        assert stats.interviews == 0
        assert stats.success_rate == 1.0

    def test_evolution_is_sorted_by_month(self) -> None:
        apps = [
            _application(ApplicationStatus.sent, datetime(2024, 3, 2, tzinfo=timezone.utc)),
            _application(ApplicationStatus.sent, datetime(2023, 12, 30, tzinfo=timezone.utc)),
            _application(ApplicationStatus.sent, datetime(2024, 3, 20, tzinfo=timezone.utc)),
        ]
        stats = compute_stats(apps)
        assert [(m.month, m.count) for m in stats.evolution] == [
            ("2023-12", 1),
            ("2024-03", 2),
        ]

    def test_accepts_generators(self) -> None:
        jan = datetime(2024, 1, 15, tzinfo=timezone.utc)
        stats = compute_stats(
            _application(ApplicationStatus.sent, jan) for _ in range(3)
        )
        assert stats.total == 3


class TestComputeAdminStats:
    """Platform-wide counts."""

    def test_counts_by_role(self) -> None:
        users = [
            _user(Role.candidate, 1),
            _user(Role.candidate, 2),
            _user(Role.recruiter, 3),
            _user(Role.admin, 4),
        ]
        stats = compute_admin_stats(users, total_jobs=5, total_applications=7)
        assert stats.total_users == 4
        assert stats.total_candidates == 2
        assert stats.total_recruiters == 1
        assert stats.users_by_role[Role.admin] == 1
        assert stats.total_jobs == 5
        assert stats.total_applications == 7

    def test_empty(self) -> None:
        stats = compute_admin_stats([], 0, 0)
        assert stats.total_users == 0
        assert all(count == 0 for count in stats.users_by_role.values())
