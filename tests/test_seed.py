"""Tests for the demo data loader."""

from __future__ import annotations

import pytest

from jobtracker.core.errors import PermissionDenied
from jobtracker.core.security import pwd_context
from jobtracker.models.actor import Actor
from jobtracker.models.enums import Role
from jobtracker.services.seed import DEMO_PASSWORD, DEMO_USERS
from jobtracker.services.tracker import Tracker


class TestSeedDemoData:
    """Admins load demo accounts once; reruns skip existing emails."""

    @pytest.mark.asyncio
    async def test_seed_creates_accounts_and_applications(
        self, tracker: Tracker, admin: Actor
    ) -> None:
        report = await tracker.seed.seed_demo_data(admin)

        assert report.users_created == len(DEMO_USERS)
        assert report.users_existing == 0
        # Three new candidates get 3, 4 and 5 applications
        assert report.applications_created == 12

        stats = await tracker.users.admin_stats(admin)
        assert stats.users_by_role[Role.admin] == 1
        assert stats.total_recruiters == 1
        assert stats.total_candidates == 3
        assert stats.total_applications == 12

        stored = await tracker.users.get_by_email("admin@test.com")
        assert stored is not None
        assert stored.role is Role.admin
        assert pwd_context.verify(DEMO_PASSWORD, stored.password_hash)

    @pytest.mark.asyncio
    async def test_seeded_candidate_sees_own_applications(
        self, tracker: Tracker, admin: Actor
    ) -> None:
        await tracker.seed.seed_demo_data(admin)
        alice = await tracker.users.get_by_email("alice@test.com")
        assert alice is not None

        owner = Actor(id=alice.id, role=Role.candidate)
        applications = await tracker.applications.list_applications(owner)
        assert len(applications) == 4
        assert all(a.user_id == alice.id for a in applications)

    @pytest.mark.asyncio
    async def test_second_run_adds_nothing(self, tracker: Tracker, admin: Actor) -> None:
        await tracker.seed.seed_demo_data(admin)
        again = await tracker.seed.seed_demo_data(admin)

        assert again.users_created == 0
        assert again.users_existing == len(DEMO_USERS)
        assert again.applications_created == 0
        assert (await tracker.users.admin_stats(admin)).total_applications == 12

    @pytest.mark.asyncio
    async def test_only_admins_may_seed(
        self, tracker: Tracker, candidate: Actor, recruiter: Actor
    ) -> None:
        for actor in (candidate, recruiter):
            with pytest.raises(PermissionDenied):
                await tracker.seed.seed_demo_data(actor)
        assert await tracker.users.get_by_email("admin@test.com") is None
