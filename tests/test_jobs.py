"""Tests for job posting rules: ownership, archive visibility, deletion guard."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from jobtracker.core.errors import HasDependents, NotFound, PermissionDenied
from jobtracker.models.actor import Actor
from jobtracker.models.enums import JobType
from jobtracker.models.job import Job, JobCreate, JobFilters, JobUpdate
from jobtracker.services.jobs import filter_jobs, parse_min_salary
from jobtracker.services.tracker import Tracker


def _posting(**overrides: object) -> JobCreate:
    data: dict = {
        "title": "Backend Developer",
        "company": "Acme",
        "location": "Paris",
        "type": JobType.full_time,
        "description": "Python services",
        "salary": "45k-55k",
    }
    data.update(overrides)
    return JobCreate(**data)


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------


class TestParseMinSalary:
    """Lower salary bound extracted from free text."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("45k-55k", 45000),
            ("60 K €", 60000),
            ("Between 30k and 40k", 30000),
            ("negotiable", None),
            (None, None),
            ("", None),
        ],
    )
    def test_parse(self, text: str | None, expected: int | None) -> None:
        assert parse_min_salary(text) == expected


class TestFilterJobs:
    """In-memory listing filters."""

    def _job(self, **overrides: object) -> Job:
        now = datetime(2024, 3, 1, tzinfo=timezone.utc)
        data: dict = {
            "id": "j",
            "title": "Backend Developer",
            "company": "Acme",
            "location": "Paris",
            "type": JobType.full_time,
            "posted_date": now,
            "recruiter_id": "rec-1",
            "created_at": now,
            "updated_at": now,
        }
        data.update(overrides)
        return Job(**data)

    def test_no_filters_returns_everything(self) -> None:
        jobs = [self._job(id="a"), self._job(id="b")]
        assert filter_jobs(jobs, None) == jobs

    def test_query_matches_any_text_field(self) -> None:
        jobs = [
            self._job(id="a", title="Data Engineer"),
            self._job(id="b", company="DataCorp"),
            self._job(id="c", description="uses data pipelines"),
            self._job(id="d"),
        ]
        result = filter_jobs(jobs, JobFilters(query="DATA"))
        assert [j.id for j in result] == ["a", "b", "c"]

    def test_combined_filters(self) -> None:
        jobs = [
            self._job(id="a", remote=True, salary="50k", location="Paris 11e"),
            self._job(id="b", remote=True, salary="30k", location="Paris"),
            self._job(id="c", remote=False, salary="60k", location="Paris"),
            self._job(id="d", remote=True, salary=None, location="Paris"),
        ]
        result = filter_jobs(
            jobs, JobFilters(location="paris", remote=True, min_salary=40000)
        )
        assert [j.id for j in result] == ["a"]

    def test_type_and_source(self) -> None:
        jobs = [
            self._job(id="a", type=JobType.internship, source="linkedin"),
            self._job(id="b", type=JobType.internship, source="indeed"),
            self._job(id="c", source="linkedin"),
        ]
        result = filter_jobs(
            jobs, JobFilters(type=JobType.internship, source="linkedin")
        )
        assert [j.id for j in result] == ["a"]


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class TestCreateJob:
    """Only recruiters publish; ownership comes from the actor."""

    @pytest.mark.asyncio
    async def test_recruiter_creates_owned_job(
        self, tracker: Tracker, recruiter: Actor
    ) -> None:
        job = await tracker.jobs.create_job(recruiter, _posting())
        assert job.recruiter_id == recruiter.id
        assert job.archived is False
        assert job.posted_date is not None
        assert job.type is JobType.full_time

    @pytest.mark.asyncio
    async def test_candidate_cannot_create(
        self, tracker: Tracker, candidate: Actor
    ) -> None:
        with pytest.raises(PermissionDenied):
            await tracker.jobs.create_job(candidate, _posting())

    @pytest.mark.asyncio
    async def test_explicit_posted_date_is_kept(
        self, tracker: Tracker, recruiter: Actor
    ) -> None:
        posted = datetime(2024, 1, 15, 8, 30, tzinfo=timezone.utc)
        job = await tracker.jobs.create_job(recruiter, _posting(posted_date=posted))
        assert job.posted_date == posted


class TestUpdateJob:
    """Only the owning recruiter edits."""

    @pytest.mark.asyncio
    async def test_owner_updates(self, tracker: Tracker, recruiter: Actor) -> None:
        job = await tracker.jobs.create_job(recruiter, _posting())
        updated = await tracker.jobs.update_job(
            job.id, recruiter, JobUpdate(title="Senior Backend Developer")
        )
        assert updated.title == "Senior Backend Developer"
        assert updated.company == "Acme"

    @pytest.mark.asyncio
    async def test_other_recruiter_denied(
        self, tracker: Tracker, recruiter: Actor, other_recruiter: Actor
    ) -> None:
        job = await tracker.jobs.create_job(recruiter, _posting())
        with pytest.raises(PermissionDenied):
            await tracker.jobs.update_job(job.id, other_recruiter, {"title": "Mine"})
        unchanged = await tracker.jobs.get_job(job.id, recruiter)
        assert unchanged.title == "Backend Developer"

    @pytest.mark.asyncio
    async def test_unknown_field_denied(self, tracker: Tracker, recruiter: Actor) -> None:
        job = await tracker.jobs.create_job(recruiter, _posting())
        with pytest.raises(PermissionDenied):
            await tracker.jobs.update_job(job.id, recruiter, {"recruiter_id": "rec-2"})

    @pytest.mark.asyncio
    async def test_missing_job(self, tracker: Tracker, recruiter: Actor) -> None:
        with pytest.raises(NotFound):
            await tracker.jobs.update_job("missing", recruiter, {"title": "x"})


class TestArchiveVisibility:
    """Archived jobs disappear from candidate listings."""

    @pytest.mark.asyncio
    async def test_archive_hides_from_candidates(
        self, tracker: Tracker, recruiter: Actor, candidate: Actor
    ) -> None:
        job = await tracker.jobs.create_job(recruiter, _posting())
        archived = await tracker.jobs.toggle_job_archive(job.id, recruiter, True)
        assert archived.archived is True

        assert await tracker.jobs.list_visible_jobs(candidate) == []
        with pytest.raises(NotFound):
            await tracker.jobs.get_job(job.id, candidate)

        own = await tracker.jobs.list_visible_jobs(recruiter)
        assert [j.id for j in own] == [job.id]

    @pytest.mark.asyncio
    async def test_restore_makes_visible_again(
        self, tracker: Tracker, recruiter: Actor, candidate: Actor
    ) -> None:
        job = await tracker.jobs.create_job(recruiter, _posting())
        await tracker.jobs.toggle_job_archive(job.id, recruiter, True)
        await tracker.jobs.toggle_job_archive(job.id, recruiter, False)
        visible = await tracker.jobs.list_visible_jobs(candidate)
        assert [j.id for j in visible] == [job.id]

    @pytest.mark.asyncio
    async def test_only_owner_archives(
        self, tracker: Tracker, recruiter: Actor, other_recruiter: Actor
    ) -> None:
        job = await tracker.jobs.create_job(recruiter, _posting())
        with pytest.raises(PermissionDenied):
            await tracker.jobs.toggle_job_archive(job.id, other_recruiter, True)

    @pytest.mark.asyncio
    async def test_applicant_still_sees_archived_job(
        self, tracker: Tracker, recruiter: Actor, candidate: Actor
    ) -> None:
        job = await tracker.jobs.create_job(recruiter, _posting())
        await tracker.applications.apply_to_job(candidate, job.id)
        await tracker.jobs.toggle_job_archive(job.id, recruiter, True)

        seen = await tracker.jobs.get_job(job.id, candidate)
        assert seen.archived is True
        assert await tracker.jobs.list_visible_jobs(candidate) == []


class TestListVisibleJobs:
    """Role-dependent listing, newest posting first."""

    @pytest.mark.asyncio
    async def test_roles_and_order(
        self,
        tracker: Tracker,
        recruiter: Actor,
        other_recruiter: Actor,
        candidate: Actor,
        admin: Actor,
    ) -> None:
        base = datetime(2024, 3, 1, tzinfo=timezone.utc)
        old = await tracker.jobs.create_job(recruiter, _posting(title="Old", posted_date=base))
        new = await tracker.jobs.create_job(
            recruiter, _posting(title="New", posted_date=base + timedelta(days=2))
        )
        other = await tracker.jobs.create_job(
            other_recruiter, _posting(title="Other", posted_date=base + timedelta(days=1))
        )

        for_candidate = await tracker.jobs.list_visible_jobs(candidate)
        assert [j.id for j in for_candidate] == [new.id, other.id, old.id]

        for_recruiter = await tracker.jobs.list_visible_jobs(recruiter)
        assert [j.id for j in for_recruiter] == [new.id, old.id]

        for_admin = await tracker.jobs.list_visible_jobs(admin)
        assert len(for_admin) == 3

    @pytest.mark.asyncio
    async def test_filters_are_applied(
        self, tracker: Tracker, recruiter: Actor, candidate: Actor
    ) -> None:
        await tracker.jobs.create_job(recruiter, _posting(title="Remote", remote=True))
        await tracker.jobs.create_job(recruiter, _posting(title="Office", remote=False))
        result = await tracker.jobs.list_visible_jobs(
            candidate, JobFilters(remote=True)
        )
        assert [j.title for j in result] == ["Remote"]


class TestDeleteJob:
    """Deletion is owner-only and blocked while applications exist."""

    @pytest.mark.asyncio
    async def test_delete_without_applications(
        self, tracker: Tracker, recruiter: Actor
    ) -> None:
        job = await tracker.jobs.create_job(recruiter, _posting())
        await tracker.jobs.delete_job(job.id, recruiter)
        with pytest.raises(NotFound):
            await tracker.jobs.get_job(job.id, recruiter)

    @pytest.mark.asyncio
    async def test_delete_with_application_is_refused(
        self, tracker: Tracker, recruiter: Actor, candidate: Actor
    ) -> None:
        job = await tracker.jobs.create_job(recruiter, _posting())
        await tracker.applications.apply_to_job(candidate, job.id)

        assert await tracker.jobs.has_applications(job.id) is True
        with pytest.raises(HasDependents):
            await tracker.jobs.delete_job(job.id, recruiter)
        still_there = await tracker.jobs.get_job(job.id, recruiter)
        assert still_there == job

    @pytest.mark.asyncio
    async def test_non_owner_cannot_delete(
        self, tracker: Tracker, recruiter: Actor, other_recruiter: Actor, admin: Actor
    ) -> None:
        job = await tracker.jobs.create_job(recruiter, _posting())
        with pytest.raises(PermissionDenied):
            await tracker.jobs.delete_job(job.id, other_recruiter)
        with pytest.raises(PermissionDenied):
            await tracker.jobs.delete_job(job.id, admin)

    @pytest.mark.asyncio
    async def test_delete_missing(self, tracker: Tracker, recruiter: Actor) -> None:
        with pytest.raises(NotFound):
            await tracker.jobs.delete_job("missing", recruiter)
