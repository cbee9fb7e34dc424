"""Demo data for fresh installations.

Creates a fixed set of demo accounts (one per role plus extra candidates)
and a handful of applications for every candidate created by this run.
Accounts whose email already exists are left untouched, so seeding twice
adds nothing.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from jobtracker.core.security import hash_password
from jobtracker.db.base import StorageAdapter
from jobtracker.models.actor import Actor
from jobtracker.models.application import ApplicationCreate
from jobtracker.models.enums import ApplicationStatus, ContractType, EntityKind, Role
from jobtracker.models.stats import SeedReport
from jobtracker.models.user import UserCreate
from jobtracker.services.access import require_role
from jobtracker.services.applications import ApplicationService
from jobtracker.services.base import ServiceBase
from jobtracker.services.users import UserService

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password"

DEMO_USERS: list[dict] = [
    {"name": "Admin User", "email": "admin@test.com", "role": Role.admin},
    {
        "name": "Demo Recruiter",
        "email": "recruiter@test.com",
        "role": Role.recruiter,
        "company_name": "TechCorp",
        "company_sector": "IT",
    },
    {
        "name": "Demo Candidate",
        "email": "candidate@test.com",
        "role": Role.candidate,
        "skills": ["React", "TypeScript", "Node.js"],
    },
    {
        "name": "Alice Dubois",
        "email": "alice@test.com",
        "role": Role.candidate,
        "skills": ["Python", "Django", "AWS"],
    },
    {
        "name": "Bob Martin",
        "email": "bob@test.com",
        "role": Role.candidate,
        "skills": ["Java", "Spring", "Angular"],
    },
]

# (title, company, location, contract type, status, days ago, notes, job url)
DEMO_APPLICATIONS: list[tuple] = [
    ("Fullstack Developer React/Node", "TechStarts", "Paris", ContractType.permanent,
     ApplicationStatus.interview, 5, "First technical interview passed.", None),
    ("Frontend Engineer", "CreativeAgency", "Lyon (Remote)", ContractType.freelance,
     ApplicationStatus.sent, 2, None, "https://example.com/jobs/123"),
    ("Backend Developer", "FinTech Co", "Paris", ContractType.permanent,
     ApplicationStatus.refused, 15, "Rejected by email.", None),
    ("Lead Developer", "Big Corp", "Toulouse", ContractType.permanent,
     ApplicationStatus.accepted, 20, "Offer received, 55k.", None),
    ("React Native Internship", "StartupMobile", "Bordeaux", ContractType.internship,
     ApplicationStatus.to_apply, 0, "Apply before Friday.", "https://startup.io/careers"),
]


class SeedService(ServiceBase):
    """Admin-only loader for the demo data set."""

    def __init__(
        self,
        adapter: StorageAdapter,
        users: UserService,
        applications: ApplicationService,
    ) -> None:
        super().__init__(adapter)
        self._users = users
        self._applications = applications

    async def _create_user(self, data: dict) -> str:
        if data["role"] is Role.admin:
            # Signup never creates admins
            record = {
                "name": data["name"],
                "email": data["email"],
                "role": Role.admin.value,
                "password_hash": hash_password(DEMO_PASSWORD),
            }
            return (await self._insert(EntityKind.users, record))["id"]
        user = await self._users.register(UserCreate(password=DEMO_PASSWORD, **data))
        return user.id

    async def seed_demo_data(self, actor: Actor) -> SeedReport:
        """Create missing demo accounts and give new candidates applications.

        The n-th new candidate gets the first ``3 + n % 3`` demo applications.
        """
        require_role(actor, Role.admin)
        report = SeedReport()
        now = datetime.now(timezone.utc)
        new_candidates = 0

        for data in DEMO_USERS:
            if await self._users.get_by_email(data["email"]) is not None:
                report.users_existing += 1
                continue
            user_id = await self._create_user(data)
            report.users_created += 1
            if data["role"] is not Role.candidate:
                continue

            owner = Actor(id=user_id, role=Role.candidate)
            count = 3 + new_candidates % 3
            new_candidates += 1
            for title, company, location, contract, status, days, notes, url in (
                DEMO_APPLICATIONS[:count]
            ):
                await self._applications.create_application(
                    owner,
                    ApplicationCreate(
                        title=title,
                        company=company,
                        location=location,
                        contract_type=contract,
                        status=status,
                        application_date=now - timedelta(days=days),
                        notes=notes,
                        job_url=url,
                    ),
                )
                report.applications_created += 1

        logger.info("demo_data_seeded", extra={"actor_id": actor.id, **report.model_dump()})
        return report
