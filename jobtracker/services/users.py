"""User accounts and administration.

Signup stores a bcrypt hash, never the password.  Email lookups are exact
and case-sensitive.  Users own nothing, so deleting one is unconditional.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from jobtracker.core.constants import (
    CANDIDATE_PROFILE_FIELDS,
    COMMON_PROFILE_FIELDS,
    RECRUITER_PROFILE_FIELDS,
)
from jobtracker.core.errors import DuplicateEmail, NotFound, PermissionDenied
from jobtracker.core.security import hash_password
from jobtracker.models.actor import Actor
from jobtracker.models.enums import EntityKind, Role
from jobtracker.models.stats import AdminStats
from jobtracker.models.user import StoredUser, User, UserCreate, UserUpdate
from jobtracker.services.access import profile_fields_for, require_fields, require_role
from jobtracker.services.base import ServiceBase, as_utc, partial_changes
from jobtracker.services.stats import compute_admin_stats

logger = logging.getLogger(__name__)

_SIGNUP_FIELDS: dict[Role, frozenset[str]] = {
    Role.candidate: COMMON_PROFILE_FIELDS | CANDIDATE_PROFILE_FIELDS,
    Role.recruiter: COMMON_PROFILE_FIELDS | RECRUITER_PROFILE_FIELDS,
}


class UserService(ServiceBase):
    """Signup, profile edits and admin-only account management."""

    async def _load(self, user_id: str) -> StoredUser:
        row = await self._get(EntityKind.users, user_id)
        if row is None:
            raise NotFound("user", user_id)
        return StoredUser.model_validate(row)

    async def get_by_email(self, email: str) -> StoredUser | None:
        """Exact, case-sensitive lookup used by the authentication layer."""
        rows = await self._query(EntityKind.users, {"email": email})
        return StoredUser.model_validate(rows[0]) if rows else None

    async def register(self, payload: UserCreate) -> User:
        """Create a candidate or recruiter account.

        Profile fields belonging to the other role are discarded.
        """
        allowed = _SIGNUP_FIELDS.get(payload.role)
        if allowed is None:
            raise PermissionDenied("Signup only creates candidate or recruiter accounts")
        if await self.get_by_email(payload.email) is not None:
            raise DuplicateEmail(f"Email already registered: {payload.email}")

        profile = payload.model_dump(mode="json", exclude={"password", "role"})
        record: dict[str, Any] = {k: v for k, v in profile.items() if k in allowed}
        record["role"] = payload.role.value
        record["password_hash"] = hash_password(payload.password)

        row = await self._insert(EntityKind.users, record)
        user = StoredUser.model_validate(row).public()
        logger.info("user_registered", extra={"user_id": user.id, "role": user.role.value})
        return user

    async def get_user(self, user_id: str, actor: Actor) -> User:
        """Return a profile to its owner or an admin; ``NotFound`` otherwise."""
        if actor.id != user_id and not actor.is_admin:
            raise NotFound("user", user_id)
        return (await self._load(user_id)).public()

    async def update_profile(
        self,
        user_id: str,
        actor: Actor,
        changes: UserUpdate | Mapping[str, Any],
    ) -> User:
        """Edit a profile.

        Users edit common fields and the fields of their own role; admins
        edit every profile field and the role.
        """
        user = await self._load(user_id)
        requested, values = partial_changes(UserUpdate, User, changes)
        require_fields(profile_fields_for(actor, user), requested, "user")

        new_email = values.get("email")
        if new_email is not None and new_email != user.email:
            if await self.get_by_email(new_email) is not None:
                raise DuplicateEmail(f"Email already registered: {new_email}")

        row = await self._update(EntityKind.users, user_id, values)
        if row is None:
            raise NotFound("user", user_id)
        return StoredUser.model_validate(row).public()

    # ------------------------------------------------------------------
    # Admin
    # ------------------------------------------------------------------

    async def list_users(self, actor: Actor) -> list[User]:
        require_role(actor, Role.admin)
        rows = await self._query(EntityKind.users)
        users = [StoredUser.model_validate(row).public() for row in rows]
        users.sort(key=lambda u: as_utc(u.created_at), reverse=True)
        return users

    async def update_user_role(self, user_id: str, role: Role, actor: Actor) -> User:
        require_role(actor, Role.admin)
        user = await self.update_profile(user_id, actor, {"role": role})
        logger.info(
            "user_role_changed",
            extra={"user_id": user_id, "role": role.value, "actor_id": actor.id},
        )
        return user

    async def delete_user(self, user_id: str, actor: Actor) -> None:
        require_role(actor, Role.admin)
        if not await self._delete(EntityKind.users, user_id):
            raise NotFound("user", user_id)
        logger.info("user_deleted", extra={"user_id": user_id, "actor_id": actor.id})

    async def admin_stats(self, actor: Actor) -> AdminStats:
        require_role(actor, Role.admin)
        users = await self.list_users(actor)
        jobs = await self._query(EntityKind.jobs)
        applications = await self._query(EntityKind.applications)
        return compute_admin_stats(users, len(jobs), len(applications))
