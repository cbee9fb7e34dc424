"""Administration endpoints.

Every route here requires the admin role; the services enforce it.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from jobtracker.models.actor import Actor
from jobtracker.models.enums import Role
from jobtracker.models.stats import AdminStats, SeedReport
from jobtracker.models.user import User
from jobtracker.routers.deps import get_actor
from jobtracker.services.tracker import Tracker, get_tracker

logger = logging.getLogger(__name__)

router = APIRouter()


class RoleChange(BaseModel):
    """Request body for changing a user's role."""
    role: Role


@router.get("/users", response_model=list[User])
async def list_users(
    actor: Actor = Depends(get_actor),
    tracker: Tracker = Depends(get_tracker),
) -> list[User]:
    return await tracker.users.list_users(actor)


@router.put("/users/{user_id}/role", response_model=User)
async def change_user_role(
    user_id: str,
    body: RoleChange,
    actor: Actor = Depends(get_actor),
    tracker: Tracker = Depends(get_tracker),
) -> User:
    return await tracker.users.update_user_role(user_id, body.role, actor)


@router.delete("/users/{user_id}", status_code=204)
async def delete_user(
    user_id: str,
    actor: Actor = Depends(get_actor),
    tracker: Tracker = Depends(get_tracker),
) -> None:
    await tracker.users.delete_user(user_id, actor)


@router.get("/stats", response_model=AdminStats)
async def platform_stats(
    actor: Actor = Depends(get_actor),
    tracker: Tracker = Depends(get_tracker),
) -> AdminStats:
    """Platform-wide user, job and application counts."""
    return await tracker.users.admin_stats(actor)


@router.post("/seed", response_model=SeedReport)
async def seed_demo_data(
    actor: Actor = Depends(get_actor),
    tracker: Tracker = Depends(get_tracker),
) -> SeedReport:
    """Load the demo accounts and applications; existing accounts are skipped."""
    return await tracker.seed.seed_demo_data(actor)
