"""User signup and profile endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from jobtracker.models.actor import Actor
from jobtracker.models.stats import ApplicationStats
from jobtracker.models.user import User, UserCreate, UserUpdate
from jobtracker.routers.deps import get_actor
from jobtracker.services.tracker import Tracker, get_tracker

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=User, status_code=201)
async def register_user(
    body: UserCreate,
    tracker: Tracker = Depends(get_tracker),
) -> User:
    """Create a candidate or recruiter account."""
    return await tracker.users.register(body)


@router.get("/me", response_model=User)
async def read_me(
    actor: Actor = Depends(get_actor),
    tracker: Tracker = Depends(get_tracker),
) -> User:
    return await tracker.users.get_user(actor.id, actor)


@router.get("/{user_id}", response_model=User)
async def read_user(
    user_id: str,
    actor: Actor = Depends(get_actor),
    tracker: Tracker = Depends(get_tracker),
) -> User:
    return await tracker.users.get_user(user_id, actor)


@router.patch("/{user_id}", response_model=User)
async def update_user(
    user_id: str,
    body: UserUpdate,
    actor: Actor = Depends(get_actor),
    tracker: Tracker = Depends(get_tracker),
) -> User:
    """Partial profile edit; only fields present in the body are applied."""
    return await tracker.users.update_profile(user_id, actor, body)


@router.get("/{user_id}/stats", response_model=ApplicationStats)
async def read_user_stats(
    user_id: str,
    actor: Actor = Depends(get_actor),
    tracker: Tracker = Depends(get_tracker),
) -> ApplicationStats:
    """Application statistics of one candidate (self or admin)."""
    return await tracker.applications.candidate_stats(actor, user_id)
