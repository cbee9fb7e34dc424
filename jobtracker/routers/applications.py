"""Application, history and message thread endpoints."""

from __future__ import annotations

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, Query

from jobtracker.models.actor import Actor
from jobtracker.models.application import (
    Application,
    ApplicationCreate,
    ApplicationFilters,
    ApplicationUpdate,
)
from jobtracker.models.enums import ApplicationStatus, ContractType
from jobtracker.models.history import ApplicationHistoryEntry
from jobtracker.models.message import Message, MessageCreate
from jobtracker.models.stats import ApplicationStats
from jobtracker.routers.deps import get_actor
from jobtracker.services.tracker import Tracker, get_tracker

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Applications
# ---------------------------------------------------------------------------

@router.get("", response_model=list[Application])
async def list_applications(
    status: ApplicationStatus | None = Query(default=None),
    contract_type: ContractType | None = Query(default=None),
    start_date: datetime | None = Query(default=None),
    end_date: datetime | None = Query(default=None),
    search_query: str | None = Query(
        default=None,
        description="Case-insensitive text matched against title and company",
    ),
    actor: Actor = Depends(get_actor),
    tracker: Tracker = Depends(get_tracker),
) -> list[Application]:
    filters = ApplicationFilters(
        status=status,
        contract_type=contract_type,
        start_date=start_date,
        end_date=end_date,
        search_query=search_query,
    )
    return await tracker.applications.list_applications(actor, filters)


@router.post("", response_model=Application, status_code=201)
async def create_application(
    body: ApplicationCreate,
    actor: Actor = Depends(get_actor),
    tracker: Tracker = Depends(get_tracker),
) -> Application:
    """Record an application entered by hand (optionally tied to a job)."""
    return await tracker.applications.create_application(actor, body)


@router.get("/stats", response_model=ApplicationStats)
async def read_my_stats(
    actor: Actor = Depends(get_actor),
    tracker: Tracker = Depends(get_tracker),
) -> ApplicationStats:
    return await tracker.applications.candidate_stats(actor)


@router.get("/{application_id}", response_model=Application)
async def read_application(
    application_id: str,
    actor: Actor = Depends(get_actor),
    tracker: Tracker = Depends(get_tracker),
) -> Application:
    return await tracker.applications.get_application(application_id, actor)


@router.patch("/{application_id}", response_model=Application)
async def update_application(
    application_id: str,
    body: ApplicationUpdate,
    actor: Actor = Depends(get_actor),
    tracker: Tracker = Depends(get_tracker),
) -> Application:
    """Edit an application.

    The history entry for a status change is written in the background and
    does not delay the response.
    """
    result = await tracker.applications.update_application(
        application_id, actor, body
    )
    return result.application


@router.delete("/{application_id}", status_code=204)
async def delete_application(
    application_id: str,
    actor: Actor = Depends(get_actor),
    tracker: Tracker = Depends(get_tracker),
) -> None:
    await tracker.applications.delete_application(application_id, actor)


@router.post("/{application_id}/follow-up", response_model=Application)
async def record_follow_up(
    application_id: str,
    actor: Actor = Depends(get_actor),
    tracker: Tracker = Depends(get_tracker),
) -> Application:
    return await tracker.applications.record_follow_up(application_id, actor)


@router.get(
    "/{application_id}/history", response_model=list[ApplicationHistoryEntry]
)
async def read_history(
    application_id: str,
    actor: Actor = Depends(get_actor),
    tracker: Tracker = Depends(get_tracker),
) -> list[ApplicationHistoryEntry]:
    """Status transitions, newest first."""
    return await tracker.applications.list_history(application_id, actor)


# ---------------------------------------------------------------------------
# Message threads
# ---------------------------------------------------------------------------

@router.get("/{application_id}/messages", response_model=list[Message])
async def list_messages(
    application_id: str,
    actor: Actor = Depends(get_actor),
    tracker: Tracker = Depends(get_tracker),
) -> list[Message]:
    return await tracker.messages.list_messages(application_id, actor)


@router.post(
    "/{application_id}/messages", response_model=Message, status_code=201
)
async def send_message(
    application_id: str,
    body: MessageCreate,
    actor: Actor = Depends(get_actor),
    tracker: Tracker = Depends(get_tracker),
) -> Message:
    return await tracker.messages.send_message(application_id, actor, body)


@router.post("/messages/{message_id}/read", response_model=Message)
async def mark_message_read(
    message_id: str,
    actor: Actor = Depends(get_actor),
    tracker: Tracker = Depends(get_tracker),
) -> Message:
    return await tracker.messages.mark_read(message_id, actor)
