"""Message threads attached to applications.

Only the owning candidate and the attached recruiter post on a thread;
admins may read it.  Messages are never deleted and only their ``read``
flag ever changes.
"""

from __future__ import annotations

import logging

from jobtracker.core.errors import NotFound, PermissionDenied
from jobtracker.db.base import StorageAdapter
from jobtracker.models.actor import Actor
from jobtracker.models.enums import EntityKind
from jobtracker.models.message import Message, MessageCreate
from jobtracker.services.access import is_thread_party
from jobtracker.services.applications import ApplicationService
from jobtracker.services.base import ServiceBase, as_utc

logger = logging.getLogger(__name__)


class MessageService(ServiceBase):
    """Send, list and acknowledge messages."""

    def __init__(self, adapter: StorageAdapter, applications: ApplicationService) -> None:
        super().__init__(adapter)
        self._applications = applications

    async def send_message(
        self, application_id: str, actor: Actor, payload: MessageCreate
    ) -> Message:
        application = await self._applications.get_application(application_id, actor)
        if not is_thread_party(actor, application):
            raise PermissionDenied("Only the candidate and recruiter may post here")

        row = await self._insert(
            EntityKind.messages,
            {
                "application_id": application_id,
                "sender_id": actor.id,
                "sender_role": actor.role.value,
                "body": payload.body,
                "read": False,
            },
        )
        logger.info(
            "message_sent",
            extra={"application_id": application_id, "sender_id": actor.id},
        )
        return Message.model_validate(row)

    async def list_messages(self, application_id: str, actor: Actor) -> list[Message]:
        """Return the thread, oldest message first."""
        await self._applications.get_application(application_id, actor)
        rows = await self._query(
            EntityKind.messages, {"application_id": application_id}
        )
        messages = [Message.model_validate(row) for row in rows]
        messages.sort(key=lambda m: as_utc(m.created_at))
        return messages

    async def mark_read(self, message_id: str, actor: Actor) -> Message:
        row = await self._get(EntityKind.messages, message_id)
        if row is None:
            raise NotFound("message", message_id)
        message = Message.model_validate(row)

        application = await self._applications.get_application(
            message.application_id, actor
        )
        if not is_thread_party(actor, application):
            raise PermissionDenied("Only thread participants may mark messages read")

        updated = await self._update(EntityKind.messages, message_id, {"read": True})
        if updated is None:
            raise NotFound("message", message_id)
        return Message.model_validate(updated)
