"""Request dependencies shared by the routers.

Authentication happens upstream: the gateway forwards the verified identity
as ``X-Actor-Id`` / ``X-Actor-Role`` headers and this layer trusts them.
"""

from fastapi import Header

from jobtracker.models.actor import Actor
from jobtracker.models.enums import Role


async def get_actor(
    x_actor_id: str = Header(..., min_length=1, description="Authenticated user id"),
    x_actor_role: Role = Header(..., description="Role of the authenticated user"),
) -> Actor:
    """Build the acting identity from the forwarded headers."""
    return Actor(id=x_actor_id, role=x_actor_role)
