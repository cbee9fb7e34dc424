"""Identity on whose behalf a business operation runs.

Supplied by the external authentication collaborator; the core trusts it.
"""

from pydantic import BaseModel, ConfigDict

from jobtracker.models.enums import Role


class Actor(BaseModel):
    """Authenticated caller: user id plus role."""
    model_config = ConfigDict(frozen=True)

    id: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role is Role.admin
