"""Request context passed explicitly to every workflow operation."""

from dataclasses import dataclass
from uuid import UUID

from backend.tripdesk.models.common import Role


@dataclass(frozen=True)
class RequestContext:
    """Identity and role of the acting session.

    Used to scope reads to the owner and to gate review decisions.
    """

    user_id: UUID
    role: Role = Role.agent

    @property
    def is_admin(self) -> bool:
        return self.role is Role.admin
