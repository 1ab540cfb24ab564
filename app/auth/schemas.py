from typing import FrozenSet
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from app.core.enums import ELEVATED_CAPABILITIES, ROLE_CAPABILITIES, Capability, Role


class AuthContext(BaseModel):
    """Authenticated requester as seen by the vacation engine.

    The engine never authenticates; it only checks capability membership.
    """

    model_config = ConfigDict(frozen=True)

    requester_id: UUID
    role: Role
    capabilities: FrozenSet[Capability]

    @classmethod
    def for_role(cls, requester_id: UUID, role: Role) -> "AuthContext":
        return cls(requester_id=requester_id, role=role, capabilities=ROLE_CAPABILITIES[role])

    @property
    def is_elevated(self) -> bool:
        """Admin or HR: may act on any employee's records."""
        return bool(self.capabilities & ELEVATED_CAPABILITIES)

    def can_act_for(self, employee_id: UUID) -> bool:
        return self.is_elevated or self.requester_id == employee_id
