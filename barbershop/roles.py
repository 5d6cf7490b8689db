# barbershop/roles.py

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .data import ADMIN_ROLE
from .errors import StoreError

logger = logging.getLogger(__name__)


class CapabilityState(str, Enum):
    unresolved = "unresolved"
    privileged = "privileged"
    default = "default"


@dataclass(frozen=True)
class Capability:
    """Outcome of an admin role lookup.

    Anything other than a completed lookup that found the role is treated
    as non-privileged, including a lookup that has not finished yet.
    """

    state: CapabilityState = CapabilityState.unresolved

    @property
    def is_privileged(self) -> bool:
        return self.state is CapabilityState.privileged

    @property
    def is_resolved(self) -> bool:
        return self.state is not CapabilityState.unresolved


UNRESOLVED = Capability(CapabilityState.unresolved)
PRIVILEGED = Capability(CapabilityState.privileged)
DEFAULT = Capability(CapabilityState.default)


@dataclass(frozen=True)
class Actor:
    id: Optional[int]
    email: Optional[str] = None
    capability: Capability = field(default=UNRESOLVED)

    @property
    def is_privileged(self) -> bool:
        return self.capability.is_privileged

    def owns(self, owner_id: Optional[int]) -> bool:
        return self.id is not None and owner_id == self.id


class RoleLookup:
    def __init__(self, store):
        self.store = store

    async def resolve(self, actor_id: Optional[int]) -> Capability:
        if actor_id is None:
            return DEFAULT
        try:
            rows = await self.store.query(
                "user_roles",
                {"user_id": actor_id, "role": ADMIN_ROLE},
                limit=1,
            )
        except StoreError:
            logger.warning("Role lookup failed for user %s, treating as non-admin", actor_id)
            return DEFAULT
        return PRIVILEGED if rows else DEFAULT

    async def is_privileged(self, actor_id: Optional[int]) -> bool:
        capability = await self.resolve(actor_id)
        return capability.is_privileged

    async def actor_for(self, user_id: int, email: Optional[str] = None) -> Actor:
        return Actor(id=user_id, email=email, capability=await self.resolve(user_id))
