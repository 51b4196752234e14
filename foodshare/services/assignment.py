# foodshare/services/assignment.py
import logging
from typing import List, Literal, Optional, Union
from pydantic import BaseModel

from foodshare.models.user import User
from foodshare.repos.inmemory import InMemoryRepo

logger = logging.getLogger(__name__)

class Assigned(BaseModel):
    kind: Literal["assigned"] = "assigned"
    volunteer_id: str

class Unassigned(BaseModel):
    kind: Literal["unassigned"] = "unassigned"
    reason: str

Assignment = Union[Assigned, Unassigned]

def is_eligible(user: User) -> bool:
    return user.role == "volunteer" and user.is_verified and user.is_active

def candidates(users: List[User], exclude_id: Optional[str] = None) -> List[User]:
    """
    Verified, active volunteers in a stable order: earliest created first,
    lowest id on ties.
    """
    pool = [u for u in users if is_eligible(u) and u.id != exclude_id]
    return sorted(pool, key=lambda u: (u.created_at, u.id))

class AssignmentPolicy:
    """First eligible volunteer wins; no load, distance or capacity weighting."""

    def __init__(self, repo: InMemoryRepo):
        self.repo = repo

    async def choose(self, exclude_id: Optional[str] = None) -> Assignment:
        pool = candidates(await self.repo.list_users("volunteer"), exclude_id)
        if not pool:
            logger.warning("No volunteer available (excluding %s)", exclude_id)
            return Unassigned(reason="no verified, active volunteer available")
        return Assigned(volunteer_id=pool[0].id)

    async def still_eligible(self, volunteer_id: str) -> bool:
        user = await self.repo.get_user(volunteer_id)
        return bool(user and is_eligible(user))
