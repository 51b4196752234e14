# foodshare/services/directory.py
import logging
from typing import List

from foodshare.core.errors import NotFoundError
from foodshare.core.guards import ensure_role
from foodshare.models.user import User
from foodshare.repos.inmemory import InMemoryRepo
from foodshare.services.notifications import Event, NotificationCenter

logger = logging.getLogger(__name__)

class UserDirectory:
    """Admin review of newly registered accounts.

    Unverified NGOs never hear about new donations and unverified volunteers
    are never assigned, so verification is what lets an account take part.
    """

    def __init__(self, repo: InMemoryRepo, notifier: NotificationCenter):
        self.repo = repo
        self.notifier = notifier

    async def _admin(self, admin_id: str) -> User:
        admin = await self.repo.require_user(admin_id)
        ensure_role(admin, "admin")
        return admin

    async def pending_users(self, admin_id: str) -> List[User]:
        await self._admin(admin_id)
        users = [u for u in await self.repo.list_users() if not u.is_verified and u.role != "admin"]
        return sorted(users, key=lambda u: (u.created_at, u.id))

    async def verify_user(self, admin_id: str, user_id: str) -> User:
        await self._admin(admin_id)
        async with self.repo.locks.hold(user_id):
            user = await self.repo.get_user(user_id)
            if not user:
                raise NotFoundError("User not found")
            if user.is_verified:
                return user
            (user,) = await self.repo.commit(user.model_copy(update={"is_verified": True}))

        logger.info("User %s (%s) verified by admin %s", user.id, user.role, admin_id)
        await self.notifier.publish([
            Event(type="AccountVerified", recipient_id=user.id, actor_id=admin_id),
        ])
        return user
