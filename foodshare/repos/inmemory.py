# foodshare/repos/inmemory.py
import asyncio
import itertools
import uuid
from contextlib import asynccontextmanager
from typing import Dict, List, Optional

from foodshare.core.errors import ConflictError, NotFoundError
from foodshare.models.common import utcnow
from foodshare.models.donation import Donation
from foodshare.models.notification import Notification
from foodshare.models.rating import Rating
from foodshare.models.task import VolunteerTask
from foodshare.models.user import User

def new_id() -> str:
    return uuid.uuid4().hex

class RecordLocks:
    """Per-record exclusive locks, acquired in sorted key order.

    A key's lock lives only while someone holds or waits for it.
    """

    def __init__(self):
        self._locks: Dict[str, asyncio.Lock] = {}
        self._users: Dict[str, int] = {}

    def _claim(self, key: str) -> asyncio.Lock:
        self._users[key] = self._users.get(key, 0) + 1
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        return lock

    def _unclaim(self, key: str):
        self._users[key] -= 1
        if not self._users[key]:
            del self._users[key]
            del self._locks[key]

    def __len__(self):
        return len(self._locks)

    @asynccontextmanager
    async def hold(self, *keys: str):
        claimed: List[str] = []
        held: List[asyncio.Lock] = []
        try:
            for key in sorted(set(k for k in keys if k)):
                lock = self._claim(key)
                claimed.append(key)
                await lock.acquire()
                held.append(lock)
            yield
        finally:
            for lock in reversed(held):
                lock.release()
            for key in claimed:
                self._unclaim(key)

class InMemoryRepo:
    def __init__(self):
        self.users: Dict[str, User] = {}
        self.users_by_email: Dict[str, str] = {}
        self.donations: Dict[str, Donation] = {}
        self.tasks: Dict[str, VolunteerTask] = {}
        self.ratings: Dict[str, Rating] = {}
        self.notifications: Dict[str, Notification] = {}
        self._task_seq = itertools.count(1)
        self._donation_seq = itertools.count(1)
        self.locks = RecordLocks()

    def _table(self, record) -> dict:
        if isinstance(record, Donation):
            return self.donations
        if isinstance(record, VolunteerTask):
            return self.tasks
        if isinstance(record, User):
            return self.users
        if isinstance(record, Rating):
            return self.ratings
        if isinstance(record, Notification):
            return self.notifications
        raise TypeError(f"No table for {type(record).__name__}")

    # Identity
    def next_donation_id(self) -> str:
        day = utcnow().strftime("%Y%m%d")
        return f"DN-{day}-{next(self._donation_seq):04d}"

    def next_task_id(self) -> str:
        return f"TK-{next(self._task_seq):06d}"

    # Writes
    async def commit(self, *records):
        """Apply a batch of new or changed records as one unit.

        Versioned records (donations, tasks, users) must carry the version
        they were read at; any mismatch rejects the whole batch before
        anything is written.
        """
        staged = []
        for rec in records:
            table = self._table(rec)
            current = table.get(rec.id)
            if hasattr(rec, "version"):
                if current is not None and current.version != rec.version:
                    raise ConflictError(
                        f"{type(rec).__name__} {rec.id} changed (version {current.version}, got {rec.version})"
                    )
                if current is not None:
                    rec = rec.model_copy(update={"version": rec.version + 1})
            staged.append((table, rec))
        for table, rec in staged:
            table[rec.id] = rec
        return [rec for _, rec in staged]

    # Users
    async def create_user(self, user: User) -> User:
        if user.email in self.users_by_email:
            raise ValueError("Email exists")
        self.users[user.id] = user
        self.users_by_email[user.email] = user.id
        return user

    async def get_user(self, user_id: str) -> Optional[User]:
        return self.users.get(user_id)

    async def require_user(self, user_id: str) -> User:
        user = self.users.get(user_id)
        if not user:
            raise NotFoundError(f"User {user_id} not found")
        return user

    async def find_user_by_email(self, email: str) -> Optional[User]:
        uid = self.users_by_email.get(email)
        return self.users.get(uid) if uid else None

    async def list_users(self, role: Optional[str] = None) -> List[User]:
        return [u for u in self.users.values() if role is None or u.role == role]

    # Donations
    async def get_donation(self, donation_id: str) -> Optional[Donation]:
        return self.donations.get(donation_id)

    async def list_donations(self, status: Optional[str] = None) -> List[Donation]:
        return [d for d in self.donations.values() if status is None or d.status == status]

    async def donations_by_donor(self, donor_id: str) -> List[Donation]:
        return [d for d in self.donations.values() if d.donor_id == donor_id]

    async def donations_by_ngo(self, ngo_id: str) -> List[Donation]:
        return [d for d in self.donations.values() if d.matched_ngo_id == ngo_id]

    # Tasks
    async def get_task(self, task_id: str) -> Optional[VolunteerTask]:
        return self.tasks.get(task_id)

    async def list_tasks(self, status: Optional[str] = None) -> List[VolunteerTask]:
        return [t for t in self.tasks.values() if status is None or t.status == status]

    async def tasks_by_volunteer(self, volunteer_id: str) -> List[VolunteerTask]:
        return [t for t in self.tasks.values() if t.volunteer_id == volunteer_id]

    async def tasks_by_donation(self, donation_id: str) -> List[VolunteerTask]:
        return [t for t in self.tasks.values() if t.donation_id == donation_id]

    # Ratings
    async def ratings_by_donation(self, donation_id: str) -> List[Rating]:
        return [r for r in self.ratings.values() if r.donation_id == donation_id]

    # Notifications
    async def get_notification(self, notification_id: str) -> Optional[Notification]:
        return self.notifications.get(notification_id)

    async def notifications_by_user(self, user_id: str) -> List[Notification]:
        return [n for n in self.notifications.values() if n.recipient_id == user_id]

    # Stats
    async def count_donations(self) -> int: return len(self.donations)
    async def count_delivered(self) -> int:
        return sum(1 for d in self.donations.values() if d.status == "delivered")
