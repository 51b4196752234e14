import logging
from typing import Iterable, List, Literal, Optional
from pydantic import BaseModel, Field

from foodshare.core.errors import NotFoundError
from foodshare.models.common import utcnow
from foodshare.models.notification import Notification
from foodshare.repos.inmemory import InMemoryRepo, new_id

logger = logging.getLogger(__name__)

EventType = Literal[
    "DonationAccepted", "TaskAssigned", "TaskAccepted",
    "DeliveryCompleted", "DonationRated", "NewDonationAvailable",
    "AccountVerified",
]

Audience = Literal["donor", "ngo", "volunteer"]

class Event(BaseModel):
    type: EventType
    recipient_id: str
    donation_id: Optional[str] = None
    task_id: Optional[str] = None
    actor_id: Optional[str] = None
    audience: Optional[Audience] = None
    data: dict = Field(default_factory=dict)

# (notification type, title, message); message may use keys from Event.data.
# Keys are an event type, or (event type, audience) where one role reads it differently.
TEMPLATES = {
    "DonationAccepted": (
        "donation_accepted", "Donation Accepted",
        "Your donation has been accepted by an NGO",
    ),
    "TaskAssigned": (
        "task_assigned", "New Task Assigned",
        "You have been assigned a new delivery task",
    ),
    "TaskAccepted": (
        "task_accepted", "Delivery Driver Assigned",
        "A delivery driver has accepted your donation and will pick it up soon. "
        "Estimated pickup time: {estimated_time} minutes",
    ),
    ("TaskAccepted", "ngo"): (
        "task_accepted", "Driver Assigned for Delivery",
        "A delivery driver has accepted the task. "
        "Food will be delivered in approximately {estimated_time} minutes.",
    ),
    "DeliveryCompleted": (
        "delivery_completed", "Delivery Completed",
        "The donation has been delivered",
    ),
    "DonationRated": (
        "donation_rated", "Donation Rated",
        "An NGO rated your donation {rating} stars",
    ),
    "NewDonationAvailable": (
        "new_donation", "New Donation Available",
        "A new {category} donation is available in your area",
    ),
    "AccountVerified": (
        "account_verified", "Account Verified",
        "Your account has been verified. You can now access the platform.",
    ),
}

def render(event: Event) -> Notification:
    kind, title, message = TEMPLATES.get((event.type, event.audience)) or TEMPLATES[event.type]
    try:
        message = message.format(**event.data)
    except KeyError:
        logger.debug("Missing template data for %s: %s", event.type, event.data)
    return Notification(
        id=new_id(),
        recipient_id=event.recipient_id,
        type=kind,
        title=title,
        message=message,
        related_donation_id=event.donation_id,
        related_task_id=event.task_id,
        related_user_id=event.actor_id,
        created_at=utcnow(),
    )

class NotificationCenter:
    """Consumes lifecycle events and keeps a per-user inbox."""

    def __init__(self, repo: InMemoryRepo):
        self.repo = repo

    async def publish(self, events: Iterable[Event]) -> List[Notification]:
        out = []
        for evt in events:
            note = render(evt)
            await self.repo.commit(note)
            logger.info("Event %s -> user %s (donation=%s task=%s)",
                        evt.type, evt.recipient_id, evt.donation_id, evt.task_id)
            out.append(note)
        return out

    async def list_for_user(self, user_id: str) -> List[Notification]:
        # reversed insertion order breaks timestamp ties toward the newest
        notes = list(reversed(await self.repo.notifications_by_user(user_id)))
        return sorted(notes, key=lambda n: n.created_at, reverse=True)

    async def mark_as_read(self, notification_id: str) -> Notification:
        note = await self.repo.get_notification(notification_id)
        if not note:
            raise NotFoundError("Notification not found")
        if note.is_read:
            return note
        (note,) = await self.repo.commit(note.model_copy(update={"is_read": True}))
        return note
