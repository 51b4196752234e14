from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from foodshare.models.common import utcnow

class Notification(BaseModel):
    id: str
    recipient_id: str
    type: str
    title: str
    message: str
    related_donation_id: Optional[str] = None
    related_task_id: Optional[str] = None
    related_user_id: Optional[str] = None
    is_read: bool = False
    created_at: datetime = Field(default_factory=utcnow)
