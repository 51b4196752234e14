from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, Field

from foodshare.models.common import TaskLocation, utcnow

TaskStatus = Literal["assigned", "accepted", "picked_up", "in_transit", "delivered", "cancelled"]

class VolunteerTask(BaseModel):
    id: str
    task_id: str
    donation_id: str
    volunteer_id: str
    donor_id: str
    ngo_id: str
    pickup_location: TaskLocation
    delivery_location: TaskLocation
    distance: Optional[str] = None
    estimated_time: Optional[int] = None
    status: TaskStatus = "assigned"
    pickup_time: Optional[datetime] = None
    delivery_time: Optional[datetime] = None
    version: int = 1
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
