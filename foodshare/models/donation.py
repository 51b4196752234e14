from datetime import datetime
from typing import List, Literal, Optional
from pydantic import BaseModel, Field, computed_field, field_validator

from foodshare.core.states import completion_for
from foodshare.models.common import Location, StatusEvent, as_utc, utcnow

DonationStatus = Literal["pending", "matched", "accepted", "in_transit", "delivered", "cancelled"]
Urgency = Literal["high", "medium", "low"]

class FoodDetails(BaseModel):
    category: str = Field(min_length=1)
    name: str = Field(min_length=1)
    quantity: float = Field(gt=0)
    unit: str = Field(min_length=1)
    preparation_time: Optional[datetime] = None
    expiry_time: datetime
    dietary_info: List[str] = []
    special_instructions: Optional[str] = None
    images: List[str] = []

    @field_validator("preparation_time", "expiry_time")
    @classmethod
    def _utc(cls, v):
        return as_utc(v) if v is not None else v

class DonationCreate(BaseModel):
    food_details: FoodDetails
    location: Location

class Donation(BaseModel):
    id: str
    donation_id: str
    donor_id: str
    food_details: FoodDetails
    location: Location
    status: DonationStatus = "pending"
    urgency_category: Urgency
    matched_ngo_id: Optional[str] = None
    assigned_volunteer_id: Optional[str] = None
    task_id: Optional[str] = None
    timeline: List[StatusEvent] = []
    cancellation_reason: Optional[str] = None
    version: int = 1
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @computed_field
    @property
    def completion_percentage(self) -> int:
        return completion_for(self.status)

    def with_status(self, status: str, by_user: Optional[str] = None, note: Optional[str] = None, **changes) -> "Donation":
        """Return a copy moved to ``status`` with one timeline entry appended.

        The receiver is left untouched so a failed commit never leaks a
        half-applied transition.
        """
        now = utcnow()
        timeline = list(self.timeline)
        if status != self.status:
            timeline.append(StatusEvent(
                status=status, timestamp=now, updated_by=by_user,
                note=note or f"Status changed to {status}",
            ))
        return self.model_copy(update={
            **changes, "status": status, "timeline": timeline, "updated_at": now,
        })
