from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, Field

from foodshare.models.common import utcnow

RatedType = Literal["donor", "ngo", "volunteer"]

class RatingBreakdown(BaseModel):
    """Detailed 1-10 quality scores, kept apart from the 1-5 star rating."""
    food_quality: int = Field(ge=1, le=10)
    packaging: int = Field(ge=1, le=10)
    accuracy: int = Field(ge=1, le=10)
    communication: int = Field(ge=1, le=10)

class RatingCreate(BaseModel):
    donation_id: str
    donor_id: str
    rating: int
    comment: Optional[str] = None
    breakdown: Optional[RatingBreakdown] = None

class Rating(BaseModel):
    id: str
    donation_id: str
    rated_by: str
    rated_to: str
    rated_type: RatedType = "donor"
    rating: int
    comment: Optional[str] = None
    breakdown: Optional[RatingBreakdown] = None
    created_at: datetime = Field(default_factory=utcnow)
