from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, EmailStr, Field

from foodshare.models.common import Address, utcnow

Role = Literal["donor", "ngo", "volunteer", "admin"]

class BreakdownAverages(BaseModel):
    food_quality: float = 0.0
    packaging: float = 0.0
    accuracy: float = 0.0
    communication: float = 0.0
    count: int = 0

class DonorProfile(BaseModel):
    business_name: str = ""
    business_type: str = ""
    address: Optional[Address] = None
    rating: float = 0.0
    total_ratings: int = 0
    rating_breakdown: Optional[BreakdownAverages] = None

class NGOProfile(BaseModel):
    organization_name: str = ""
    registration_number: str = ""
    address: Optional[Address] = None
    capacity: int = 0

class VolunteerProfile(BaseModel):
    vehicle_type: str = ""
    completed_tasks: int = 0

class User(BaseModel):
    id: str
    full_name: str
    email: EmailStr
    role: Role
    phone: Optional[str] = None
    is_verified: bool = False
    is_active: bool = True
    donor_profile: Optional[DonorProfile] = None
    ngo_profile: Optional[NGOProfile] = None
    volunteer_profile: Optional[VolunteerProfile] = None
    version: int = 1
    created_at: datetime = Field(default_factory=utcnow)
