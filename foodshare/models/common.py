from datetime import datetime, timezone
from typing import List, Optional
from pydantic import BaseModel, Field

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

def as_utc(value: datetime) -> datetime:
    # naive timestamps from clients are taken as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value

class Address(BaseModel):
    street: str
    city: str
    state: str = ""
    pincode: str = ""

class Location(BaseModel):
    address: Address
    coordinates: List[float] = Field(min_length=2, max_length=2)  # [lng, lat]

class TaskLocation(BaseModel):
    address: str
    coordinates: List[float] = [0.0, 0.0]

class StatusEvent(BaseModel):
    status: str
    timestamp: datetime
    updated_by: Optional[str] = None
    note: Optional[str] = None
