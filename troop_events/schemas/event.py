# troop_events/schemas/event.py
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List
from datetime import date, time, datetime
from .user import CreatorRead, BadgeRead
from .registration import ParticipantRead
from .helper import EventHelperRead

ROLES = ("public", "helper", "leader", "admin")

class EventBase(BaseModel):
    title: str = Field(..., max_length=150)
    description: Optional[str] = ""
    location_name: Optional[str] = Field("", max_length=150)
    location_address: Optional[str] = Field("", max_length=255)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    start_date: date
    end_date: Optional[date] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    event_type: Optional[str] = Field("Meeting", max_length=50)
    required_helpers: int = Field(0, ge=0)
    max_participants: int = Field(0, ge=0)
    notes: Optional[str] = ""
    equipment: Optional[str] = ""
    cost: Optional[float] = Field(None, ge=0)
    public_visible: bool = True
    leaders_only_visible: bool = False
    helpers_only_visible: bool = False

class EventCreate(EventBase):
    badge_ids: List[int] = []

class EventUpdate(BaseModel):
    title: Optional[str] = Field(None, max_length=150)
    description: Optional[str] = None
    location_name: Optional[str] = Field(None, max_length=150)
    location_address: Optional[str] = Field(None, max_length=255)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    event_type: Optional[str] = Field(None, max_length=50)
    required_helpers: Optional[int] = Field(None, ge=0)
    max_participants: Optional[int] = Field(None, ge=0)
    notes: Optional[str] = None
    equipment: Optional[str] = None
    cost: Optional[float] = Field(None, ge=0)
    public_visible: Optional[bool] = None
    leaders_only_visible: Optional[bool] = None
    helpers_only_visible: Optional[bool] = None
    # None keeps the current badge links, a list replaces them
    badge_ids: Optional[List[int]] = None

class EventSummary(EventBase):
    id: int
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None
    creator: Optional[CreatorRead] = None
    badge_count: int = 0
    helper_count: int = 0
    participant_count: int = 0

    class Config:
        from_attributes = True

class EventRead(EventBase):
    id: int
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None
    creator: Optional[CreatorRead] = None
    badges: List[BadgeRead] = []
    helpers: List[EventHelperRead] = []
    participants: List[ParticipantRead] = []

    class Config:
        from_attributes = True

class EventFilters(BaseModel):
    """Filters accepted by the event listing. Unknown keys are rejected."""
    upcoming: bool = False
    past: bool = False
    event_type: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    created_by: Optional[int] = None
    badge_id: Optional[int] = None
    user_role: Optional[str] = None

    @field_validator("user_role")
    @classmethod
    def known_role(cls, v):
        if v is not None and v not in ROLES:
            raise ValueError(f"unknown role '{v}'")
        return v

    @model_validator(mode="after")
    def not_both_upcoming_and_past(self):
        if self.upcoming and self.past:
            raise ValueError("upcoming and past cannot be combined")
        return self

    class Config:
        extra = "forbid"

class HelperEventRead(BaseModel):
    confirmed: bool
    event: EventSummary

    class Config:
        from_attributes = True
