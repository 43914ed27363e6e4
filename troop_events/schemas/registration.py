# troop_events/schemas/registration.py
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

class RegistrationCreate(BaseModel):
    notes: Optional[str] = Field("", max_length=255)

class RegistrationRead(BaseModel):
    id: int
    event_id: int
    user_id: int
    registration_date: datetime
    status: str
    notes: Optional[str] = None

    class Config:
        from_attributes = True

class ParticipantRead(BaseModel):
    id: int
    user_id: int
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    registration_date: Optional[datetime] = None
    status: str
    notes: Optional[str] = None

    class Config:
        from_attributes = True

class RegistrationStatus(BaseModel):
    is_registered: bool
