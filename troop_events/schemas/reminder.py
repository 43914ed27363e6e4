# troop_events/schemas/reminder.py
from pydantic import BaseModel, Field
from typing import Optional
from datetime import date, time, datetime

class ReminderCreate(BaseModel):
    reminder_type: str = Field(..., max_length=50)
    reminder_time: datetime

class ReminderRead(BaseModel):
    id: int
    event_id: int
    reminder_type: str
    reminder_time: datetime
    sent: bool
    sent_time: Optional[datetime] = None

    class Config:
        from_attributes = True

class PendingReminderRead(BaseModel):
    id: int
    event_id: int
    event_title: str
    event_date: date
    event_time: Optional[time] = None
    reminder_type: str
    reminder_time: datetime

    class Config:
        from_attributes = True
