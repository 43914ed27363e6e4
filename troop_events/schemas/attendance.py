# troop_events/schemas/attendance.py
from pydantic import BaseModel
from typing import Optional
from datetime import datetime

class CheckIn(BaseModel):
    user_id: int
    check_in_time: Optional[datetime] = None

class CheckOut(BaseModel):
    user_id: int
    check_out_time: Optional[datetime] = None

class AttendanceRead(BaseModel):
    id: int
    event_id: int
    user_id: int
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    check_in_time: datetime
    check_out_time: Optional[datetime] = None
    notes: Optional[str] = None

    class Config:
        from_attributes = True
