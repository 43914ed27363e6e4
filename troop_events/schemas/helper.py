# troop_events/schemas/helper.py
from pydantic import BaseModel
from typing import Optional

class HelperAssign(BaseModel):
    helper_id: int
    confirmed: bool = False
    check_availability: bool = True

class HelperConfirmation(BaseModel):
    confirmed: bool

class EventHelperRead(BaseModel):
    helper_id: int
    user_id: int
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    confirmed: bool

    class Config:
        from_attributes = True

class AvailableHelperRead(BaseModel):
    id: int
    user_id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None

    class Config:
        from_attributes = True
