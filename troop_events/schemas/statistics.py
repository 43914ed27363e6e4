# troop_events/schemas/statistics.py
from pydantic import BaseModel
from typing import List
from datetime import date

class TypeCount(BaseModel):
    event_type: str
    count: int

class MonthCount(BaseModel):
    year: int
    month: int
    count: int

class UnderstaffedEvent(BaseModel):
    id: int
    title: str
    start_date: date
    required_helpers: int
    current_helpers: int
    needed_helpers: int

class PopularEvent(BaseModel):
    id: int
    title: str
    participant_count: int

class StatisticsRead(BaseModel):
    total: int
    upcoming: int
    total_participants: int
    by_type: List[TypeCount]
    by_month: List[MonthCount]
    needing_helpers: List[UnderstaffedEvent]
    popular_events: List[PopularEvent]
