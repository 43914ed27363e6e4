# troop_events/routes/dashboard_fastapi.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from troop_events.auth import Identity, get_leader_or_admin
from troop_events.database import get_db
from troop_events.schemas.statistics import StatisticsRead
from troop_events.services.statistics import StatisticsAggregator

router = APIRouter(
    tags=["Dashboard"],
)


@router.get("/statistics", response_model=StatisticsRead)
def read_statistics(identity: Identity = Depends(get_leader_or_admin), db: Session = Depends(get_db)):
    """
    Event totals, counts per type and per month, under-staffed upcoming events
    and the most registered events.
    """
    return StatisticsAggregator(db).get_statistics()
