# troop_events/routes/reminders_fastapi.py
from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from troop_events.auth import Identity, get_leader_or_admin
from troop_events.database import get_db
from troop_events.schemas.reminder import PendingReminderRead, ReminderCreate, ReminderRead
from troop_events.services.reminders import ReminderScheduler

router = APIRouter(
    tags=["Reminders"],
)


@router.get("/reminders/pending", response_model=List[PendingReminderRead])
def read_pending_reminders(identity: Identity = Depends(get_leader_or_admin), db: Session = Depends(get_db)):
    return ReminderScheduler(db).get_pending_reminders()


@router.post("/reminders/{reminder_id}/sent", response_model=ReminderRead)
def mark_reminder_sent(reminder_id: int, identity: Identity = Depends(get_leader_or_admin), db: Session = Depends(get_db)):
    return ReminderScheduler(db).mark_reminder_sent(reminder_id)


@router.post("/{event_id}/reminders", response_model=ReminderRead, status_code=status.HTTP_201_CREATED)
def create_reminder(event_id: int, reminder: ReminderCreate, identity: Identity = Depends(get_leader_or_admin), db: Session = Depends(get_db)):
    return ReminderScheduler(db).create_reminder(event_id, reminder.reminder_type, reminder.reminder_time)
