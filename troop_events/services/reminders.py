# -*- coding: utf-8 -*-
"""
Reminder Scheduler. Delivery happens outside the core: a poller reads the
pending reminders, sends them and acknowledges each with mark_reminder_sent.
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session, contains_eager

from troop_events.database import atomic
from troop_events.exceptions import EventNotFound, ReminderNotFound
from troop_events.models.event import Event
from troop_events.models.reminder import Reminder


class ReminderScheduler:

    def __init__(self, db: Session):
        self.db = db

    def create_reminder(self, event_id: int, reminder_type: str, reminder_time: datetime) -> Reminder:
        with atomic(self.db):
            if self.db.query(Event.id).filter(Event.id == event_id).first() is None:
                raise EventNotFound()
            reminder = Reminder(
                event_id=event_id,
                reminder_type=reminder_type,
                reminder_time=reminder_time,
                sent=False,
                sent_time=None,
            )
            self.db.add(reminder)

        logging.info(f"Reminder '{reminder_type}' for event {event_id} scheduled at {reminder_time}")
        return reminder

    def mark_reminder_sent(self, reminder_id: int, now: Optional[datetime] = None) -> Reminder:
        # Only ever moves sent from False to True; a second call refreshes sent_time
        with atomic(self.db):
            reminder = self.db.query(Reminder).filter(Reminder.id == reminder_id).first()
            if reminder is None:
                raise ReminderNotFound()
            reminder.sent = True
            reminder.sent_time = now or datetime.utcnow()

        logging.info(f"Reminder {reminder_id} marked as sent")
        return reminder

    def get_pending_reminders(self, now: Optional[datetime] = None) -> List[Reminder]:
        now = now or datetime.utcnow()
        return self.db.query(Reminder).join(Event, Reminder.event_id == Event.id).options(
            contains_eager(Reminder.event)
        ).filter(
            Reminder.sent == False,
            Reminder.reminder_time <= now,
        ).order_by(Reminder.reminder_time.asc(), Reminder.id.asc()).all()
