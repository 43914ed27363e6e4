# -*- coding: utf-8 -*-
"""
Participant registration and cancellation.

The capacity check and the insert run in one transaction with the event row
locked, so two concurrent registrations cannot both take the last place.
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from troop_events.database import atomic
from troop_events.exceptions import (
    AlreadyRegistered, CapacityExceeded, EventAlreadyStarted, EventNotFound,
    RegistrationNotFound, UserNotFound,
)
from troop_events.models.event import Event
from troop_events.models.registration import Registration, REGISTERED, CANCELLED
from troop_events.models.user import User
from troop_events.services.capacity import can_register


class RegistrationService:

    def __init__(self, db: Session):
        self.db = db

    def register(self, event_id: int, user_id: int, notes: str = "", now: Optional[datetime] = None) -> Registration:
        with atomic(self.db):
            # FOR UPDATE on PostgreSQL/MySQL; SQLite already holds the write lock
            db_event = self.db.query(Event).filter(Event.id == event_id).with_for_update().first()
            if db_event is None:
                raise EventNotFound()

            if self.db.query(User.id).filter(User.id == user_id).first() is None:
                raise UserNotFound()

            if self._active(event_id, user_id) is not None:
                logging.warning(f"User {user_id} is already registered for event {event_id}")
                raise AlreadyRegistered()

            if db_event.has_started(now):
                raise EventAlreadyStarted()

            if not can_register(db_event, self.active_count(event_id)):
                logging.warning(f"Event {event_id} is full ({db_event.max_participants} places)")
                raise CapacityExceeded()

            registration = Registration(
                event_id=event_id,
                user_id=user_id,
                notes=notes or "",
                status=REGISTERED,
                registration_date=now or datetime.utcnow(),
            )
            self.db.add(registration)
            try:
                self.db.flush()
            except IntegrityError:
                # Partial unique index caught a registration committed meanwhile
                raise AlreadyRegistered()

        logging.info(f"User {user_id} registered for event {event_id}")
        return registration

    def cancel(self, event_id: int, user_id: int) -> Registration:
        """Marks the active registration as cancelled. The row is kept."""
        with atomic(self.db):
            if self.db.query(Event.id).filter(Event.id == event_id).first() is None:
                raise EventNotFound()

            registration = self._active(event_id, user_id)
            if registration is None:
                raise RegistrationNotFound()
            registration.status = CANCELLED

        logging.info(f"User {user_id} cancelled registration for event {event_id}")
        return registration

    def is_registered(self, event_id: int, user_id: int) -> bool:
        return self._active(event_id, user_id) is not None

    def active_count(self, event_id: int) -> int:
        return self.db.query(func.count(Registration.id)).filter(
            Registration.event_id == event_id,
            Registration.status != CANCELLED,
        ).scalar()

    def _active(self, event_id, user_id):
        return self.db.query(Registration).filter(
            Registration.event_id == event_id,
            Registration.user_id == user_id,
            Registration.status != CANCELLED,
        ).first()
