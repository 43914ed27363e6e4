# -*- coding: utf-8 -*-
"""
Attendance Tracker: check-in / check-out per participant.
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import update
from sqlalchemy.orm import Session, joinedload

from troop_events.database import atomic, upsert
from troop_events.exceptions import EventNotFound, RegistrationCancelled, UserNotFound
from troop_events.models.attendance import AttendanceRecord
from troop_events.models.event import Event
from troop_events.models.registration import Registration, ATTENDED, CANCELLED
from troop_events.models.user import User


class AttendanceTracker:

    def __init__(self, db: Session):
        self.db = db

    def record_attendance(self, event_id: int, user_id: int, check_in_time: Optional[datetime] = None) -> AttendanceRecord:
        """
        Records (or re-records) a check-in and marks the registration attended.

        A user whose only registration was cancelled is refused; a user with
        no registration at all is accepted as a walk-in.
        """
        check_in_time = check_in_time or datetime.utcnow()

        with atomic(self.db):
            self._require_event(event_id)
            if self.db.query(User.id).filter(User.id == user_id).first() is None:
                raise UserNotFound()

            registrations = self.db.query(Registration).filter(
                Registration.event_id == event_id,
                Registration.user_id == user_id,
            ).all()
            active = [r for r in registrations if r.status != CANCELLED]
            if registrations and not active:
                raise RegistrationCancelled()

            upsert(
                self.db, AttendanceRecord,
                {"event_id": event_id, "user_id": user_id, "check_in_time": check_in_time},
                conflict_columns=("event_id", "user_id"),
                update_columns=("check_in_time",),
            )
            for registration in active:
                registration.status = ATTENDED

        logging.info(f"Attendance recorded for user {user_id} at event {event_id}")
        return self._record(event_id, user_id)

    def record_check_out(self, event_id: int, user_id: int, check_out_time: Optional[datetime] = None) -> bool:
        """
        Sets the check-out time. Without a prior check-in nothing changes and
        False is returned; that is not an error.
        """
        with atomic(self.db):
            self._require_event(event_id)
            result = self.db.execute(
                update(AttendanceRecord)
                .where(AttendanceRecord.event_id == event_id, AttendanceRecord.user_id == user_id)
                .values(check_out_time=check_out_time or datetime.utcnow())
                .execution_options(synchronize_session=False)
            )
            updated = bool(result.rowcount)

        if updated:
            logging.info(f"Check-out recorded for user {user_id} at event {event_id}")
        return updated

    def get_attendance(self, event_id: int) -> List[AttendanceRecord]:
        self._require_event(event_id)
        return self.db.query(AttendanceRecord).options(joinedload(AttendanceRecord.user)).filter(
            AttendanceRecord.event_id == event_id
        ).order_by(AttendanceRecord.check_in_time.asc(), AttendanceRecord.id.asc()).all()

    def _record(self, event_id, user_id):
        return self.db.query(AttendanceRecord).options(joinedload(AttendanceRecord.user)).filter(
            AttendanceRecord.event_id == event_id,
            AttendanceRecord.user_id == user_id,
        ).one()

    def _require_event(self, event_id):
        if self.db.query(Event.id).filter(Event.id == event_id).first() is None:
            raise EventNotFound()
