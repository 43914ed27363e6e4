# -*- coding: utf-8 -*-
"""
Event Store: owns the Event aggregate and its sub-collections (badge links,
helper assignments, registrations, attendance, reminders).

Every write runs inside one transaction; a failure in any step rolls back the
whole operation.
"""

import logging
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import exists, or_
from sqlalchemy.orm import Session, joinedload, selectinload

from troop_events.database import atomic
from troop_events.exceptions import EventNotFound, InvalidTimeWindow
from troop_events.models.badge import EventBadge
from troop_events.models.event import Event
from troop_events.models.helper import Helper, HelperAssignment
from troop_events.models.registration import Registration
from troop_events.models.attendance import AttendanceRecord
from troop_events.models.reminder import Reminder
from troop_events.schemas.event import EventFilters

# Values written when the caller leaves a field empty
FIELD_DEFAULTS = {
    "description": "",
    "location_name": "",
    "location_address": "",
    "event_type": "Meeting",
    "required_helpers": 0,
    "max_participants": 0,
    "notes": "",
    "equipment": "",
    "public_visible": True,
    "leaders_only_visible": False,
    "helpers_only_visible": False,
}

REQUIRED_FIELDS = ("title", "start_date")

# Children first, the event row last
OWNED_ROWS = (EventBadge, HelperAssignment, Registration, AttendanceRecord, Reminder)


def visibility_clause(role):
    if role == "public":
        return Event.public_visible == True
    if role == "helper":
        return or_(Event.public_visible == True, Event.helpers_only_visible == True)
    if role in ("leader", "admin"):
        return or_(Event.public_visible == True, Event.leaders_only_visible == True)
    return None


def can_view(event, role):
    if role == "public" and not event.public_visible:
        return False
    if role == "helper" and not event.public_visible and not event.helpers_only_visible:
        return False
    if role not in ("leader", "admin") and event.leaders_only_visible:
        return False
    return True


def check_time_window(start_time, end_time):
    if start_time is not None and end_time is not None and end_time <= start_time:
        raise InvalidTimeWindow()


class EventStore:

    def __init__(self, db: Session):
        self.db = db

    # --- writes ---

    def create(self, event_data: dict, badge_ids: Optional[List[int]] = None, created_by: Optional[int] = None) -> Event:
        """
        Inserts the event and its badge links as one unit. An unknown badge id
        aborts the whole insert.
        """
        fields = dict(event_data)
        for key, default in FIELD_DEFAULTS.items():
            if fields.get(key) is None:
                fields[key] = default
        check_time_window(fields.get("start_time"), fields.get("end_time"))

        with atomic(self.db):
            db_event = Event(**fields, created_by=created_by)
            self.db.add(db_event)
            # Flush to get the id before linking badges
            self.db.flush()
            self._link_badges(db_event.id, badge_ids or [])

        logging.info(f"Event {db_event.id} '{db_event.title}' created by user {created_by}")
        return self.get_by_id(db_event.id)

    def update(self, event_id: int, event_data: dict, badge_ids: Optional[List[int]] = None) -> Event:
        """
        Updates scalar fields (last write wins). When badge_ids is given the
        badge links are replaced in the same transaction.
        """
        with atomic(self.db):
            db_event = self.db.query(Event).filter(Event.id == event_id).first()
            if db_event is None:
                raise EventNotFound()

            for key, value in event_data.items():
                if value is None:
                    if key in REQUIRED_FIELDS:
                        continue
                    value = FIELD_DEFAULTS.get(key)
                setattr(db_event, key, value)
            check_time_window(db_event.start_time, db_event.end_time)

            if badge_ids is not None:
                self.db.query(EventBadge).filter(EventBadge.event_id == event_id).delete(synchronize_session=False)
                self._link_badges(event_id, badge_ids)

        logging.info(f"Event {event_id} updated")
        return self.get_by_id(event_id)

    def delete(self, event_id: int) -> bool:
        """
        Removes the event and everything it owns. Returns False when the event
        does not exist; any failure midway rolls back every row.
        """
        with atomic(self.db):
            found = self.db.query(Event.id).filter(Event.id == event_id).first()
            if found is None:
                return False
            for model in OWNED_ROWS:
                self._purge(model, event_id)
            self.db.query(Event).filter(Event.id == event_id).delete()

        logging.info(f"Event {event_id} deleted with all related records")
        return True

    def _link_badges(self, event_id, badge_ids):
        # dict.fromkeys keeps the caller's order and drops repeats
        self.db.add_all([EventBadge(event_id=event_id, badge_id=badge_id) for badge_id in dict.fromkeys(badge_ids)])
        self.db.flush()

    def _purge(self, model, event_id):
        self.db.query(model).filter(model.event_id == event_id).delete(synchronize_session=False)

    # --- reads ---

    def get_by_id(self, event_id: int) -> Optional[Event]:
        return self.db.query(Event).options(
            joinedload(Event.creator),
            selectinload(Event.badges),
            selectinload(Event.helper_assignments).joinedload(HelperAssignment.helper).joinedload(Helper.user),
            selectinload(Event.registrations).joinedload(Registration.user),
        ).filter(Event.id == event_id).first()

    def get_all(self, filters: Optional[EventFilters] = None, today: Optional[date] = None) -> List[Event]:
        """Lists events matching every given filter, soonest first."""
        filters = filters or EventFilters()
        today = today or datetime.utcnow().date()

        query = self.db.query(Event).options(
            joinedload(Event.creator),
            selectinload(Event.badges),
            selectinload(Event.helper_assignments),
            selectinload(Event.registrations),
        )

        if filters.upcoming:
            query = query.filter(Event.start_date >= today)
        if filters.past:
            query = query.filter(Event.start_date < today)
        if filters.event_type:
            query = query.filter(Event.event_type == filters.event_type)
        if filters.start_date:
            query = query.filter(Event.start_date >= filters.start_date)
        if filters.end_date:
            query = query.filter(Event.start_date <= filters.end_date)
        if filters.created_by is not None:
            query = query.filter(Event.created_by == filters.created_by)
        if filters.badge_id is not None:
            query = query.filter(
                exists().where(EventBadge.event_id == Event.id, EventBadge.badge_id == filters.badge_id)
            )

        clause = visibility_clause(filters.user_role)
        if clause is not None:
            query = query.filter(clause)

        return query.order_by(Event.start_date.asc(), Event.start_time.asc().nulls_first(), Event.id.asc()).all()

    def get_event_types(self) -> List[str]:
        rows = self.db.query(Event.event_type).filter(Event.public_visible == True).distinct().order_by(Event.event_type).all()
        return [row.event_type for row in rows]
