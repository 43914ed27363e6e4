# -*- coding: utf-8 -*-
"""
Availability Resolver: which helpers are free for a time window, and helper
assignment management.

Windows are half-open, [start, end). Two windows that only touch at an edge
(10:00-12:00 and 12:00-14:00) do not conflict. An assigned event without a
start or end time blocks its whole day.
"""

import logging
from datetime import datetime, time, timedelta
from typing import List, Optional, Set

from sqlalchemy.orm import Session, joinedload

from troop_events.database import atomic, upsert
from troop_events.exceptions import (
    EventNotFound, HelperNotFound, HelperUnavailable, InvalidTimeWindow, NotAssigned,
)
from troop_events.models.event import Event
from troop_events.models.helper import Helper, HelperAssignment


def day_window(day):
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


def event_window(event):
    """Time span an event occupies on its start date."""
    if event.start_time is None or event.end_time is None:
        return day_window(event.start_date)
    return (
        datetime.combine(event.start_date, event.start_time),
        datetime.combine(event.start_date, event.end_time),
    )


def candidate_window(event_date, start_time, end_time):
    start = datetime.combine(event_date, start_time)
    end = datetime.combine(event_date, end_time)
    if end <= start:
        raise InvalidTimeWindow()
    return start, end


def windows_overlap(first, second):
    return first[0] < second[1] and first[1] > second[0]


class AvailabilityResolver:

    def __init__(self, db: Session):
        self.db = db

    # --- lookups ---

    def find_available_helpers(self, event_id: int, event_date, start_time, end_time) -> List[Helper]:
        """
        Helpers with no assignment to another event overlapping the window,
        and not already assigned to this event.
        """
        window = candidate_window(event_date, start_time, end_time)
        self._get_event(event_id)

        busy = self._busy_helper_ids(event_id, window)
        assigned_here = {
            row.helper_id for row in
            self.db.query(HelperAssignment.helper_id).filter(HelperAssignment.event_id == event_id)
        }

        helpers = self.db.query(Helper).options(joinedload(Helper.user)).order_by(Helper.id).all()
        return [h for h in helpers if h.id not in busy and h.id not in assigned_here]

    def is_helper_available(self, event_id: int, helper_id: int, event_date, start_time, end_time) -> bool:
        window = candidate_window(event_date, start_time, end_time)
        return helper_id not in self._busy_helper_ids(event_id, window, helper_id=helper_id)

    def is_helper_assigned(self, event_id: int, helper_id: int) -> bool:
        return self._assignment(event_id, helper_id) is not None

    def get_helper_events(self, helper_id: int, include_confirmed: bool = True, include_pending: bool = True) -> List[HelperAssignment]:
        query = self.db.query(HelperAssignment).join(Event, HelperAssignment.event_id == Event.id).options(
            joinedload(HelperAssignment.event).joinedload(Event.creator),
        ).filter(HelperAssignment.helper_id == helper_id)

        if include_confirmed and not include_pending:
            query = query.filter(HelperAssignment.confirmed == True)
        elif include_pending and not include_confirmed:
            query = query.filter(HelperAssignment.confirmed == False)

        return query.order_by(Event.start_date.asc(), Event.start_time.asc().nulls_first(), Event.id.asc()).all()

    # --- writes ---

    def assign_helper(self, event_id: int, helper_id: int, confirmed: bool = False, check_availability: bool = False) -> HelperAssignment:
        """
        Upserts the (event, helper) pair; re-assigning only updates `confirmed`.

        Without check_availability the caller is trusted to have looked up
        availability first. With it, the overlap check and the write share one
        transaction with the helper row locked.
        """
        with atomic(self.db):
            db_event = self._get_event(event_id)
            helper = self.db.query(Helper).filter(Helper.id == helper_id).with_for_update().first()
            if helper is None:
                raise HelperNotFound()

            if check_availability and helper_id in self._busy_helper_ids(event_id, event_window(db_event), helper_id=helper_id):
                logging.warning(f"Helper {helper_id} has an overlapping assignment, not assigned to event {event_id}")
                raise HelperUnavailable()

            upsert(
                self.db, HelperAssignment,
                {"event_id": event_id, "helper_id": helper_id, "confirmed": bool(confirmed)},
                conflict_columns=("event_id", "helper_id"),
                update_columns=("confirmed",),
            )

        logging.info(f"Helper {helper_id} assigned to event {event_id} (confirmed={bool(confirmed)})")
        return self._assignment(event_id, helper_id)

    def volunteer(self, event_id: int, user_id: int) -> HelperAssignment:
        """A helper offers themselves for an event; the assignment starts unconfirmed."""
        helper = self.db.query(Helper).filter(Helper.user_id == user_id).first()
        if helper is None:
            raise HelperNotFound("Helper profile not found for this user")
        return self.assign_helper(event_id, helper.id, confirmed=False, check_availability=True)

    def remove_helper(self, event_id: int, helper_id: int) -> bool:
        with atomic(self.db):
            self.db.query(HelperAssignment).filter(
                HelperAssignment.event_id == event_id,
                HelperAssignment.helper_id == helper_id,
            ).delete(synchronize_session=False)

        logging.info(f"Helper {helper_id} removed from event {event_id}")
        return True

    def update_confirmation(self, event_id: int, helper_id: int, confirmed: bool) -> bool:
        with atomic(self.db):
            assignment = self._assignment(event_id, helper_id)
            if assignment is None:
                raise NotAssigned()
            assignment.confirmed = bool(confirmed)

        logging.info(f"Helper {helper_id} {'confirmed' if confirmed else 'unconfirmed'} for event {event_id}")
        return True

    # --- internals ---

    def _get_event(self, event_id):
        db_event = self.db.query(Event).filter(Event.id == event_id).first()
        if db_event is None:
            raise EventNotFound()
        return db_event

    def _assignment(self, event_id, helper_id) -> Optional[HelperAssignment]:
        return self.db.query(HelperAssignment).filter(
            HelperAssignment.event_id == event_id,
            HelperAssignment.helper_id == helper_id,
        ).first()

    def _busy_helper_ids(self, event_id, window, helper_id=None) -> Set[int]:
        """Helpers holding an assignment to another event that overlaps the window."""
        query = self.db.query(HelperAssignment.helper_id, Event).join(
            Event, HelperAssignment.event_id == Event.id
        ).filter(
            Event.id != event_id,
            Event.start_date == window[0].date(),
        )
        if helper_id is not None:
            query = query.filter(HelperAssignment.helper_id == helper_id)

        return {hid for hid, other in query if windows_overlap(event_window(other), window)}
