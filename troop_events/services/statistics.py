# -*- coding: utf-8 -*-
"""
Statistics Aggregator: read-only rollups for the leaders' dashboard. Computed
fresh on each call.
"""

from collections import Counter
from datetime import date, datetime
from typing import Optional

from dateutil.relativedelta import relativedelta
from sqlalchemy import func
from sqlalchemy.orm import Session

from troop_events.models.event import Event
from troop_events.models.helper import HelperAssignment
from troop_events.models.registration import Registration, CANCELLED

TOP_N = 5


class StatisticsAggregator:

    def __init__(self, db: Session):
        self.db = db

    def get_statistics(self, today: Optional[date] = None) -> dict:
        today = today or datetime.utcnow().date()

        total = self.db.query(func.count(Event.id)).scalar()
        upcoming = self.db.query(func.count(Event.id)).filter(Event.start_date >= today).scalar()
        total_participants = self.db.query(func.count(Registration.id)).filter(
            Registration.status != CANCELLED
        ).scalar()

        return {
            "total": total,
            "upcoming": upcoming,
            "total_participants": total_participants,
            "by_type": self._by_type(),
            "by_month": self._by_month(today),
            "needing_helpers": self._needing_helpers(today),
            "popular_events": self._popular_events(),
        }

    def _by_type(self):
        count = func.count(Event.id).label("count")
        rows = self.db.query(Event.event_type, count).group_by(Event.event_type).order_by(count.desc(), Event.event_type).all()
        return [{"event_type": row.event_type, "count": row.count} for row in rows]

    def _by_month(self, today):
        """Events per (year, month) starting from twelve months ago."""
        since = today - relativedelta(months=12)
        months = Counter(
            (row.start_date.year, row.start_date.month)
            for row in self.db.query(Event.start_date).filter(Event.start_date >= since)
        )
        return [{"year": year, "month": month, "count": months[(year, month)]} for year, month in sorted(months)]

    def _needing_helpers(self, today):
        current = func.count(HelperAssignment.id).label("current_helpers")
        rows = self.db.query(
            Event.id, Event.title, Event.start_date, Event.start_time, Event.required_helpers, current,
        ).outerjoin(
            HelperAssignment, HelperAssignment.event_id == Event.id
        ).filter(
            Event.start_date >= today
        ).group_by(
            Event.id, Event.title, Event.start_date, Event.start_time, Event.required_helpers
        ).having(
            current < Event.required_helpers
        ).order_by(
            Event.start_date.asc(), Event.start_time.asc().nulls_first(), Event.id.asc()
        ).limit(TOP_N).all()

        return [
            {
                "id": row.id,
                "title": row.title,
                "start_date": row.start_date,
                "required_helpers": row.required_helpers,
                "current_helpers": row.current_helpers,
                "needed_helpers": row.required_helpers - row.current_helpers,
            }
            for row in rows
        ]

    def _popular_events(self):
        participants = func.count(Registration.id).label("participant_count")
        rows = self.db.query(Event.id, Event.title, participants).join(
            Registration, Registration.event_id == Event.id
        ).filter(
            Registration.status != CANCELLED
        ).group_by(Event.id, Event.title).order_by(participants.desc(), Event.id.asc()).limit(TOP_N).all()

        return [{"id": row.id, "title": row.title, "participant_count": row.participant_count} for row in rows]
