"""
Tests for the attendance tracker.
"""

from datetime import datetime

import pytest

from troop_events.exceptions import EventNotFound, RegistrationCancelled, UserNotFound
from troop_events.models import AttendanceRecord, Registration
from troop_events.services.attendance import AttendanceTracker
from troop_events.services.registrations import RegistrationService


def test_recording_twice_keeps_one_row_with_latest_check_in(db, seed, make_event):
    event = make_event()
    tracker = AttendanceTracker(db)

    tracker.record_attendance(event.id, seed.scout_1.id, check_in_time=datetime(2026, 5, 1, 18, 0))
    record = tracker.record_attendance(event.id, seed.scout_1.id, check_in_time=datetime(2026, 5, 1, 18, 15))

    rows = db.query(AttendanceRecord).filter(AttendanceRecord.event_id == event.id).all()
    assert len(rows) == 1
    assert record.check_in_time == datetime(2026, 5, 1, 18, 15)


def test_check_in_marks_registration_attended(db, seed, make_event):
    event = make_event()
    RegistrationService(db).register(event.id, seed.scout_1.id)

    AttendanceTracker(db).record_attendance(event.id, seed.scout_1.id)

    registration = db.query(Registration).filter(Registration.event_id == event.id).one()
    assert registration.status == "attended"
    # Attended still holds a place
    assert RegistrationService(db).is_registered(event.id, seed.scout_1.id)


def test_cancelled_registration_cannot_check_in(db, seed, make_event):
    event = make_event()
    service = RegistrationService(db)
    service.register(event.id, seed.scout_1.id)
    service.cancel(event.id, seed.scout_1.id)

    with pytest.raises(RegistrationCancelled):
        AttendanceTracker(db).record_attendance(event.id, seed.scout_1.id)

    assert db.query(AttendanceRecord).count() == 0


def test_walk_in_without_registration(db, seed, make_event):
    event = make_event()

    record = AttendanceTracker(db).record_attendance(event.id, seed.scout_2.id)

    assert record.user_id == seed.scout_2.id
    assert record.username == "bagheera"
    assert db.query(Registration).count() == 0


def test_unknown_event_or_user(db, seed, make_event):
    event = make_event()
    tracker = AttendanceTracker(db)
    with pytest.raises(EventNotFound):
        tracker.record_attendance(404, seed.scout_1.id)
    with pytest.raises(UserNotFound):
        tracker.record_attendance(event.id, 404)


def test_check_out(db, seed, make_event):
    event = make_event()
    tracker = AttendanceTracker(db)

    assert tracker.record_check_out(event.id, seed.scout_1.id) is False

    tracker.record_attendance(event.id, seed.scout_1.id, check_in_time=datetime(2026, 5, 1, 18, 0))
    assert tracker.record_check_out(event.id, seed.scout_1.id, check_out_time=datetime(2026, 5, 1, 20, 5)) is True

    record = tracker.get_attendance(event.id)[0]
    db.refresh(record)
    assert record.check_out_time == datetime(2026, 5, 1, 20, 5)


def test_get_attendance_ordered_by_check_in(db, seed, make_event):
    event = make_event()
    tracker = AttendanceTracker(db)
    tracker.record_attendance(event.id, seed.scout_1.id, check_in_time=datetime(2026, 5, 1, 18, 20))
    tracker.record_attendance(event.id, seed.scout_2.id, check_in_time=datetime(2026, 5, 1, 18, 5))
    tracker.record_attendance(event.id, seed.scout_3.id, check_in_time=datetime(2026, 5, 1, 18, 10))

    names = [r.username for r in tracker.get_attendance(event.id)]

    assert names == ["bagheera", "rikki", "mowgli"]


def test_get_attendance_unknown_event(db, seed):
    with pytest.raises(EventNotFound):
        AttendanceTracker(db).get_attendance(404)
