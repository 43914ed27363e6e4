"""
Tests for the availability resolver and helper assignment management.
"""

from datetime import date, time

import pytest

from troop_events.exceptions import (
    EventNotFound, HelperNotFound, HelperUnavailable, InvalidTimeWindow, NotAssigned,
)
from troop_events.models import HelperAssignment
from troop_events.services.availability import (
    AvailabilityResolver, candidate_window, event_window, windows_overlap,
)

DAY = date(2025, 6, 1)


@pytest.fixture
def day_events(make_event):
    """Three events on one day: A 10-12, B 11-13, C 13-15."""
    return {
        "A": make_event(title="A", start_date=DAY, start_time=time(10, 0), end_time=time(12, 0)),
        "B": make_event(title="B", start_date=DAY, start_time=time(11, 0), end_time=time(13, 0)),
        "C": make_event(title="C", start_date=DAY, start_time=time(13, 0), end_time=time(15, 0)),
    }


def ids(helpers):
    return [h.id for h in helpers]


def test_windows_overlap_is_half_open():
    morning = candidate_window(DAY, time(10, 0), time(12, 0))
    assert windows_overlap(morning, candidate_window(DAY, time(11, 0), time(13, 0)))
    assert not windows_overlap(morning, candidate_window(DAY, time(12, 0), time(14, 0)))
    assert not windows_overlap(morning, candidate_window(DAY, time(8, 0), time(10, 0)))
    assert windows_overlap(morning, candidate_window(DAY, time(9, 0), time(17, 0)))


def test_candidate_window_rejects_empty_or_reversed():
    with pytest.raises(InvalidTimeWindow):
        candidate_window(DAY, time(12, 0), time(10, 0))
    with pytest.raises(InvalidTimeWindow):
        candidate_window(DAY, time(12, 0), time(12, 0))


def test_event_without_times_spans_its_day(make_event):
    event = make_event(start_date=DAY, start_time=None, end_time=None)
    start, end = event_window(event)
    assert (start.hour, start.date()) == (0, DAY)
    assert (end - start).days == 1


class TestFindAvailableHelpers:

    def test_overlapping_assignment_excludes_helper(self, db, seed, day_events):
        resolver = AvailabilityResolver(db)
        resolver.assign_helper(day_events["A"].id, seed.helper_1.id)

        busy = resolver.find_available_helpers(day_events["B"].id, DAY, time(11, 0), time(13, 0))
        free = resolver.find_available_helpers(day_events["C"].id, DAY, time(13, 0), time(15, 0))

        assert ids(busy) == [seed.helper_2.id]
        assert ids(free) == [seed.helper_1.id, seed.helper_2.id]

    @pytest.mark.parametrize("start,end", [(time(12, 0), time(14, 0)), (time(8, 0), time(10, 0))])
    def test_touching_windows_do_not_conflict(self, db, seed, day_events, start, end):
        resolver = AvailabilityResolver(db)
        resolver.assign_helper(day_events["A"].id, seed.helper_1.id)

        assert seed.helper_1.id in ids(resolver.find_available_helpers(day_events["C"].id, DAY, start, end))

    def test_other_days_do_not_conflict(self, db, seed, day_events, make_event):
        resolver = AvailabilityResolver(db)
        resolver.assign_helper(day_events["A"].id, seed.helper_1.id)
        next_day = make_event(start_date=date(2025, 6, 2), start_time=time(10, 0), end_time=time(12, 0))

        assert seed.helper_1.id in ids(
            resolver.find_available_helpers(next_day.id, date(2025, 6, 2), time(10, 0), time(12, 0))
        )

    def test_all_day_event_blocks_every_window(self, db, seed, day_events, make_event):
        resolver = AvailabilityResolver(db)
        camp = make_event(title="Day camp", start_date=DAY, start_time=None, end_time=None)
        resolver.assign_helper(camp.id, seed.helper_2.id)

        for start, end in [(time(6, 0), time(7, 0)), (time(22, 0), time(23, 0))]:
            available = resolver.find_available_helpers(day_events["C"].id, DAY, start, end)
            assert seed.helper_2.id not in ids(available)

    def test_helper_already_on_event_is_not_offered_again(self, db, seed, day_events):
        resolver = AvailabilityResolver(db)
        resolver.assign_helper(day_events["A"].id, seed.helper_1.id)

        available = resolver.find_available_helpers(day_events["A"].id, DAY, time(10, 0), time(12, 0))

        assert ids(available) == [seed.helper_2.id]

    def test_unknown_event(self, db, seed):
        with pytest.raises(EventNotFound):
            AvailabilityResolver(db).find_available_helpers(404, DAY, time(10, 0), time(12, 0))

    def test_invalid_window(self, db, seed, day_events):
        with pytest.raises(InvalidTimeWindow):
            AvailabilityResolver(db).find_available_helpers(day_events["A"].id, DAY, time(12, 0), time(10, 0))


class TestIsHelperAvailable:

    def test_own_assignment_does_not_make_helper_busy(self, db, seed, day_events):
        resolver = AvailabilityResolver(db)
        resolver.assign_helper(day_events["A"].id, seed.helper_1.id)

        assert resolver.is_helper_available(day_events["A"].id, seed.helper_1.id, DAY, time(10, 0), time(12, 0))
        assert not resolver.is_helper_available(day_events["B"].id, seed.helper_1.id, DAY, time(11, 0), time(13, 0))
        assert resolver.is_helper_available(day_events["B"].id, seed.helper_2.id, DAY, time(11, 0), time(13, 0))


class TestAssignments:

    def test_reassigning_updates_confirmation_in_place(self, db, seed, day_events):
        resolver = AvailabilityResolver(db)
        event_id = day_events["A"].id

        resolver.assign_helper(event_id, seed.helper_1.id, confirmed=False)
        assignment = resolver.assign_helper(event_id, seed.helper_1.id, confirmed=True)

        assert assignment.confirmed is True
        assert db.query(HelperAssignment).filter(HelperAssignment.event_id == event_id).count() == 1

    def test_checked_assignment_refuses_overlap(self, db, seed, day_events):
        resolver = AvailabilityResolver(db)
        resolver.assign_helper(day_events["A"].id, seed.helper_1.id)

        with pytest.raises(HelperUnavailable):
            resolver.assign_helper(day_events["B"].id, seed.helper_1.id, check_availability=True)

        assert not resolver.is_helper_assigned(day_events["B"].id, seed.helper_1.id)
        resolver.assign_helper(day_events["C"].id, seed.helper_1.id, check_availability=True)
        assert resolver.is_helper_assigned(day_events["C"].id, seed.helper_1.id)

    def test_assign_unknown_event_or_helper(self, db, seed, day_events):
        resolver = AvailabilityResolver(db)
        with pytest.raises(EventNotFound):
            resolver.assign_helper(404, seed.helper_1.id)
        with pytest.raises(HelperNotFound):
            resolver.assign_helper(day_events["A"].id, 404)

    def test_update_confirmation(self, db, seed, day_events):
        resolver = AvailabilityResolver(db)
        event_id = day_events["A"].id
        resolver.assign_helper(event_id, seed.helper_1.id)

        assert resolver.update_confirmation(event_id, seed.helper_1.id, True) is True
        assert resolver.get_helper_events(seed.helper_1.id)[0].confirmed is True

        with pytest.raises(NotAssigned):
            resolver.update_confirmation(event_id, seed.helper_2.id, True)

    def test_remove_helper_is_idempotent(self, db, seed, day_events):
        resolver = AvailabilityResolver(db)
        event_id = day_events["A"].id
        resolver.assign_helper(event_id, seed.helper_1.id)

        assert resolver.remove_helper(event_id, seed.helper_1.id) is True
        assert resolver.remove_helper(event_id, seed.helper_1.id) is True
        assert not resolver.is_helper_assigned(event_id, seed.helper_1.id)


class TestVolunteer:

    def test_volunteer_assigns_own_profile_unconfirmed(self, db, seed, day_events):
        assignment = AvailabilityResolver(db).volunteer(day_events["A"].id, seed.helper_user_1.id)

        assert assignment.helper_id == seed.helper_1.id
        assert assignment.confirmed is False

    def test_volunteer_without_profile(self, db, seed, day_events):
        with pytest.raises(HelperNotFound):
            AvailabilityResolver(db).volunteer(day_events["A"].id, seed.scout_1.id)

    def test_volunteer_when_busy(self, db, seed, day_events):
        resolver = AvailabilityResolver(db)
        resolver.assign_helper(day_events["A"].id, seed.helper_1.id)

        with pytest.raises(HelperUnavailable):
            resolver.volunteer(day_events["B"].id, seed.helper_user_1.id)


def test_get_helper_events_filters_and_orders(db, seed, day_events):
    resolver = AvailabilityResolver(db)
    resolver.assign_helper(day_events["C"].id, seed.helper_1.id, confirmed=True)
    resolver.assign_helper(day_events["A"].id, seed.helper_1.id, confirmed=False)

    everything = resolver.get_helper_events(seed.helper_1.id)
    confirmed = resolver.get_helper_events(seed.helper_1.id, include_pending=False)
    pending = resolver.get_helper_events(seed.helper_1.id, include_confirmed=False)

    assert [a.event.title for a in everything] == ["A", "C"]
    assert [a.event.title for a in confirmed] == ["C"]
    assert [a.event.title for a in pending] == ["A"]
    assert resolver.get_helper_events(seed.helper_2.id) == []
