"""
Tests for slot computation.
"""
from datetime import date, datetime, time, timedelta
from types import SimpleNamespace

import pytest

from clinic.appointments.availability import compute_slots, WORKING_BANDS
from clinic.exceptions import SchedulingValidationException

DAY = date(2024, 6, 3)
EARLIER = datetime(2024, 6, 1, 8, 0)


def at(hour, minute=0, day=DAY):
    return datetime.combine(day, time(hour, minute))


def busy(start, end):
    return SimpleNamespace(start_time=start, end_time=end)


def times(slots):
    return [slot.time for slot in slots]


def test_empty_day_thirty_minute_service():
    slots = compute_slots(DAY, 30, [], [], EARLIER)

    morning = [s for s in slots if s.start_time < at(13)]
    assert morning[0].time == "09:00"
    assert morning[1].time == "09:15"
    assert morning[-1].time == "12:30"
    assert len(morning) == 15
    assert not any(s.is_recommended for s in slots)


def test_slots_never_cross_band_end():
    slots = compute_slots(DAY, 45, [], [], EARLIER)

    for slot in slots:
        band_end = next(
            at(end) for start, end in WORKING_BANDS if at(start) <= slot.start_time < at(end)
        )
        assert slot.end_time <= band_end
        assert slot.end_time - slot.start_time == timedelta(minutes=45)
    assert "12:15" in times(slots)
    assert "12:30" not in times(slots)
    assert "16:15" in times(slots)
    assert "16:30" not in times(slots)


def test_no_slot_overlaps_booking_or_blocker():
    appointments = [busy(at(10), at(10, 30))]
    blockers = [busy(at(14), at(15))]

    slots = compute_slots(DAY, 30, appointments, blockers, EARLIER)

    for slot in slots:
        for item in appointments + blockers:
            assert not (slot.start_time < item.end_time and slot.end_time > item.start_time)
    assert "09:30" in times(slots)
    assert "09:45" not in times(slots)
    assert "10:00" not in times(slots)
    assert "10:15" not in times(slots)
    assert "14:45" not in times(slots)


def test_touching_intervals_do_not_overlap():
    slots = compute_slots(DAY, 30, [busy(at(10), at(10, 30))], [], EARLIER)

    assert "09:30" in times(slots)
    assert "10:30" in times(slots)


def test_adjacent_slots_are_recommended_and_listed_first():
    slots = compute_slots(DAY, 30, [busy(at(10), at(10, 30))], [], EARLIER)

    recommended = [s for s in slots if s.is_recommended]
    assert times(recommended) == ["09:30", "10:30"]
    assert slots[:2] == recommended
    assert all(not s.is_recommended for s in slots[2:])


def test_non_recommended_slots_stay_chronological():
    slots = compute_slots(DAY, 30, [busy(at(11), at(11, 20))], [busy(at(15), at(16))], EARLIER)

    rest = [s.start_time for s in slots if not s.is_recommended]
    assert rest == sorted(rest)
    recommended = [s.start_time for s in slots if s.is_recommended]
    assert recommended == sorted(recommended)


def test_blocker_edges_are_recommended_too():
    slots = compute_slots(DAY, 20, [], [busy(at(12), at(12, 30))], EARLIER)

    assert times(s for s in slots if s.is_recommended) == ["12:30"]


def test_recommendation_tolerance_is_one_second():
    near = busy(at(9), at(9, 30) - timedelta(milliseconds=500))
    far = busy(at(14), at(14, 30) - timedelta(seconds=2))

    slots = compute_slots(DAY, 15, [near], [far], EARLIER)

    by_time = {s.time: s for s in slots}
    assert by_time["09:30"].is_recommended
    assert not by_time["14:30"].is_recommended


def test_past_slots_dropped_today():
    now = at(11, 5)

    slots = compute_slots(DAY, 30, [], [], now)

    assert all(s.start_time >= now for s in slots)
    assert min(s.start_time for s in slots) == at(11, 15)


def test_slot_starting_exactly_now_is_kept():
    slots = compute_slots(DAY, 30, [], [], at(14))

    assert times(slots)[0] == "14:00"


def test_past_filter_only_applies_to_today():
    slots = compute_slots(DAY, 30, [], [], at(16, 0, day=DAY - timedelta(days=1)))

    assert times(slots)[0] == "09:00"


def test_service_longer_than_any_band():
    assert compute_slots(DAY, 300, [], [], EARLIER) == []


def test_service_only_fits_morning_band():
    slots = compute_slots(DAY, 200, [], [], EARLIER)

    assert times(slots) == ["09:00", "09:15", "09:30"]


def test_fully_booked_day_returns_empty_list():
    blockers = [busy(at(9), at(13)), busy(at(14), at(17))]

    assert compute_slots(DAY, 15, [], blockers, EARLIER) == []


@pytest.mark.parametrize("duration", [0, -15])
def test_non_positive_duration_rejected(duration):
    with pytest.raises(SchedulingValidationException):
        compute_slots(DAY, duration, [], [], EARLIER)
