"""Unit tests for slot generation and overlap checks."""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from client_booking.scheduler import (
    add_minutes,
    compare_times,
    filter_slots,
    group_slots_by_time_of_day,
    intervals_overlap,
    is_booked,
    parse_time,
    slots_for_day,
    time_of_day,
)
from client_booking.schema import (
    AppointmentStatus,
    BookingConfig,
    SlotFilter,
    TimeOfDay,
    TimeRange,
    WeeklyAvailability,
)
from tests.conftest import MONDAY, make_appointment, make_slot


def test_monday_template_produces_expected_cadence(monday_config):
    """30 min slots with 15 min buffer start every 45 minutes."""
    slots = slots_for_day(MONDAY, monday_config)

    assert [s.start_time for s in slots] == ["09:00", "09:45", "10:30", "11:15"]
    assert [s.end_time for s in slots] == ["09:30", "10:15", "11:00", "11:45"]
    assert all(s.is_available for s in slots)
    assert all(s.time_of_day == TimeOfDay.MORNING for s in slots)
    assert all(s.date == MONDAY for s in slots)


def test_slot_ids_derive_from_date_and_start(monday_config):
    slots = slots_for_day(MONDAY, monday_config)
    assert slots[0].id == "2025-02-03-09:00"
    assert len({s.id for s in slots}) == len(slots)


def test_slots_for_day_is_deterministic(full_week_config):
    first = slots_for_day(MONDAY, full_week_config)
    second = slots_for_day(MONDAY, full_week_config)
    assert first == second


def test_no_partial_slot_from_leftover_time():
    """09:00-10:15 with 60 min slots yields only 09:00-10:00."""
    config = BookingConfig(
        slot_duration=60,
        buffer_time=0,
        weekly_availability=WeeklyAvailability(monday=[TimeRange(start="09:00", end="10:15")]),
    )
    slots = slots_for_day(MONDAY, config)
    assert len(slots) == 1
    assert (slots[0].start_time, slots[0].end_time) == ("09:00", "10:00")


def test_slot_ending_exactly_at_range_end_is_kept():
    config = BookingConfig(
        slot_duration=30,
        buffer_time=0,
        weekly_availability=WeeklyAvailability(monday=[TimeRange(start="09:00", end="10:00")]),
    )
    slots = slots_for_day(MONDAY, config)
    assert [s.end_time for s in slots] == ["09:30", "10:00"]


def test_closed_day_has_no_slots(monday_config):
    tuesday = MONDAY + timedelta(days=1)
    assert slots_for_day(tuesday, monday_config) == []


def test_multiple_ranges_produce_independent_sequences(full_week_config):
    slots = slots_for_day(MONDAY, full_week_config)
    starts = [s.start_time for s in slots]
    assert starts == [
        "08:00", "09:00", "10:00", "11:00",
        "13:00", "14:00", "15:00", "16:00", "17:00", "18:00",
    ]


def test_time_of_day_boundaries():
    assert time_of_day("11:59") == TimeOfDay.MORNING
    assert time_of_day("12:00") == TimeOfDay.AFTERNOON
    assert time_of_day("16:59") == TimeOfDay.AFTERNOON
    assert time_of_day("17:00") == TimeOfDay.EVENING


def test_slots_classified_across_day(full_week_config):
    grouped = group_slots_by_time_of_day(slots_for_day(MONDAY, full_week_config))
    assert [s.start_time for s in grouped.morning] == ["08:00", "09:00", "10:00", "11:00"]
    assert [s.start_time for s in grouped.afternoon] == ["13:00", "14:00", "15:00", "16:00"]
    assert [s.start_time for s in grouped.evening] == ["17:00", "18:00"]


def test_time_helpers():
    assert parse_time("09:30") == 570
    assert add_minutes("09:45", 30) == "10:15"
    assert compare_times("09:00", "10:00") < 0
    assert compare_times("10:00", "10:00") == 0


@pytest.mark.parametrize("bad", ["9:00", "09-00", "", "25:00", "09:60", "ab:cd"])
def test_parse_time_rejects_malformed(bad):
    with pytest.raises(ValueError):
        parse_time(bad)


def test_time_range_rejects_malformed_and_inverted():
    with pytest.raises(ValidationError):
        TimeRange(start="9:00", end="10:00")
    with pytest.raises(ValidationError):
        TimeRange(start="10:00", end="09:00")


def test_slot_and_appointment_reject_inverted_times():
    with pytest.raises(ValidationError):
        make_slot(MONDAY, "10:00", "09:30")
    with pytest.raises(ValidationError):
        make_slot(MONDAY, "09:00", "09:00")
    with pytest.raises(ValidationError):
        make_appointment(MONDAY, "10:00", "09:00")


def test_intervals_overlap_half_open():
    assert not intervals_overlap(540, 600, 600, 660)
    assert intervals_overlap(540, 600, 570, 630)
    assert intervals_overlap(540, 660, 570, 600)


def test_touching_appointment_does_not_block():
    """A booking 09:00-10:00 leaves 10:00-11:00 free but blocks 09:30-10:30."""
    appointments = [make_appointment(MONDAY, "09:00", "10:00")]
    assert not is_booked(MONDAY, "10:00", "11:00", appointments)
    assert is_booked(MONDAY, "09:30", "10:30", appointments)


def test_appointment_on_other_date_does_not_block():
    appointments = [make_appointment(MONDAY + timedelta(days=7), "09:00", "10:00")]
    assert not is_booked(MONDAY, "09:00", "10:00", appointments)


def test_cancelled_appointment_does_not_block():
    appointments = [
        make_appointment(MONDAY, "09:00", "10:00", status=AppointmentStatus.CANCELLED)
    ]
    assert not is_booked(MONDAY, "09:00", "10:00", appointments)


def test_pending_appointment_blocks():
    appointments = [make_appointment(MONDAY, "09:00", "10:00", status=AppointmentStatus.PENDING)]
    assert is_booked(MONDAY, "09:00", "10:00", appointments)


def test_filter_slots_by_time_of_day_and_duration(full_week_config):
    slots = slots_for_day(MONDAY, full_week_config)
    evening = filter_slots(slots, SlotFilter(time_of_day=[TimeOfDay.EVENING]))
    assert [s.start_time for s in evening] == ["17:00", "18:00"]

    assert filter_slots(slots, SlotFilter(min_duration=90)) == []
    assert filter_slots(slots, SlotFilter(min_duration=60)) == slots


def test_filter_slots_without_criteria_keeps_all():
    slots = [make_slot(MONDAY, "09:00", "09:30"), make_slot(MONDAY, "18:00", "18:30")]
    assert filter_slots(slots, SlotFilter()) == slots
