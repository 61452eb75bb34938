"""Deterministic slot generation and overlap checks for a single day."""

import logging
import re
from collections.abc import Iterable
from datetime import date

from client_booking.schema import (
    Appointment,
    AppointmentStatus,
    BookingConfig,
    GroupedSlots,
    SlotFilter,
    TimeOfDay,
    TimeSlot,
    Weekday,
)

logger = logging.getLogger(__name__)

_HHMM = re.compile(r"^(\d{2}):(\d{2})$")

# Start-hour boundaries for time-of-day classification
AFTERNOON_START_HOUR = 12
EVENING_START_HOUR = 17


def parse_time(s: str) -> int:
    """Parse HH:MM to minutes since midnight."""
    match = _HHMM.match(s)
    if not match:
        raise ValueError(f"Invalid time {s!r}, expected HH:MM")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise ValueError(f"Invalid time {s!r}, expected HH:MM")
    return hours * 60 + minutes


def format_time(total_minutes: int) -> str:
    """Format minutes since midnight as HH:MM."""
    return f"{total_minutes // 60:02d}:{total_minutes % 60:02d}"


def add_minutes(time_str: str, minutes: int) -> str:
    return format_time(parse_time(time_str) + minutes)


def compare_times(a: str, b: str) -> int:
    """Negative if a < b, zero if equal, positive if a > b."""
    return parse_time(a) - parse_time(b)


def time_of_day(start_time: str) -> TimeOfDay:
    """Classify a slot by its start hour."""
    hour = parse_time(start_time) // 60
    if hour < AFTERNOON_START_HOUR:
        return TimeOfDay.MORNING
    if hour < EVENING_START_HOUR:
        return TimeOfDay.AFTERNOON
    return TimeOfDay.EVENING


def slot_id(day: date, start_time: str) -> str:
    return f"{day.isoformat()}-{start_time}"


def slots_for_day(day: date, config: BookingConfig) -> list[TimeSlot]:
    """
    Enumerate every slot the weekly template allows on ``day``.
    Bookings are ignored; every returned slot has is_available=True.
    """
    ranges = config.weekly_availability.for_day(Weekday.from_date(day))
    step = config.slot_duration + config.buffer_time

    slots: list[TimeSlot] = []
    for time_range in ranges:
        range_end = parse_time(time_range.end)
        current = parse_time(time_range.start)

        # Iterate in slot+buffer sized steps; never emit a partial slot
        while current + config.slot_duration <= range_end:
            start_time = format_time(current)
            slots.append(
                TimeSlot(
                    id=slot_id(day, start_time),
                    date=day,
                    start_time=start_time,
                    end_time=format_time(current + config.slot_duration),
                    time_of_day=time_of_day(start_time),
                    is_available=True,
                )
            )
            current += step

    logger.debug("Generated %d slots for %s", len(slots), day.isoformat())
    return slots


def intervals_overlap(start1: int, end1: int, start2: int, end2: int) -> bool:
    """Half-open overlap: touching endpoints do not conflict."""
    return not (end1 <= start2 or start1 >= end2)


def is_booked(
    day: date,
    start_time: str,
    end_time: str,
    appointments: Iterable[Appointment],
) -> bool:
    """Check if [start_time, end_time) on ``day`` overlaps any active appointment."""
    slot_start = parse_time(start_time)
    slot_end = parse_time(end_time)
    for appt in appointments:
        if appt.date != day or appt.status == AppointmentStatus.CANCELLED:
            continue
        if intervals_overlap(
            slot_start, slot_end, parse_time(appt.start_time), parse_time(appt.end_time)
        ):
            return True
    return False


def group_slots_by_time_of_day(slots: Iterable[TimeSlot]) -> GroupedSlots:
    grouped = GroupedSlots()
    for slot in slots:
        getattr(grouped, slot.time_of_day.value).append(slot)
    return grouped


def filter_slots(slots: Iterable[TimeSlot], slot_filter: SlotFilter) -> list[TimeSlot]:
    """Keep slots matching the requested times of day and minimum duration."""
    result = []
    for slot in slots:
        if slot_filter.time_of_day and slot.time_of_day not in slot_filter.time_of_day:
            continue
        if slot_filter.min_duration is not None:
            if compare_times(slot.end_time, slot.start_time) < slot_filter.min_duration:
                continue
        result.append(slot)
    return result
