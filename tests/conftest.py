"""Pytest configuration and fixtures."""

from datetime import date, datetime, timezone
from typing import Optional

import pytest

from client_booking.planner import BookingPlanner
from client_booking.scheduler import slot_id, time_of_day
from client_booking.schema import (
    Appointment,
    AppointmentStatus,
    BookingConfig,
    TimeRange,
    TimeSlot,
    WeeklyAvailability,
)
from client_booking.store import AppointmentStore

# 2025-02-03 is a Monday
MONDAY = date(2025, 2, 3)


def make_slot(day: date, start: str, end: str) -> TimeSlot:
    """Helper to create an available TimeSlot."""
    return TimeSlot(
        id=slot_id(day, start),
        date=day,
        start_time=start,
        end_time=end,
        time_of_day=time_of_day(start),
        is_available=True,
    )


def make_appointment(
    day: date,
    start: str,
    end: str,
    status: AppointmentStatus = AppointmentStatus.CONFIRMED,
    appointment_id: Optional[str] = None,
) -> Appointment:
    """Helper to create an Appointment with sensible defaults."""
    return Appointment(
        id=appointment_id or f"apt-{day.isoformat()}-{start}",
        date=day,
        start_time=start,
        end_time=end,
        client_name="Existing Client",
        client_email="existing@example.com",
        status=status,
        created_at=datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc),
    )


@pytest.fixture
def monday_config() -> BookingConfig:
    """Monday mornings only: 30 min slots with 15 min buffer."""
    return BookingConfig(
        slot_duration=30,
        buffer_time=15,
        weekly_availability=WeeklyAvailability(
            monday=[TimeRange(start="09:00", end="12:00")],
        ),
        max_series_count=4,
    )


@pytest.fixture
def full_week_config() -> BookingConfig:
    """Hourly slots across the day, every weekday."""
    ranges = [TimeRange(start="08:00", end="12:00"), TimeRange(start="13:00", end="19:00")]
    return BookingConfig(
        slot_duration=60,
        buffer_time=0,
        weekly_availability=WeeklyAvailability(
            monday=ranges,
            tuesday=ranges,
            wednesday=ranges,
            thursday=ranges,
            friday=ranges,
        ),
        max_series_count=10,
    )


@pytest.fixture
def store() -> AppointmentStore:
    return AppointmentStore()


@pytest.fixture
def planner(monday_config, store) -> BookingPlanner:
    return BookingPlanner(monday_config, store)
