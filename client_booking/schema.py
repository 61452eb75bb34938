"""Pydantic models for the booking template, slots, appointments and API bodies."""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator

HHMM_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


# --- Enumerations ---


class Weekday(str, Enum):
    """Closed set of weekday keys used by the weekly template."""

    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @classmethod
    def from_date(cls, day: date) -> "Weekday":
        # Python: Monday=0, Sunday=6
        return list(cls)[day.weekday()]


class TimeOfDay(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"


class RecurrencePattern(str, Enum):
    ONCE = "once"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"


class AppointmentStatus(str, Enum):
    """Lifecycle status of an appointment.

    ``pending`` is reserved for a future confirmation workflow; no
    operation produces it.
    """

    CONFIRMED = "confirmed"
    PENDING = "pending"
    CANCELLED = "cancelled"


class DayStatus(str, Enum):
    AVAILABLE = "available"
    PARTIAL = "partial"
    NONE = "none"


# --- Weekly template and configuration ---


class TimeRange(BaseModel):
    """Time range in HH:MM format."""

    start: str = Field(..., pattern=HHMM_PATTERN, description="Start time HH:MM")
    end: str = Field(..., pattern=HHMM_PATTERN, description="End time HH:MM")

    @model_validator(mode="after")
    def start_before_end(self) -> "TimeRange":
        # Zero-padded HH:MM compares lexicographically in time order
        if self.start >= self.end:
            raise ValueError(f"start {self.start} must be before end {self.end}")
        return self


class WeeklyAvailability(BaseModel):
    """Recurring open hours keyed by weekday. Unset days are closed."""

    monday: list[TimeRange] = Field(default_factory=list)
    tuesday: list[TimeRange] = Field(default_factory=list)
    wednesday: list[TimeRange] = Field(default_factory=list)
    thursday: list[TimeRange] = Field(default_factory=list)
    friday: list[TimeRange] = Field(default_factory=list)
    saturday: list[TimeRange] = Field(default_factory=list)
    sunday: list[TimeRange] = Field(default_factory=list)

    def for_day(self, weekday: Weekday) -> list[TimeRange]:
        """Return the ranges for ``weekday`` (empty when the day is closed)."""
        return getattr(self, weekday.value)


class BookingConfig(BaseModel):
    """Slot sizing, weekly template and booking window."""

    slot_duration: int = Field(default=30, gt=0, description="Slot length in minutes")
    buffer_time: int = Field(default=0, ge=0, description="Idle minutes between slots")
    weekly_availability: WeeklyAvailability = Field(default_factory=WeeklyAvailability)
    max_series_count: int = Field(default=10, ge=1)
    min_advance_hours: Optional[int] = Field(default=None, ge=0)
    max_advance_days: Optional[int] = Field(default=None, ge=0)


# --- Derived views ---


class TimeSlot(BaseModel):
    """A fixed-duration bookable window on one date."""

    id: str
    date: date
    start_time: str = Field(..., pattern=HHMM_PATTERN)
    end_time: str = Field(..., pattern=HHMM_PATTERN)
    time_of_day: TimeOfDay
    is_available: bool = True
    available_series_count: Optional[int] = None

    @model_validator(mode="after")
    def start_before_end(self) -> "TimeSlot":
        if self.start_time >= self.end_time:
            raise ValueError(
                f"start_time {self.start_time} must be before end_time {self.end_time}"
            )
        return self


class GroupedSlots(BaseModel):
    morning: list[TimeSlot] = Field(default_factory=list)
    afternoon: list[TimeSlot] = Field(default_factory=list)
    evening: list[TimeSlot] = Field(default_factory=list)


class SlotFilter(BaseModel):
    """Optional narrowing of a slot list."""

    time_of_day: Optional[list[TimeOfDay]] = None
    min_duration: Optional[int] = Field(default=None, gt=0)


class DayAvailability(BaseModel):
    date: date
    available_count: int
    total_count: int
    status: DayStatus
    slots: list[TimeSlot] = Field(default_factory=list)


class MonthData(BaseModel):
    year: int
    month: int = Field(..., ge=1, le=12)
    days: list[DayAvailability] = Field(default_factory=list)


# --- Appointments and booking ---


class Appointment(BaseModel):
    """A booked appointment. Only ``status`` ever changes after creation."""

    id: str
    date: date
    start_time: str = Field(..., pattern=HHMM_PATTERN)
    end_time: str = Field(..., pattern=HHMM_PATTERN)
    client_name: str
    client_email: str
    message: Optional[str] = None
    is_series: bool = False
    series_id: Optional[str] = None
    recurrence: Optional[RecurrencePattern] = None
    status: AppointmentStatus = AppointmentStatus.CONFIRMED
    created_at: datetime

    @model_validator(mode="after")
    def start_before_end(self) -> "Appointment":
        if self.start_time >= self.end_time:
            raise ValueError(
                f"start_time {self.start_time} must be before end_time {self.end_time}"
            )
        return self


class BookingRequest(BaseModel):
    """Request body for POST /bookings."""

    slot: TimeSlot
    name: str
    email: str
    message: Optional[str] = None
    recurrence: RecurrencePattern = RecurrencePattern.ONCE
    series_count: int = Field(default=1, ge=1)


class BookingResult(BaseModel):
    """Outcome of a create or cancel operation."""

    success: bool
    error: Optional[str] = None
    conflict_date: Optional[date] = None
    not_found: bool = False
    appointments: list[Appointment] = Field(default_factory=list)


class SeriesAvailabilityRequest(BaseModel):
    """Request body for POST /series-availability."""

    slot: TimeSlot
    recurrence: RecurrencePattern = RecurrencePattern.WEEKLY


class SeriesAvailabilityResponse(BaseModel):
    count: int
