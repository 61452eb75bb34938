"""Day and month availability views, series planning and booking commits."""

import calendar
import logging
import uuid
from collections.abc import Iterable, Sequence
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from client_booking.scheduler import is_booked, parse_time, slots_for_day
from client_booking.schema import (
    Appointment,
    AppointmentStatus,
    BookingConfig,
    BookingRequest,
    BookingResult,
    DayAvailability,
    DayStatus,
    MonthData,
    RecurrencePattern,
    TimeSlot,
)
from client_booking.store import AppointmentStore

logger = logging.getLogger(__name__)

APPOINTMENT_NOT_FOUND = "Appointment not found"

RECURRENCE_STEP_DAYS = {
    RecurrencePattern.ONCE: 0,
    RecurrencePattern.WEEKLY: 7,
    RecurrencePattern.BIWEEKLY: 14,
}


class SlotConflictError(Exception):
    """Raised when an occurrence of a booking overlaps an active appointment."""

    def __init__(self, day: date, start_time: str) -> None:
        self.day = day
        self.start_time = start_time
        super().__init__(f"Slot at {day.isoformat()} {start_time} is no longer available")


def _day_status(available_count: int, total_count: int) -> DayStatus:
    if total_count > 0 and available_count == total_count:
        return DayStatus.AVAILABLE
    if available_count > 0:
        return DayStatus.PARTIAL
    return DayStatus.NONE


def day_availability(
    day: date,
    config: BookingConfig,
    appointments: Iterable[Appointment],
) -> DayAvailability:
    """Template slots for ``day`` with occupancy resolved against ``appointments``."""
    appointments = tuple(appointments)
    slots = [
        slot.model_copy(
            update={"is_available": not is_booked(day, slot.start_time, slot.end_time, appointments)}
        )
        for slot in slots_for_day(day, config)
    ]
    available_count = sum(1 for s in slots if s.is_available)
    return DayAvailability(
        date=day,
        available_count=available_count,
        total_count=len(slots),
        status=_day_status(available_count, len(slots)),
        slots=slots,
    )


def month_data(
    month_date: date,
    config: BookingConfig,
    appointments: Iterable[Appointment],
    today: Optional[date] = None,
) -> MonthData:
    """
    Availability for every bookable day of ``month_date``'s month.
    Days before today, or beyond today + max_advance_days, are left out.
    """
    today = today or date.today()
    appointments = tuple(appointments)
    last_day = None
    if config.max_advance_days is not None:
        try:
            last_day = today + timedelta(days=config.max_advance_days)
        except OverflowError:
            last_day = date.max

    _, days_in_month = calendar.monthrange(month_date.year, month_date.month)
    days: list[DayAvailability] = []
    for day_number in range(1, days_in_month + 1):
        current = date(month_date.year, month_date.month, day_number)
        if current < today:
            continue
        if last_day is not None and current > last_day:
            continue
        days.append(day_availability(current, config, appointments))

    return MonthData(year=month_date.year, month=month_date.month, days=days)


def series_dates(start: date, recurrence: RecurrencePattern, count: int) -> list[date]:
    """
    Dates of the first ``count`` occurrences starting at ``start``.
    The list stops early if the next occurrence would fall after ``date.max``.
    """
    step = RECURRENCE_STEP_DAYS[recurrence]
    dates: list[date] = []
    for i in range(count):
        try:
            dates.append(start + timedelta(days=step * i))
        except OverflowError:
            break
    return dates


def series_availability(
    slot: TimeSlot,
    recurrence: RecurrencePattern,
    config: BookingConfig,
    appointments: Iterable[Appointment],
) -> int:
    """
    How many consecutive occurrences of ``slot`` can be booked.
    The series is cut at the first conflict; later free dates do not count.
    """
    if recurrence == RecurrencePattern.ONCE:
        return 1

    appointments = tuple(appointments)
    count = 1
    for day in series_dates(slot.date, recurrence, config.max_series_count)[1:]:
        if is_booked(day, slot.start_time, slot.end_time, appointments):
            break
        count += 1
    return count


class BookingPlanner:
    """Owns the write side of an AppointmentStore for one booking template."""

    def __init__(self, config: BookingConfig, store: Optional[AppointmentStore] = None) -> None:
        self._config = config
        self.store = store if store is not None else AppointmentStore()

    @property
    def config(self) -> BookingConfig:
        return self._config

    def update_config(self, config: BookingConfig) -> None:
        self._config = config
        logger.info(
            "Booking config updated: %d min slots, %d min buffer",
            config.slot_duration,
            config.buffer_time,
        )

    # --- Read side ---

    def day_availability(self, day: date) -> DayAvailability:
        return day_availability(day, self._config, self.store.snapshot())

    def month_data(self, month_date: date, today: Optional[date] = None) -> MonthData:
        return month_data(month_date, self._config, self.store.snapshot(), today=today)

    def series_availability(self, slot: TimeSlot, recurrence: RecurrencePattern) -> int:
        return series_availability(slot, recurrence, self._config, self.store.snapshot())

    # --- Write side ---

    def create_booking(self, request: BookingRequest) -> BookingResult:
        """
        Book every occurrence of the request or none of them.
        Each target date is re-checked against the store at commit time.
        """
        rejection = self._check_request(request)
        if rejection:
            logger.warning("Booking rejected: %s", rejection)
            return BookingResult(success=False, error=rejection)

        slot = request.slot
        dates = series_dates(slot.date, request.recurrence, request.series_count)
        if len(dates) < request.series_count:
            logger.warning("Booking rejected: series from %s runs past %s", slot.date, date.max)
            return BookingResult(success=False, error="Series runs past the last supported date")

        try:
            appointments = self._build_appointments(request, dates)

            def ensure_unbooked(current: Sequence[Appointment]) -> None:
                for day in dates:
                    if is_booked(day, slot.start_time, slot.end_time, current):
                        raise SlotConflictError(day, slot.start_time)

            self.store.commit(appointments, validate=ensure_unbooked)
        except SlotConflictError as e:
            logger.warning("Booking conflict: %s", e)
            return BookingResult(success=False, error=str(e), conflict_date=e.day)
        except Exception:
            logger.exception("Failed to create booking for %s", slot.id)
            return BookingResult(success=False, error="Failed to create booking")

        logger.info(
            "Booked %d appointment(s) for %s starting %s at %s",
            len(appointments),
            request.name,
            slot.date.isoformat(),
            slot.start_time,
        )
        return BookingResult(success=True, appointments=appointments)

    def cancel_booking(self, appointment_id: str) -> BookingResult:
        """Mark an appointment cancelled. The slot frees up immediately."""
        try:
            cancelled = self.store.cancel(appointment_id)
        except Exception:
            logger.exception("Failed to cancel appointment %s", appointment_id)
            return BookingResult(success=False, error="Failed to cancel booking")

        if cancelled is None:
            logger.warning("Cancel requested for unknown appointment %s", appointment_id)
            return BookingResult(success=False, error=APPOINTMENT_NOT_FOUND, not_found=True)

        logger.info("Appointment cancelled: %s", appointment_id)
        return BookingResult(success=True, appointments=[cancelled])

    def _check_request(self, request: BookingRequest) -> Optional[str]:
        """Return a rejection message, or None if the request is acceptable."""
        if not request.name.strip():
            return "Client name is required"
        if not request.email.strip():
            return "Client email is required"
        if request.recurrence == RecurrencePattern.ONCE and request.series_count > 1:
            return "A one-off booking cannot have more than one occurrence"
        if request.series_count > self._config.max_series_count:
            return (
                f"Series of {request.series_count} exceeds the maximum of "
                f"{self._config.max_series_count}"
            )
        if self._config.min_advance_hours is not None:
            minutes = parse_time(request.slot.start_time)
            starts_at = datetime.combine(request.slot.date, datetime.min.time()) + timedelta(
                minutes=minutes
            )
            earliest = datetime.now() + timedelta(hours=self._config.min_advance_hours)
            if starts_at < earliest:
                return (
                    f"Bookings require at least {self._config.min_advance_hours} hours notice"
                )
        return None

    @staticmethod
    def _build_appointments(request: BookingRequest, dates: list[date]) -> list[Appointment]:
        is_series = request.series_count > 1
        series_id = f"series-{uuid.uuid4().hex[:12]}" if is_series else None
        created_at = datetime.now(timezone.utc)
        return [
            Appointment(
                id=f"apt-{uuid.uuid4().hex[:12]}",
                date=day,
                start_time=request.slot.start_time,
                end_time=request.slot.end_time,
                client_name=request.name,
                client_email=request.email,
                message=request.message,
                is_series=is_series,
                series_id=series_id,
                recurrence=request.recurrence if is_series else None,
                status=AppointmentStatus.CONFIRMED,
                created_at=created_at,
            )
            for day in dates
        ]
