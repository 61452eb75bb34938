"""FastAPI application exposing the booking planner."""

import logging
from datetime import date

from fastapi import FastAPI, HTTPException, Path

from client_booking.config import configure_logging, load_settings
from client_booking.planner import BookingPlanner
from client_booking.schema import (
    Appointment,
    BookingConfig,
    BookingRequest,
    BookingResult,
    DayAvailability,
    MonthData,
    SeriesAvailabilityRequest,
    SeriesAvailabilityResponse,
)

settings = load_settings()
configure_logging(settings.log_level)

logger = logging.getLogger(__name__)

app = FastAPI(title="Client Booking", version="0.1.0")

planner = BookingPlanner(settings.booking_config())
logger.info(
    "Booking service ready: %d min slots, %d min buffer, series up to %d",
    settings.slot_duration,
    settings.buffer_time,
    settings.max_series_count,
)


@app.get("/config", response_model=BookingConfig)
def get_config() -> BookingConfig:
    """Current booking template."""
    return planner.config


@app.put("/config", response_model=BookingConfig)
def put_config(config: BookingConfig) -> BookingConfig:
    """Replace the booking template. Derived views follow on the next query."""
    planner.update_config(config)
    return planner.config


@app.get("/availability/day/{day}", response_model=DayAvailability)
def get_day_availability(day: date) -> DayAvailability:
    return planner.day_availability(day)


@app.get("/availability/{year}/{month}", response_model=MonthData)
def get_month_availability(
    year: int = Path(..., ge=1, le=9999),
    month: int = Path(..., ge=1, le=12),
) -> MonthData:
    """Bookable days of a month, from today up to the advance booking limit."""
    return planner.month_data(date(year, month, 1))


@app.post("/series-availability", response_model=SeriesAvailabilityResponse)
def post_series_availability(request: SeriesAvailabilityRequest) -> SeriesAvailabilityResponse:
    """How many occurrences of a recurring booking fit before the first conflict."""
    count = planner.series_availability(request.slot, request.recurrence)
    return SeriesAvailabilityResponse(count=count)


@app.get("/appointments", response_model=list[Appointment])
def list_appointments() -> list[Appointment]:
    return list(planner.store.snapshot())


@app.post("/bookings", response_model=BookingResult, status_code=201)
def create_booking(request: BookingRequest) -> BookingResult:
    """
    Book a slot, or a weekly/biweekly series of it.
    All occurrences are booked or none are.
    """
    result = planner.create_booking(request)
    if result.success:
        return result
    if result.conflict_date is not None:
        raise HTTPException(status_code=409, detail=result.error)
    raise HTTPException(status_code=400, detail=result.error)


@app.post("/bookings/{appointment_id}/cancel", response_model=BookingResult)
def cancel_booking(appointment_id: str) -> BookingResult:
    result = planner.cancel_booking(appointment_id)
    if result.success:
        return result
    if result.not_found:
        raise HTTPException(status_code=404, detail=result.error)
    raise HTTPException(status_code=500, detail=result.error)


@app.get("/health")
def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}
