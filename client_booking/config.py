"""
Environment-driven settings for the booking service.

BOOKING_WEEKLY_AVAILABILITY takes a JSON object keyed by weekday, e.g.
{"monday": [{"start": "09:00", "end": "12:00"}]}.
"""

import json
import logging
import os
from dataclasses import dataclass
from typing import Optional

from pydantic import ValidationError

from client_booking.schema import BookingConfig, WeeklyAvailability

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"

DEFAULT_WEEKLY_AVAILABILITY = {
    day: [{"start": "09:00", "end": "12:00"}, {"start": "13:00", "end": "17:00"}]
    for day in ("monday", "tuesday", "wednesday", "thursday", "friday")
}


def _env_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.environ.get(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(f"Invalid integer for {env_var}: {raw!r}") from None


def _env_optional_int(env_var: str, default: str = "") -> Optional[int]:
    """Like _env_int, but an empty value means unset."""
    raw = os.environ.get(env_var, default).strip()
    if not raw:
        return None
    return _env_int(env_var, raw)


def _env_weekly_availability(env_var: str) -> WeeklyAvailability:
    raw = os.environ.get(env_var)
    if not raw:
        return WeeklyAvailability.model_validate(DEFAULT_WEEKLY_AVAILABILITY)
    try:
        return WeeklyAvailability.model_validate(json.loads(raw))
    except (json.JSONDecodeError, ValidationError) as e:
        raise ValueError(f"Invalid weekly availability in {env_var}: {e}") from None


@dataclass(frozen=True)
class Settings:
    """Booking template and service settings."""

    slot_duration: int
    buffer_time: int
    max_series_count: int
    max_advance_days: Optional[int]
    min_advance_hours: Optional[int]
    weekly_availability: WeeklyAvailability
    log_level: str = "INFO"

    def booking_config(self) -> BookingConfig:
        return BookingConfig(
            slot_duration=self.slot_duration,
            buffer_time=self.buffer_time,
            weekly_availability=self.weekly_availability,
            max_series_count=self.max_series_count,
            min_advance_hours=self.min_advance_hours,
            max_advance_days=self.max_advance_days,
        )


def _validate_settings(settings: Settings) -> None:
    """Validate settings values are within acceptable ranges."""
    if settings.slot_duration < 1:
        raise ValueError(f"BOOKING_SLOT_DURATION must be >= 1, got {settings.slot_duration}")
    if settings.buffer_time < 0:
        raise ValueError(f"BOOKING_BUFFER_TIME must be >= 0, got {settings.buffer_time}")
    if settings.max_series_count < 1:
        raise ValueError(
            f"BOOKING_MAX_SERIES_COUNT must be >= 1, got {settings.max_series_count}"
        )
    if settings.max_advance_days is not None and settings.max_advance_days < 0:
        raise ValueError(
            f"BOOKING_MAX_ADVANCE_DAYS must be >= 0, got {settings.max_advance_days}"
        )
    if settings.min_advance_hours is not None and settings.min_advance_hours < 0:
        raise ValueError(
            f"BOOKING_MIN_ADVANCE_HOURS must be >= 0, got {settings.min_advance_hours}"
        )


def load_settings() -> Settings:
    """Read and validate settings from the environment."""
    settings = Settings(
        slot_duration=_env_int("BOOKING_SLOT_DURATION", "30"),
        buffer_time=_env_int("BOOKING_BUFFER_TIME", "15"),
        max_series_count=_env_int("BOOKING_MAX_SERIES_COUNT", "10"),
        max_advance_days=_env_optional_int("BOOKING_MAX_ADVANCE_DAYS", "90"),
        min_advance_hours=_env_optional_int("BOOKING_MIN_ADVANCE_HOURS"),
        weekly_availability=_env_weekly_availability("BOOKING_WEEKLY_AVAILABILITY"),
        log_level=os.environ.get("LOG_LEVEL", "INFO"),
    )
    _validate_settings(settings)
    return settings


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
