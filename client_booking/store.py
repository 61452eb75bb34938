"""In-memory appointment list with a single writer lock."""

import logging
import threading
from collections.abc import Callable, Iterable
from typing import Optional

from client_booking.schema import Appointment, AppointmentStatus

logger = logging.getLogger(__name__)


class AppointmentStore:
    """
    Sole source of truth for occupancy.

    Readers take an immutable snapshot per query. Writes go through
    commit() and cancel(), which hold the lock for the whole check-and-write.
    Stored records are replaced, never mutated, so snapshots stay stable.
    """

    def __init__(self, appointments: Optional[Iterable[Appointment]] = None) -> None:
        self._appointments: list[Appointment] = list(appointments or [])
        self._lock = threading.Lock()

    def snapshot(self) -> tuple[Appointment, ...]:
        with self._lock:
            return tuple(self._appointments)

    def get(self, appointment_id: str) -> Optional[Appointment]:
        with self._lock:
            return self._find(appointment_id)

    def commit(
        self,
        appointments: list[Appointment],
        validate: Optional[Callable[[tuple[Appointment, ...]], None]] = None,
    ) -> None:
        """
        Append ``appointments`` atomically.
        ``validate`` runs under the lock against the current contents and
        aborts the commit by raising.
        """
        with self._lock:
            if validate is not None:
                validate(tuple(self._appointments))
            self._appointments.extend(appointments)
        logger.debug("Committed %d appointments", len(appointments))

    def cancel(self, appointment_id: str) -> Optional[Appointment]:
        """Soft-delete an appointment. Returns the cancelled record, or None if unknown."""
        with self._lock:
            for index, appt in enumerate(self._appointments):
                if appt.id == appointment_id:
                    cancelled = appt.model_copy(update={"status": AppointmentStatus.CANCELLED})
                    self._appointments[index] = cancelled
                    return cancelled
        return None

    def clear(self) -> None:
        """Drop every appointment. Used by test fixtures for isolation."""
        with self._lock:
            self._appointments.clear()

    def _find(self, appointment_id: str) -> Optional[Appointment]:
        for appt in self._appointments:
            if appt.id == appointment_id:
                return appt
        return None

    def __len__(self) -> int:
        with self._lock:
            return len(self._appointments)
