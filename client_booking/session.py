"""Caller-local cursor state over a BookingPlanner: month, selected day and slot."""

from datetime import date
from typing import Optional

from client_booking.planner import BookingPlanner
from client_booking.scheduler import group_slots_by_time_of_day
from client_booking.schema import GroupedSlots, MonthData, TimeSlot


def _first_of_month(day: date) -> date:
    return day.replace(day=1)


class BookingSession:
    """
    Month navigation and slot selection for one booking surface.

    Views are recomputed from the planner on every access, unless a
    month has been supplied explicitly with set_month_data().
    """

    def __init__(self, planner: BookingPlanner, today: Optional[date] = None) -> None:
        self.planner = planner
        self._today = today
        self.current_month: date = _first_of_month(self.today())
        self.selected_date: Optional[date] = None
        self.selected_slot: Optional[TimeSlot] = None
        self._month_override: Optional[MonthData] = None

    def today(self) -> date:
        return self._today or date.today()

    @property
    def month_data(self) -> MonthData:
        if self._month_override is not None:
            return self._month_override
        return self.planner.month_data(self.current_month, today=self.today())

    @property
    def selected_day_slots(self) -> Optional[GroupedSlots]:
        """Available slots of the selected day, grouped by time of day."""
        if self.selected_date is None:
            return None
        for day in self.month_data.days:
            if day.date == self.selected_date:
                return group_slots_by_time_of_day(s for s in day.slots if s.is_available)
        return None

    @property
    def available_slots_count(self) -> int:
        return sum(day.available_count for day in self.month_data.days)

    def select_date(self, day: date) -> None:
        self.selected_date = day
        self.selected_slot = None

    def select_slot(self, slot: TimeSlot) -> None:
        self.selected_slot = slot

    def clear_selection(self) -> None:
        self.selected_slot = None

    def next_month(self) -> None:
        year, month = self.current_month.year, self.current_month.month + 1
        if month > 12:
            year, month = year + 1, 1
        self._move_to(date(year, month, 1))

    def previous_month(self) -> None:
        year, month = self.current_month.year, self.current_month.month - 1
        if month < 1:
            year, month = year - 1, 12
        self._move_to(date(year, month, 1))

    def go_to_today(self) -> None:
        today = self.today()
        self._move_to(_first_of_month(today))
        self.selected_date = today

    def set_month_data(self, data: MonthData) -> None:
        """Show externally supplied month data instead of computing it."""
        self._month_override = data
        self.current_month = date(data.year, data.month, 1)

    def _move_to(self, month_start: date) -> None:
        # An override only describes the month it was set for
        self._month_override = None
        self.current_month = month_start
