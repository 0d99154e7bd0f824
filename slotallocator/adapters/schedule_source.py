"""
JSON-backed booking lookup for running the engine without the booking API.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

import pendulum
from pendulum import Date

from ..domain.exceptions import ScheduleDataError
from ..domain.models import DaySchedule, EditingRange, WorkingHours, bookings_from_rows

logger = logging.getLogger(__name__)

WEEKDAY_NAMES = [
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
]

DEFAULT_DATA_FILE = Path(__file__).parent / "mock_schedule_data.json"


class JsonScheduleSource:
    """
    Booking lookup that reads clinic schedule data from a JSON file.

    The file mirrors what the booking API returns per date:

    * ``working_hours``: weekday name -> ``{"from_time", "to_time"}``
      (missing weekday = closed)
    * ``closed_dates``: ISO dates without working hours
    * ``occupied``: ISO date -> rows carrying a ``slot_code`` payload
    * ``appointments``: appointment id -> ``{"appointment_date", "code"}``
    """

    def __init__(self, data_file: Path | None = None):
        """
        Initialize the source.

        Args:
            data_file: JSON file to read; defaults to the bundled mock data

        Raises:
            ScheduleDataError: If the file exists but is not valid schedule JSON
        """
        self.data_file = data_file or DEFAULT_DATA_FILE
        self._load_schedule_data()

    def _load_schedule_data(self):
        """Load schedule data from the JSON file."""
        if not self.data_file.exists():
            logger.warning("Schedule data file %s not found, using empty schedule", self.data_file)
            self.data: Dict[str, Any] = {}
            return

        try:
            with open(self.data_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as exc:
            raise ScheduleDataError(f"Invalid JSON in {self.data_file}: {exc}") from exc

        if not isinstance(data, dict):
            raise ScheduleDataError("Schedule data must contain a mapping at the root level.")

        self.data = data

    def _working_hours_for(self, schedule_date: Date) -> WorkingHours | None:
        if schedule_date.isoformat() in self.data.get("closed_dates", []):
            return None

        weekday = WEEKDAY_NAMES[schedule_date.isoweekday() - 1]
        hours = self.data.get("working_hours", {}).get(weekday)

        if not hours or not hours.get("from_time") or not hours.get("to_time"):
            return None

        return WorkingHours.from_text(hours["from_time"], hours["to_time"])

    async def get_day_schedule(self, schedule_date: Date) -> DaySchedule:
        """
        Build the day schedule for a date.

        Args:
            schedule_date: The date being displayed

        Returns:
            DaySchedule with working hours and occupied bookings
        """
        rows: List[Dict[str, Any]] = self.data.get("occupied", {}).get(
            schedule_date.isoformat(), []
        )

        return DaySchedule(
            schedule_date=schedule_date,
            working_hours=self._working_hours_for(schedule_date),
            bookings=tuple(bookings_from_rows(rows)),
        )

    def get_editing_range(self, appointment_id: str) -> EditingRange | None:
        """
        Look up the slot span of an existing appointment for edit mode.

        Returns None for unknown appointments or unreadable codes.
        """
        appointment = self.data.get("appointments", {}).get(appointment_id)
        if not appointment:
            return None

        try:
            origin_date = pendulum.from_format(appointment["appointment_date"], "YYYY-MM-DD").date()
        except (KeyError, TypeError, ValueError):
            logger.warning("Appointment %s has no readable date", appointment_id)
            return None

        return EditingRange.from_code(appointment.get("code"), origin_date)
