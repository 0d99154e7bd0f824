"""
Domain models for slot generation, classification and selection.
"""

import json
import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Tuple

from pendulum import Date

from .timeutils import (
    add_minutes,
    format_time,
    normalize_clock_text,
    normalize_label,
    parse_time,
    to_12_hour,
    to_24_hour,
)

logger = logging.getLogger(__name__)

# Used when an occupied-slot payload cannot be read
FALLBACK_SLOT_CODE = {"startTime": "09:00", "endTime": "09:15"}


class SlotStatus(str, Enum):
    """Eligibility of a generated slot."""
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    CURRENT = "current"
    PAST = "past"

    @property
    def is_selectable(self) -> bool:
        return self in (SlotStatus.AVAILABLE, SlotStatus.CURRENT)


@dataclass(frozen=True)
class ServiceSpec:
    """
    Duration parameters of the service being booked.

    ``slots_needed`` is never below one: even a zero-length service occupies
    the slot it starts in.
    """
    service_duration: int
    buffer_time: int = 0
    granularity: int = 15

    @property
    def total_duration(self) -> int:
        return self.service_duration + self.buffer_time

    @property
    def slots_needed(self) -> int:
        if self.granularity <= 0:
            return 1
        return max(1, math.ceil(self.total_duration / self.granularity))


@dataclass(frozen=True)
class WorkingHours:
    """Working hours of one schedule date, as minute-of-day bounds."""
    start: int
    end: int

    @classmethod
    def from_text(cls, start: str | None, end: str | None) -> "WorkingHours":
        """Build from clinic settings text such as "9am" / "17:00"."""
        return cls(
            start=parse_time(normalize_clock_text(start)),
            end=parse_time(normalize_clock_text(end)),
        )

    def __str__(self) -> str:
        return f"{format_time(self.start)} - {format_time(self.end)}"


@dataclass(frozen=True)
class Booking:
    """
    An existing reservation, expressed as first and last slot start.

    The end is the start of the last occupied slot, not the wall-clock end of
    the appointment.
    """
    start: int
    end: int

    @classmethod
    def from_text(cls, start: str, end: str) -> "Booking":
        return cls(start=parse_time(start), end=parse_time(end))

    @classmethod
    def from_slot_code(cls, slot_code: Any) -> "Booking":
        """
        Build a booking from an occupied-slot payload.

        The payload is the JSON text ``{"startTime": "11:00", "endTime": "11:15"}``
        stored by the booking API. Unreadable payloads become a 09:00-09:15
        booking so a bad row never hides the whole schedule.
        """
        payload = parse_slot_code(slot_code)
        if payload is None:
            logger.warning("Unreadable slot code %r, using fallback booking", slot_code)
            payload = FALLBACK_SLOT_CODE
        return cls.from_text(payload["startTime"], payload["endTime"])

    def widened(self, granularity: int) -> "Booking":
        """Single-point bookings also block the following slot."""
        if self.start == self.end:
            return Booking(start=self.start, end=add_minutes(self.end, granularity))
        return self

    def covers(self, minute: int) -> bool:
        return self.start <= minute <= self.end


@dataclass(frozen=True)
class EditingRange:
    """
    The slot span of the appointment currently being edited.

    Only shown (as ``current``) on the appointment's original date.
    """
    start_time: str
    end_time: str
    origin_date: Date

    @classmethod
    def from_code(cls, code: Any, origin_date: Date) -> "EditingRange | None":
        """Build from the appointment's stored slot code; None if unreadable."""
        payload = parse_slot_code(code)
        if payload is None:
            return None
        return cls(
            start_time=to_24_hour(payload["startTime"]),
            end_time=to_24_hour(payload["endTime"]),
            origin_date=origin_date,
        )

    @property
    def start_minute(self) -> int:
        return parse_time(self.start_time)

    @property
    def end_minute(self) -> int:
        return parse_time(self.end_time)

    def is_visible_on(self, displayed_date: Date) -> bool:
        return displayed_date == self.origin_date

    def covers(self, minute: int) -> bool:
        return self.start_minute <= minute <= self.end_minute


@dataclass(frozen=True)
class Slot:
    """A generated, classified slot."""
    label: str
    start_minute: int
    status: SlotStatus

    @property
    def display_label(self) -> str:
        return to_12_hour(self.label)

    @property
    def is_selectable(self) -> bool:
        return self.status.is_selectable


@dataclass(frozen=True)
class Selection:
    """
    The committed appointment time, as first and last slot start.

    Serializes to the same ``{"startTime", "endTime"}`` payload the booking
    API stores as slot code.
    """
    start_time: str
    end_time: str

    @classmethod
    def from_labels(cls, labels: Iterable[str]) -> "Selection | None":
        """Collapse a list of slot labels (12- or 24-hour) into a range."""
        converted = sorted(to_24_hour(label) for label in labels)
        if not converted:
            return None
        return cls(start_time=converted[0], end_time=converted[-1])

    @property
    def start_minute(self) -> int:
        return parse_time(self.start_time)

    @property
    def end_minute(self) -> int:
        return parse_time(self.end_time)

    def contains(self, label: str) -> bool:
        """Inclusive membership test on slot starts; unreadable labels are never inside."""
        canonical = normalize_label(label)
        if canonical is None:
            return False
        return self.start_minute <= parse_time(canonical) <= self.end_minute

    def to_payload(self) -> Dict[str, str]:
        return {"startTime": self.start_time, "endTime": self.end_time}

    def __str__(self) -> str:
        return f"{to_12_hour(self.start_time)} - {to_12_hour(self.end_time)}"


@dataclass(frozen=True)
class SlotRun:
    """A contiguous run of eligible slot labels."""
    slots: Tuple[str, ...]

    @property
    def start_time(self) -> str:
        return self.slots[0]

    @property
    def end_time(self) -> str:
        return self.slots[-1]

    def __len__(self) -> int:
        return len(self.slots)

    def __contains__(self, label: object) -> bool:
        return label in self.slots

    def to_selection(self) -> Selection:
        return Selection(start_time=self.start_time, end_time=self.end_time)


@dataclass(frozen=True)
class GroupPosition:
    """Where a slot sits inside a selected run or an occupied booking."""
    position: int
    is_first: bool
    is_last: bool
    group_size: int
    booking_index: int | None = None


@dataclass(frozen=True)
class DaySchedule:
    """
    Everything the booking lookup knows about one date.

    ``working_hours`` is None on non-working days.
    """
    schedule_date: Date
    working_hours: WorkingHours | None
    bookings: Tuple[Booking, ...] = field(default_factory=tuple)
    editing_range: EditingRange | None = None


def parse_slot_code(slot_code: Any) -> Dict[str, str] | None:
    """
    Decode a ``{"startTime", "endTime"}`` slot code.

    Accepts the JSON text or an already decoded mapping. Returns None when
    the payload is unreadable or incomplete.
    """
    if isinstance(slot_code, str):
        try:
            slot_code = json.loads(slot_code)
        except json.JSONDecodeError:
            return None

    if not isinstance(slot_code, dict):
        return None

    start = slot_code.get("startTime")
    end = slot_code.get("endTime")
    if not isinstance(start, str) or not isinstance(end, str) or not start or not end:
        return None

    return {"startTime": start, "endTime": end}


def bookings_from_rows(rows: Iterable[Dict[str, Any]]) -> List[Booking]:
    """Convert occupied-slot rows (each with a ``slot_code``) into bookings."""
    return [Booking.from_slot_code(row.get("slot_code")) for row in rows]
