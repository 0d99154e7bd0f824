"""
Domain layer - Pure business logic without external dependencies.
"""

from .models import (
    Booking,
    DaySchedule,
    EditingRange,
    GroupPosition,
    Selection,
    ServiceSpec,
    Slot,
    SlotRun,
    SlotStatus,
    WorkingHours,
)
from .range_resolver import HoverPreview, RangeResolver
from .selection import SelectionStateMachine, ToggleOutcome, ToggleResult
from .slot_calculator import SlotCalculator, SlotSchedule

__all__ = [
    "Booking",
    "DaySchedule",
    "EditingRange",
    "GroupPosition",
    "HoverPreview",
    "RangeResolver",
    "Selection",
    "SelectionStateMachine",
    "ServiceSpec",
    "Slot",
    "SlotCalculator",
    "SlotRun",
    "SlotSchedule",
    "SlotStatus",
    "ToggleOutcome",
    "ToggleResult",
    "WorkingHours",
]
