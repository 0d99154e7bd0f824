"""
Core business logic for generating and classifying appointment slots.

This is the heart of the application - pure domain logic without any
external dependencies (no API calls, no database, no I/O). The clock is
passed in, never read here.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

from pendulum import DateTime

from .models import (
    Booking,
    DaySchedule,
    GroupPosition,
    Selection,
    ServiceSpec,
    Slot,
    SlotStatus,
    WorkingHours,
)
from .timeutils import add_minutes, format_time, normalize_label


@dataclass(frozen=True)
class SlotSchedule:
    """
    The classified slots of one date, in ascending order.

    Lookups accept canonical 24-hour labels, labels without a leading zero
    ("9:00") and 12-hour display text. Anything else matches no slot.
    """
    slots: Tuple[Slot, ...]
    bookings: Tuple[Booking, ...]
    granularity: int
    _by_label: Dict[str, Slot] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "_by_label", {slot.label: slot for slot in self.slots})

    @property
    def labels(self) -> List[str]:
        return [slot.label for slot in self.slots]

    def get(self, label: str) -> Slot | None:
        canonical = normalize_label(label)
        if canonical is None:
            return None
        return self._by_label.get(canonical)

    def __contains__(self, label: object) -> bool:
        return isinstance(label, str) and self.get(label) is not None

    def __len__(self) -> int:
        return len(self.slots)

    def status_of(self, label: str) -> SlotStatus | None:
        slot = self.get(label)
        return slot.status if slot else None

    def selectable(self) -> List[Slot]:
        """Slots that can start or belong to a selection (available or current)."""
        return [slot for slot in self.slots if slot.is_selectable]

    def visible(self, show_occupied: bool = False) -> List[Slot]:
        """Slots to render: everything, or only the selectable ones."""
        if show_occupied:
            return list(self.slots)
        return self.selectable()

    def selection_group_position(
        self,
        label: str,
        selection: Selection | None,
    ) -> GroupPosition | None:
        """Locate a slot inside the committed selection, counted over selectable slots."""
        if selection is None:
            return None

        selectable = [slot.label for slot in self.selectable()]
        wanted = (normalize_label(label), selection.start_time, selection.end_time)
        if any(item not in selectable for item in wanted):
            return None

        index, start_index, end_index = (selectable.index(item) for item in wanted)
        if not start_index <= index <= end_index:
            return None

        return GroupPosition(
            position=index - start_index,
            is_first=index == start_index,
            is_last=index == end_index,
            group_size=end_index - start_index + 1,
        )

    def booking_group_position(self, label: str) -> GroupPosition | None:
        """
        Locate a slot inside the occupied booking that covers it.

        Returns None when no booking covers the slot.
        """
        slot = self.get(label)
        if slot is None:
            return None
        minute = slot.start_minute

        for index, booking in enumerate(self.bookings):
            widened = booking.widened(self.granularity)
            if not widened.covers(minute):
                continue

            group = [slot for slot in self.slots if widened.covers(slot.start_minute)]
            positions = [slot.start_minute for slot in group]
            if minute not in positions:
                continue

            position = positions.index(minute)
            return GroupPosition(
                position=position,
                is_first=position == 0,
                is_last=position == len(group) - 1,
                group_size=len(group),
                booking_index=index,
            )

        return None


class SlotCalculator:
    """
    Generates and classifies bookable slots for one schedule date.

    Algorithm:
    1. Step from the opening time by the slot granularity
    2. Keep every start whose full booking (service + buffer) ends by closing
    3. Classify each start as past, current, occupied or available
    """

    def __init__(self, service: ServiceSpec):
        self.service = service

    def generate_slots(self, working_hours: WorkingHours | None) -> List[int]:
        """
        Enumerate candidate slot starts across working hours.

        Args:
            working_hours: Opening bounds, or None for a non-working day

        Returns:
            Strictly increasing list of minute-of-day slot starts
        """
        if working_hours is None or self.service.granularity <= 0:
            return []

        total_duration = self.service.total_duration
        starts: List[int] = []
        current = working_hours.start

        while add_minutes(current, total_duration) <= working_hours.end:
            starts.append(current)
            current = add_minutes(current, self.service.granularity)

        return starts

    def classify(
        self,
        slot_starts: Sequence[int],
        schedule: DaySchedule,
        now: DateTime,
    ) -> List[Slot]:
        """
        Label every slot start with its status.

        Priority is past > current > occupied > available. A slot starting
        exactly at ``now`` is not past.
        """
        is_today = schedule.schedule_date == now.date()
        now_seconds = now.hour * 3600 + now.minute * 60 + now.second

        editing = schedule.editing_range
        show_editing = editing is not None and editing.is_visible_on(schedule.schedule_date)

        widened = [
            booking.widened(self.service.granularity) for booking in schedule.bookings
        ]

        slots: List[Slot] = []
        for start in slot_starts:
            if is_today and start * 60 < now_seconds:
                status = SlotStatus.PAST
            elif show_editing and editing.covers(start):
                status = SlotStatus.CURRENT
            elif any(booking.covers(start) for booking in widened):
                status = SlotStatus.OCCUPIED
            else:
                status = SlotStatus.AVAILABLE

            slots.append(Slot(label=format_time(start), start_minute=start, status=status))

        return slots

    def build_schedule(self, schedule: DaySchedule, now: DateTime) -> SlotSchedule:
        """Generate and classify in one go."""
        starts = self.generate_slots(schedule.working_hours)
        return SlotSchedule(
            slots=tuple(self.classify(starts, schedule, now)),
            bookings=tuple(schedule.bookings),
            granularity=self.service.granularity,
        )
