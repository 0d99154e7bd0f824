"""
Contiguous range resolution and hover previews.

A booking needs ``slots_needed`` consecutive slots. Contiguity is strict:
the run may not skip over an occupied or past slot to collect "the next N
available" ones.
"""

from dataclasses import dataclass
from typing import List

from .models import ServiceSpec, SlotRun
from .slot_calculator import SlotSchedule
from .timeutils import add_minutes, format_time, normalize_label


@dataclass(frozen=True)
class HoverPreview:
    """What a click on the hovered slot would select, if anything."""
    hovered: str
    run: SlotRun | None

    @property
    def is_invalid(self) -> bool:
        return self.run is None

    @property
    def slots(self) -> List[str]:
        return list(self.run.slots) if self.run else []

    def covers(self, label: str) -> bool:
        return self.run is not None and normalize_label(label) in self.run


class RangeResolver:
    """Walks forward from a candidate slot to build a contiguous run."""

    def __init__(self, schedule: SlotSchedule, service: ServiceSpec):
        self.schedule = schedule
        self.service = service

    def resolve(self, start_label: str) -> SlotRun | None:
        """
        Build the run of ``slots_needed`` slots starting at ``start_label``.

        The start and each following step must be a generated slot whose
        status is available or current; the first miss aborts. Text that is
        not a slot label resolves to nothing.

        Returns:
            The run, or None if the slot cannot start a booking
        """
        first = self.schedule.get(start_label)
        if first is None:
            return None

        run: List[str] = []

        for step in range(self.service.slots_needed):
            label = format_time(add_minutes(first.start_minute, step * self.service.granularity))
            slot = self.schedule.get(label)
            if slot is None or not slot.is_selectable:
                return None
            run.append(label)

        return SlotRun(slots=tuple(run))

    def preview(self, hovered_label: str) -> HoverPreview:
        """Read-only resolution for hover feedback."""
        return HoverPreview(
            hovered=normalize_label(hovered_label) or (hovered_label or "").strip(),
            run=self.resolve(hovered_label),
        )
