"""
Application services for building and driving the slot engine of one date.

``SlotEngine`` is the thin facade a presentation layer talks to: it exposes
``generate``, ``classify``, ``resolve``, ``preview`` and ``toggle`` over the
pure domain objects. ``SlotEngineService`` fetches the day's data through a
booking lookup adapter and hands out a fresh, empty engine on every load,
so a selection never outlives the bookings it was resolved against.
"""

from __future__ import annotations

import dataclasses
from typing import List, Protocol

from pendulum import Date, DateTime

from ..domain.models import DaySchedule, EditingRange, Selection, ServiceSpec, Slot, SlotRun
from ..domain.range_resolver import HoverPreview, RangeResolver
from ..domain.selection import SelectionStateMachine, ToggleResult
from ..domain.slot_calculator import SlotCalculator, SlotSchedule


class BookingLookupProtocol(Protocol):
    """Protocol describing the booking lookup behaviour needed by the service."""

    async def get_day_schedule(self, schedule_date: Date) -> DaySchedule:
        """Return working hours and occupied bookings for one date."""


class SlotEngine:
    """
    Slot engine for a single date and service.

    Inputs are fixed at construction; the only mutable state is the
    selection held by the state machine.
    """

    def __init__(
        self,
        day: DaySchedule,
        service: ServiceSpec,
        now: DateTime,
    ) -> None:
        self.day = day
        self.service = service
        self.now = now

        self._calculator = SlotCalculator(service=service)
        self._schedule = self._calculator.build_schedule(day, now)
        self._resolver = RangeResolver(schedule=self._schedule, service=service)
        self._machine = SelectionStateMachine(resolver=self._resolver)

    @property
    def schedule(self) -> SlotSchedule:
        return self._schedule

    @property
    def selection(self) -> Selection | None:
        return self._machine.selection

    def generate(self) -> List[str]:
        """Slot labels in ascending order."""
        return self._schedule.labels

    def classify(self) -> List[Slot]:
        return list(self._schedule.slots)

    def resolve(self, label: str) -> SlotRun | None:
        return self._resolver.resolve(label)

    def preview(self, hovered_label: str) -> HoverPreview:
        return self._resolver.preview(hovered_label)

    def toggle(self, clicked_label: str) -> ToggleResult:
        return self._machine.toggle(clicked_label)


class SlotEngineService:
    """
    Orchestrates booking lookup and engine construction.

    Dependency inversion toward a protocol makes it easy to plug in the real
    booking API adapter or the JSON-backed source in tests.
    """

    def __init__(self, lookup: BookingLookupProtocol, service: ServiceSpec) -> None:
        self._lookup = lookup
        self._service = service
        self._engine: SlotEngine | None = None

    @property
    def engine(self) -> SlotEngine | None:
        return self._engine

    async def load_day(
        self,
        *,
        schedule_date: Date,
        now: DateTime,
        editing_range: EditingRange | None = None,
    ) -> SlotEngine:
        """
        Fetch the date's schedule and build a fresh engine for it.

        The new engine always starts without a selection, also when the
        same date is reloaded with fresh bookings.
        """
        day = await self._lookup.get_day_schedule(schedule_date)

        if editing_range is not None:
            day = dataclasses.replace(day, editing_range=editing_range)

        self._engine = SlotEngine(day=day, service=self._service, now=now)
        return self._engine
