"""
Tests for the selection state machine.
"""

import logging

import pendulum

from slotallocator.domain.models import (
    Booking,
    DaySchedule,
    EditingRange,
    Selection,
    ServiceSpec,
    WorkingHours,
)
from slotallocator.domain.range_resolver import RangeResolver
from slotallocator.domain.selection import SelectionStateMachine, ToggleOutcome
from slotallocator.domain.slot_calculator import SlotCalculator

MONDAY = pendulum.date(2024, 11, 25)
EARLIER = pendulum.parse("2024-11-20 10:00", tz="Europe/Berlin")


def _machine(bookings=(), editing_range=None) -> SelectionStateMachine:
    service = ServiceSpec(service_duration=45, buffer_time=15, granularity=15)
    day = DaySchedule(
        schedule_date=MONDAY,
        working_hours=WorkingHours.from_text("09:00", "17:00"),
        bookings=tuple(bookings),
        editing_range=editing_range,
    )
    schedule = SlotCalculator(service=service).build_schedule(day, EARLIER)
    return SelectionStateMachine(resolver=RangeResolver(schedule=schedule, service=service))


class TestToggle:
    """Tests for SelectionStateMachine.toggle."""

    def test_click_commits_run_and_reclick_clears(self):
        """Test select then deselect of a four-slot appointment."""
        machine = _machine()

        result = machine.toggle("10:00")

        assert result.outcome == ToggleOutcome.SELECTED
        assert machine.selection == Selection(start_time="10:00", end_time="10:45")

        result = machine.toggle("10:00")

        assert result.outcome == ToggleOutcome.CLEARED
        assert result.selection is None
        assert machine.is_empty

    def test_click_anywhere_inside_run_clears(self):
        machine = _machine()
        machine.toggle("10:00")

        result = machine.toggle("10:45")

        assert result.outcome == ToggleOutcome.CLEARED
        assert machine.selection is None

    def test_blocked_click_keeps_state(self, caplog):
        """Test that a run crossing a booking is rejected without mutation."""
        machine = _machine([Booking.from_text("10:15", "10:15")])

        with caplog.at_level(logging.WARNING, logger="slotallocator.domain.selection"):
            result = machine.toggle("10:00")

        assert result.blocked
        assert result.selection is None
        assert machine.is_empty
        assert "Selection blocked" in caplog.text

    def test_blocked_click_keeps_existing_selection(self):
        machine = _machine([Booking.from_text("10:15", "10:15")])
        machine.toggle("14:00")

        result = machine.toggle("10:00")

        assert result.outcome == ToggleOutcome.BLOCKED
        assert result.selection == Selection(start_time="14:00", end_time="14:45")
        assert machine.selection == Selection(start_time="14:00", end_time="14:45")

    def test_new_click_replaces_selection(self):
        """Test that only one selection ever exists."""
        machine = _machine()
        machine.toggle("10:00")

        result = machine.toggle("13:00")

        assert result.outcome == ToggleOutcome.SELECTED
        assert machine.selection == Selection(start_time="13:00", end_time="13:45")

    def test_overlapping_click_outside_run_replaces(self):
        """Test that a click just after the run starts a new run rather than extending."""
        machine = _machine()
        machine.toggle("10:00")

        machine.toggle("11:00")

        assert machine.selection == Selection(start_time="11:00", end_time="11:45")

    def test_editing_range_is_selectable_and_clearable(self):
        editing = EditingRange(start_time="11:00", end_time="11:45", origin_date=MONDAY)
        machine = _machine(
            bookings=[Booking.from_text("11:00", "11:45")],
            editing_range=editing,
        )

        assert machine.toggle("11:00").outcome == ToggleOutcome.SELECTED
        assert machine.selection == Selection(start_time="11:00", end_time="11:45")
        assert machine.toggle("11:30").outcome == ToggleOutcome.CLEARED
        assert machine.is_empty

    def test_edit_can_shift_into_adjacent_free_slots(self):
        editing = EditingRange(start_time="11:00", end_time="11:45", origin_date=MONDAY)
        machine = _machine(bookings=[Booking.from_text("11:00", "11:45")], editing_range=editing)

        result = machine.toggle("11:30")

        assert result.outcome == ToggleOutcome.SELECTED
        assert machine.selection == Selection(start_time="11:30", end_time="12:15")

    def test_new_machine_starts_empty(self):
        machine = _machine()

        assert machine.is_empty
        assert machine.selection is None


class TestNonSlotClicks:
    """Tests for clicks on text that is not a generated slot."""

    def test_unreadable_click_on_empty_machine_is_blocked(self):
        """Test that garbage never falls back to the 09:00 slot."""
        machine = _machine()

        result = machine.toggle("nonsense")

        assert result.outcome == ToggleOutcome.BLOCKED
        assert machine.is_empty

    def test_unreadable_click_keeps_existing_selection(self):
        machine = _machine()
        machine.toggle("14:00")

        result = machine.toggle("oops")

        assert result.outcome == ToggleOutcome.BLOCKED
        assert machine.selection == Selection(start_time="14:00", end_time="14:45")

    def test_unreadable_click_does_not_clear_morning_selection(self):
        """Test that garbage cannot clear a run covering 09:00."""
        machine = _machine()
        machine.toggle("09:00")

        result = machine.toggle("garbage")

        assert result.outcome == ToggleOutcome.BLOCKED
        assert machine.selection == Selection(start_time="09:00", end_time="09:45")

    def test_time_outside_working_hours_is_blocked(self):
        machine = _machine()
        machine.toggle("14:00")

        result = machine.toggle("07:00")

        assert result.blocked
        assert machine.selection == Selection(start_time="14:00", end_time="14:45")

    def test_label_without_leading_zero_clears(self):
        machine = _machine()
        machine.toggle("09:00")

        assert machine.toggle("9:15").outcome == ToggleOutcome.CLEARED
        assert machine.toggle("9:00").outcome == ToggleOutcome.SELECTED
        assert machine.selection == Selection(start_time="09:00", end_time="09:45")
