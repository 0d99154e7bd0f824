"""
Tests for time normalization helpers.
"""

import pytest

from slotallocator.domain.timeutils import (
    add_minutes,
    format_time,
    normalize_clock_text,
    normalize_label,
    parse_time,
    to_12_hour,
    to_24_hour,
)


class TestParseTime:
    """Tests for parse_time."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("09:15", 555),
            ("9:15", 555),
            ("2:30 PM", 870),
            ("2:30pm", 870),
            ("12:00 am", 0),
            ("12:15 PM", 735),
            ("Start at 9:05PM today", 1265),
            ("13:00 pm", 780),
        ],
    )
    def test_parses_24_and_12_hour_text(self, text, expected):
        """Test that the first h:mm pattern is read, honouring am/pm markers."""
        assert parse_time(text) == expected

    @pytest.mark.parametrize("text", ["", "noon", "9 o'clock", None])
    def test_unreadable_text_falls_back_to_nine(self, text):
        """Test that text without a time yields the 09:00 anchor instead of raising."""
        assert parse_time(text) == 540


class TestFormatting:
    """Tests for formatting and conversion helpers."""

    def test_format_time_pads(self):
        assert format_time(545) == "09:05"
        assert format_time(0) == "00:00"
        assert format_time(1020) == "17:00"

    def test_add_minutes(self):
        assert add_minutes(600, 15) == 615
        assert add_minutes(600, -30) == 570

    @pytest.mark.parametrize(
        "time24, expected",
        [
            ("00:00", "12:00 AM"),
            ("09:00", "9:00 AM"),
            ("12:00", "12:00 PM"),
            ("13:05", "1:05 PM"),
            ("23:45", "11:45 PM"),
        ],
    )
    def test_to_12_hour(self, time24, expected):
        assert to_12_hour(time24) == expected

    def test_to_12_hour_passes_through_unexpected_text(self):
        """Test that to_12_hour is the identity for non 24-hour text."""
        assert to_12_hour("10:00 AM") == "10:00 AM"
        assert to_12_hour("soon") == "soon"

    def test_to_24_hour(self):
        assert to_24_hour("1:05 PM") == "13:05"
        assert to_24_hour("12:30 am") == "00:30"
        assert to_24_hour(" 14:00 ") == "14:00"

    def test_to_24_hour_unreadable_meridian_text_falls_back(self):
        assert to_24_hour("pm") == "09:00"

    def test_to_24_hour_accepts_missing_text(self):
        assert to_24_hour(None) == ""
        assert to_24_hour("") == ""

    def test_round_trip_for_every_canonical_label(self):
        """Test that every label the engine can emit survives 12-hour display."""
        for minute in range(0, 24 * 60, 5):
            label = format_time(minute)
            assert to_24_hour(to_12_hour(label)) == label


class TestNormalizeLabel:
    """Tests for slot label canonicalization."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("09:00", "09:00"),
            ("9:00", "09:00"),
            (" 9:15 ", "09:15"),
            ("2:00 PM", "14:00"),
            ("12:15am", "00:15"),
            ("14:45", "14:45"),
        ],
    )
    def test_canonicalizes_slot_labels(self, text, expected):
        assert normalize_label(text) == expected

    @pytest.mark.parametrize("text", [None, "", "nonsense", "pm", "oops 9:00", "09:00 tomorrow", "9"])
    def test_text_that_is_not_a_time_gives_none(self, text):
        assert normalize_label(text) is None


class TestNormalizeClockText:
    """Tests for working-hour text normalization."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("9am", "09:00"),
            ("5 pm", "17:00"),
            ("9:30 PM", "21:30"),
            ("12pm", "12:00"),
            ("12:00 AM", "00:00"),
            ("8:0", "08:00"),
            ("17:00", "17:00"),
            ("9", "09:00"),
        ],
    )
    def test_normalizes_loose_formats(self, text, expected):
        assert normalize_clock_text(text) == expected

    @pytest.mark.parametrize("text", [None, "", "closed pm"])
    def test_missing_or_unreadable_falls_back(self, text):
        assert normalize_clock_text(text) == "09:00"
