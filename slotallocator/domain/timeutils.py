"""
Time normalization helpers.

Clinic data mixes 24-hour text ("14:30"), 12-hour text ("2:30 PM") and the
occasional free-form value. Everything inside the engine works on
minute-of-day integers; these helpers convert between the two worlds.

Parsing is lenient on purpose: text without a recognizable time falls back to
the 09:00 anchor instead of raising, so slot generation stays total.
"""

import logging
import re

logger = logging.getLogger(__name__)

FALLBACK_MINUTE = 9 * 60
FALLBACK_LABEL = "09:00"

_TIME_PATTERN = re.compile(r"(\d{1,2}):(\d{2})")
_MERIDIAN_TIME_PATTERN = re.compile(r"(\d{1,2}):(\d{2})\s*(am|pm)")
_LOOSE_MERIDIAN_PATTERN = re.compile(r"(\d{1,2}):?(\d{0,2})\s*(am|pm)")
_CANONICAL_PATTERN = re.compile(r"^[0-2]?\d:[0-5]\d$")


def _has_meridian(text: str) -> bool:
    return "am" in text or "pm" in text


def _apply_meridian(hours: int, meridian: str) -> int:
    if meridian == "pm" and hours != 12:
        return hours + 12
    if meridian == "am" and hours == 12:
        return 0
    return hours


def parse_time(text: str) -> int:
    """
    Parse arbitrary time text into a minute-of-day value.

    The first ``h:mm`` pattern wins; an ``am``/``pm`` marker anywhere in the
    text (case-insensitive) turns it into a 12-hour reading.

    Args:
        text: Time text such as "09:15", "9:15 am" or "Start: 2:00PM"

    Returns:
        Minutes since midnight, or 540 (09:00) if no time could be found
    """
    clean = (text or "").strip().lower()
    match = _TIME_PATTERN.search(clean)

    if not match:
        logger.debug("No time found in %r, falling back to %s", text, FALLBACK_LABEL)
        return FALLBACK_MINUTE

    hours = int(match.group(1))
    minutes = int(match.group(2))

    if "pm" in clean and hours < 12:
        hours += 12
    if "am" in clean and hours == 12:
        hours = 0

    return hours * 60 + minutes


def format_time(minute_of_day: int) -> str:
    """Format a minute-of-day value as canonical 24-hour "HH:MM"."""
    hours, minutes = divmod(minute_of_day, 60)
    return f"{hours:02d}:{minutes:02d}"


def add_minutes(minute_of_day: int, delta: int) -> int:
    """Shift a minute-of-day value. Slots never cross midnight, so no rollover."""
    return minute_of_day + delta


def to_12_hour(time24: str) -> str:
    """
    Convert "HH:MM" to "h:MM AM/PM" for display.

    Text that is not shaped like a 24-hour time is returned unchanged.
    """
    if not _CANONICAL_PATTERN.match(time24):
        return time24

    hour_text, minutes = time24.split(":")
    hours = int(hour_text)
    meridian = "PM" if hours >= 12 else "AM"
    hours = hours % 12
    if hours == 0:
        hours = 12

    return f"{hours}:{minutes} {meridian}"


def to_24_hour(text: str | None) -> str:
    """
    Convert 12-hour display text back to "HH:MM".

    Text without an am/pm marker is assumed to be 24-hour already and is only
    stripped and lower-cased; missing text gives "". Unreadable 12-hour text
    falls back to "09:00".
    """
    clean = (text or "").strip().lower()
    if not _has_meridian(clean):
        return clean

    match = _MERIDIAN_TIME_PATTERN.search(clean)
    if not match:
        return FALLBACK_LABEL

    hours = _apply_meridian(int(match.group(1)), match.group(3))
    return f"{hours:02d}:{match.group(2)}"


def normalize_label(text: str | None) -> str | None:
    """
    Canonicalize a slot label ("9:00", "09:00", "9:00 am") to "HH:MM".

    Unlike ``parse_time`` there is no fallback: text that is not a time
    gives None, so it can never stand in for a real slot.
    """
    clean = (text or "").strip().lower()

    if _has_meridian(clean):
        match = _MERIDIAN_TIME_PATTERN.fullmatch(clean)
        if not match:
            return None
        hours = _apply_meridian(int(match.group(1)), match.group(3))
        return format_time(hours * 60 + int(match.group(2)))

    match = _TIME_PATTERN.fullmatch(clean)
    if not match:
        return None
    return format_time(int(match.group(1)) * 60 + int(match.group(2)))


def normalize_clock_text(text: str | None) -> str:
    """
    Normalize clinic working-hour text to "HH:MM".

    Accepts the loose formats found in clinic settings, e.g. "9am",
    "9:30 PM", "8:0" or "17:00".
    """
    if not text:
        return FALLBACK_LABEL

    clean = text.strip().lower()

    if not _has_meridian(clean):
        hours, _, minutes = clean.partition(":")
        return f"{hours.zfill(2)}:{(minutes or '00').zfill(2)}"

    match = _LOOSE_MERIDIAN_PATTERN.search(clean)
    if not match:
        return FALLBACK_LABEL

    hours = _apply_meridian(int(match.group(1)), match.group(3))
    minutes = int(match.group(2)) if match.group(2) else 0

    return f"{hours:02d}:{minutes:02d}"
