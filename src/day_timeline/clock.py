"""Conversions between wall-clock strings and minutes since midnight."""

from __future__ import annotations

import logging
import re
from datetime import datetime

from .models import MINUTES_PER_DAY

logger = logging.getLogger(__name__)

_TWELVE_HOUR_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})\s*([AaPp][Mm])$")
_TWENTY_FOUR_HOUR_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")


class InvalidTimeFormat(ValueError):
    """Raised when a clock string cannot be turned into a minute of day."""


def parse_clock(text: str) -> int:
    """Parse ``"H:MM AM"`` or ``"HH:MM[:SS]"`` into minutes since midnight."""
    if not isinstance(text, str):
        raise InvalidTimeFormat(f"Expected a clock string, got {text!r}")
    value = text.strip()

    match = _TWELVE_HOUR_PATTERN.match(value)
    if match:
        hour, minute = int(match.group(1)), int(match.group(2))
        if not 1 <= hour <= 12 or minute > 59:
            raise InvalidTimeFormat(f"Clock value out of range: {text!r}")
        hour %= 12
        if match.group(3).upper() == "PM":
            hour += 12
        return hour * 60 + minute

    match = _TWENTY_FOUR_HOUR_PATTERN.match(value)
    if match:
        hour, minute = int(match.group(1)), int(match.group(2))
        seconds = int(match.group(3)) if match.group(3) is not None else 0
        if hour > 23 or minute > 59 or seconds > 59:
            raise InvalidTimeFormat(f"Clock value out of range: {text!r}")
        return hour * 60 + minute

    raise InvalidTimeFormat(f"Unrecognized clock format: {text!r}")


def parse_clock_or_default(text: str, default: int = 0) -> int:
    try:
        return parse_clock(text)
    except InvalidTimeFormat:
        logger.warning("Could not parse clock value %r; using minute %d.", text, default)
        return default


def format_clock(minute: int) -> str:
    """Render a minute of day as canonical 12-hour time, e.g. ``9:05 AM``."""
    minute %= MINUTES_PER_DAY
    hour, mins = divmod(minute, 60)
    meridiem = "AM" if hour < 12 else "PM"
    display_hour = hour % 12 or 12
    return f"{display_hour}:{mins:02d} {meridiem}"


def add_minutes(minute: int, delta: int) -> int:
    return minute + delta


def diff_minutes(a: int, b: int) -> int:
    return a - b


def minute_of(instant: datetime) -> int:
    return instant.hour * 60 + instant.minute
