"""Position of the "now" marker on a timeline."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from .clock import minute_of
from .config import TimelineSettings


def cursor_position(
    day: date, now: datetime, settings: Optional[TimelineSettings] = None
) -> Optional[float]:
    """Return the offset of ``now`` in layout units, or ``None`` off today."""
    if day != now.date():
        return None
    settings = settings or TimelineSettings()
    return minute_of(now) * settings.px_per_minute
