"""Gather the focus sessions and routine blocks that belong to one day."""

from __future__ import annotations

import logging
from datetime import date, datetime, tzinfo
from typing import Iterable, Optional

from .clock import minute_of
from .models import (
    MINUTES_PER_DAY,
    ActivitySegment,
    FocusLogEntry,
    RoutineDefinition,
    SegmentKind,
)
from .normalization import normalize_title, resolve_focus_title
from .routines import expand_routine

logger = logging.getLogger(__name__)


def collect_activities(
    day: date,
    focus_logs: Iterable[FocusLogEntry],
    routines: Iterable[RoutineDefinition],
    *,
    timezone: Optional[tzinfo] = None,
) -> list[ActivitySegment]:
    """Return focus segments followed by routine segments, both in input order."""
    segments: list[ActivitySegment] = []

    for entry in focus_logs:
        segment = focus_segment(entry, day, timezone=timezone)
        if segment is not None:
            segments.append(segment)

    for routine in routines:
        if not routine.active:
            continue
        segments.extend(expand_routine(routine, day))

    return segments


def focus_segment(
    entry: FocusLogEntry, day: date, *, timezone: Optional[tzinfo] = None
) -> Optional[ActivitySegment]:
    """Project ``entry`` onto ``day``, or ``None`` when it does not belong there."""
    if entry.start_instant is None:
        logger.debug("Skipping focus log %s without a start instant.", entry.id)
        return None
    if entry.end_instant is None:
        return None

    start = _local(entry.start_instant, timezone)
    if start.date() != day:
        return None
    end = _local(entry.end_instant, timezone)

    start_minute = minute_of(start)
    if end.date() > day:
        end_minute = MINUTES_PER_DAY
    elif end < start:
        logger.debug("Focus log %s ends before it starts; clamping.", entry.id)
        end_minute = start_minute
    else:
        end_minute = minute_of(end)

    return ActivitySegment(
        id=f"focus-{entry.id}",
        title=resolve_focus_title(entry.title, entry.linked_task_title, entry.description),
        start_minute=start_minute,
        end_minute=max(end_minute, start_minute),
        kind=SegmentKind.FOCUS,
        description=normalize_title(entry.description),
    )


def _local(instant: datetime, timezone: Optional[tzinfo]) -> datetime:
    """Wall-clock time as a naive datetime, so mixed instants compare."""
    if instant.tzinfo is None:
        return instant
    return instant.astimezone(timezone).replace(tzinfo=None)
