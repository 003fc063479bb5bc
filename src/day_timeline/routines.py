"""Projection of recurring routines onto a single day."""

from __future__ import annotations

import logging
from datetime import date

from .models import (
    LAST_MINUTE,
    MINUTES_PER_DAY,
    ActivitySegment,
    OvernightPart,
    RoutineDefinition,
    SegmentKind,
)

logger = logging.getLogger(__name__)


def expand_routine(routine: RoutineDefinition, day: date) -> list[ActivitySegment]:
    """Return the one or two segments ``routine`` occupies on ``day``.

    Every routine is projected onto every day; ``weekday_mask`` is not
    consulted. A routine whose end wraps past midnight is split into a
    ``START`` part ending at 23:59 and an ``END`` part starting at 00:00.
    """
    start = min(max(routine.start_minute, 0), LAST_MINUTE)
    duration = _effective_duration(routine)

    if duration == 0:
        return [_segment(routine, f"routine-{routine.id}", start, start, OvernightPart.NONE)]

    end = (start + duration) % MINUTES_PER_DAY
    if end > start:
        return [_segment(routine, f"routine-{routine.id}", start, end, OvernightPart.NONE)]

    segments = [
        _segment(routine, f"routine-{routine.id}-start", start, LAST_MINUTE, OvernightPart.START)
    ]
    if end > 0:
        segments.append(
            _segment(routine, f"routine-{routine.id}-end", 0, end - 1, OvernightPart.END)
        )
    logger.debug(
        "Routine %s wraps past midnight on %s; split into %d part(s).",
        routine.id,
        day.isoformat(),
        len(segments),
    )
    return segments


def _effective_duration(routine: RoutineDefinition) -> int:
    duration = routine.duration_minutes
    if not duration or duration < 0:
        return 0
    if duration > MINUTES_PER_DAY:
        logger.debug(
            "Routine %s lasts %d minutes; clamping to one day.", routine.id, duration
        )
        return MINUTES_PER_DAY
    return int(duration)


def _segment(
    routine: RoutineDefinition,
    segment_id: str,
    start: int,
    end: int,
    part: OvernightPart,
) -> ActivitySegment:
    return ActivitySegment(
        id=segment_id,
        title=routine.name,
        start_minute=start,
        end_minute=end,
        kind=SegmentKind.ROUTINE,
        description=routine.description,
        source_routine_id=str(routine.id),
        overnight_part=part,
    )
