"""Insert synthetic idle blocks into the gaps of today's activity."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from .clock import minute_of
from .config import TimelineSettings
from .models import ActivitySegment, SegmentKind

IDLE_TITLE = "Idle Time"


def synthesize_idle(
    sorted_activities: Sequence[ActivitySegment],
    day: date,
    idle_anchor: Optional[int],
    now: datetime,
    settings: Optional[TimelineSettings] = None,
) -> list[ActivitySegment]:
    """Return ``sorted_activities`` with idle segments filling the gaps.

    Idle time is only synthesized when ``day`` is the calendar day of
    ``now``. Gaps between activities, and the gap after the last activity up
    to ``now``, must exceed the idle threshold; shorter gaps are treated as
    transition noise. The leading gap from ``idle_anchor`` and the
    nothing-happened-yet case are emitted whatever their length.
    """
    settings = settings or TimelineSettings()
    activities = list(sorted_activities)
    if day != now.date():
        return activities

    threshold = settings.idle_threshold_minutes
    now_minute = minute_of(now)

    if not activities:
        if idle_anchor is None:
            return []
        return [idle_segment(idle_anchor, now_minute)]

    result: list[ActivitySegment] = []
    first_start = activities[0].start_minute
    if idle_anchor is not None and idle_anchor < first_start:
        result.append(idle_segment(idle_anchor, first_start))

    covered_until = activities[0].end_exclusive
    result.append(activities[0])
    for activity in activities[1:]:
        if activity.start_minute - covered_until > threshold:
            result.append(idle_segment(covered_until, activity.start_minute))
        result.append(activity)
        covered_until = max(covered_until, activity.end_exclusive)

    if now_minute - covered_until > threshold:
        result.append(idle_segment(covered_until, now_minute))

    result.sort(key=lambda segment: segment.start_minute)
    return result


def idle_segment(start: int, end: int) -> ActivitySegment:
    return ActivitySegment(
        id=f"idle-{start}",
        title=IDLE_TITLE,
        start_minute=start,
        end_minute=max(end, start),
        kind=SegmentKind.IDLE,
    )
