"""End-to-end composition of a single day's timeline."""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Iterable, Optional

from .collector import collect_activities
from .config import LayoutMode, TimelineSettings
from .cursor import cursor_position
from .idle import synthesize_idle
from .layout import layout_segments
from .models import (
    ActivitySegment,
    FocusLogEntry,
    LaidOutSegment,
    RoutineDefinition,
    SegmentKind,
)

logger = logging.getLogger(__name__)


def compose_timeline(
    day: date,
    focus_logs: Iterable[FocusLogEntry],
    routines: Iterable[RoutineDefinition],
    *,
    now: datetime,
    idle_anchor: Optional[int] = None,
    settings: Optional[TimelineSettings] = None,
    mode: Optional[LayoutMode] = None,
) -> list[LaidOutSegment]:
    """Collect, order, fill idle gaps and lay out the activity of ``day``."""
    settings = settings or TimelineSettings()
    activities = collect_activities(day, focus_logs, routines, timezone=settings.timezone)
    # sorted() is stable, so focus logs stay ahead of routines on ties.
    activities = sorted(activities, key=lambda segment: segment.start_minute)
    segments = synthesize_idle(activities, day, idle_anchor, now, settings)
    logger.debug(
        "Composed %s: %d activities, %d idle blocks.",
        day.isoformat(),
        len(activities),
        len(segments) - len(activities),
    )
    return layout_segments(segments, settings, mode)


@dataclass(slots=True)
class KindSummary:
    minutes: int = 0
    count: int = 0


def summarize_segments(segments: Iterable[ActivitySegment]) -> dict[SegmentKind, KindSummary]:
    """Total minutes and block counts per segment kind."""
    totals: defaultdict[SegmentKind, KindSummary] = defaultdict(KindSummary)
    for segment in segments:
        bucket = totals[segment.kind]
        bucket.minutes += segment.duration_minutes
        bucket.count += 1
    return {kind: totals[kind] for kind in SegmentKind}


@dataclass(slots=True)
class DayView:
    """A render-ready snapshot of one day."""

    day: date
    generated_at: datetime
    segments: list[LaidOutSegment]
    cursor: Optional[float]
    summary: dict[SegmentKind, KindSummary] = field(default_factory=dict)

    @property
    def is_today(self) -> bool:
        return self.day == self.generated_at.date()

    def to_payload(self) -> dict[str, Any]:
        return {
            "date": self.day.strftime("%Y-%m-%d"),
            "generated_at": self.generated_at.isoformat(),
            "is_today": self.is_today,
            "cursor": self.cursor,
            "segments": [segment.to_payload() for segment in self.segments],
            "summary": {
                kind.value: {"minutes": bucket.minutes, "count": bucket.count}
                for kind, bucket in self.summary.items()
            },
        }


def build_day_view(
    day: date,
    focus_logs: Iterable[FocusLogEntry],
    routines: Iterable[RoutineDefinition],
    *,
    now: datetime,
    idle_anchor: Optional[int] = None,
    settings: Optional[TimelineSettings] = None,
    mode: Optional[LayoutMode] = None,
) -> DayView:
    settings = settings or TimelineSettings()
    laid_out = compose_timeline(
        day,
        focus_logs,
        routines,
        now=now,
        idle_anchor=idle_anchor,
        settings=settings,
        mode=mode,
    )
    return DayView(
        day=day,
        generated_at=now,
        segments=laid_out,
        cursor=cursor_position(day, now, settings),
        summary=summarize_segments(item.segment for item in laid_out),
    )
