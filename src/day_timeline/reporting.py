"""Reporting utilities for CLI output."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Optional

from .clock import format_clock, minute_of
from .models import FocusLogEntry, LaidOutSegment, OvernightPart
from .timeline import DayView


@dataclass(slots=True)
class FocusStatistics:
    start: date
    end: date
    days: int
    total_focus_minutes: float
    completed_sessions: int

    @property
    def average_focus_minutes_per_day(self) -> float:
        return round(self.total_focus_minutes / self.days, 1) if self.days else 0.0


def focus_statistics(
    focus_logs: Iterable[FocusLogEntry], end_day: date, days: int = 7
) -> FocusStatistics:
    """Aggregate completed focus sessions started in the ``days`` ending on ``end_day``."""
    days = max(days, 1)
    start_day = end_day - timedelta(days=days - 1)
    total_seconds = 0.0
    completed = 0
    for entry in focus_logs:
        if entry.start_instant is None or entry.end_instant is None:
            continue
        if not start_day <= entry.start_instant.date() <= end_day:
            continue
        total_seconds += entry.duration_seconds
        completed += 1
    return FocusStatistics(
        start=start_day,
        end=end_day,
        days=days,
        total_focus_minutes=round(total_seconds / 60.0, 1),
        completed_sessions=completed,
    )


class TimelinePrinter:
    """Render a composed day in the console."""

    def print_day(self, view: DayView) -> None:
        print(f"Timeline for {view.day.strftime('%a %Y-%m-%d')}")
        print("-" * 60)
        if not view.segments:
            print("No activities logged for this day.")
            return

        for item in view.segments:
            print(format_segment_row(item))

        print()
        for kind, bucket in view.summary.items():
            if bucket.count:
                print(
                    f"{kind.value.capitalize():<8} {bucket.count:>3} block(s)  "
                    f"{format_duration(bucket.minutes * 60)}"
                )
        cursor_line = self.cursor_line(view.cursor, minute_of(view.generated_at))
        if cursor_line:
            print(cursor_line)

    @staticmethod
    def cursor_line(cursor: Optional[float], minute: int) -> Optional[str]:
        if cursor is None:
            return None
        return f"Now {format_clock(minute)} (offset {cursor:.1f})"

    def print_statistics(self, stats: FocusStatistics) -> None:
        print(f"Focus statistics {stats.start:%Y-%m-%d} to {stats.end:%Y-%m-%d}")
        print("-" * 40)
        print(f"Sessions completed: {stats.completed_sessions}")
        print(f"Total focus time:   {format_duration(stats.total_focus_minutes * 60)}")
        print(
            "Average per day:    "
            f"{format_duration(stats.average_focus_minutes_per_day * 60)}"
        )


def format_segment_row(item: LaidOutSegment) -> str:
    segment = item.segment
    span = f"{format_clock(segment.start_minute)} - {format_clock(segment.end_exclusive)}"
    marker = ""
    if segment.overnight_part is OvernightPart.START:
        marker = " (continues tomorrow)"
    elif segment.overnight_part is OvernightPart.END:
        marker = " (from yesterday)"
    return (
        f"{span:<22} {segment.kind.value:<8} {segment.title[:30]:<30}"
        f"{marker}  @{item.top:.0f}+{item.height:.0f}"
    )


def format_duration(seconds: float) -> str:
    total_seconds = int(round(seconds))
    hours, remainder = divmod(total_seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"
