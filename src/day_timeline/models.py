"""Domain models for the daily timeline."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional

MINUTES_PER_DAY = 1440
LAST_MINUTE = MINUTES_PER_DAY - 1


class SegmentKind(str, Enum):
    FOCUS = "focus"
    ROUTINE = "routine"
    IDLE = "idle"


class OvernightPart(str, Enum):
    NONE = "none"
    START = "start"
    END = "end"


@dataclass(slots=True)
class ActivitySegment:
    """A block of time on a single day, expressed in minutes since midnight.

    Overnight parts use an inclusive ``end_minute`` (the ``START`` part ends
    on minute 1439); every other segment uses an exclusive end.
    """

    id: str
    title: str
    start_minute: int
    end_minute: int
    kind: SegmentKind
    description: Optional[str] = None
    source_routine_id: Optional[str] = None
    overnight_part: OvernightPart = OvernightPart.NONE

    @property
    def end_exclusive(self) -> int:
        if self.overnight_part is OvernightPart.NONE:
            return self.end_minute
        return self.end_minute + 1

    @property
    def duration_minutes(self) -> int:
        return max(self.end_exclusive - self.start_minute, 0)


@dataclass(slots=True)
class LaidOutSegment:
    """A segment plus its vertical placement in layout units."""

    segment: ActivitySegment
    top: float
    height: float

    def to_payload(self) -> dict[str, Any]:
        segment = self.segment
        return {
            "id": segment.id,
            "title": segment.title,
            "start_minute": segment.start_minute,
            "end_minute": segment.end_minute,
            "kind": segment.kind.value,
            "description": segment.description,
            "source_routine_id": segment.source_routine_id,
            "overnight_part": segment.overnight_part.value,
            "duration_minutes": segment.duration_minutes,
            "top": self.top,
            "height": self.height,
        }


@dataclass(slots=True)
class RoutineDefinition:
    """A recurring routine. ``weekday_mask`` is stored but not consulted."""

    id: str
    name: str
    start_minute: int
    duration_minutes: Optional[int]
    description: Optional[str] = None
    active: bool = True
    weekday_mask: Optional[str] = None


@dataclass(slots=True)
class FocusLogEntry:
    """A completed (or still running) focus session with absolute instants."""

    id: str
    start_instant: Optional[datetime]
    end_instant: Optional[datetime] = None
    title: Optional[str] = None
    description: Optional[str] = None
    linked_task_title: Optional[str] = None

    @property
    def duration_seconds(self) -> float:
        if self.start_instant is None or self.end_instant is None:
            return 0.0
        return max((self.end_instant - self.start_instant).total_seconds(), 0.0)
