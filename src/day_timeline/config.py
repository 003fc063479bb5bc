"""Configuration models and helpers for the timeline compositor."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from enum import Enum
from typing import Optional

from .models import MINUTES_PER_DAY


class LayoutMode(str, Enum):
    PROPORTIONAL = "proportional"
    STACKED = "stacked"


@dataclass(slots=True)
class TimelineSettings:
    """Tunable constants for idle synthesis, layout and the live view."""

    idle_threshold_minutes: int = 15
    min_block_height: float = 40.0
    min_gap: float = 8.0
    min_height: float = 20.0
    timeline_height: float = 1920.0
    layout_mode: LayoutMode = LayoutMode.STACKED
    timezone: Optional[tzinfo] = None
    tick_seconds: float = 1.0
    refresh_seconds: float = 30.0

    @property
    def px_per_minute(self) -> float:
        return self.timeline_height / MINUTES_PER_DAY

    @classmethod
    def from_options(
        cls,
        timeline_height: float | None = None,
        layout_mode: str | LayoutMode | None = None,
        idle_threshold_minutes: int | None = None,
        tick_seconds: float | None = None,
    ) -> "TimelineSettings":
        defaults = cls()
        mode = LayoutMode(layout_mode) if layout_mode is not None else defaults.layout_mode
        return cls(
            idle_threshold_minutes=(
                idle_threshold_minutes
                if idle_threshold_minutes is not None
                else defaults.idle_threshold_minutes
            ),
            timeline_height=(
                timeline_height if timeline_height is not None else defaults.timeline_height
            ),
            layout_mode=mode,
            tick_seconds=tick_seconds if tick_seconds is not None else defaults.tick_seconds,
        )
