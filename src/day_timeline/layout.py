"""Vertical placement of timeline segments."""

from __future__ import annotations

from typing import Iterable, Optional

from .config import LayoutMode, TimelineSettings
from .models import ActivitySegment, LaidOutSegment


def layout_segments(
    segments: Iterable[ActivitySegment],
    settings: Optional[TimelineSettings] = None,
    mode: Optional[LayoutMode] = None,
) -> list[LaidOutSegment]:
    """Assign ``top`` and ``height`` to each segment, in the given order."""
    settings = settings or TimelineSettings()
    mode = mode or settings.layout_mode
    if mode is LayoutMode.PROPORTIONAL:
        return layout_proportional(segments, settings)
    return layout_stacked(segments, settings)


def layout_proportional(
    segments: Iterable[ActivitySegment], settings: TimelineSettings
) -> list[LaidOutSegment]:
    """Place each block at its clock position.

    Blocks are never repacked, so segments whose times genuinely overlap
    will overlap on screen as well.
    """
    ppm = settings.px_per_minute
    return [
        LaidOutSegment(
            segment=segment,
            top=segment.start_minute * ppm,
            height=max(segment.duration_minutes * ppm, settings.min_height),
        )
        for segment in segments
    ]


def layout_stacked(
    segments: Iterable[ActivitySegment], settings: TimelineSettings
) -> list[LaidOutSegment]:
    """Stack blocks top to bottom so that no two ever collide."""
    ppm = settings.px_per_minute
    cursor = 0.0
    laid_out: list[LaidOutSegment] = []
    for segment in segments:
        height = max(segment.duration_minutes * ppm, settings.min_block_height)
        laid_out.append(LaidOutSegment(segment=segment, top=cursor, height=height))
        cursor = cursor + height + settings.min_gap
    return laid_out
