"""Utilities to normalize segment titles."""

from __future__ import annotations

import re
from typing import Optional

FOCUS_FALLBACK_TITLE = "Focus Session"

_WHITESPACE_PATTERN = re.compile(r"\s{2,}")


def normalize_title(value: Optional[str]) -> Optional[str]:
    """Collapse runs of whitespace and drop blank values."""
    if not value:
        return None
    normalized = _WHITESPACE_PATTERN.sub(" ", value.replace("\n", " ")).strip()
    return normalized or None


def resolve_focus_title(
    title: Optional[str],
    linked_task_title: Optional[str],
    description: Optional[str],
) -> str:
    """Pick the first non-blank of title, linked task and description."""
    for candidate in (title, linked_task_title, description):
        normalized = normalize_title(candidate)
        if normalized:
            return normalized
    return FOCUS_FALLBACK_TITLE
