"""Caller-side state for a live timeline view: navigation, fetches and ticks."""

from __future__ import annotations

import calendar
import logging
import threading
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Callable, Optional

from .config import TimelineSettings
from .cursor import cursor_position
from .db import (
    database_connection,
    fetch_focus_logs_for_day,
    fetch_routines,
    focus_log_from_row,
    routine_from_row,
)
from .models import FocusLogEntry, RoutineDefinition
from .timeline import DayView, build_day_view

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class TimelineSnapshot:
    """The inputs fetched for one day, handed to the compositor as-is."""

    day: date
    focus_logs: list[FocusLogEntry] = field(default_factory=list)
    routines: list[RoutineDefinition] = field(default_factory=list)


SnapshotLoader = Callable[[date], TimelineSnapshot]


def database_loader(db_path: Path) -> SnapshotLoader:
    """Build a loader that reads one day's snapshot from SQLite."""

    def load(day: date) -> TimelineSnapshot:
        with database_connection(db_path, check_same_thread=False) as conn:
            log_rows = fetch_focus_logs_for_day(conn, day)
            routine_rows = fetch_routines(conn, active_only=True)
        return TimelineSnapshot(
            day=day,
            focus_logs=[focus_log_from_row(row) for row in log_rows],
            routines=[routine_from_row(row) for row in routine_rows],
        )

    return load


class ViewGeneration:
    """Monotonic token used to discard fetches for a day no longer shown."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value = 0

    @property
    def current(self) -> int:
        with self._lock:
            return self._value

    def advance(self) -> int:
        with self._lock:
            self._value += 1
            return self._value

    def is_current(self, token: int) -> bool:
        with self._lock:
            return token == self._value


class TimelineSession:
    """Tracks the viewed day and the latest snapshot accepted for it."""

    def __init__(
        self,
        loader: SnapshotLoader,
        settings: Optional[TimelineSettings] = None,
        *,
        day: Optional[date] = None,
        idle_anchor: Optional[int] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.settings = settings or TimelineSettings()
        self.idle_anchor = idle_anchor
        self._loader = loader
        self._clock = clock
        self._lock = threading.Lock()
        self._generation = ViewGeneration()
        self._day = day or clock().date()
        self._snapshot: Optional[TimelineSnapshot] = None

    @property
    def day(self) -> date:
        with self._lock:
            return self._day

    @property
    def generation(self) -> int:
        return self._generation.current

    def show(self, day: date) -> int:
        with self._lock:
            self._day = day
            token = self._generation.advance()
        logger.debug("Viewing %s (generation %d).", day.isoformat(), token)
        return token

    def shift(self, days: int) -> int:
        return self.show(self.day + timedelta(days=days))

    def previous_day(self) -> int:
        return self.shift(-1)

    def next_day(self) -> int:
        return self.shift(1)

    def jump_to_month(self, year: int, month: int) -> int:
        last_day = calendar.monthrange(year, month)[1]
        return self.show(date(year, month, min(self.day.day, last_day)))

    def refresh(self) -> bool:
        """Fetch the viewed day's snapshot; returns whether it was accepted."""
        with self._lock:
            token = self._generation.current
            day = self._day
        snapshot = self._loader(day)
        return self.accept(token, snapshot)

    def refresh_async(self) -> threading.Thread:
        thread = threading.Thread(target=self._refresh_logged, daemon=True)
        thread.start()
        return thread

    def accept(self, token: int, snapshot: TimelineSnapshot) -> bool:
        with self._lock:
            if not self._generation.is_current(token):
                logger.debug(
                    "Discarding stale snapshot for %s (generation %d).",
                    snapshot.day.isoformat(),
                    token,
                )
                return False
            self._snapshot = snapshot
            return True

    def render(self, now: Optional[datetime] = None) -> DayView:
        now = now or self._clock()
        with self._lock:
            day = self._day
            snapshot = self._snapshot
        if snapshot is None or snapshot.day != day:
            snapshot = TimelineSnapshot(day=day)
        return build_day_view(
            day,
            snapshot.focus_logs,
            snapshot.routines,
            now=now,
            idle_anchor=self.idle_anchor,
            settings=self.settings,
        )

    def cursor(self, now: Optional[datetime] = None) -> Optional[float]:
        return cursor_position(self.day, now or self._clock(), self.settings)

    def _refresh_logged(self) -> None:
        try:
            self.refresh()
        except Exception:
            logger.exception("Failed to refresh timeline for %s.", self.day.isoformat())


class LiveTicker:
    """Invoke a callback on a fixed cadence in a background thread."""

    def __init__(self, callback: Callable[[], None], interval: float = 1.0) -> None:
        self._callback = callback
        self._interval = interval
        self._lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self._stop_event: Optional[threading.Event] = None

    def start(self) -> None:
        with self._lock:
            if self._thread and self._thread.is_alive():
                return
            stop_event = threading.Event()
            thread = threading.Thread(target=self._run, args=(stop_event,), daemon=True)
            self._thread = thread
            self._stop_event = stop_event
            thread.start()
            logger.debug("Live ticker started (every %.1fs).", self._interval)

    def stop(self) -> None:
        thread: Optional[threading.Thread] = None
        with self._lock:
            if not self._thread or not self._stop_event:
                return
            self._stop_event.set()
            thread = self._thread
            self._thread = None
            self._stop_event = None
        if thread is not threading.current_thread():
            thread.join(timeout=10)
        logger.debug("Live ticker stopped.")

    def is_running(self) -> bool:
        with self._lock:
            return bool(self._thread and self._thread.is_alive())

    def __enter__(self) -> "LiveTicker":
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    def _run(self, stop_event: threading.Event) -> None:
        while not stop_event.is_set():
            try:
                self._callback()
            except Exception:
                logger.exception("Live ticker callback failed.")
            # Sleep in an interruptible manner.
            stop_event.wait(self._interval)
