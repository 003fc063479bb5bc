"""SQLite storage for focus logs and routine definitions."""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Iterator, Optional

from .clock import format_clock, parse_clock_or_default
from .models import FocusLogEntry, RoutineDefinition

logger = logging.getLogger(__name__)

DATETIME_FMT = "%Y-%m-%d %H:%M:%S.%f"

_UNSET = object()


def open_database(path: Path, *, check_same_thread: bool = True) -> sqlite3.Connection:
    """Open (and initialize) the SQLite database."""
    conn = sqlite3.connect(
        path,
        isolation_level=None,
        check_same_thread=check_same_thread,
    )
    conn.row_factory = sqlite3.Row
    initialize_schema(conn)
    return conn


@contextmanager
def database_connection(
    path: Path, *, check_same_thread: bool = True
) -> Iterator[sqlite3.Connection]:
    conn = open_database(path, check_same_thread=check_same_thread)
    try:
        yield conn
    finally:
        conn.close()


def initialize_schema(conn: sqlite3.Connection) -> None:
    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS focus_logs (
            id INTEGER PRIMARY KEY,
            title TEXT,
            started_at TEXT NOT NULL,
            ended_at TEXT,
            description TEXT,
            task_title TEXT
        );

        CREATE INDEX IF NOT EXISTS idx_focus_logs_started_at
            ON focus_logs(started_at);

        CREATE TABLE IF NOT EXISTS routines (
            id INTEGER PRIMARY KEY,
            name TEXT NOT NULL,
            start_time TEXT NOT NULL,
            duration_minutes INTEGER,
            description TEXT,
            is_active INTEGER NOT NULL DEFAULT 1,
            weekdays TEXT,
            created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
        );
        """
    )


def insert_focus_log(
    conn: sqlite3.Connection,
    started_at: datetime,
    ended_at: Optional[datetime],
    *,
    title: Optional[str] = None,
    description: Optional[str] = None,
    task_title: Optional[str] = None,
) -> int:
    cur = conn.execute(
        """
        INSERT INTO focus_logs (title, started_at, ended_at, description, task_title)
        VALUES (?, ?, ?, ?, ?)
        """,
        (
            title,
            started_at.strftime(DATETIME_FMT),
            ended_at.strftime(DATETIME_FMT) if ended_at else None,
            description,
            task_title,
        ),
    )
    return int(cur.lastrowid)


def fetch_focus_logs_between(
    conn: sqlite3.Connection, start: datetime, end: datetime
) -> list[sqlite3.Row]:
    """Fetch focus logs whose start falls in ``[start, end)``."""
    return list(
        conn.execute(
            """
            SELECT id, title, started_at, ended_at, description, task_title
            FROM focus_logs
            WHERE started_at >= ? AND started_at < ?
            ORDER BY started_at, id;
            """,
            (start.strftime(DATETIME_FMT), end.strftime(DATETIME_FMT)),
        )
    )


def fetch_focus_logs_for_day(conn: sqlite3.Connection, day: date) -> list[sqlite3.Row]:
    start = datetime.combine(day, datetime.min.time())
    return fetch_focus_logs_between(conn, start, start + timedelta(days=1))


def insert_routine(
    conn: sqlite3.Connection,
    name: str,
    start_minute: int,
    duration_minutes: Optional[int],
    *,
    description: Optional[str] = None,
    active: bool = True,
    weekdays: Optional[str] = None,
) -> int:
    cur = conn.execute(
        """
        INSERT INTO routines (name, start_time, duration_minutes, description, is_active, weekdays)
        VALUES (?, ?, ?, ?, ?, ?)
        """,
        (
            name,
            _minute_to_24h(start_minute),
            duration_minutes,
            description,
            1 if active else 0,
            weekdays,
        ),
    )
    return int(cur.lastrowid)


def fetch_routines(conn: sqlite3.Connection, *, active_only: bool = False) -> list[sqlite3.Row]:
    query = """
        SELECT id, name, start_time, duration_minutes, description, is_active, weekdays
        FROM routines
    """
    if active_only:
        query += " WHERE is_active = 1"
    query += " ORDER BY start_time, id;"
    return list(conn.execute(query))


def fetch_routine(conn: sqlite3.Connection, routine_id: int) -> Optional[sqlite3.Row]:
    return conn.execute(
        """
        SELECT id, name, start_time, duration_minutes, description, is_active, weekdays
        FROM routines
        WHERE id = ?
        """,
        (routine_id,),
    ).fetchone()


def update_routine(
    conn: sqlite3.Connection,
    routine_id: int,
    *,
    name: Optional[str] = None,
    start_minute: Optional[int] = None,
    duration_minutes: object = _UNSET,
    description: object = _UNSET,
    active: Optional[bool] = None,
    weekdays: object = _UNSET,
) -> None:
    """Update a single routine record."""
    fields: list[str] = []
    params: list[object] = []

    if name is not None:
        fields.append("name = ?")
        params.append(name)
    if start_minute is not None:
        fields.append("start_time = ?")
        params.append(_minute_to_24h(start_minute))
    if duration_minutes is not _UNSET:
        fields.append("duration_minutes = ?")
        params.append(duration_minutes)
    if description is not _UNSET:
        fields.append("description = ?")
        params.append(description)
    if active is not None:
        fields.append("is_active = ?")
        params.append(1 if active else 0)
    if weekdays is not _UNSET:
        fields.append("weekdays = ?")
        params.append(weekdays)

    if not fields:
        return

    params.append(routine_id)
    cur = conn.execute(
        f"UPDATE routines SET {', '.join(fields)} WHERE id = ?",
        params,
    )
    if cur.rowcount == 0:
        raise ValueError(f"No routine found for id={routine_id}")


def delete_routine(conn: sqlite3.Connection, routine_id: int) -> None:
    cur = conn.execute("DELETE FROM routines WHERE id = ?", (routine_id,))
    if cur.rowcount == 0:
        raise ValueError(f"No routine found for id={routine_id}")


def focus_log_from_row(row: sqlite3.Row) -> FocusLogEntry:
    return FocusLogEntry(
        id=str(row["id"]),
        title=row["title"],
        start_instant=_parse_datetime(row["started_at"]),
        end_instant=_parse_datetime(row["ended_at"]),
        description=row["description"],
        linked_task_title=row["task_title"],
    )


def routine_from_row(row: sqlite3.Row) -> RoutineDefinition:
    return RoutineDefinition(
        id=str(row["id"]),
        name=row["name"],
        start_minute=parse_clock_or_default(row["start_time"]),
        duration_minutes=_parse_duration(row["duration_minutes"]),
        description=row["description"],
        active=bool(row["is_active"]),
        weekday_mask=row["weekdays"],
    )


def routine_to_payload(row: sqlite3.Row) -> dict[str, object]:
    routine = routine_from_row(row)
    return {
        "id": routine.id,
        "name": routine.name,
        "start_time": row["start_time"],
        "start_label": format_clock(routine.start_minute),
        "start_minute": routine.start_minute,
        "duration_minutes": routine.duration_minutes,
        "description": routine.description,
        "active": routine.active,
        "weekdays": routine.weekday_mask,
    }


def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.strptime(value, DATETIME_FMT)
    except ValueError:
        logger.warning("Ignoring malformed timestamp %r.", value)
        return None


def _parse_duration(value: object) -> int:
    if value is None:
        return 0
    try:
        return max(int(value), 0)
    except (TypeError, ValueError):
        logger.warning("Ignoring malformed routine duration %r.", value)
        return 0


def _minute_to_24h(minute: int) -> str:
    hour, mins = divmod(minute, 60)
    return f"{hour:02d}:{mins:02d}:00"
