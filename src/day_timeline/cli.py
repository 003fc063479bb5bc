"""Command-line interface for the day timeline."""

from __future__ import annotations

import logging
import threading
from datetime import date as Date, datetime
from pathlib import Path
from typing import Optional

import typer

from .clock import InvalidTimeFormat, format_clock, minute_of, parse_clock
from .config import LayoutMode, TimelineSettings
from .paths import get_db_path

app = typer.Typer(help="Daily activity timeline for focus sessions and routines.")

_DATETIME_FORMATS = ["%Y-%m-%d %H:%M", "%Y-%m-%dT%H:%M", "%Y-%m-%d %H:%M:%S"]


@app.callback(no_args_is_help=True)
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logs.")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


@app.command()
def show(
    date: Optional[str] = typer.Option(
        None,
        "--date",
        help="Date (YYYY-MM-DD) to show. Defaults to today.",
    ),
    now: Optional[str] = typer.Option(
        None,
        "--now",
        help="Override the current clock time (e.g. 9:30 AM) for today's view.",
    ),
    idle_since: Optional[str] = typer.Option(
        None,
        "--idle-since",
        help="Clock time at which idle tracking began (e.g. 8:00 AM).",
    ),
    mode: LayoutMode = typer.Option(
        LayoutMode.STACKED, "--mode", help="Layout mode for block placement."
    ),
    height: float = typer.Option(
        1920.0, "--height", min=1.0, help="Layout units for the whole day."
    ),
    db_path: Optional[Path] = typer.Option(
        None,
        "--db",
        path_type=Path,
        help="Location of the timeline SQLite database.",
    ),
) -> None:
    """Print the composed timeline for a specific day."""
    from .reporting import TimelinePrinter
    from .session import database_loader
    from .timeline import build_day_view

    current = _resolve_now(now)
    target = _parse_day(date) if date else current.date()
    settings = TimelineSettings.from_options(timeline_height=height, layout_mode=mode)
    snapshot = database_loader(db_path or get_db_path())(target)
    view = build_day_view(
        target,
        snapshot.focus_logs,
        snapshot.routines,
        now=current,
        idle_anchor=_parse_clock_option(idle_since, "--idle-since") if idle_since else None,
        settings=settings,
    )
    TimelinePrinter().print_day(view)


@app.command("log")
def log_focus(
    start: datetime = typer.Option(
        ..., "--start", formats=_DATETIME_FORMATS, help="Session start (YYYY-MM-DD HH:MM)."
    ),
    end: Optional[datetime] = typer.Option(
        None, "--end", formats=_DATETIME_FORMATS, help="Session end (YYYY-MM-DD HH:MM)."
    ),
    title: Optional[str] = typer.Option(None, "--title", help="Session title."),
    task: Optional[str] = typer.Option(None, "--task", help="Title of the linked task."),
    description: Optional[str] = typer.Option(None, "--description", help="Free-text notes."),
    db_path: Optional[Path] = typer.Option(
        None, "--db", path_type=Path, help="Location of the timeline SQLite database."
    ),
) -> None:
    """Record a focus session."""
    from .db import database_connection, insert_focus_log

    if end is not None and end < start:
        raise typer.BadParameter("--end must not be before --start")
    with database_connection(db_path or get_db_path()) as conn:
        log_id = insert_focus_log(
            conn, start, end, title=title, description=description, task_title=task
        )
    typer.echo(f"Logged focus session {log_id}.")


@app.command("routine-add")
def routine_add(
    name: str = typer.Argument(..., help="Routine name."),
    at: str = typer.Option(..., "--at", help="Start time, e.g. 7:30 AM or 19:30."),
    duration: int = typer.Option(30, "--duration", min=0, help="Duration in minutes."),
    description: Optional[str] = typer.Option(None, "--description", help="Routine notes."),
    weekdays: Optional[str] = typer.Option(
        None, "--weekdays", help="Weekday mask to store with the routine."
    ),
    inactive: bool = typer.Option(False, "--inactive", help="Store the routine disabled."),
    db_path: Optional[Path] = typer.Option(
        None, "--db", path_type=Path, help="Location of the timeline SQLite database."
    ),
) -> None:
    """Add a recurring routine."""
    from .db import database_connection, insert_routine

    start_minute = _parse_clock_option(at, "--at")
    with database_connection(db_path or get_db_path()) as conn:
        routine_id = insert_routine(
            conn,
            name,
            start_minute,
            duration,
            description=description,
            active=not inactive,
            weekdays=weekdays,
        )
    typer.echo(f"Added routine {routine_id}: {name} at {format_clock(start_minute)}.")


@app.command()
def routines(
    db_path: Optional[Path] = typer.Option(
        None, "--db", path_type=Path, help="Location of the timeline SQLite database."
    ),
) -> None:
    """List stored routines."""
    from .db import database_connection, fetch_routines, routine_from_row

    with database_connection(db_path or get_db_path()) as conn:
        rows = fetch_routines(conn)
    if not rows:
        typer.echo("No routines stored.")
        return
    for routine in (routine_from_row(row) for row in rows):
        status = "active" if routine.active else "inactive"
        typer.echo(
            f"{routine.id:>4}  {format_clock(routine.start_minute):>8}  "
            f"{routine.duration_minutes or 0:>4} min  {status:<8}  {routine.name}"
        )


@app.command("routine-toggle")
def routine_toggle(
    routine_id: int = typer.Argument(..., help="Routine id."),
    active: bool = typer.Option(True, "--active/--inactive", help="New active flag."),
    db_path: Optional[Path] = typer.Option(
        None, "--db", path_type=Path, help="Location of the timeline SQLite database."
    ),
) -> None:
    """Enable or disable a routine."""
    from .db import database_connection, update_routine

    with database_connection(db_path or get_db_path()) as conn:
        try:
            update_routine(conn, routine_id, active=active)
        except ValueError as exc:
            typer.echo(str(exc), err=True)
            raise typer.Exit(code=1) from exc
    typer.echo(f"Routine {routine_id} is now {'active' if active else 'inactive'}.")


@app.command()
def stats(
    days: int = typer.Option(7, "--days", min=1, max=366, help="Days to aggregate."),
    db_path: Optional[Path] = typer.Option(
        None, "--db", path_type=Path, help="Location of the timeline SQLite database."
    ),
) -> None:
    """Print focus statistics for the last few days."""
    from datetime import timedelta

    from .db import database_connection, fetch_focus_logs_between, focus_log_from_row
    from .reporting import TimelinePrinter, focus_statistics

    end_day = datetime.now().date()
    start = datetime.combine(end_day - timedelta(days=days - 1), datetime.min.time())
    with database_connection(db_path or get_db_path()) as conn:
        rows = fetch_focus_logs_between(conn, start, start + timedelta(days=days))
    result = focus_statistics([focus_log_from_row(row) for row in rows], end_day, days)
    TimelinePrinter().print_statistics(result)


@app.command()
def watch(
    date: Optional[str] = typer.Option(
        None, "--date", help="Date (YYYY-MM-DD) to watch. Defaults to today."
    ),
    idle_since: Optional[str] = typer.Option(
        None, "--idle-since", help="Clock time at which idle tracking began."
    ),
    interval: float = typer.Option(1.0, "--interval", min=0.05, help="Seconds between ticks."),
    refresh_seconds: float = typer.Option(
        30.0, "--refresh", min=1.0, help="Seconds between data refreshes."
    ),
    ticks: int = typer.Option(0, "--ticks", min=0, help="Stop after this many ticks (0 = never)."),
    db_path: Optional[Path] = typer.Option(
        None, "--db", path_type=Path, help="Location of the timeline SQLite database."
    ),
) -> None:
    """Follow a day live, printing the cursor each tick until interrupted."""
    import time

    from .reporting import TimelinePrinter
    from .session import LiveTicker, TimelineSession, database_loader

    settings = TimelineSettings(tick_seconds=interval, refresh_seconds=refresh_seconds)
    session = TimelineSession(
        database_loader(db_path or get_db_path()),
        settings,
        day=_parse_day(date) if date else None,
        idle_anchor=_parse_clock_option(idle_since, "--idle-since") if idle_since else None,
    )
    printer = TimelinePrinter()
    session.refresh()
    printer.print_day(session.render())

    done = threading.Event()
    state = {"ticks": 0, "last_refresh": time.monotonic()}

    def on_tick() -> None:
        if done.is_set():
            return
        now = datetime.now()
        if time.monotonic() - state["last_refresh"] >= settings.refresh_seconds:
            state["last_refresh"] = time.monotonic()
            session.refresh_async()
        line = printer.cursor_line(session.cursor(now), minute_of(now))
        typer.echo(line or f"{session.day:%Y-%m-%d} is not today; no live cursor.")
        state["ticks"] += 1
        if ticks and state["ticks"] >= ticks:
            done.set()

    try:
        with LiveTicker(on_tick, interval=settings.tick_seconds):
            while not done.wait(0.2):
                pass
    except KeyboardInterrupt:
        typer.echo("Stopped watching.")


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind the API."),
    port: int = typer.Option(
        8765, "--port", min=1, max=65535, help="TCP port for the API."
    ),
    db_path: Optional[Path] = typer.Option(
        None, "--db", path_type=Path, help="Location of the timeline SQLite database."
    ),
    height: float = typer.Option(
        1920.0, "--height", min=1.0, help="Layout units for the whole day."
    ),
    open_page: Optional[str] = typer.Option(
        None,
        "--open",
        help="Open a page once the API is up: docs, timeline or summary.",
    ),
) -> None:
    """Start the local timeline API."""
    from .server_runner import dashboard_url, run_dashboard

    if open_page is not None:
        try:
            dashboard_url(host, port, open_page)
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="--open") from exc
    run_dashboard(
        host=host,
        port=port,
        db_path=db_path or get_db_path(),
        settings=TimelineSettings.from_options(timeline_height=height),
        browser_target=open_page,
    )


def _parse_day(value: str) -> Date:
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as exc:
        raise typer.BadParameter("Dates must use YYYY-MM-DD.") from exc


def _parse_clock_option(value: str, option: str) -> int:
    try:
        return parse_clock(value)
    except InvalidTimeFormat as exc:
        raise typer.BadParameter(str(exc), param_hint=option) from exc


def _resolve_now(value: Optional[str]) -> datetime:
    current = datetime.now()
    if not value:
        return current
    minute = _parse_clock_option(value, "--now")
    return current.replace(hour=minute // 60, minute=minute % 60, second=0, microsecond=0)
