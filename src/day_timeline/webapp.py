"""FastAPI application that exposes the timeline and its inputs as a local API."""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict

from .clock import InvalidTimeFormat, format_clock, minute_of, parse_clock
from .config import LayoutMode, TimelineSettings
from .cursor import cursor_position
from .db import (
    database_connection,
    delete_routine,
    fetch_focus_logs_between,
    fetch_focus_logs_for_day,
    fetch_routine,
    fetch_routines,
    focus_log_from_row,
    insert_focus_log,
    insert_routine,
    routine_from_row,
    routine_to_payload,
    update_routine,
)
from .paths import get_db_path
from .reporting import focus_statistics
from .timeline import build_day_view

logger = logging.getLogger(__name__)


class FocusLogPayload(BaseModel):
    started_at: datetime
    ended_at: Optional[datetime] = None
    title: Optional[str] = None
    description: Optional[str] = None
    task_title: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


class RoutinePayload(BaseModel):
    name: str
    start_time: str
    duration_minutes: int = 0
    description: Optional[str] = None
    active: bool = True
    weekdays: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


class RoutineUpdate(BaseModel):
    name: Optional[str] = None
    start_time: Optional[str] = None
    duration_minutes: Optional[int] = None
    description: Optional[str] = None
    active: Optional[bool] = None
    weekdays: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


def create_app(
    *,
    db_path: Optional[Path] = None,
    settings: Optional[TimelineSettings] = None,
) -> FastAPI:
    """Instantiate the FastAPI application."""
    resolved_db_path = Path(db_path or get_db_path())
    resolved_settings = settings or TimelineSettings()

    app = FastAPI(title="Day Timeline", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.db_path = resolved_db_path
    app.state.settings = resolved_settings

    @app.on_event("startup")
    async def _startup() -> None:
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s %(levelname)s %(name)s %(message)s",
        )
        logger.info("Serving timeline from %s", resolved_db_path)

    @app.get("/api/status")
    def status(request: Request) -> Dict[str, Any]:
        return {
            "database_path": str(request.app.state.db_path),
            "timeline_height": resolved_settings.timeline_height,
            "layout_mode": resolved_settings.layout_mode.value,
            "idle_threshold_minutes": resolved_settings.idle_threshold_minutes,
        }

    @app.get("/api/timeline")
    def timeline(
        request: Request,
        date: Optional[str] = Query(
            default=None,
            description="Target date in YYYY-MM-DD format.",
        ),
        idle_since: Optional[str] = Query(
            default=None,
            description="Clock time at which idle tracking began, e.g. 8:00 AM.",
        ),
        mode: Optional[LayoutMode] = Query(
            default=None,
            description="Layout mode: stacked or proportional.",
        ),
    ) -> Dict[str, Any]:
        target_day = _parse_date(date)
        idle_anchor = _parse_clock_param(idle_since) if idle_since else None
        with database_connection(request.app.state.db_path) as conn:
            log_rows = fetch_focus_logs_for_day(conn, target_day)
            routine_rows = fetch_routines(conn, active_only=True)
        view = build_day_view(
            target_day,
            [focus_log_from_row(row) for row in log_rows],
            [routine_from_row(row) for row in routine_rows],
            now=datetime.now(),
            idle_anchor=idle_anchor,
            settings=request.app.state.settings,
            mode=mode,
        )
        return view.to_payload()

    @app.get("/api/cursor")
    def cursor(
        request: Request,
        date: Optional[str] = Query(
            default=None,
            description="Target date in YYYY-MM-DD format.",
        ),
    ) -> Dict[str, Any]:
        target_day = _parse_date(date)
        now = datetime.now()
        return {
            "date": target_day.strftime("%Y-%m-%d"),
            "now": format_clock(minute_of(now)),
            "cursor": cursor_position(target_day, now, request.app.state.settings),
        }

    @app.get("/api/summary")
    def summary(
        request: Request,
        date: Optional[str] = Query(
            default=None,
            description="Target date in YYYY-MM-DD format.",
        ),
    ) -> Dict[str, Any]:
        payload = timeline(request, date=date, idle_since=None, mode=None)
        return {"date": payload["date"], "totals": payload["summary"]}

    @app.get("/api/stats")
    def stats(
        request: Request,
        days: int = Query(default=7, ge=1, le=366),
    ) -> Dict[str, Any]:
        end_day = datetime.now().date()
        start = datetime.combine(end_day - timedelta(days=days - 1), datetime.min.time())
        with database_connection(request.app.state.db_path) as conn:
            rows = fetch_focus_logs_between(conn, start, start + timedelta(days=days))
        result = focus_statistics([focus_log_from_row(row) for row in rows], end_day, days)
        return {
            "start": result.start.strftime("%Y-%m-%d"),
            "end": result.end.strftime("%Y-%m-%d"),
            "total_focus_minutes": result.total_focus_minutes,
            "completed_sessions": result.completed_sessions,
            "average_focus_minutes_per_day": result.average_focus_minutes_per_day,
        }

    @app.get("/api/focus-logs")
    def list_focus_logs(
        request: Request,
        date: Optional[str] = Query(
            default=None,
            description="Target date in YYYY-MM-DD format.",
        ),
    ) -> Dict[str, Any]:
        target_day = _parse_date(date)
        with database_connection(request.app.state.db_path) as conn:
            rows = fetch_focus_logs_for_day(conn, target_day)
        return {
            "date": target_day.strftime("%Y-%m-%d"),
            "focus_logs": [_focus_log_payload(row) for row in rows],
        }

    @app.post("/api/focus-logs", status_code=201)
    def create_focus_log(payload: FocusLogPayload, request: Request) -> Dict[str, Any]:
        started_at = _to_local_naive(payload.started_at)
        ended_at = _to_local_naive(payload.ended_at) if payload.ended_at else None
        if ended_at is not None and ended_at < started_at:
            raise HTTPException(
                status_code=400, detail="ended_at must not be before started_at"
            )
        with database_connection(request.app.state.db_path) as conn:
            log_id = insert_focus_log(
                conn,
                started_at,
                ended_at,
                title=payload.title,
                description=payload.description,
                task_title=payload.task_title,
            )
            row = conn.execute(
                """
                SELECT id, title, started_at, ended_at, description, task_title
                FROM focus_logs
                WHERE id = ?
                """,
                (log_id,),
            ).fetchone()
        return _focus_log_payload(row)

    @app.get("/api/routines")
    def list_routines(
        request: Request,
        active_only: bool = Query(default=False),
    ) -> Dict[str, Any]:
        with database_connection(request.app.state.db_path) as conn:
            rows = fetch_routines(conn, active_only=active_only)
        return {"routines": [routine_to_payload(row) for row in rows]}

    @app.post("/api/routines", status_code=201)
    def create_routine(payload: RoutinePayload, request: Request) -> Dict[str, Any]:
        name = payload.name.strip()
        if not name:
            raise HTTPException(status_code=400, detail="name is required")
        start_minute = _parse_clock_param(payload.start_time)
        with database_connection(request.app.state.db_path) as conn:
            routine_id = insert_routine(
                conn,
                name,
                start_minute,
                max(payload.duration_minutes, 0),
                description=payload.description,
                active=payload.active,
                weekdays=payload.weekdays,
            )
            row = fetch_routine(conn, routine_id)
        if row is None:
            raise HTTPException(status_code=500, detail="Failed to persist routine.")
        return routine_to_payload(row)

    @app.patch("/api/routines/{routine_id}")
    def update_routine_endpoint(
        routine_id: int,
        payload: RoutineUpdate,
        request: Request,
    ) -> Dict[str, Any]:
        updates = payload.model_dump(exclude_unset=True)
        if "start_time" in updates:
            start_time = updates.pop("start_time")
            if start_time is not None:
                updates["start_minute"] = _parse_clock_param(start_time)
        if updates.get("duration_minutes") is not None:
            updates["duration_minutes"] = max(updates["duration_minutes"], 0)
        with database_connection(request.app.state.db_path) as conn:
            try:
                update_routine(conn, routine_id, **updates)
            except ValueError as exc:
                raise HTTPException(status_code=404, detail="Routine not found") from exc
            row = fetch_routine(conn, routine_id)
        if row is None:
            raise HTTPException(status_code=404, detail="Routine not found")
        return routine_to_payload(row)

    @app.delete("/api/routines/{routine_id}", status_code=204)
    def delete_routine_endpoint(routine_id: int, request: Request) -> None:
        with database_connection(request.app.state.db_path) as conn:
            try:
                delete_routine(conn, routine_id)
            except ValueError as exc:
                raise HTTPException(status_code=404, detail="Routine not found") from exc

    return app


def _parse_date(value: Optional[str]) -> date:
    if not value:
        return datetime.now().date()
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="Invalid date format") from exc


def _parse_clock_param(value: str) -> int:
    try:
        return parse_clock(value)
    except InvalidTimeFormat as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


def _focus_log_payload(row: Any) -> Dict[str, Any]:
    entry = focus_log_from_row(row)
    return {
        "id": entry.id,
        "title": entry.title,
        "started_at": entry.start_instant.isoformat() if entry.start_instant else None,
        "ended_at": entry.end_instant.isoformat() if entry.end_instant else None,
        "description": entry.description,
        "task_title": entry.linked_task_title,
        "duration_seconds": entry.duration_seconds,
    }


def _to_local_naive(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)
