"""Launch the timeline API under uvicorn."""

from __future__ import annotations

import logging
import threading
import webbrowser
from pathlib import Path
from typing import Optional

import uvicorn

from .config import TimelineSettings
from .paths import get_db_path
from .webapp import create_app

logger = logging.getLogger(__name__)

BROWSER_TARGETS = {
    "docs": "/docs",
    "timeline": "/api/timeline",
    "summary": "/api/summary",
}


def dashboard_url(host: str, port: int, target: str = "docs") -> str:
    """URL for one of the pages worth opening after start-up."""
    try:
        path = BROWSER_TARGETS[target]
    except KeyError as exc:
        raise ValueError(
            f"Unknown browser target {target!r}; expected one of {sorted(BROWSER_TARGETS)}"
        ) from exc
    if host in ("0.0.0.0", "::"):
        host = "127.0.0.1"
    return f"http://{host}:{port}{path}"


def describe_settings(settings: TimelineSettings) -> str:
    timezone = settings.timezone or "system local time"
    return (
        f"{settings.layout_mode.value} layout, {settings.timeline_height:g} units per day, "
        f"idle after {settings.idle_threshold_minutes} min, {timezone}"
    )


def run_dashboard(
    *,
    host: str = "127.0.0.1",
    port: int = 8765,
    db_path: Optional[Path] = None,
    settings: Optional[TimelineSettings] = None,
    browser_target: Optional[str] = None,
    log_level: str = "info",
) -> None:
    """Serve the timeline API; ``browser_target`` names a page to open once it is up."""
    resolved_settings = settings or TimelineSettings()
    resolved_db_path = db_path or get_db_path()
    url = dashboard_url(host, port, browser_target) if browser_target else None

    app = create_app(db_path=resolved_db_path, settings=resolved_settings)
    logger.info("Timeline API for %s: %s", resolved_db_path, describe_settings(resolved_settings))

    if url is not None:
        # uvicorn blocks, so the browser waits on a timer until the socket is bound.
        timer = threading.Timer(1.0, _open_browser, args=(url,))
        timer.daemon = True
        timer.start()

    uvicorn.run(app, host=host, port=port, log_level=log_level)


def _open_browser(url: str) -> None:
    if not webbrowser.open(url):
        logger.warning("No browser available to open %s", url)
