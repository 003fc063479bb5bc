"""Where the timeline keeps its database."""

from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_data_path

APP_NAME = "DayTimeline"
DB_FILENAME = "timeline.sqlite3"

HOME_ENV = "DAY_TIMELINE_HOME"
DB_ENV = "DAY_TIMELINE_DB"


def get_data_dir() -> Path:
    """``$DAY_TIMELINE_HOME`` if set, else the per-user data dir from platformdirs."""
    override = os.environ.get(HOME_ENV)
    if override:
        path = Path(override).expanduser()
    else:
        path = user_data_path(APP_NAME, appauthor=False)
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_db_path() -> Path:
    override = os.environ.get(DB_ENV)
    if override:
        path = Path(override).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        return path
    return get_data_dir() / DB_FILENAME
