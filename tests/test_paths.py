"""
Tests for data directory and launcher helpers
"""
from datetime import timedelta, timezone

import pytest

from day_timeline.config import LayoutMode, TimelineSettings
from day_timeline.paths import DB_ENV, HOME_ENV, get_data_dir, get_db_path
from day_timeline.server_runner import dashboard_url, describe_settings


class TestPaths:
    def test_home_override(self, tmp_path, monkeypatch):
        monkeypatch.delenv(DB_ENV, raising=False)
        monkeypatch.setenv(HOME_ENV, str(tmp_path / "home"))

        assert get_data_dir() == tmp_path / "home"
        assert (tmp_path / "home").is_dir()
        assert get_db_path() == tmp_path / "home" / "timeline.sqlite3"

    def test_db_override_wins(self, tmp_path, monkeypatch):
        monkeypatch.setenv(HOME_ENV, str(tmp_path / "home"))
        monkeypatch.setenv(DB_ENV, str(tmp_path / "nested" / "custom.db"))

        assert get_db_path() == tmp_path / "nested" / "custom.db"
        assert (tmp_path / "nested").is_dir()


class TestLauncherHelpers:
    def test_dashboard_url_targets(self):
        assert dashboard_url("127.0.0.1", 8765) == "http://127.0.0.1:8765/docs"
        assert dashboard_url("0.0.0.0", 9000, "timeline") == "http://127.0.0.1:9000/api/timeline"

    def test_unknown_target(self):
        with pytest.raises(ValueError):
            dashboard_url("127.0.0.1", 8765, "calendar")

    def test_describe_settings(self):
        settings = TimelineSettings(
            timeline_height=1440.0,
            layout_mode=LayoutMode.PROPORTIONAL,
            timezone=timezone(timedelta(hours=2)),
        )

        text = describe_settings(settings)

        assert text.startswith("proportional layout, 1440 units per day, idle after 15 min")
        assert "UTC+02:00" in text

    def test_describe_default_timezone(self):
        assert describe_settings(TimelineSettings()).endswith("system local time")
