"""
Tests for the typer command-line interface
"""
from typer.testing import CliRunner

from day_timeline.cli import app

runner = CliRunner()


def _invoke(db_path, *args):
    return runner.invoke(app, [*args, "--db", str(db_path)])


class TestRoutineCommands:
    def test_add_and_list(self, db_path):
        added = _invoke(db_path, "routine-add", "Yoga", "--at", "11:00 PM", "--duration", "90")
        assert added.exit_code == 0
        assert "11:00 PM" in added.output

        listed = _invoke(db_path, "routines")
        assert listed.exit_code == 0
        assert "Yoga" in listed.output
        assert "active" in listed.output

    def test_invalid_time(self, db_path):
        result = _invoke(db_path, "routine-add", "Yoga", "--at", "late")
        assert result.exit_code != 0

    def test_toggle(self, db_path):
        _invoke(db_path, "routine-add", "Run", "--at", "07:00")

        result = _invoke(db_path, "routine-toggle", "1", "--inactive")

        assert result.exit_code == 0
        assert "inactive" in _invoke(db_path, "routines").output

    def test_toggle_unknown(self, db_path):
        assert _invoke(db_path, "routine-toggle", "7").exit_code == 1


class TestShowCommand:
    def test_show_past_day(self, db_path):
        _invoke(db_path, "log", "--start", "2020-01-06 09:00", "--end", "2020-01-06 10:00", "--title", "Write")
        _invoke(db_path, "routine-add", "Wind down", "--at", "23:00", "--duration", "90")

        result = _invoke(db_path, "show", "--date", "2020-01-06")

        assert result.exit_code == 0
        assert "Write" in result.output
        assert "Wind down" in result.output
        assert "continues tomorrow" in result.output
        assert "Now " not in result.output

    def test_show_empty_day(self, db_path):
        result = _invoke(db_path, "show", "--date", "2020-01-06")

        assert result.exit_code == 0
        assert "No activities logged" in result.output

    def test_log_rejects_reversed_session(self, db_path):
        result = _invoke(db_path, "log", "--start", "2020-01-06 10:00", "--end", "2020-01-06 09:00")
        assert result.exit_code != 0

    def test_stats(self, db_path):
        result = _invoke(db_path, "stats", "--days", "3")

        assert result.exit_code == 0
        assert "Sessions completed: 0" in result.output


class TestWatchCommand:
    def test_stops_after_ticks(self, db_path):
        result = _invoke(
            db_path, "watch", "--date", "2020-01-06", "--interval", "0.05", "--ticks", "2"
        )

        assert result.exit_code == 0
        assert result.output.count("no live cursor") == 2


class TestWebCommand:
    def test_unknown_browser_target_rejected(self, db_path):
        result = _invoke(db_path, "web", "--open", "calendar")

        assert result.exit_code != 0
