"""
Unit tests for clock string parsing and formatting
"""
from datetime import datetime

import pytest

from day_timeline.clock import (
    InvalidTimeFormat,
    add_minutes,
    diff_minutes,
    format_clock,
    minute_of,
    parse_clock,
    parse_clock_or_default,
)


class TestParseClock:
    """Test parsing of 12-hour and 24-hour clock strings."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("12:00 AM", 0),
            ("12:30 am", 30),
            ("1:05 AM", 65),
            ("9:00 AM", 540),
            ("12:00 PM", 720),
            ("11:00 PM", 1380),
            ("11:59 pm", 1439),
            (" 7:15PM ", 1155),
        ],
    )
    def test_twelve_hour(self, text, expected):
        assert parse_clock(text) == expected

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("00:00", 0),
            ("09:00", 540),
            ("9:00", 540),
            ("23:59", 1439),
            ("14:30:45", 870),
            ("07:05:00", 425),
        ],
    )
    def test_twenty_four_hour(self, text, expected):
        assert parse_clock(text) == expected

    @pytest.mark.parametrize(
        "text",
        ["", "noon", "13:00 PM", "0:30 AM", "9:60 AM", "24:00", "12:61", "10:00:60", "9.30"],
    )
    def test_invalid_values_raise(self, text):
        with pytest.raises(InvalidTimeFormat):
            parse_clock(text)

    def test_invalid_time_format_is_value_error(self):
        with pytest.raises(ValueError):
            parse_clock("later")

    def test_non_string_raises(self):
        with pytest.raises(InvalidTimeFormat):
            parse_clock(None)

    def test_default_on_failure(self, caplog):
        assert parse_clock_or_default("garbage") == 0
        assert parse_clock_or_default("garbage", default=60) == 60
        assert "garbage" in caplog.text

    def test_default_passthrough(self):
        assert parse_clock_or_default("06:30:00") == 390


class TestFormatClock:
    """Test canonical 12-hour rendering."""

    def test_midnight_and_noon(self):
        assert format_clock(0) == "12:00 AM"
        assert format_clock(720) == "12:00 PM"

    def test_zero_padded_minutes(self):
        assert format_clock(545) == "9:05 AM"
        assert format_clock(1381) == "11:01 PM"

    def test_canonical_round_trip(self):
        for text, canonical in [
            ("9:00 am", "9:00 AM"),
            ("12:15 pm", "12:15 PM"),
            ("12:00 AM", "12:00 AM"),
            ("3:07PM", "3:07 PM"),
        ]:
            assert format_clock(parse_clock(text)) == canonical

    def test_every_minute_round_trips(self):
        for minute in range(0, 1440, 7):
            assert parse_clock(format_clock(minute)) == minute


class TestArithmetic:
    """Plain integer helpers do not wrap around midnight."""

    def test_add_minutes(self):
        assert add_minutes(1430, 20) == 1450

    def test_diff_minutes(self):
        assert diff_minutes(600, 540) == 60
        assert diff_minutes(30, 1380) == -1350

    def test_minute_of(self):
        assert minute_of(datetime(2026, 1, 1, 14, 5, 59)) == 845
