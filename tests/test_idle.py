"""
Unit tests for idle synthesis
"""
from datetime import timedelta

from day_timeline.collector import collect_activities
from day_timeline.config import TimelineSettings
from day_timeline.idle import IDLE_TITLE, synthesize_idle
from day_timeline.models import SegmentKind


def _sorted(today, logs, routines=()):
    return sorted(collect_activities(today, logs, routines), key=lambda s: s.start_minute)


def _spans(segments, kind=None):
    return [
        (s.start_minute, s.end_minute)
        for s in segments
        if kind is None or s.kind is kind
    ]


class TestSynthesizeIdle:
    """Test idle blocks for today's view."""

    def test_short_gap_suppressed_long_gap_filled(self, make_log, today, now):
        logs = [
            make_log("09:00", "10:00"),
            make_log("10:10", "11:00"),
            make_log("14:00", "14:30"),
        ]
        late = now.replace(hour=14, minute=40)

        segments = synthesize_idle(_sorted(today, logs), today, None, late)

        assert _spans(segments, SegmentKind.IDLE) == [(660, 840)]

    def test_empty_day_today(self, today, now):
        segments = synthesize_idle([], today, 480, now)

        assert len(segments) == 1
        idle = segments[0]
        assert idle.kind is SegmentKind.IDLE
        assert (idle.start_minute, idle.end_minute) == (480, 570)
        assert idle.title == IDLE_TITLE
        assert idle.description is None

    def test_empty_day_short_idle_still_emitted(self, today, now):
        segments = synthesize_idle([], today, 565, now)

        assert _spans(segments) == [(565, 570)]

    def test_empty_day_without_anchor(self, today, now):
        assert synthesize_idle([], today, None, now) == []

    def test_not_today_never_idle(self, make_log, today, now):
        logs = [make_log("09:00", "10:00"), make_log("13:00", "14:00")]
        yesterday_now = now + timedelta(days=1)

        assert synthesize_idle([], today, 480, yesterday_now) == []
        segments = synthesize_idle(_sorted(today, logs), today, 480, yesterday_now)
        assert SegmentKind.IDLE not in {s.kind for s in segments}

    def test_leading_idle_from_anchor(self, make_log, today, now):
        segments = synthesize_idle(_sorted(today, [make_log("09:00", "09:20")]), today, 535, now)

        assert _spans(segments, SegmentKind.IDLE) == [(535, 540)]
        assert segments[0].kind is SegmentKind.IDLE

    def test_anchor_after_first_activity(self, make_log, today, now):
        segments = synthesize_idle(_sorted(today, [make_log("08:00", "09:20")]), today, 500, now)

        assert _spans(segments, SegmentKind.IDLE) == []

    def test_trailing_idle_up_to_now(self, make_log, today, now):
        segments = synthesize_idle(_sorted(today, [make_log("08:00", "09:00")]), today, None, now)

        assert _spans(segments, SegmentKind.IDLE) == [(540, 570)]
        assert segments[-1].kind is SegmentKind.IDLE

    def test_trailing_gap_at_threshold_suppressed(self, make_log, today, now):
        segments = synthesize_idle(_sorted(today, [make_log("08:00", "09:15")]), today, None, now)

        assert _spans(segments, SegmentKind.IDLE) == []

    def test_gap_exactly_threshold_suppressed(self, make_log, today, now):
        logs = [make_log("07:00", "08:00"), make_log("08:15", "08:30"), make_log("08:46", "09:20")]

        segments = synthesize_idle(_sorted(today, logs), today, None, now)

        assert _spans(segments, SegmentKind.IDLE) == [(510, 526)]

    def test_overlapping_activities_do_not_produce_idle_inside(self, make_log, today, now):
        logs = [make_log("06:00", "09:00"), make_log("06:30", "06:40"), make_log("08:00", "08:30")]

        segments = synthesize_idle(_sorted(today, logs), today, None, now)

        assert _spans(segments, SegmentKind.IDLE) == [(540, 570)]

    def test_output_sorted_and_idle_never_overlaps(self, make_log, make_routine, today, now):
        logs = [make_log("06:00", "06:30"), make_log("07:30", "08:00")]
        routines = [make_routine(1380, 90)]
        late = now.replace(hour=12)

        segments = synthesize_idle(_sorted(today, logs, routines), today, 10, late)

        starts = [s.start_minute for s in segments]
        assert starts == sorted(starts)
        idle = _spans(segments, SegmentKind.IDLE)
        for (_, end), (start, _) in zip(idle, idle[1:]):
            assert end <= start

    def test_overnight_end_part_uses_exclusive_end(self, make_log, make_routine, today, now):
        routines = [make_routine(1380, 90)]
        logs = [make_log("00:46", "01:00")]

        segments = synthesize_idle(_sorted(today, logs, routines), today, None, now)

        assert (30, 46) in _spans(segments, SegmentKind.IDLE)

    def test_custom_threshold(self, make_log, today, now):
        logs = [make_log("08:00", "08:30"), make_log("08:40", "09:00")]
        settings = TimelineSettings(idle_threshold_minutes=5)

        segments = synthesize_idle(_sorted(today, logs), today, None, now, settings)

        assert _spans(segments, SegmentKind.IDLE) == [(510, 520), (540, 570)]

    def test_now_before_anchor_is_clamped(self, today, now):
        segments = synthesize_idle([], today, 600, now)

        assert _spans(segments) == [(600, 600)]
        assert segments[0].duration_minutes == 0
