"""
Unit tests for join-window computation.
"""

from datetime import date, datetime, time, timedelta, timezone

import pytest

from vmtb.models.meeting import ScheduleType
from vmtb.scheduling.recurrence import (
    is_join_enabled,
    is_recurring,
    join_window,
    minutes_until_occurrence,
    occurrence_for,
    weekday_index,
)

# 2025-03-01 is a Saturday, 2025-03-03 a Monday, 2025-03-04 a Tuesday
SATURDAY = date(2025, 3, 1)
MONDAY = date(2025, 3, 3)
TUESDAY = date(2025, 3, 4)


class TestOneTimeMeetings:
    """Join window of meetings with a fixed date."""

    def test_two_minutes_before_start_is_joinable(self, make_meeting):
        """Test that a meeting can be joined shortly before it starts."""
        meeting = make_meeting()
        assert is_join_enabled(meeting, datetime(2025, 3, 1, 9, 58)) is True

    def test_sixty_one_minutes_after_start_is_closed(self, make_meeting):
        """Test that the window closes once the meeting is over an hour old."""
        meeting = make_meeting()
        assert is_join_enabled(meeting, datetime(2025, 3, 1, 11, 1)) is False

    @pytest.mark.parametrize(
        "now, expected",
        [
            (datetime(2025, 3, 1, 9, 54), False),
            (datetime(2025, 3, 1, 9, 55), True),
            (datetime(2025, 3, 1, 10, 0), True),
            (datetime(2025, 3, 1, 11, 0), True),
            (datetime(2025, 3, 1, 11, 1), False),
        ],
    )
    def test_window_boundaries(self, make_meeting, now, expected):
        """Test the inclusive edges of the join window."""
        assert is_join_enabled(make_meeting(), now) is expected

    def test_sub_minute_precision_is_truncated(self, make_meeting):
        """Test that seconds are ignored when measuring the distance to the start."""
        meeting = make_meeting()
        # 5.5 minutes ahead counts as 5, 60.98 minutes late counts as 60
        assert minutes_until_occurrence(meeting, datetime(2025, 3, 1, 9, 54, 30)) == 5
        assert is_join_enabled(meeting, datetime(2025, 3, 1, 9, 54, 30)) is True
        assert minutes_until_occurrence(meeting, datetime(2025, 3, 1, 11, 0, 59)) == -60
        assert is_join_enabled(meeting, datetime(2025, 3, 1, 11, 0, 59)) is True

    def test_other_day_is_not_joinable(self, make_meeting):
        """Test that a meeting on another date is never joinable."""
        meeting = make_meeting()
        assert is_join_enabled(meeting, datetime(2025, 3, 2, 10, 0)) is False
        assert is_join_enabled(meeting, datetime(2025, 2, 28, 10, 0)) is False

    def test_instant_meeting_uses_fixed_datetime(self, make_meeting):
        """Test that instant meetings use their stored date and time."""
        meeting = make_meeting(schedule_type=ScheduleType.INSTANT, scheduled_time=time(14, 30))
        assert is_join_enabled(meeting, datetime(2025, 3, 1, 14, 45)) is True
        assert is_join_enabled(meeting, datetime(2025, 3, 2, 14, 45)) is False

    def test_date_and_time_combined_without_timezone_shift(self, make_meeting):
        """Test that date and time are combined as local wall-clock values."""
        meeting = make_meeting(scheduled_time=time(0, 15))
        assert occurrence_for(meeting, datetime(2025, 3, 1, 12, 0)) == datetime(2025, 3, 1, 0, 15)

    def test_aware_now_uses_its_wall_clock_reading(self, make_meeting):
        """Test that an aware reference time is read without conversion."""
        meeting = make_meeting()
        now = datetime(2025, 3, 1, 9, 58, tzinfo=timezone(timedelta(hours=5, minutes=30)))
        assert is_join_enabled(meeting, now) is True

    def test_join_enabled_matches_minute_rule(self, make_meeting):
        """For every offset, joinable iff -60 <= minutes until start <= 5."""
        meeting = make_meeting()
        start = datetime(2025, 3, 1, 10, 0)
        for offset_seconds in range(-80 * 60, 20 * 60, 37):
            now = start + timedelta(seconds=offset_seconds)
            minutes_until = minutes_until_occurrence(meeting, now)
            assert is_join_enabled(meeting, now) == (-60 <= minutes_until <= 5)


class TestRecurringMeetings:
    """Join window of weekly custom meetings."""

    @pytest.fixture
    def monday_meeting(self, make_meeting):
        return make_meeting(
            scheduled_date=date(2025, 1, 6),
            scheduled_time=time(14, 0),
            schedule_type=ScheduleType.CUSTOM,
            repeat_days=[1],
        )

    def test_is_recurring(self, monday_meeting, make_meeting):
        """Test that only custom meetings with repeat days recur."""
        assert is_recurring(monday_meeting) is True
        assert is_recurring(make_meeting()) is False

    @pytest.mark.parametrize("hour", [0, 13, 14, 15, 23])
    def test_not_joinable_on_other_weekday(self, monday_meeting, hour):
        """Test that a weekly meeting is closed on days it does not repeat."""
        now = datetime.combine(TUESDAY, time(hour, 0))
        assert is_join_enabled(monday_meeting, now) is False

    def test_joinable_on_repeat_day_within_window(self, monday_meeting):
        """Test that a weekly meeting opens on its repeat day."""
        assert is_join_enabled(monday_meeting, datetime.combine(MONDAY, time(13, 57))) is True
        assert is_join_enabled(monday_meeting, datetime.combine(MONDAY, time(14, 59))) is True

    def test_closed_on_repeat_day_outside_window(self, monday_meeting):
        """Test that a weekly meeting is closed outside the window on its day."""
        assert is_join_enabled(monday_meeting, datetime.combine(MONDAY, time(13, 50))) is False
        assert is_join_enabled(monday_meeting, datetime.combine(MONDAY, time(15, 1))) is False

    def test_occurrence_is_today(self, monday_meeting):
        """Test that the occurrence of a weekly meeting falls on the reference date."""
        now = datetime.combine(MONDAY, time(9, 0))
        assert occurrence_for(monday_meeting, now) == datetime.combine(MONDAY, time(14, 0))

    def test_join_window_none_on_non_meeting_day(self, monday_meeting):
        """Test that no window exists on a day the meeting does not repeat."""
        assert join_window(monday_meeting, datetime.combine(TUESDAY, time(14, 0))) is None


class TestHelpers:
    """Test the small recurrence helpers."""

    def test_weekday_index_starts_on_sunday(self):
        """Test that weekdays are numbered from Sunday."""
        assert weekday_index(datetime(2025, 3, 2, 12, 0)) == 0
        assert weekday_index(datetime.combine(MONDAY, time(12, 0))) == 1
        assert weekday_index(datetime.combine(SATURDAY, time(12, 0))) == 6

    def test_join_window_bounds(self, make_meeting):
        """Test that the window runs from five minutes before to sixty after."""
        window = join_window(make_meeting(), datetime(2025, 3, 1, 9, 0))
        assert window is not None
        assert window.opens_at == datetime(2025, 3, 1, 9, 55)
        assert window.closes_at == datetime(2025, 3, 1, 11, 0)
        assert window.minutes_until == 60
        assert window.enabled is False
