"""
Join-window computation for one-time, instant and weekly recurring meetings.

All arithmetic is on local wall-clock values. ``scheduled_date`` and
``scheduled_time`` are combined directly, never through UTC, so a meeting
never shifts to a neighbouring day.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ..models.meeting import Meeting, ScheduleType
from ..utils.config import MeetingPolicy


@dataclass(frozen=True)
class JoinWindow:
    """Derived join window of a single occurrence. Never stored."""

    occurrence: datetime
    opens_at: datetime
    closes_at: datetime
    minutes_until: int
    enabled: bool


def is_recurring(meeting: Meeting) -> bool:
    """A custom meeting with at least one repeat day."""
    return meeting.schedule_type == ScheduleType.CUSTOM and bool(meeting.repeat_days)


def wall_clock(moment: datetime) -> datetime:
    """Drop tzinfo without converting; only the local reading matters."""
    return moment.replace(tzinfo=None)


def weekday_index(moment: datetime) -> int:
    """Weekday with Sunday=0 .. Saturday=6."""
    return moment.isoweekday() % 7


def whole_minutes_between(start: datetime, end: datetime) -> int:
    """Signed minutes from ``start`` to ``end``, truncated toward zero."""
    return int((wall_clock(end) - wall_clock(start)).total_seconds() / 60)


def occurrence_for(meeting: Meeting, now: datetime) -> datetime:
    """The occurrence that join eligibility is measured against.

    Recurring meetings occur today at their scheduled time; every other
    meeting has its single fixed datetime.
    """
    if is_recurring(meeting):
        today = wall_clock(now).date()
        return datetime.combine(today, meeting.scheduled_time)
    return datetime.combine(meeting.scheduled_date, meeting.scheduled_time)


def minutes_until_occurrence(meeting: Meeting, now: datetime) -> int:
    """Signed whole minutes until the occurrence; negative means it started already."""
    return whole_minutes_between(now, occurrence_for(meeting, now))


def within_join_window(minutes_until: int) -> bool:
    return (
        -MeetingPolicy.JOIN_GRACE_MINUTES
        <= minutes_until
        <= MeetingPolicy.JOIN_LEAD_MINUTES
    )


def is_join_enabled(meeting: Meeting, now: datetime) -> bool:
    """Whether joining is allowed at ``now``.

    Open from 5 minutes before the start until 60 minutes after. A
    recurring meeting is only joinable on one of its repeat days.
    """
    if is_recurring(meeting) and weekday_index(wall_clock(now)) not in meeting.repeat_days:
        return False
    return within_join_window(minutes_until_occurrence(meeting, now))


def join_window(meeting: Meeting, now: datetime) -> Optional[JoinWindow]:
    """Describe the current join window, or ``None`` on a non-meeting day."""
    if is_recurring(meeting) and weekday_index(wall_clock(now)) not in meeting.repeat_days:
        return None

    occurrence = occurrence_for(meeting, now)
    minutes_until = whole_minutes_between(now, occurrence)
    return JoinWindow(
        occurrence=occurrence,
        opens_at=occurrence - timedelta(minutes=MeetingPolicy.JOIN_LEAD_MINUTES),
        closes_at=occurrence + timedelta(minutes=MeetingPolicy.JOIN_GRACE_MINUTES),
        minutes_until=minutes_until,
        enabled=within_join_window(minutes_until),
    )
