"""Filtering and ordering of a mixed list of dated and recurring meetings."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, List, Optional

from ..models.meeting import Meeting, MeetingStatus
from ..utils.config import MeetingPolicy
from .recurrence import is_recurring, occurrence_for, wall_clock, whole_minutes_between

INACTIVE_STATUSES = frozenset({MeetingStatus.ENDED, MeetingStatus.CANCELLED})


def has_ended(meeting: Meeting, now: datetime) -> bool:
    """A dated meeting has ended once more than the grace period has passed since its start.

    Uses the same whole-minute difference as the join window, so the two
    never disagree on the boundary minute.
    """
    minutes_since_start = whole_minutes_between(occurrence_for(meeting, now), now)
    return minutes_since_start > MeetingPolicy.JOIN_GRACE_MINUTES


def is_upcoming(meeting: Meeting, now: datetime) -> bool:
    # Recurring meetings always have an occurrence ahead of them this week
    if is_recurring(meeting):
        return True
    today = wall_clock(now).date()
    return meeting.scheduled_date >= today and not has_ended(meeting, now)


def _created_key(created_at: datetime) -> datetime:
    # Store timestamps are aware; compare them on one clock
    if created_at.tzinfo is not None:
        return created_at.astimezone(timezone.utc).replace(tzinfo=None)
    return created_at


def _sort_key(meeting: Meeting, now: datetime):
    if is_recurring(meeting):
        return (1, _created_key(meeting.created_at))
    return (0, occurrence_for(meeting, now))


def get_upcoming(meetings: Iterable[Meeting], now: datetime) -> List[Meeting]:
    """Upcoming meetings: dated ones by start time, then recurring ones oldest first.

    Recurring meetings come after every dated meeting, ordered by
    ``created_at``. The sort is stable.
    """
    upcoming = [meeting for meeting in meetings if is_upcoming(meeting, now)]
    return sorted(upcoming, key=lambda meeting: _sort_key(meeting, now))


def get_upcoming_for_mtb(
    meetings: Iterable[Meeting], mtb_id: str, now: datetime
) -> List[Meeting]:
    """Upcoming meetings of one MTB, skipping ended and cancelled ones."""
    candidates = [
        meeting
        for meeting in meetings
        if meeting.mtb_id == mtb_id and meeting.status not in INACTIVE_STATUSES
    ]
    return get_upcoming(candidates, now)


def next_meeting_for_mtb(
    meetings: Iterable[Meeting], mtb_id: str, now: datetime
) -> Optional[Meeting]:
    upcoming = get_upcoming_for_mtb(meetings, mtb_id, now)
    return upcoming[0] if upcoming else None
