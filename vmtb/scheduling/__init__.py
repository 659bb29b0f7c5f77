"""Meeting scheduling: join windows, upcoming lists, and the meeting feed."""

from vmtb.scheduling.aggregator import (
    get_upcoming,
    get_upcoming_for_mtb,
    has_ended,
    next_meeting_for_mtb,
)
from vmtb.scheduling.feed import MeetingFeed
from vmtb.scheduling.recurrence import (
    JoinWindow,
    is_join_enabled,
    is_recurring,
    join_window,
    minutes_until_occurrence,
    occurrence_for,
    weekday_index,
)

__all__ = [
    "get_upcoming",
    "get_upcoming_for_mtb",
    "has_ended",
    "next_meeting_for_mtb",
    "MeetingFeed",
    "JoinWindow",
    "is_join_enabled",
    "is_recurring",
    "join_window",
    "minutes_until_occurrence",
    "occurrence_for",
    "weekday_index",
]
