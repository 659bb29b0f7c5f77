"""In-memory meeting list fed by optimistic local writes and store pushes."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, Iterable, List, Optional

from ..models.meeting import Meeting
from ..utils.logging import get_logger
from .aggregator import INACTIVE_STATUSES, get_upcoming

logger = get_logger(__name__)


class MeetingFeed:
    """Meetings visible to one user, keyed by id.

    The same meeting can arrive twice: once from the optimistic local
    append after ``create`` and again from the realtime push. Only
    presence matters, so entries are keyed by ``id`` and a later arrival
    simply replaces the earlier one.
    """

    def __init__(self, meetings: Optional[Iterable[Meeting]] = None):
        self._meetings: Dict[str, Meeting] = {}
        if meetings:
            self.replace_all(meetings)

    def __len__(self) -> int:
        return len(self._meetings)

    def __contains__(self, meeting_id: object) -> bool:
        return meeting_id in self._meetings

    def get(self, meeting_id: str) -> Optional[Meeting]:
        return self._meetings.get(meeting_id)

    def apply(self, meeting: Meeting) -> bool:
        """Insert or replace a meeting. Returns True if the id was new."""
        is_new = meeting.id not in self._meetings
        self._meetings[meeting.id] = meeting
        if not is_new:
            logger.debug(f"Meeting {meeting.id} already in feed, replaced")
        return is_new

    def remove(self, meeting_id: str) -> bool:
        return self._meetings.pop(meeting_id, None) is not None

    def replace_all(self, meetings: Iterable[Meeting]) -> None:
        """Swap in an authoritative list; duplicate ids collapse to one entry."""
        self._meetings = {}
        for meeting in meetings:
            self._meetings[meeting.id] = meeting

    def all(self) -> List[Meeting]:
        return list(self._meetings.values())

    def upcoming(self, now: datetime) -> List[Meeting]:
        """Upcoming active meetings in display order."""
        active = [m for m in self._meetings.values() if m.status not in INACTIVE_STATUSES]
        return get_upcoming(active, now)
