"""
Meeting scheduling use-cases.
Writes go to the meeting store and are reflected in the in-memory feed
right away; the later realtime push for the same meeting is deduplicated.
"""

import uuid
from datetime import date, datetime, time, timezone
from typing import Any, Dict, Iterable, List, Optional

from ..models.meeting import Meeting, MeetingDraft, MeetingStatus, ScheduleType
from ..scheduling.feed import MeetingFeed
from ..scheduling.recurrence import is_join_enabled
from ..utils.config import settings
from ..utils.errors import InvariantViolation
from ..utils.logging import get_logger
from .meeting_store import MeetingStore

logger = get_logger(__name__)


class MeetingService:
    """Schedules, ends and lists meetings for the MTBs a user belongs to."""

    def __init__(self, store: MeetingStore, feed: Optional[MeetingFeed] = None, user_id: Optional[str] = None):
        self._store = store
        self.feed = feed or MeetingFeed()
        self.user_id = user_id

    async def schedule(
        self,
        mtb_id: str,
        scheduled_date: date,
        scheduled_time: time,
        schedule_type: ScheduleType,
        repeat_days: Optional[Iterable[int]] = None,
        explicit_dates: Optional[Iterable[date]] = None,
    ) -> List[Meeting]:
        """Create the meetings for one scheduling request.

        ``custom`` creates one recurring meeting plus a one-time meeting per
        explicit date, ``instant`` creates a meeting that is already in
        progress, anything else creates a single one-time meeting.
        """
        drafts: List[MeetingDraft] = []

        if schedule_type == ScheduleType.INSTANT:
            drafts.append(
                MeetingDraft(
                    mtb_id=mtb_id,
                    created_by=self.user_id,
                    scheduled_date=scheduled_date,
                    scheduled_time=scheduled_time,
                    schedule_type=ScheduleType.INSTANT,
                    status=MeetingStatus.IN_PROGRESS,
                    started_at=datetime.now(timezone.utc),
                    meeting_link=f"{settings.meeting_link_base}?instant={uuid.uuid4().hex}",
                )
            )
        elif schedule_type == ScheduleType.CUSTOM:
            drafts.append(
                MeetingDraft(
                    mtb_id=mtb_id,
                    created_by=self.user_id,
                    scheduled_date=scheduled_date,
                    scheduled_time=scheduled_time,
                    schedule_type=ScheduleType.CUSTOM,
                    repeat_days=list(repeat_days or []),
                )
            )
            for extra_date in explicit_dates or []:
                drafts.append(
                    MeetingDraft(
                        mtb_id=mtb_id,
                        created_by=self.user_id,
                        scheduled_date=extra_date,
                        scheduled_time=scheduled_time,
                        schedule_type=ScheduleType.ONCE,
                    )
                )
        else:
            drafts.append(
                MeetingDraft(
                    mtb_id=mtb_id,
                    created_by=self.user_id,
                    scheduled_date=scheduled_date,
                    scheduled_time=scheduled_time,
                    schedule_type=ScheduleType.ONCE,
                )
            )

        created: List[Meeting] = []
        for draft in drafts:
            meeting = await self._store.create(draft)
            self.feed.apply(meeting)
            created.append(meeting)

        logger.info(f"Scheduled {len(created)} meeting(s) for MTB {mtb_id}")
        return created

    async def refresh(self, mtb_ids: List[str]) -> List[Meeting]:
        """Replace the feed with the store's current meetings."""
        meetings = await self._store.list(mtb_ids)
        self.feed.replace_all(meetings)
        return self.feed.all()

    def on_push(self, record: Dict[str, Any]) -> Meeting:
        """Apply a realtime insert/update notification from the store."""
        meeting = Meeting.model_validate(record)
        self.feed.apply(meeting)
        return meeting

    def on_delete_push(self, meeting_id: str) -> bool:
        return self.feed.remove(meeting_id)

    async def end(self, meeting_id: str) -> Meeting:
        meeting = await self._store.update_status(meeting_id, MeetingStatus.ENDED)
        self.feed.apply(meeting)
        return meeting

    async def cancel(self, meeting_id: str) -> Meeting:
        meeting = await self._store.update_status(meeting_id, MeetingStatus.CANCELLED)
        self.feed.apply(meeting)
        return meeting

    async def delete(self, meeting_id: str) -> bool:
        deleted = await self._store.delete(meeting_id)
        self.feed.remove(meeting_id)
        return deleted

    def upcoming(self, now: datetime) -> List[Meeting]:
        return self.feed.upcoming(now)

    def join_link(self, meeting_id: str, now: datetime) -> str:
        """A fresh meeting link, only while the join window is open.

        Raises:
            KeyError: the meeting is not in the feed.
            InvariantViolation: the join window is closed.
        """
        meeting = self.feed.get(meeting_id)
        if meeting is None:
            raise KeyError(meeting_id)
        if not is_join_enabled(meeting, now):
            raise InvariantViolation(f"Meeting {meeting_id} is not open for joining")
        return f"{settings.meeting_link_base}?mid={meeting.id}&t={int(now.timestamp() * 1000)}"
