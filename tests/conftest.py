"""Shared fakes for the collaborator contracts."""

import uuid
from datetime import date, datetime, time, timezone
from typing import Dict, Iterable, List, Optional

import pytest

from vmtb.models.meeting import Meeting, MeetingDraft, MeetingStatus, ScheduleType
from vmtb.services.notifier import RecordingAttentionNotifier


class FakeRegistry:
    """Case registry holding a fixed set of used names."""

    def __init__(self, existing: Iterable[str] = ()):
        self.existing = set(existing)
        self.calls: List[str] = []

    async def case_name_exists(self, name: str) -> bool:
        self.calls.append(name)
        return name in self.existing


class FakeMeetingStore:
    """In-memory meeting store."""

    def __init__(self):
        self.rows: Dict[str, Meeting] = {}
        self.created: List[MeetingDraft] = []

    async def create(self, draft: MeetingDraft) -> Meeting:
        self.created.append(draft)
        meeting = Meeting(
            **draft.model_dump(),
            id=str(uuid.uuid4()),
            created_at=datetime.now(timezone.utc),
        )
        self.rows[meeting.id] = meeting
        return meeting

    async def list(self, mtb_ids: List[str]) -> List[Meeting]:
        return [m for m in self.rows.values() if m.mtb_id in mtb_ids]

    async def update_status(self, meeting_id: str, status: MeetingStatus) -> Meeting:
        meeting = self.rows[meeting_id].model_copy(update={"status": status})
        self.rows[meeting_id] = meeting
        return meeting

    async def delete(self, meeting_id: str) -> bool:
        return self.rows.pop(meeting_id, None) is not None


class FakeDocumentStore:
    """In-memory document bytes keyed by content reference."""

    def __init__(self):
        self.files: Dict[str, bytes] = {}

    async def add(self, session_id, document_id, file_name, content, content_type):
        ref = f"user-1/{session_id}/{document_id}"
        self.files[ref] = content
        return ref

    async def list(self, session_id):
        return [ref for ref in self.files if ref.split("/")[1] == session_id]

    async def remove(self, content_refs):
        for ref in content_refs:
            self.files.pop(ref, None)

    async def signed_url(self, content_ref):
        return f"https://storage.test/{content_ref}?token=abc"


def build_meeting(
    meeting_id: str = "m1",
    scheduled_date: date = date(2025, 3, 1),
    scheduled_time: time = time(10, 0),
    schedule_type: ScheduleType = ScheduleType.ONCE,
    repeat_days: Optional[List[int]] = None,
    created_at: datetime = datetime(2025, 2, 1, 8, 0),
    status: MeetingStatus = MeetingStatus.SCHEDULED,
    mtb_id: str = "mtb-1",
) -> Meeting:
    return Meeting(
        id=meeting_id,
        mtb_id=mtb_id,
        scheduled_date=scheduled_date,
        scheduled_time=scheduled_time,
        schedule_type=schedule_type,
        repeat_days=repeat_days,
        created_at=created_at,
        status=status,
    )


@pytest.fixture
def make_meeting():
    """Factory for meetings with sensible defaults."""
    return build_meeting


@pytest.fixture
def fake_registry():
    return FakeRegistry()


@pytest.fixture
def registry_with():
    """Registry factory pre-loaded with the given case names."""
    return lambda *names: FakeRegistry(existing=names)


@pytest.fixture
def fake_store():
    return FakeMeetingStore()


@pytest.fixture
def fake_documents():
    return FakeDocumentStore()


@pytest.fixture
def notifier():
    return RecordingAttentionNotifier()
