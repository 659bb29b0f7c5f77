"""
Meeting store backed by the Supabase ``meetings`` table.
Handles create, list, status update and delete of meeting rows.
"""

import asyncio
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Protocol

from pydantic import ValidationError
from supabase import Client

from ..models.meeting import Meeting, MeetingDraft, MeetingStatus
from ..utils.config import settings
from ..utils.errors import CollaboratorError
from ..utils.logging import get_audit_logger, get_logger, monitor_latency
from .supabase_client import get_supabase_client

logger = get_logger(__name__)
audit_logger = get_audit_logger()


class MeetingStore(Protocol):
    async def create(self, draft: MeetingDraft) -> Meeting: ...

    async def list(self, mtb_ids: List[str]) -> List[Meeting]: ...

    async def update_status(self, meeting_id: str, status: MeetingStatus) -> Meeting: ...

    async def delete(self, meeting_id: str) -> bool: ...


def parse_meeting_rows(rows: List[Dict[str, Any]]) -> List[Meeting]:
    """Turn store rows into meetings, rejecting rows that break meeting invariants."""
    meetings: List[Meeting] = []
    for row in rows:
        try:
            meetings.append(Meeting.model_validate(row))
        except ValidationError as e:
            logger.warning(f"Skipping invalid meeting row {row.get('id')}: {e.error_count()} error(s)")
    return meetings


class SupabaseMeetingStore:
    """Storage of meetings in Supabase Postgres."""

    def __init__(self, user_id: Optional[str] = None, client: Optional[Client] = None):
        self.user_id = user_id
        self._client = client

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = get_supabase_client()
        return self._client

    def _table(self):
        return self.client.table(settings.meetings_table)

    async def _execute(self, operation: str, query, resource_id: str, audit_operation: str):
        try:
            result = await asyncio.to_thread(query.execute)
        except Exception as e:
            audit_logger.log_data_access(
                resource_type="meeting",
                resource_id=resource_id,
                user_id=self.user_id,
                operation=audit_operation,
                success=False,
                error=str(e),
            )
            logger.error(f"Failed to {audit_operation} meeting {resource_id}: {e}")
            raise CollaboratorError(operation, str(e)) from e

        audit_logger.log_data_access(
            resource_type="meeting",
            resource_id=resource_id,
            user_id=self.user_id,
            operation=audit_operation,
            success=True,
        )
        return result

    @monitor_latency("store_create_meeting", "supabase")
    async def create(self, draft: MeetingDraft) -> Meeting:
        """Insert a meeting and return it with its id and creation time."""
        record = draft.model_dump(mode="json")
        record["id"] = str(uuid.uuid4())
        record["created_at"] = datetime.now(timezone.utc).isoformat()
        if record.get("created_by") is None:
            record["created_by"] = self.user_id

        result = await self._execute(
            "store_create_meeting", self._table().insert(record), record["id"], "create"
        )
        if not result.data:
            raise CollaboratorError("store_create_meeting", "insert returned no row")
        return Meeting.model_validate(result.data[0])

    @monitor_latency("store_list_meetings", "supabase")
    async def list(self, mtb_ids: List[str]) -> List[Meeting]:
        """All meetings of the given MTBs."""
        if not mtb_ids:
            return []
        query = self._table().select("*").in_("mtb_id", list(mtb_ids))
        result = await self._execute("store_list_meetings", query, ",".join(mtb_ids), "read")
        return parse_meeting_rows(result.data or [])

    @monitor_latency("store_update_meeting_status", "supabase")
    async def update_status(self, meeting_id: str, status: MeetingStatus) -> Meeting:
        """Set a meeting's status. Raises ``KeyError`` for an unknown id."""
        changes: Dict[str, Any] = {"status": status.value}
        if status == MeetingStatus.IN_PROGRESS:
            changes["started_at"] = datetime.now(timezone.utc).isoformat()

        query = self._table().update(changes).eq("id", meeting_id)
        result = await self._execute("store_update_meeting_status", query, meeting_id, "update")
        if not result.data:
            raise KeyError(meeting_id)
        return Meeting.model_validate(result.data[0])

    @monitor_latency("store_delete_meeting", "supabase")
    async def delete(self, meeting_id: str) -> bool:
        query = self._table().delete().eq("id", meeting_id)
        result = await self._execute("store_delete_meeting", query, meeting_id, "delete")
        return bool(result.data)
