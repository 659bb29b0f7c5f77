"""Active intake sessions, at most one per user."""

from __future__ import annotations

from threading import Lock
from typing import Dict, Optional

from ..utils.logging import get_logger
from .session import WorkflowSession

logger = get_logger(__name__)


class IntakeSessionRegistry:
    """Holds the single active ``WorkflowSession`` of each user.

    Sessions are never persisted; starting a new case discards the
    previous, unfinished one.
    """

    def __init__(self):
        self._sessions: Dict[str, WorkflowSession] = {}
        self._lock = Lock()

    def start(self, owner_id: str) -> WorkflowSession:
        session = WorkflowSession(owner_id=owner_id)
        with self._lock:
            previous = self._sessions.get(owner_id)
            self._sessions[owner_id] = session
        if previous is not None:
            logger.info(f"Discarded unfinished intake session {previous.session_id}")
        return session

    def get(self, owner_id: str) -> WorkflowSession:
        """Raises ``KeyError`` when the user has no active session."""
        with self._lock:
            return self._sessions[owner_id]

    def find(self, owner_id: str) -> Optional[WorkflowSession]:
        with self._lock:
            return self._sessions.get(owner_id)

    def discard(self, owner_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(owner_id, None) is not None
