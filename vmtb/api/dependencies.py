"""FastAPI dependencies resolving per-user collaborators from application state."""

from datetime import datetime

from fastapi import Header, HTTPException, Request, status

from ..services.document_store import DocumentStore
from ..services.meeting_service import MeetingService
from ..workflow.intake import CaseIntakeWorkflow
from ..workflow.session import WorkflowSession
from ..workflow.sessions import IntakeSessionRegistry


def current_user_id(x_user_id: str = Header(..., alias="X-User-Id")) -> str:
    """Authenticated user id, forwarded by the auth layer in front of this API."""
    if not x_user_id.strip():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing user id")
    return x_user_id.strip()


def now(request: Request) -> datetime:
    return request.app.state.clock()


def session_registry(request: Request) -> IntakeSessionRegistry:
    return request.app.state.sessions


def active_session(request: Request, user_id: str) -> WorkflowSession:
    try:
        return request.app.state.sessions.get(user_id)
    except KeyError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="No active intake session"
        ) from exc


def build_workflow(request: Request, user_id: str) -> CaseIntakeWorkflow:
    state = request.app.state
    return CaseIntakeWorkflow(
        session=active_session(request, user_id),
        registry=state.registry_factory(user_id),
        notifier=state.notifier,
        tracker=state.tracker,
    )


def meeting_service(request: Request, user_id: str) -> MeetingService:
    """The user's scheduling service; its feed is dropped after a period of inactivity."""
    state = request.app.state
    return state.meeting_services.get_or_create(
        user_id, lambda: MeetingService(state.store_factory(user_id), user_id=user_id)
    )


def document_store(request: Request, user_id: str) -> DocumentStore:
    return request.app.state.document_store_factory(user_id)
