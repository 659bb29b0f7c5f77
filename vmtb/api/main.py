"""
FastAPI application for the VMTB core.
Exposes the case intake wizard and MTB meeting scheduling.
"""

from datetime import datetime
from typing import Callable, Optional

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..services.case_registry import SupabaseCaseRegistry
from ..services.document_store import DocumentStore, SupabaseDocumentStore
from ..services.meeting_store import MeetingStore, SupabaseMeetingStore
from ..services.notifier import AttentionNotifier, LoggingAttentionNotifier
from ..utils.cache import KeyedCache
from ..utils.config import settings
from ..utils.errors import CollaboratorError, InvariantViolation
from ..utils.logging import get_logger, setup_logging
from ..workflow.documents import DocumentLifecycleTracker
from ..workflow.sessions import IntakeSessionRegistry
from ..workflow.validation import CaseRegistry
from .routers.intake import router as intake_router
from .routers.meetings import router as meetings_router

logger = get_logger(__name__)


def create_app(
    *,
    registry_factory: Callable[[str], CaseRegistry] = SupabaseCaseRegistry,
    store_factory: Callable[[str], MeetingStore] = SupabaseMeetingStore,
    document_store_factory: Callable[[str], DocumentStore] = SupabaseDocumentStore,
    notifier: Optional[AttentionNotifier] = None,
    clock: Callable[[], datetime] = datetime.now,
    sessions: Optional[IntakeSessionRegistry] = None,
    meeting_services: Optional[KeyedCache] = None,
) -> FastAPI:
    """Build the API with its collaborators; tests pass fakes here."""

    app = FastAPI(
        title="VMTB Core API",
        description="Case intake workflow and MTB meeting scheduling",
        version=__version__,
        debug=settings.debug,
    )

    app.state.registry_factory = registry_factory
    app.state.store_factory = store_factory
    app.state.document_store_factory = document_store_factory
    app.state.notifier = notifier or LoggingAttentionNotifier()
    app.state.clock = clock
    app.state.tracker = DocumentLifecycleTracker(clock=clock)
    app.state.sessions = sessions or IntakeSessionRegistry()
    app.state.meeting_services = meeting_services if meeting_services is not None else KeyedCache()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(InvariantViolation)
    async def invariant_violation_handler(request: Request, exc: InvariantViolation):
        logger.warning(f"Rejected call on {request.url.path}: {exc}")
        return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})

    @app.exception_handler(CollaboratorError)
    async def collaborator_error_handler(request: Request, exc: CollaboratorError):
        logger.error(f"Collaborator failure on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": str(exc), "operation": exc.operation},
        )

    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "version": __version__}

    app.include_router(intake_router)
    app.include_router(meetings_router)
    return app


setup_logging()
app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "vmtb.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
