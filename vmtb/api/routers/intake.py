"""REST router for the case intake wizard."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status

from ...models.case import ValidationResult
from ...utils.logging import get_logger
from ...workflow.documents import DocumentLifecycleTracker
from ...workflow.session import WorkflowStep
from ...workflow.validation import validate_all
from ..dependencies import (
    active_session,
    build_workflow,
    current_user_id,
    document_store,
    session_registry,
)
from ..schemas import (
    AdvanceResponse,
    AnonymizationEdit,
    BackRequest,
    ContentUrlResponse,
    DigitizedText,
    DocumentState,
    DocumentUpload,
    MetadataUpdate,
    SessionState,
)

router = APIRouter(prefix="/api/intake", tags=["intake"])
logger = get_logger(__name__)


@router.post("/session", response_model=SessionState, status_code=status.HTTP_201_CREATED)
async def start_session(request: Request, user_id: str = Depends(current_user_id)) -> SessionState:
    """Start a new case, discarding any unfinished one."""

    session = session_registry(request).start(user_id)
    return SessionState.from_session(session)


@router.get("/session", response_model=SessionState)
async def read_session(request: Request, user_id: str = Depends(current_user_id)) -> SessionState:
    return SessionState.from_session(active_session(request, user_id))


@router.delete("/session", status_code=status.HTTP_204_NO_CONTENT)
async def abandon_session(request: Request, user_id: str = Depends(current_user_id)) -> None:
    """Drop the unfinished case together with any uploaded content."""

    registry = session_registry(request)
    session = registry.find(user_id)
    if session is None:
        return
    store = document_store(request, user_id)
    await store.remove(await store.list(session.session_id))
    registry.discard(user_id)


@router.put("/session/metadata", response_model=SessionState)
async def update_metadata(
    payload: MetadataUpdate, request: Request, user_id: str = Depends(current_user_id)
) -> SessionState:
    workflow = build_workflow(request, user_id)
    workflow.set_patient_metadata(payload.patient)
    workflow.set_case_metadata(payload.case)
    return SessionState.from_session(workflow.session)


@router.post("/session/documents", response_model=DocumentState, status_code=status.HTTP_201_CREATED)
async def upload_document(
    payload: DocumentUpload, request: Request, user_id: str = Depends(current_user_id)
) -> DocumentState:
    workflow = build_workflow(request, user_id)
    document = workflow.upload(payload.file_name, payload.mime_type, payload.content_ref)
    return DocumentState.from_document(document, needs_review=True)


@router.delete("/session/documents/{document_id}", response_model=SessionState)
async def remove_document(
    document_id: str, request: Request, user_id: str = Depends(current_user_id)
) -> SessionState:
    workflow = build_workflow(request, user_id)
    workflow.require_step(WorkflowStep.UPLOAD, "remove documents")
    document = workflow.session.get_document(document_id)
    refs = [ref for ref in (document.content_ref, document.anonymized_content_ref) if ref]
    await document_store(request, user_id).remove(refs)
    workflow.remove_document(document_id)
    return SessionState.from_session(workflow.session)


@router.put("/session/documents/{document_id}/content", response_model=DocumentState)
async def upload_content(
    document_id: str,
    request: Request,
    anonymized: bool = Query(False, description="Store as the anonymized version"),
    user_id: str = Depends(current_user_id),
) -> DocumentState:
    """Store raw document bytes sent as the request body.

    Uploading the anonymized version counts as an anonymization edit.
    """

    workflow = build_workflow(request, user_id)
    document = workflow.session.get_document(document_id)
    content = await request.body()
    if not content:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Empty document content")

    content_type = request.headers.get("content-type") or document.mime_type
    stored_id = f"{document_id}_anonymized" if anonymized else document_id
    ref = await document_store(request, user_id).add(
        workflow.session.session_id, stored_id, document.file_name, content, content_type
    )
    if anonymized:
        workflow.edit_anonymization(document_id, ref)
    else:
        workflow.attach_content(document_id, ref)
    return DocumentState.from_document(
        document, DocumentLifecycleTracker.needs_digitization_review(document)
    )


@router.get("/session/documents/{document_id}/url", response_model=ContentUrlResponse)
async def read_content_url(
    document_id: str,
    request: Request,
    anonymized: bool = Query(False),
    user_id: str = Depends(current_user_id),
) -> ContentUrlResponse:
    document = active_session(request, user_id).get_document(document_id)
    ref = document.anonymized_content_ref if anonymized else document.content_ref
    if not ref:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No stored content")
    url = await document_store(request, user_id).signed_url(ref)
    return ContentUrlResponse(document_id=document_id, url=url)


@router.post("/session/documents/{document_id}/anonymization/visit", response_model=SessionState)
async def visit_for_anonymization(
    document_id: str, request: Request, user_id: str = Depends(current_user_id)
) -> SessionState:
    workflow = build_workflow(request, user_id)
    workflow.visit_for_anonymization(document_id)
    return SessionState.from_session(workflow.session)


@router.post("/session/documents/{document_id}/anonymization/edit", response_model=SessionState)
async def edit_anonymization(
    document_id: str,
    payload: AnonymizationEdit,
    request: Request,
    user_id: str = Depends(current_user_id),
) -> SessionState:
    workflow = build_workflow(request, user_id)
    workflow.edit_anonymization(document_id, payload.content_ref)
    return SessionState.from_session(workflow.session)


@router.post("/session/documents/{document_id}/digitization/visit", response_model=SessionState)
async def visit_for_digitization(
    document_id: str, request: Request, user_id: str = Depends(current_user_id)
) -> SessionState:
    workflow = build_workflow(request, user_id)
    workflow.visit_for_digitization(document_id)
    return SessionState.from_session(workflow.session)


@router.put("/session/documents/{document_id}/digitization/text", response_model=SessionState)
async def record_digitized_text(
    document_id: str,
    payload: DigitizedText,
    request: Request,
    user_id: str = Depends(current_user_id),
) -> SessionState:
    workflow = build_workflow(request, user_id)
    workflow.record_digitized_text(document_id, payload.text)
    return SessionState.from_session(workflow.session)


@router.post("/session/advance", response_model=AdvanceResponse)
async def advance(request: Request, user_id: str = Depends(current_user_id)) -> AdvanceResponse:
    """Validate the current step and move forward when it passes."""

    workflow = build_workflow(request, user_id)
    outcome = await workflow.advance()
    return AdvanceResponse.from_outcome(outcome)


@router.post("/session/back", response_model=SessionState)
async def go_back(
    payload: BackRequest, request: Request, user_id: str = Depends(current_user_id)
) -> SessionState:
    workflow = build_workflow(request, user_id)
    workflow.go_back(payload.step)
    return SessionState.from_session(workflow.session)


@router.get("/session/validation", response_model=ValidationResult)
async def read_validation(request: Request, user_id: str = Depends(current_user_id)) -> ValidationResult:
    """Combined checks used before final submission."""

    return validate_all(active_session(request, user_id))
