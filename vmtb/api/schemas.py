"""Request and response models of the HTTP API."""

from __future__ import annotations

from datetime import date, datetime, time
from typing import List, Optional

from pydantic import BaseModel, Field

from ..models.case import CaseMetadata, PatientMetadata, ValidationResult
from ..models.meeting import Meeting, ScheduleType
from ..scheduling.recurrence import JoinWindow
from ..services.notifier import AttentionSignal
from ..workflow.documents import Document, DocumentLifecycleTracker
from ..workflow.intake import AdvanceOutcome
from ..workflow.session import WorkflowSession, WorkflowStep


class MetadataUpdate(BaseModel):
    patient: PatientMetadata
    case: CaseMetadata


class DocumentUpload(BaseModel):
    file_name: str = Field(..., min_length=1)
    mime_type: str
    content_ref: Optional[str] = Field(None, description="Reference to the raw file in the document store")


class AnonymizationEdit(BaseModel):
    content_ref: Optional[str] = None


class DigitizedText(BaseModel):
    text: str


class BackRequest(BaseModel):
    step: WorkflowStep


class DocumentState(BaseModel):
    id: str
    file_name: str
    file_type: str
    visited_in_anonymization: bool
    visited_in_digitization: bool
    anonymized_changed_at: Optional[datetime] = None
    needs_digitization_review: bool

    @classmethod
    def from_document(cls, document: Document, needs_review: bool) -> "DocumentState":
        return cls(
            id=document.id,
            file_name=document.file_name,
            file_type=document.file_type.value,
            visited_in_anonymization=document.visited_in_anonymization,
            visited_in_digitization=document.visited_in_digitization,
            anonymized_changed_at=document.anonymized_changed_at,
            needs_digitization_review=needs_review,
        )


class SessionState(BaseModel):
    session_id: str
    step: WorkflowStep
    completed_steps: List[WorkflowStep]
    patient: PatientMetadata
    case: CaseMetadata
    documents: List[DocumentState]
    active_document_id: Optional[str] = None

    @classmethod
    def from_session(cls, session: WorkflowSession) -> "SessionState":
        return cls(
            session_id=session.session_id,
            step=session.step,
            completed_steps=sorted(session.completed_steps),
            patient=session.patient_metadata,
            case=session.case_metadata,
            documents=[
                DocumentState.from_document(
                    doc, DocumentLifecycleTracker.needs_digitization_review(doc)
                )
                for doc in session.documents
            ],
            active_document_id=session.active_document_id,
        )


class AttentionPayload(BaseModel):
    title: str
    description: str
    unverified_documents: List[str] = Field(default_factory=list)

    @classmethod
    def from_signal(cls, signal: AttentionSignal) -> "AttentionPayload":
        return cls(
            title=signal.title,
            description=signal.description,
            unverified_documents=list(signal.unverified_documents),
        )


class AdvanceResponse(BaseModel):
    advanced: bool
    step: WorkflowStep
    stale: bool = False
    validation: Optional[ValidationResult] = None
    attention: Optional[AttentionPayload] = None

    @classmethod
    def from_outcome(cls, outcome: AdvanceOutcome) -> "AdvanceResponse":
        return cls(
            advanced=outcome.advanced,
            step=outcome.step,
            stale=outcome.stale,
            validation=outcome.validation,
            attention=AttentionPayload.from_signal(outcome.attention) if outcome.attention else None,
        )


class ScheduleRequest(BaseModel):
    mtb_id: str
    scheduled_date: date
    scheduled_time: time
    schedule_type: ScheduleType = ScheduleType.ONCE
    repeat_days: Optional[List[int]] = None
    explicit_dates: Optional[List[date]] = None


class MeetingView(BaseModel):
    meeting: Meeting
    join_enabled: bool


class JoinWindowResponse(BaseModel):
    meeting_id: str
    meeting_day: bool
    occurrence: Optional[datetime] = None
    opens_at: Optional[datetime] = None
    closes_at: Optional[datetime] = None
    minutes_until: Optional[int] = None
    enabled: bool = False

    @classmethod
    def from_window(cls, meeting_id: str, window: Optional[JoinWindow]) -> "JoinWindowResponse":
        if window is None:
            return cls(meeting_id=meeting_id, meeting_day=False)
        return cls(
            meeting_id=meeting_id,
            meeting_day=True,
            occurrence=window.occurrence,
            opens_at=window.opens_at,
            closes_at=window.closes_at,
            minutes_until=window.minutes_until,
            enabled=window.enabled,
        )


class JoinLinkResponse(BaseModel):
    meeting_id: str
    link: str


class ContentUrlResponse(BaseModel):
    document_id: str
    url: str
