"""
Case intake workflow.

Drives a ``WorkflowSession`` through the wizard steps
metadata -> upload -> anonymization -> digitization -> review.
Advancing runs the gate of the current step first; going back to a
completed step is always allowed and never undoes anything.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional

from ..models.case import CaseMetadata, PatientMetadata, ValidationResult
from ..services.notifier import AttentionNotifier, AttentionSignal, LoggingAttentionNotifier
from ..utils.errors import InvariantViolation
from ..utils.logging import RequestContext, get_audit_logger, get_logger
from .documents import Document, DocumentLifecycleTracker
from .session import WorkflowSession, WorkflowStep
from .validation import (
    CaseRegistry,
    check_metadata_fields,
    validate_anonymization,
    validate_digitization,
    validate_documents_uploaded,
    validate_metadata,
)

logger = get_logger(__name__)
audit_logger = get_audit_logger()

# Gates of the steps that validate synchronously; metadata needs the registry.
_STEP_GATES: Dict[WorkflowStep, Callable[[WorkflowSession], ValidationResult]] = {
    WorkflowStep.UPLOAD: validate_documents_uploaded,
    WorkflowStep.ANONYMIZATION: validate_anonymization,
    WorkflowStep.DIGITIZATION: validate_digitization,
}

_ATTENTION_COPY: Dict[WorkflowStep, tuple] = {
    WorkflowStep.METADATA: (
        "Missing Case Details",
        "Please complete the patient and case details before continuing.",
    ),
    WorkflowStep.UPLOAD: (
        "No Documents Uploaded",
        "Upload at least one document before continuing.",
    ),
    WorkflowStep.ANONYMIZATION: (
        "Documents Not Reviewed",
        "Some documents have not been reviewed for anonymization.",
    ),
    WorkflowStep.DIGITIZATION: (
        "Documents Not Reviewed",
        "Some documents have not been reviewed for digitization.",
    ),
}


@dataclass
class AdvanceOutcome:
    """Result of one ``advance`` attempt."""

    advanced: bool
    step: WorkflowStep
    validation: Optional[ValidationResult] = None
    attention: Optional[AttentionSignal] = None
    # The registry answered after the user moved on; the answer was dropped
    stale: bool = False


class CaseIntakeWorkflow:
    """State machine over one intake session."""

    def __init__(
        self,
        session: WorkflowSession,
        registry: CaseRegistry,
        notifier: Optional[AttentionNotifier] = None,
        tracker: Optional[DocumentLifecycleTracker] = None,
    ):
        self.session = session
        self._registry = registry
        self._notifier = notifier or LoggingAttentionNotifier()
        self._tracker = tracker or DocumentLifecycleTracker()

    # ------------------------------------------------------------------
    # Step transitions
    # ------------------------------------------------------------------

    async def advance(self) -> AdvanceOutcome:
        """Validate the current step and move to the next one if it passes.

        Raises:
            InvariantViolation: called on the terminal review step.
            CollaboratorError: the case registry failed; nothing changed.
        """
        session = self.session
        current = session.step
        target = current.next_step()
        if target is None:
            raise InvariantViolation("Review is the last step; submit the case instead")

        with RequestContext(user_id=session.owner_id, session_id=session.session_id):
            if current == WorkflowStep.METADATA:
                result = await self._run_metadata_gate()
                if result is None:
                    return AdvanceOutcome(advanced=False, step=session.step, stale=True)
            else:
                result = _STEP_GATES[current](session)

            if not result.valid:
                signal = self._attention_for(current, result)
                self._notifier.notify(signal)
                audit_logger.log_workflow_transition(
                    session_id=session.session_id,
                    owner_id=session.owner_id,
                    from_step=current.value,
                    to_step=target.value,
                    accepted=False,
                    errors=result.errors,
                )
                return AdvanceOutcome(
                    advanced=False, step=current, validation=result, attention=signal
                )

            session.completed_steps.add(current)
            session.step = target
            audit_logger.log_workflow_transition(
                session_id=session.session_id,
                owner_id=session.owner_id,
                from_step=current.value,
                to_step=target.value,
                accepted=True,
            )
            return AdvanceOutcome(advanced=True, step=target, validation=result)

    async def _run_metadata_gate(self) -> Optional[ValidationResult]:
        """Run the metadata gate; ``None`` if the answer arrived for outdated input.

        The check is tagged with the step and case name at dispatch time. If
        either differs when the registry answers, the answer is discarded.
        Field checks run again on arrival so that edits made while the lookup
        was pending are never advanced past.
        """
        session = self.session
        dispatched_for = (session.step, session.case_name)
        result = await validate_metadata(session, self._registry)
        if (session.step, session.case_name) != dispatched_for:
            logger.info(
                f"Discarding stale case-name check for '{dispatched_for[1]}' "
                f"in session {session.session_id}"
            )
            return None

        current = check_metadata_fields(session)
        if not current.valid:
            return current
        return result

    def can_navigate_to(self, step: WorkflowStep) -> bool:
        """Only earlier steps that were already completed can be revisited."""
        return step < self.session.step and step in self.session.completed_steps

    def go_back(self, step: WorkflowStep) -> WorkflowStep:
        """Return to an earlier completed step. Nothing is reset."""
        if not self.can_navigate_to(step):
            raise InvariantViolation(
                f"Cannot navigate from {self.session.step.value} to {step.value}"
            )
        logger.info(f"Session {self.session.session_id} back to {step.value}")
        self.session.step = step
        return step

    @staticmethod
    def _attention_for(step: WorkflowStep, result: ValidationResult) -> AttentionSignal:
        title, description = _ATTENTION_COPY[step]
        if step == WorkflowStep.METADATA and result.errors:
            description = "; ".join(result.errors)
        return AttentionSignal(
            title=title,
            description=description,
            unverified_documents=list(result.unverified_documents or []),
        )

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    def require_step(self, step: WorkflowStep, action: str) -> None:
        """Edits that a gate has already checked are only accepted on that gate's step."""
        if self.session.step != step:
            raise InvariantViolation(
                f"Cannot {action} on step {self.session.step.value}; go back to {step.value} first"
            )

    def set_patient_metadata(self, metadata: PatientMetadata) -> None:
        self.require_step(WorkflowStep.METADATA, "change patient details")
        self.session.patient_metadata = metadata

    def set_case_metadata(self, metadata: CaseMetadata) -> None:
        self.require_step(WorkflowStep.METADATA, "change case details")
        self.session.case_metadata = metadata

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    def upload(
        self, file_name: str, mime_type: str, content_ref: Optional[str] = None
    ) -> Document:
        self.require_step(WorkflowStep.UPLOAD, "upload documents")
        document = self.session.add_document(file_name, mime_type, content_ref)
        logger.info(f"Uploaded {file_name} as {document.id} ({document.file_type.value})")
        return document

    def remove_document(self, document_id: str) -> Document:
        self.require_step(WorkflowStep.UPLOAD, "remove documents")
        return self.session.remove_document(document_id)

    def attach_content(self, document_id: str, content_ref: str) -> Document:
        document = self.session.get_document(document_id)
        document.content_ref = content_ref
        return document

    def visit_for_anonymization(self, document_id: str) -> Document:
        document = self.session.get_document(document_id)
        self._tracker.mark_visited_in_anonymization(document)
        self.session.active_document_id = document_id
        return document

    def edit_anonymization(
        self, document_id: str, content_ref: Optional[str] = None
    ) -> Document:
        document = self.session.get_document(document_id)
        self._tracker.apply_anonymization_edit(document, content_ref)
        return document

    def visit_for_digitization(self, document_id: str) -> Document:
        document = self.session.get_document(document_id)
        self._tracker.mark_visited_in_digitization(document)
        self.session.active_document_id = document_id
        return document

    def record_digitized_text(self, document_id: str, text: str) -> Document:
        document = self.session.get_document(document_id)
        self._tracker.record_digitized_text(document, text)
        return document
