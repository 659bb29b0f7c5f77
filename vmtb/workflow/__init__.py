"""Case intake wizard: session state, document lifecycle, gates, and transitions."""

from vmtb.workflow.documents import Document, DocumentLifecycleTracker
from vmtb.workflow.intake import AdvanceOutcome, CaseIntakeWorkflow
from vmtb.workflow.session import WorkflowSession, WorkflowStep
from vmtb.workflow.sessions import IntakeSessionRegistry
from vmtb.workflow.validation import (
    check_metadata_fields,
    validate_all,
    validate_anonymization,
    validate_digitization,
    validate_documents_uploaded,
    validate_metadata,
)

__all__ = [
    "Document",
    "DocumentLifecycleTracker",
    "AdvanceOutcome",
    "CaseIntakeWorkflow",
    "WorkflowSession",
    "WorkflowStep",
    "IntakeSessionRegistry",
    "check_metadata_fields",
    "validate_all",
    "validate_anonymization",
    "validate_digitization",
    "validate_documents_uploaded",
    "validate_metadata",
]
