"""Case intake session state and the ordered set of wizard steps."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Set

from ..models.case import CaseMetadata, DocumentType, PatientMetadata
from ..utils.errors import InvariantViolation
from .documents import Document


class WorkflowStep(str, Enum):
    """Wizard steps in their fixed order."""

    METADATA = "metadata"
    UPLOAD = "upload"
    ANONYMIZATION = "anonymization"
    DIGITIZATION = "digitization"
    REVIEW = "review"

    @classmethod
    def sequence(cls) -> List["WorkflowStep"]:
        return list(cls)

    @property
    def order(self) -> int:
        return WorkflowStep.sequence().index(self)

    def next_step(self) -> Optional["WorkflowStep"]:
        """The following step, or ``None`` for the terminal review step."""
        steps = WorkflowStep.sequence()
        if self.order + 1 < len(steps):
            return steps[self.order + 1]
        return None

    def previous_step(self) -> Optional["WorkflowStep"]:
        if self.order == 0:
            return None
        return WorkflowStep.sequence()[self.order - 1]

    def __lt__(self, other):
        if not isinstance(other, WorkflowStep):
            return NotImplemented
        return self.order < other.order

    def __le__(self, other):
        if not isinstance(other, WorkflowStep):
            return NotImplemented
        return self.order <= other.order

    def __gt__(self, other):
        if not isinstance(other, WorkflowStep):
            return NotImplemented
        return self.order > other.order

    def __ge__(self, other):
        if not isinstance(other, WorkflowStep):
            return NotImplemented
        return self.order >= other.order


def _document_id() -> str:
    return f"doc_{uuid.uuid4().hex[:12]}"


@dataclass
class WorkflowSession:
    """State of one case being created.

    Lives in memory only. It is discarded after submission or when the user
    abandons the flow, and is passed explicitly to everything that reads or
    mutates it.
    """

    owner_id: Optional[str] = None
    session_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    step: WorkflowStep = WorkflowStep.METADATA
    patient_metadata: PatientMetadata = field(default_factory=PatientMetadata)
    case_metadata: CaseMetadata = field(default_factory=CaseMetadata)
    documents: List[Document] = field(default_factory=list)
    completed_steps: Set[WorkflowStep] = field(default_factory=set)
    active_document_id: Optional[str] = None

    @property
    def case_name(self) -> str:
        return self.case_metadata.case_name.strip()

    def add_document(
        self,
        file_name: str,
        mime_type: str,
        content_ref: Optional[str] = None,
        document_id: Optional[str] = None,
    ) -> Document:
        """Append a freshly uploaded document; upload order is kept."""
        document = Document(
            id=document_id or _document_id(),
            file_name=file_name,
            file_type=DocumentType.from_mime_type(mime_type),
            mime_type=mime_type,
            content_ref=content_ref,
        )
        if any(existing.id == document.id for existing in self.documents):
            raise InvariantViolation(f"Document id {document.id} already in session")
        self.documents.append(document)
        return document

    def get_document(self, document_id: str) -> Document:
        for document in self.documents:
            if document.id == document_id:
                return document
        raise InvariantViolation(f"Unknown document {document_id}")

    def remove_document(self, document_id: str) -> Document:
        document = self.get_document(document_id)
        self.documents.remove(document)
        if self.active_document_id == document_id:
            self.active_document_id = None
        return document

    def set_active_document(self, document_id: Optional[str]) -> None:
        if document_id is not None:
            self.get_document(document_id)
        self.active_document_id = document_id
