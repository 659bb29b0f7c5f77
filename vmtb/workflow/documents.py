"""
Per-document review lifecycle across the anonymization and digitization phases.

Every change to the visited flags goes through ``DocumentLifecycleTracker``
so that an anonymization edit always invalidates an earlier digitization
review.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from ..models.case import DocumentType
from ..utils.errors import InvariantViolation
from ..utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class Document:
    """A document uploaded into an intake session."""

    id: str
    file_name: str
    file_type: DocumentType
    mime_type: str = ""
    content_ref: Optional[str] = None
    visited_in_anonymization: bool = False
    visited_in_digitization: bool = False
    anonymized_changed_at: Optional[datetime] = None
    digitization_visited_at: Optional[datetime] = None
    anonymized_content_ref: Optional[str] = None
    digitized_text: Optional[str] = None


class DocumentLifecycleTracker:
    """Named lifecycle transitions for documents."""

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        self._clock = clock

    def mark_visited_in_anonymization(self, document: Document) -> None:
        """Record that the document was reviewed for anonymization. Idempotent."""
        document.visited_in_anonymization = True

    def apply_anonymization_edit(
        self, document: Document, content_ref: Optional[str] = None
    ) -> None:
        """Record an anonymization edit; any digitization review becomes stale."""
        document.anonymized_changed_at = self._clock()
        if content_ref is not None:
            document.anonymized_content_ref = content_ref
        if document.visited_in_digitization:
            logger.info(f"Anonymization edit invalidated digitization review of {document.id}")
        document.visited_in_digitization = False

    def mark_visited_in_digitization(self, document: Document) -> None:
        """Record a digitization review.

        Raises:
            InvariantViolation: the document was never reviewed for anonymization.
        """
        if not document.visited_in_anonymization:
            raise InvariantViolation(
                f"Document {document.file_name} must be reviewed for anonymization "
                "before digitization"
            )
        document.visited_in_digitization = True
        document.digitization_visited_at = self._clock()

    def record_digitized_text(self, document: Document, text: str) -> None:
        document.digitized_text = text

    @staticmethod
    def needs_digitization_review(document: Document) -> bool:
        if not document.visited_in_digitization:
            return True
        if document.anonymized_changed_at is None:
            return False
        if document.digitization_visited_at is None:
            return True
        return document.anonymized_changed_at > document.digitization_visited_at
