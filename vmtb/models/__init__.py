"""Model modules for the VMTB core."""

from vmtb.models.case import (
    CancerType,
    CaseMetadata,
    DocumentType,
    PatientMetadata,
    Sex,
    ValidationResult,
)
from vmtb.models.meeting import Meeting, MeetingDraft, MeetingStatus, ScheduleType

__all__ = [
    "CancerType",
    "CaseMetadata",
    "DocumentType",
    "PatientMetadata",
    "Sex",
    "ValidationResult",
    "Meeting",
    "MeetingDraft",
    "MeetingStatus",
    "ScheduleType",
]
