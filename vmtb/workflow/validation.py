"""
Validation gates, one per wizard step boundary.

Gates only read the session. Calling a gate twice on the same session state
gives the same result, which makes re-validation after back-navigation safe.
Failures are returned as ``ValidationResult`` values; nothing here raises
for invalid input.
"""

from __future__ import annotations

from typing import List, Optional, Protocol

from ..models.case import CancerType, Sex, ValidationResult
from ..utils.config import WorkflowPolicy
from .session import WorkflowSession

DUPLICATE_CASE_NAME_ERROR = (
    "You already have a case with this name. Please choose a different name."
)

_SEX_VALUES = {member.value for member in Sex}
_CANCER_TYPE_VALUES = {member.value for member in CancerType}


class CaseRegistry(Protocol):
    """Lookup of case names already used by the current user."""

    async def case_name_exists(self, name: str) -> bool: ...


def _enum_value(value) -> Optional[str]:
    if value is None:
        return None
    return getattr(value, "value", value)


def check_metadata_fields(session: WorkflowSession) -> ValidationResult:
    """Field-level metadata checks, without the case-name uniqueness lookup."""
    patient = session.patient_metadata
    case = session.case_metadata
    errors: List[str] = []

    if not patient.name.strip():
        errors.append("Patient name is required")

    age = patient.age
    if (
        age is None
        or isinstance(age, bool)
        or not WorkflowPolicy.MIN_PATIENT_AGE <= age <= WorkflowPolicy.MAX_PATIENT_AGE
    ):
        errors.append("Valid patient age is required")

    if _enum_value(patient.sex) not in _SEX_VALUES:
        errors.append("Patient sex is required")

    if not case.case_name.strip():
        errors.append("Case name is required")

    if _enum_value(case.cancer_type) not in _CANCER_TYPE_VALUES:
        errors.append("Cancer type is required")

    return ValidationResult.from_errors(errors)


async def validate_metadata(
    session: WorkflowSession, registry: CaseRegistry
) -> ValidationResult:
    """Metadata gate, including the case-name uniqueness lookup.

    The lookup only runs once the fields pass. Registry failures propagate
    as ``CollaboratorError``.
    """
    result = check_metadata_fields(session)
    if not result.valid:
        return result

    if await registry.case_name_exists(session.case_name):
        return ValidationResult.from_errors([DUPLICATE_CASE_NAME_ERROR])
    return result


def validate_documents_uploaded(session: WorkflowSession) -> ValidationResult:
    errors: List[str] = []
    if not session.documents:
        errors.append("At least one document must be uploaded")
    return ValidationResult.from_errors(errors)


def validate_anonymization(session: WorkflowSession) -> ValidationResult:
    """Every document must have been reviewed for anonymization.

    Unreviewed documents are listed by file name in upload order.
    """
    unvisited = [doc.file_name for doc in session.documents if not doc.visited_in_anonymization]
    errors: List[str] = []
    if unvisited:
        errors.append(f"{len(unvisited)} document(s) require review for anonymization")
    return ValidationResult.from_errors(errors, unverified_documents=unvisited)


def validate_digitization(session: WorkflowSession) -> ValidationResult:
    unvisited = [doc.file_name for doc in session.documents if not doc.visited_in_digitization]
    errors: List[str] = []
    if unvisited:
        errors.append(f"{len(unvisited)} document(s) require review for digitization")
    return ValidationResult.from_errors(errors, unverified_documents=unvisited)


def validate_all(session: WorkflowSession) -> ValidationResult:
    """Combined field, upload and review checks before final submission."""
    results = [
        check_metadata_fields(session),
        validate_documents_uploaded(session),
        validate_anonymization(session),
        validate_digitization(session),
    ]

    errors: List[str] = []
    unverified: List[str] = []
    for result in results:
        errors.extend(result.errors)
        for name in result.unverified_documents or []:
            if name not in unverified:
                unverified.append(name)

    return ValidationResult.from_errors(errors, unverified_documents=unverified)
