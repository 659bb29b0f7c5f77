"""Pydantic models for case intake metadata and validation results."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class Sex(str, Enum):
    """Patient sex as recorded on intake."""

    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class CancerType(str, Enum):
    """Cancer types a case can be filed under."""

    BREAST = "breast"
    LUNG = "lung"
    COLORECTAL = "colorectal"
    PROSTATE = "prostate"
    MELANOMA = "melanoma"
    LEUKEMIA = "leukemia"
    LYMPHOMA = "lymphoma"
    PANCREATIC = "pancreatic"
    OVARIAN = "ovarian"
    BLADDER = "bladder"
    KIDNEY = "kidney"
    THYROID = "thyroid"
    LIVER = "liver"
    BRAIN = "brain"
    OTHER = "other"


class DocumentType(str, Enum):
    """Kinds of uploaded case documents."""

    IMAGE = "image"
    PDF = "pdf"

    @classmethod
    def from_mime_type(cls, mime_type: str | None) -> "DocumentType":
        """Anything that is not a PDF is handled as an image."""

        if mime_type and mime_type.strip().lower() == "application/pdf":
            return cls.PDF
        return cls.IMAGE


class PatientMetadata(BaseModel):
    """Patient details entered on the first intake step.

    Values are kept loose here; range and enum checks happen in the
    metadata gate so that a failing form still round-trips.
    """

    name: str = ""
    age: Optional[int] = None
    sex: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def none_to_empty(cls, value):
        return "" if value is None else value


class CaseMetadata(BaseModel):
    """Case details entered on the first intake step."""

    case_name: str = ""
    cancer_type: Optional[str] = None
    notes: Optional[str] = Field(default=None, description="Free-text notes for the board.")

    @field_validator("case_name", mode="before")
    @classmethod
    def none_to_empty(cls, value):
        return "" if value is None else value


class ValidationResult(BaseModel):
    """Outcome of one validation gate."""

    valid: bool
    errors: List[str] = Field(default_factory=list)
    unverified_documents: Optional[List[str]] = None

    @classmethod
    def from_errors(
        cls, errors: List[str], unverified_documents: Optional[List[str]] = None
    ) -> "ValidationResult":
        return cls(
            valid=not errors,
            errors=list(errors),
            unverified_documents=unverified_documents,
        )
