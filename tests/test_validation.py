"""
Unit tests for the validation gates.
"""

import pytest

from vmtb.models.case import CaseMetadata, PatientMetadata
from vmtb.workflow.session import WorkflowSession
from vmtb.workflow.validation import (
    DUPLICATE_CASE_NAME_ERROR,
    check_metadata_fields,
    validate_all,
    validate_anonymization,
    validate_digitization,
    validate_documents_uploaded,
    validate_metadata,
)


def complete_session(**patient_overrides) -> WorkflowSession:
    patient = {"name": "Jane Doe", "age": 54, "sex": "female"}
    patient.update(patient_overrides)
    return WorkflowSession(
        owner_id="user-1",
        patient_metadata=PatientMetadata(**patient),
        case_metadata=CaseMetadata(case_name="Case 7", cancer_type="breast"),
    )


class TestMetadataFields:
    """Test the local metadata field checks."""

    def test_complete_metadata_is_valid(self):
        """Test that fully filled metadata passes."""
        result = check_metadata_fields(complete_session())
        assert result.valid
        assert result.errors == []

    def test_empty_session_lists_every_field(self):
        """Test that an empty session reports every missing field."""
        result = check_metadata_fields(WorkflowSession())
        assert not result.valid
        assert result.errors == [
            "Patient name is required",
            "Valid patient age is required",
            "Patient sex is required",
            "Case name is required",
            "Cancer type is required",
        ]

    @pytest.mark.parametrize("age", [0, 1, 150])
    def test_age_bounds_accepted(self, age):
        """Test that ages at the bounds are accepted."""
        assert check_metadata_fields(complete_session(age=age)).valid

    @pytest.mark.parametrize("age", [-1, 151, None])
    def test_age_out_of_range(self, age):
        """Test that ages outside the range are rejected."""
        result = check_metadata_fields(complete_session(age=age))
        assert result.errors == ["Valid patient age is required"]

    def test_unknown_sex_and_blank_name(self):
        """Test that a blank name and unknown sex are reported."""
        result = check_metadata_fields(complete_session(name="   ", sex="unknown"))
        assert result.errors == ["Patient name is required", "Patient sex is required"]

    def test_unknown_cancer_type(self):
        """Test that an unknown cancer type is reported."""
        session = complete_session()
        session.case_metadata.cancer_type = "not-a-cancer"
        assert check_metadata_fields(session).errors == ["Cancer type is required"]


class TestValidateMetadata:
    """Test the metadata gate with the case registry."""

    @pytest.mark.asyncio
    async def test_unique_name_passes(self, fake_registry):
        """Test that an unused case name passes."""
        result = await validate_metadata(complete_session(), fake_registry)
        assert result.valid
        assert fake_registry.calls == ["Case 7"]

    @pytest.mark.asyncio
    async def test_duplicate_name(self, registry_with):
        """Test that an existing case name is rejected."""
        registry = registry_with("Case 7")
        result = await validate_metadata(complete_session(), registry)

        assert not result.valid
        assert result.errors == [DUPLICATE_CASE_NAME_ERROR]

    @pytest.mark.asyncio
    async def test_registry_skipped_when_fields_fail(self, fake_registry):
        """Test that the registry is not asked when local checks fail."""
        result = await validate_metadata(complete_session(name=""), fake_registry)

        assert not result.valid
        assert fake_registry.calls == []

    @pytest.mark.asyncio
    async def test_name_is_trimmed_before_lookup(self, registry_with):
        """Test that the registry is asked for the trimmed name."""
        registry = registry_with("Case 7")
        session = complete_session()
        session.case_metadata.case_name = " Case 7 "

        result = await validate_metadata(session, registry)

        assert registry.calls == ["Case 7"]
        assert not result.valid


class TestDocumentGates:
    """Test the upload, anonymization and digitization gates."""

    def _session_with_documents(self, *names):
        session = complete_session()
        for name in names:
            session.add_document(name, "application/pdf", document_id=f"id_{name}")
        return session

    def test_upload_requires_a_document(self):
        """Test that the upload gate needs at least one document."""
        assert validate_documents_uploaded(WorkflowSession()).errors == [
            "At least one document must be uploaded"
        ]
        assert validate_documents_uploaded(self._session_with_documents("a")).valid

    def test_anonymization_lists_unvisited_in_upload_order(self):
        """Test that unreviewed documents are named in upload order."""
        session = self._session_with_documents("c", "a", "b")
        session.get_document("id_a").visited_in_anonymization = True

        result = validate_anonymization(session)

        assert not result.valid
        assert result.errors == ["2 document(s) require review for anonymization"]
        assert result.unverified_documents == ["c", "b"]

    def test_single_unvisited_document(self):
        """Test the message for a single unreviewed document."""
        session = self._session_with_documents("a", "b", "c")
        for doc_id in ("id_a", "id_c"):
            session.get_document(doc_id).visited_in_anonymization = True

        result = validate_anonymization(session)

        assert result.unverified_documents == ["b"]
        assert result.errors == ["1 document(s) require review for anonymization"]

    def test_all_visited(self):
        """Test that the gate passes once every document was reviewed."""
        session = self._session_with_documents("a")
        session.documents[0].visited_in_anonymization = True
        result = validate_anonymization(session)
        assert result.valid
        assert result.unverified_documents == []

    def test_gates_are_repeatable_and_read_only(self):
        """Test that running a gate twice gives the same answer without changes."""
        session = self._session_with_documents("a", "b")
        snapshot = [vars(doc).copy() for doc in session.documents]

        first = validate_anonymization(session)
        second = validate_anonymization(session)

        assert first == second
        assert [vars(doc) for doc in session.documents] == snapshot

    def test_digitization_gate(self):
        """Test that the digitization gate needs every document reviewed."""
        session = self._session_with_documents("a", "b")
        session.get_document("id_b").visited_in_digitization = True

        result = validate_digitization(session)

        assert result.errors == ["1 document(s) require review for digitization"]
        assert result.unverified_documents == ["a"]


class TestValidateAll:
    """Test the combined check of a whole session."""

    def test_merges_errors_and_unverified_names(self):
        """Test that errors of every gate are merged."""
        session = WorkflowSession()
        session.add_document("a.pdf", "application/pdf")

        result = validate_all(session)

        assert not result.valid
        assert "Patient name is required" in result.errors
        assert "1 document(s) require review for anonymization" in result.errors
        assert "1 document(s) require review for digitization" in result.errors
        assert result.unverified_documents == ["a.pdf"]

    def test_ready_session(self):
        """Test that a complete session passes."""
        session = complete_session()
        doc = session.add_document("a.pdf", "application/pdf")
        doc.visited_in_anonymization = True
        doc.visited_in_digitization = True

        assert validate_all(session).valid
