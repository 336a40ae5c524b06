"""Normalizer (Layer 1) unit tests.

Tests schema validation of raw requirement documents:
- per-document failures are isolated to the document's feature key
- set-level failures (duplicate sequence numbers / ids) reject the whole set
- references must point at criteria of strictly earlier documents
"""

import pytest

from helpers import make_criterion, make_document
from reqdrift.exceptions import ValidationError
from reqdrift.layers.layer1_normalization import Normalizer
from reqdrift.models import DocumentStatus, RequirementDocument


@pytest.fixture
def normalizer():
    return Normalizer()


# ===================================================================
# validate_document: single-document rules
# ===================================================================

class TestValidateDocument:
    def test_valid_document_builds_model(self, normalizer):
        raw = make_document("doc-1", 1, "auth", [make_criterion("A1", "login with email")])
        doc = normalizer.validate_document(raw)
        assert isinstance(doc, RequirementDocument)
        assert doc.id == "doc-1"
        assert doc.sequence_number == 1
        assert doc.status == DocumentStatus.DONE
        assert doc.feature_key == "auth"
        assert doc.criteria[0].text == "login with email"

    def test_model_instance_passes_through_unchanged(self, normalizer):
        doc = RequirementDocument(
            id="doc-1", sequence_number=1, status=DocumentStatus.DRAFT, feature_key="auth"
        )
        assert normalizer.validate_document(doc) is doc

    @pytest.mark.parametrize("status", ["Shipped", "done", "", None])
    def test_status_outside_enumeration_rejected(self, normalizer, status):
        raw = make_document("doc-1", 1, "auth", [], status=status)
        with pytest.raises(ValidationError) as exc_info:
            normalizer.validate_document(raw)
        assert exc_info.value.document_id == "doc-1"
        assert exc_info.value.field == "status"

    def test_missing_sequence_number_rejected(self, normalizer):
        raw = make_document("doc-1", 1, "auth", [])
        del raw["sequenceNumber"]
        with pytest.raises(ValidationError) as exc_info:
            normalizer.validate_document(raw)
        assert exc_info.value.field == "sequenceNumber"

    @pytest.mark.parametrize("value", ["abc", "1.5", True, 2.5, [1]])
    def test_non_numeric_sequence_number_rejected(self, normalizer, value):
        raw = make_document("doc-1", value, "auth", [])
        with pytest.raises(ValidationError) as exc_info:
            normalizer.validate_document(raw)
        assert exc_info.value.field == "sequenceNumber"

    def test_numeric_string_sequence_number_accepted(self, normalizer):
        doc = normalizer.validate_document(make_document("doc-1", "7", "auth", []))
        assert doc.sequence_number == 7

    def test_whole_number_float_sequence_number_accepted(self, normalizer):
        """JSON 클라이언트가 보내는 2.0 같은 값은 정수로 취급한다."""
        doc = normalizer.validate_document(make_document("doc-1", 2.0, "auth", []))
        assert doc.sequence_number == 2

    @pytest.mark.parametrize("value,expected", [
        (-1, -1), ("-1", -1), ("+3", 3), (" 7 ", 7),
    ])
    def test_signed_sequence_number_same_for_int_and_string(self, normalizer, value, expected):
        doc = normalizer.validate_document(make_document("doc-1", value, "auth", []))
        assert doc.sequence_number == expected

    def test_non_integer_message(self, normalizer):
        with pytest.raises(ValidationError) as exc_info:
            normalizer.validate_document(make_document("doc-1", 2.5, "auth", []))
        assert "정수" in exc_info.value.message

    def test_float_and_int_sequence_numbers_collide(self, normalizer):
        docs = [
            make_document("doc-1", 2, "auth", []),
            make_document("doc-2", 2.0, "billing", []),
        ]
        with pytest.raises(ValidationError) as exc_info:
            normalizer.normalize(docs)
        assert exc_info.value.field == "sequenceNumber"

    def test_both_supersedes_and_removes_rejected(self, normalizer):
        criterion = make_criterion(
            "A2", "login with phone", supersedes=("doc-0", "A1"), removes=("doc-0", "A1")
        )
        raw = make_document("doc-1", 1, "auth", [criterion])
        with pytest.raises(ValidationError) as exc_info:
            normalizer.validate_document(raw)
        assert exc_info.value.document_id == "doc-1"
        assert exc_info.value.field == "criteria.0.supersedes"

    def test_duplicate_criterion_id_rejected(self, normalizer):
        raw = make_document(
            "doc-1", 1, "auth",
            [make_criterion("A1", "one"), make_criterion("A1", "two")],
        )
        with pytest.raises(ValidationError) as exc_info:
            normalizer.validate_document(raw)
        assert exc_info.value.field == "criteria.1.id"

    def test_empty_text_only_allowed_for_removal(self, normalizer):
        raw = make_document("doc-1", 1, "auth", [make_criterion("A1", "   ")])
        with pytest.raises(ValidationError):
            normalizer.validate_document(raw)

        removal = make_document(
            "doc-2", 2, "auth", [make_criterion("A2", "", removes=("doc-1", "A1"))]
        )
        assert normalizer.validate_document(removal).criteria[0].removes is not None

    def test_missing_criterion_text_reports_schema_field(self, normalizer):
        raw = make_document("doc-1", 1, "auth", [{"id": "A1"}])
        with pytest.raises(ValidationError) as exc_info:
            normalizer.validate_document(raw)
        assert exc_info.value.field == "criteria.0.text"

    def test_missing_id_rejected(self, normalizer):
        raw = make_document(None, 1, "auth", [])
        with pytest.raises(ValidationError) as exc_info:
            normalizer.validate_document(raw)
        assert exc_info.value.field == "id"

    def test_error_carries_code_and_details(self, normalizer):
        raw = make_document("doc-9", 1, "auth", [], status="Shipped")
        with pytest.raises(ValidationError) as exc_info:
            normalizer.validate_document(raw)
        err = exc_info.value
        assert err.error_code == "ERR_VALID_001"
        assert err.details["document_id"] == "doc-9"
        assert err.details["field"] == "status"


# ===================================================================
# normalize: set-level behaviour
# ===================================================================

class TestNormalizeSet:
    def test_valid_documents_pass_in_input_order(self, normalizer):
        docs = [
            make_document("doc-2", 2, "auth", [make_criterion("A2", "b")]),
            make_document("doc-1", 1, "auth", [make_criterion("A1", "a")]),
        ]
        result = normalizer.normalize(docs)
        assert [d.id for d in result.documents] == ["doc-2", "doc-1"]
        assert result.failures == {}

    def test_duplicate_sequence_number_rejects_whole_set(self, normalizer):
        docs = [
            make_document("doc-1", 1, "auth", [make_criterion("A1", "a")]),
            make_document("doc-2", 1, "billing", [make_criterion("B1", "b")]),
        ]
        with pytest.raises(ValidationError) as exc_info:
            normalizer.normalize(docs)
        assert exc_info.value.field == "sequenceNumber"
        assert exc_info.value.document_id == "doc-2"

    def test_duplicate_sequence_detected_even_if_other_fields_invalid(self, normalizer):
        docs = [
            make_document("doc-1", 1, "auth", [], status="Bogus"),
            make_document("doc-2", 1, "billing", []),
        ]
        with pytest.raises(ValidationError):
            normalizer.normalize(docs)

    def test_duplicate_document_id_rejects_whole_set(self, normalizer):
        docs = [
            make_document("doc-1", 1, "auth", []),
            make_document("doc-1", 2, "auth", []),
        ]
        with pytest.raises(ValidationError) as exc_info:
            normalizer.normalize(docs)
        assert exc_info.value.field == "id"

    def test_missing_feature_key_rejects_whole_set(self, normalizer):
        docs = [make_document("doc-1", 1, "", [])]
        with pytest.raises(ValidationError) as exc_info:
            normalizer.normalize(docs)
        assert exc_info.value.field == "featureKey"

    def test_invalid_document_fails_only_its_feature(self, normalizer):
        docs = [
            make_document("doc-1", 1, "auth", [make_criterion("A1", "a")]),
            make_document("doc-2", 2, "auth", [], status="Shipped"),
            make_document("doc-3", 3, "billing", [make_criterion("B1", "b")]),
        ]
        result = normalizer.normalize(docs)
        assert set(result.failures) == {"auth"}
        assert result.failures["auth"].document_id == "doc-2"
        # auth 문서는 전부 제외되고 billing만 통과
        assert [d.id for d in result.documents] == ["doc-3"]

    def test_reference_to_earlier_document_accepted(self, normalizer):
        docs = [
            make_document("doc-1", 1, "auth", [make_criterion("A1", "a")]),
            make_document(
                "doc-2", 2, "auth", [make_criterion("A2", "b", supersedes=("doc-1", "A1"))]
            ),
        ]
        result = normalizer.normalize(docs)
        assert result.failures == {}
        assert len(result.documents) == 2

    def test_reference_to_unknown_criterion_rejected(self, normalizer):
        docs = [
            make_document("doc-1", 1, "auth", [make_criterion("A1", "a")]),
            make_document(
                "doc-2", 2, "auth", [make_criterion("A2", "b", removes=("doc-1", "A9"))]
            ),
        ]
        result = normalizer.normalize(docs)
        assert result.failures["auth"].field == "criteria.0.removes"
        assert result.documents == []

    def test_reference_to_later_document_rejected(self, normalizer):
        docs = [
            make_document(
                "doc-1", 1, "auth", [make_criterion("A1", "a", supersedes=("doc-2", "A2"))]
            ),
            make_document("doc-2", 2, "auth", [make_criterion("A2", "b")]),
        ]
        result = normalizer.normalize(docs)
        assert "auth" in result.failures
        assert result.failures["auth"].document_id == "doc-1"

    def test_reference_across_features_passes_normalization(self, normalizer):
        """다른 기능의 기준 참조는 존재하므로 통과하고, 해석 단계에서 실패한다."""
        docs = [
            make_document("doc-1", 1, "billing", [make_criterion("B1", "a")]),
            make_document(
                "doc-2", 2, "auth", [make_criterion("A1", "b", removes=("doc-1", "B1"))]
            ),
        ]
        result = normalizer.normalize(docs)
        assert result.failures == {}

    def test_abandoned_documents_are_still_validated(self, normalizer):
        docs = [make_document("doc-1", 1, "auth", [], status="Abandoned")]
        result = normalizer.normalize(docs)
        assert result.documents[0].status == DocumentStatus.ABANDONED
