"""Resolver (Layer 3) unit tests.

Covers the fold over whole chains:
- determinism, additive union, override replaces, dangling references
- unratified flag and per-chain failure isolation in resolve_all
"""

import pytest

from reqdrift.layers.layer3_resolution import Resolver
from reqdrift.models import (
    AcceptanceCriterion,
    CriterionRef,
    DocumentStatus,
    FeatureChain,
    ProvenanceAction,
    RequirementDocument,
)


def _ref(doc_id, cid) -> CriterionRef:
    return CriterionRef(document_id=doc_id, criterion_id=cid)


def _doc(doc_id, seq, criteria, status=DocumentStatus.DONE, feature="auth"):
    return RequirementDocument(
        id=doc_id,
        sequence_number=seq,
        status=status,
        feature_key=feature,
        criteria=tuple(criteria),
    )


def _chain(*docs, feature="auth") -> FeatureChain:
    return FeatureChain(feature_key=feature, documents=tuple(docs))


@pytest.fixture
def resolver():
    return Resolver(security_tags=["security"])


class TestResolve:
    def test_additive_union(self, resolver):
        """참조가 없는 문서 N개의 활성 기준 수는 모든 기준 수의 합과 같다."""
        chain = _chain(
            _doc("d1", 1, [AcceptanceCriterion(id="A1", text="a"),
                           AcceptanceCriterion(id="A2", text="b")]),
            _doc("d2", 2, [AcceptanceCriterion(id="A3", text="c")]),
            _doc("d3", 3, [AcceptanceCriterion(id="A4", text="d"),
                           AcceptanceCriterion(id="A5", text="e"),
                           AcceptanceCriterion(id="A6", text="f")]),
        )
        state = resolver.resolve(chain)
        assert len(state.criteria) == 6
        assert state.retired == ()

    def test_override_replaces_active_text_but_keeps_provenance(self, resolver):
        chain = _chain(
            _doc("d1", 1, [AcceptanceCriterion(id="A1", text="session lasts 1 hour")]),
            _doc("d2", 2, [AcceptanceCriterion(
                id="A2", text="session lasts 8 hours", supersedes=_ref("d1", "A1")
            )]),
        )
        state = resolver.resolve(chain)

        assert [c.text for c in state.criteria] == ["session lasts 8 hours"]
        assert state.retired == (_ref("d1", "A1"),)
        logged_texts = [p.text for p in state.provenance]
        assert "session lasts 1 hour" in logged_texts
        assert [p.action for p in state.provenance] == [
            ProvenanceAction.ADDED,
            ProvenanceAction.SUPERSEDED,
            ProvenanceAction.ADDED,
        ]

    def test_override_chain_accumulates_lineage(self, resolver):
        chain = _chain(
            _doc("d1", 1, [AcceptanceCriterion(id="A1", text="v1")]),
            _doc("d2", 2, [AcceptanceCriterion(id="A2", text="v2", supersedes=_ref("d1", "A1"))]),
            _doc("d3", 3, [AcceptanceCriterion(id="A3", text="v3", supersedes=_ref("d2", "A2"))]),
        )
        state = resolver.resolve(chain)
        (criterion,) = state.criteria
        assert criterion.key == _ref("d3", "A3")
        assert [p.criterion for p in criterion.provenance if p.action == ProvenanceAction.SUPERSEDED] == [
            _ref("d1", "A1"), _ref("d2", "A2"),
        ]

    def test_source_status_comes_from_contributing_document(self, resolver):
        chain = _chain(
            _doc("d1", 1, [AcceptanceCriterion(id="A1", text="a")], status=DocumentStatus.DONE),
            _doc("d2", 2, [AcceptanceCriterion(id="A2", text="b")], status=DocumentStatus.DRAFT),
        )
        state = resolver.resolve(chain)
        statuses = {c.key.criterion_id: c.source_status for c in state.criteria}
        assert statuses == {"A1": DocumentStatus.DONE, "A2": DocumentStatus.DRAFT}
        assert state.latest_status == DocumentStatus.DRAFT

    def test_security_tag_marks_criterion(self, resolver):
        chain = _chain(_doc("d1", 1, [
            AcceptanceCriterion(id="A1", text="passwords hashed", tags=("Security",)),
            AcceptanceCriterion(id="A2", text="dark mode"),
        ]))
        state = resolver.resolve(chain)
        assert [c.security_relevant for c in state.criteria] == [True, False]

    def test_dangling_reference_outside_chain_raises(self, resolver):
        from reqdrift.exceptions import DanglingReferenceError

        chain = _chain(
            _doc("d2", 2, [AcceptanceCriterion(id="A2", text="x", removes=_ref("d1", "B1"))]),
        )
        with pytest.raises(DanglingReferenceError) as exc_info:
            resolver.resolve(chain)
        assert exc_info.value.error_code == "ERR_RESOLVE_001"
        assert exc_info.value.details["ref"] == "d1#B1"

    def test_unratified_when_no_approved_or_done_document(self, resolver):
        chain = _chain(_doc("d1", 1, [AcceptanceCriterion(id="A1", text="a")],
                            status=DocumentStatus.DRAFT))
        assert resolver.resolve(chain).unratified is True

    def test_ratified_when_any_document_approved(self, resolver):
        chain = _chain(
            _doc("d1", 1, [AcceptanceCriterion(id="A1", text="a")], status=DocumentStatus.DRAFT),
            _doc("d2", 2, [AcceptanceCriterion(id="A2", text="b")], status=DocumentStatus.APPROVED),
        )
        assert resolver.resolve(chain).unratified is False

    def test_empty_chain_is_rejected(self, resolver):
        with pytest.raises(ValueError):
            resolver.resolve(_chain())

    def test_determinism(self, resolver):
        chain = _chain(
            _doc("d1", 1, [AcceptanceCriterion(id="A1", text="a"),
                           AcceptanceCriterion(id="A2", text="b")]),
            _doc("d2", 2, [AcceptanceCriterion(id="A3", text="c", supersedes=_ref("d1", "A2"))]),
        )
        first = resolver.resolve(chain)
        second = resolver.resolve(chain)
        assert first == second
        assert first.model_dump_json() == second.model_dump_json()
        assert first.fingerprint() == second.fingerprint()


class TestResolveAll:
    def test_failure_is_isolated_to_its_chain(self, resolver):
        good = _chain(_doc("d1", 1, [AcceptanceCriterion(id="B1", text="pay")], feature="billing"),
                      feature="billing")
        bad = _chain(_doc("d2", 2, [AcceptanceCriterion(id="A1", text="x", supersedes=_ref("d1", "B1"))]))

        result = resolver.resolve_all([bad, good])
        assert set(result.states) == {"billing"}
        assert set(result.failures) == {"auth"}
        assert result.failures["auth"].error_code == "ERR_RESOLVE_001"
        assert result.failures["auth"].feature_key == "auth"
        assert result.failed_feature_keys == {"auth"}
