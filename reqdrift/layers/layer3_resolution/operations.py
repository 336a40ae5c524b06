"""
폴딩 연산(Fold Operation) 정의입니다.

인수 기준 하나는 정확히 하나의 연산으로 변환됩니다:
┌──────────────┬──────────────────────┬──────────────────────────────────────┐
│ 연산         │ 조건                 │ 동작                                 │
├──────────────┼──────────────────────┼──────────────────────────────────────┤
│ Additive     │ 참조 없음            │ 새 키로 추가                         │
│ Override     │ supersedes = ref     │ ref를 제거하고 같은 위치에 새 기준    │
│ Remove       │ removes = ref        │ ref 제거 (본문이 있으면 별도 기준 추가) │
└──────────────┴──────────────────────┴──────────────────────────────────────┘

참조 대상이 활성 상태가 아니면 DanglingReferenceError를 발생시킵니다.
"""

from dataclasses import dataclass, field
from typing import Union

from reqdrift.exceptions import DanglingReferenceError
from reqdrift.models import (
    AcceptanceCriterion,
    CanonicalCriterion,
    CanonicalFeatureState,
    CriterionRef,
    FeatureChain,
    ProvenanceAction,
    ProvenanceEntry,
    RequirementDocument,
)


@dataclass
class FoldState:
    """폴딩 중에만 존재하는 작업용 상태입니다. 체인 하나당 하나씩 만들어집니다."""

    feature_key: str
    active: dict[CriterionRef, CanonicalCriterion] = field(default_factory=dict)
    provenance: list[ProvenanceEntry] = field(default_factory=list)
    retired: list[CriterionRef] = field(default_factory=list)

    def require_active(
        self, ref: CriterionRef, acting_document: RequirementDocument
    ) -> CanonicalCriterion:
        current = self.active.get(ref)
        if current is None:
            reason = "이미 대체/삭제됨" if ref in self.retired else "이 체인에 존재하지 않음"
            raise DanglingReferenceError(
                f"[{self.feature_key}] 문서 {acting_document.id}가 활성 상태가 아닌 "
                f"기준 {ref}를 참조합니다 ({reason})",
                feature_key=self.feature_key,
                document_id=acting_document.id,
                ref=str(ref),
            )
        return current

    def insert(self, entry: CanonicalCriterion) -> None:
        self.active[entry.key] = entry

    def replace(self, ref: CriterionRef, entry: CanonicalCriterion) -> None:
        """ref 자리에 entry를 넣습니다. 활성 집합 내 순서는 유지됩니다."""
        self.active = {
            (entry.key if key == ref else key): (entry if key == ref else value)
            for key, value in self.active.items()
        }
        self.retired.append(ref)

    def retire(self, ref: CriterionRef) -> None:
        del self.active[ref]
        self.retired.append(ref)

    def freeze(self, chain: FeatureChain) -> CanonicalFeatureState:
        return CanonicalFeatureState(
            feature_key=self.feature_key,
            criteria=tuple(self.active.values()),
            provenance=tuple(self.provenance),
            retired=tuple(self.retired),
            document_ids=tuple(doc.id for doc in chain.documents),
            latest_status=chain.documents[-1].status,
            unratified=not any(doc.status.is_ratified for doc in chain.documents),
        )


@dataclass(frozen=True)
class _Operation:
    document: RequirementDocument
    criterion: AcceptanceCriterion
    security_relevant: bool = False

    @property
    def key(self) -> CriterionRef:
        return self.document.ref(self.criterion.id)

    def _entry(
        self, action: ProvenanceAction, ref: CriterionRef, text: str
    ) -> ProvenanceEntry:
        return ProvenanceEntry(
            action=action,
            criterion=ref,
            text=text,
            acted_by=self.key,
            sequence_number=self.document.sequence_number,
        )

    def _build(self, lineage: tuple[ProvenanceEntry, ...] = ()) -> CanonicalCriterion:
        added = self._entry(ProvenanceAction.ADDED, self.key, self.criterion.text)
        return CanonicalCriterion(
            key=self.key,
            text=self.criterion.text,
            source_document_id=self.document.id,
            source_status=self.document.status,
            security_relevant=self.security_relevant,
            tags=self.criterion.tags,
            provenance=lineage + (added,),
        )

    def apply(self, state: FoldState) -> None:
        raise NotImplementedError


@dataclass(frozen=True)
class Additive(_Operation):
    """순수 추가."""

    def apply(self, state: FoldState) -> None:
        entry = self._build()
        state.insert(entry)
        state.provenance.extend(entry.provenance)


@dataclass(frozen=True)
class Override(_Operation):
    """기존 기준을 대체."""

    @property
    def ref(self) -> CriterionRef:
        return self.criterion.supersedes

    def apply(self, state: FoldState) -> None:
        previous = state.require_active(self.ref, self.document)
        superseded = self._entry(ProvenanceAction.SUPERSEDED, self.ref, previous.text)
        entry = self._build(lineage=previous.provenance + (superseded,))
        state.replace(self.ref, entry)
        state.provenance.extend([superseded, entry.provenance[-1]])


@dataclass(frozen=True)
class Remove(_Operation):
    """기존 기준을 삭제. 대체 기준은 넣지 않습니다."""

    @property
    def ref(self) -> CriterionRef:
        return self.criterion.removes

    def apply(self, state: FoldState) -> None:
        previous = state.require_active(self.ref, self.document)
        removed = self._entry(ProvenanceAction.REMOVED, self.ref, previous.text)
        state.retire(self.ref)
        state.provenance.append(removed)
        # 삭제를 담은 기준 자체에 본문이 있으면 끝에 새 기준으로 추가 (삭제 기록만 계보로 가짐)
        if self.criterion.text.strip():
            entry = self._build(lineage=(removed,))
            state.insert(entry)
            state.provenance.append(entry.provenance[-1])


FoldOperation = Union[Additive, Override, Remove]


def operation_for(
    document: RequirementDocument,
    criterion: AcceptanceCriterion,
    security_relevant: bool = False,
) -> FoldOperation:
    """인수 기준을 해당하는 폴딩 연산으로 변환합니다."""
    if criterion.supersedes is not None:
        return Override(document, criterion, security_relevant)
    if criterion.removes is not None:
        return Remove(document, criterion, security_relevant)
    return Additive(document, criterion, security_relevant)
