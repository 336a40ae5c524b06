"""
정규 상태(Canonical State) 데이터 모델입니다.
체인을 폴딩한 결과로 얻는, 충돌 없는 기능별 요구사항 집합을 정의합니다.
"""

import hashlib
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from .document import CriterionRef, DocumentStatus
from .error import ErrorResponse


class ProvenanceAction(str, Enum):
    """출처 로그에 남는 동작 종류입니다."""

    ADDED = "added"            # 기준이 활성 집합에 추가됨
    SUPERSEDED = "superseded"  # 이후 문서의 기준으로 대체됨
    REMOVED = "removed"        # 이후 문서에 의해 명시적으로 삭제됨


class ProvenanceEntry(BaseModel):
    """출처 로그의 한 줄입니다."""

    model_config = ConfigDict(frozen=True)

    action: ProvenanceAction
    criterion: CriterionRef = Field(..., description="영향을 받은 기준")
    text: str = Field(default="", description="영향을 받은 기준의 원문")
    acted_by: CriterionRef = Field(
        ..., description="이 동작을 일으킨 기준 (추가인 경우 자기 자신)"
    )
    sequence_number: int = Field(..., description="동작을 일으킨 문서의 순번")

    def to_display_string(self) -> str:
        """사람이 읽기 좋은 형태로 변환합니다."""
        if self.action == ProvenanceAction.ADDED:
            return f"added {self.criterion} (seq {self.sequence_number})"
        return f"{self.action.value} {self.criterion} by {self.acted_by} (seq {self.sequence_number})"


class CanonicalCriterion(BaseModel):
    """활성 상태로 남은 기준 하나와 그 계보입니다."""

    model_config = ConfigDict(frozen=True)

    key: CriterionRef
    text: str
    source_document_id: str
    source_status: DocumentStatus
    security_relevant: bool = False
    tags: tuple[str, ...] = ()
    provenance: tuple[ProvenanceEntry, ...] = Field(
        default=(), description="이 기준이 대체한 조상 기준부터 자신의 추가까지"
    )


class CanonicalFeatureState(BaseModel):
    """
    기능 하나의 정규 상태입니다.
    같은 체인으로부터 항상 같은 결과가 나오는 순수 함수의 결과이며 변경되지 않습니다.
    """

    model_config = ConfigDict(frozen=True)

    feature_key: str
    criteria: tuple[CanonicalCriterion, ...] = ()
    provenance: tuple[ProvenanceEntry, ...] = ()
    retired: tuple[CriterionRef, ...] = Field(
        default=(), description="대체 또는 삭제되어 비활성화된 기준"
    )
    document_ids: tuple[str, ...] = ()
    latest_status: DocumentStatus
    unratified: bool = Field(
        default=False, description="승인/완료 문서가 하나도 없는 체인 (정보용)"
    )

    def fingerprint(self) -> str:
        """정규 JSON의 SHA-256 해시. 결정성 검증에 사용합니다."""
        return hashlib.sha256(self.model_dump_json().encode("utf-8")).hexdigest()

    def get_criterion(self, ref: CriterionRef) -> Optional[CanonicalCriterion]:
        for criterion in self.criteria:
            if criterion.key == ref:
                return criterion
        return None


class ResolutionResult(BaseModel):
    """
    기능별 해석 결과 묶음입니다.
    성공한 기능은 states에, 실패한 기능은 failures에 들어갑니다.
    """

    states: dict[str, CanonicalFeatureState] = Field(default_factory=dict)
    failures: dict[str, ErrorResponse] = Field(default_factory=dict)

    @property
    def failed_feature_keys(self) -> set[str]:
        return set(self.failures)
