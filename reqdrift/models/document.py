"""
요구사항 문서(Requirement Document) 데이터 모델입니다.
기능(feature)별 요구사항 변경 이력의 최소 단위를 정의합니다.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class DocumentStatus(str, Enum):
    """요구사항 문서의 상태입니다."""

    DRAFT = "Draft"          # 초안 (아직 확정되지 않음)
    APPROVED = "Approved"    # 승인됨 (구현 대상)
    DONE = "Done"            # 완료됨 (이미 출시된 동작)
    ABANDONED = "Abandoned"  # 폐기됨 (해석 대상에서 제외)

    @property
    def is_ratified(self) -> bool:
        """승인 또는 완료 상태인지 여부."""
        return self in (DocumentStatus.APPROVED, DocumentStatus.DONE)


class CriterionRef(BaseModel):
    """
    다른 문서의 인수 기준을 가리키는 참조입니다.
    (documentId, criterionId) 쌍으로 전체 프로젝트에서 유일하게 식별됩니다.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    document_id: str = Field(..., alias="documentId", description="문서 ID")
    criterion_id: str = Field(..., alias="criterionId", description="기준 ID")

    def __str__(self) -> str:
        return f"{self.document_id}#{self.criterion_id}"


class AcceptanceCriterion(BaseModel):
    """
    인수 기준 하나입니다.
    supersedes/removes 중 최대 하나만 설정할 수 있으며, 둘 다 없으면 순수 추가입니다.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., description="기준 ID (문서 내에서 유일)")
    text: str = Field(..., description="검증 가능한 요구 동작 설명")
    supersedes: Optional[CriterionRef] = Field(
        default=None, description="대체할 이전 기준"
    )
    removes: Optional[CriterionRef] = Field(
        default=None, description="삭제할 이전 기준"
    )
    tags: tuple[str, ...] = Field(
        default=(), description="분류 태그 (예: security)"
    )

    @property
    def is_additive(self) -> bool:
        return self.supersedes is None and self.removes is None


class RequirementDocument(BaseModel):
    """
    정규화된 요구사항 문서입니다.
    한번 생성되면 변경되지 않으며, 해석 과정에서 대체되거나 제외될 뿐입니다.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(..., description="문서 ID")
    sequence_number: int = Field(
        ..., alias="sequenceNumber", description="프로젝트 전체에서 유일한 순번"
    )
    status: DocumentStatus
    feature_key: str = Field(..., alias="featureKey", description="기능 키")
    criteria: tuple[AcceptanceCriterion, ...] = Field(default=())
    title: Optional[str] = Field(default=None, description="문서 제목 (참고용)")

    def ref(self, criterion_id: str) -> CriterionRef:
        """이 문서에 속한 기준의 참조를 만듭니다."""
        return CriterionRef(document_id=self.id, criterion_id=criterion_id)


class FeatureChain(BaseModel):
    """
    같은 기능 키를 가진 문서들을 순번 순서대로 모은 체인입니다.
    폐기(Abandoned) 문서는 생성 시점에 이미 제외되어 있습니다.
    """

    model_config = ConfigDict(frozen=True)

    feature_key: str
    documents: tuple[RequirementDocument, ...] = Field(default=())
