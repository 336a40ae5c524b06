"""
관찰 사실(Observed Fact)과 매칭 결과 모델입니다.
관찰 사실은 외부 수집기(코드/로그 검색)가 제공하는 입력이며, 엔진은 이를 변경하지 않습니다.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from .canonical import CanonicalCriterion, CanonicalFeatureState
from .finding import EngineWarning


class ObservedFact(BaseModel):
    """실제 시스템 동작에 대한 외부 증거 하나입니다."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    feature_key_hint: str = Field(
        default="", alias="featureKeyHint", description="어느 기능에 대한 증거인지 힌트"
    )
    description: str = Field(..., description="관찰된 동작 설명")
    evidence_location: str = Field(
        default="", alias="evidenceLocation", description="증거 위치 (파일:줄, 로그 ID 등)"
    )
    security_relevant: bool = Field(
        default=False, alias="securityRelevant", description="보안 관련 증거 여부"
    )


class CriterionMatch(BaseModel):
    """
    활성 기준 하나에 대한 매칭 결과입니다.
    fact_index는 입력 증거 목록에서의 위치이며, 매칭되지 않으면 None입니다.
    """

    criterion: CanonicalCriterion
    fact: Optional[ObservedFact] = None
    fact_index: Optional[int] = None
    similarity: float = 0.0

    @property
    def is_matched(self) -> bool:
        return self.fact is not None


class FeatureMatchResult(BaseModel):
    """기능 하나의 매칭 결과입니다."""

    state: CanonicalFeatureState
    matches: list[CriterionMatch] = Field(default_factory=list)
    degraded: bool = Field(
        default=False, description="정확한 힌트 대신 정규화된 힌트로 후보를 찾았는지 여부"
    )
    warnings: list[EngineWarning] = Field(default_factory=list)

    @property
    def feature_key(self) -> str:
        return self.state.feature_key

    @property
    def matched_fact_indices(self) -> set[int]:
        return {m.fact_index for m in self.matches if m.fact_index is not None}


class OrphanedFact(BaseModel):
    """어떤 기능의 어떤 기준과도 매칭되지 않은 증거입니다."""

    fact: ObservedFact
    fact_index: int
