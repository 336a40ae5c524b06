"""
갭 분석 결과(Gap Finding) 데이터 모델입니다.
정규 상태와 관찰 사실 사이의 불일치를 종류와 심각도로 표현합니다.
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, ConfigDict, Field

from reqdrift.exceptions import DriftEngineError
from .document import CriterionRef
from .canonical import ProvenanceEntry


class GapCategory(str, Enum):
    """
    불일치 종류입니다.

    분류:
    - MISSING: 요구사항은 있으나 증거가 없음
    - PARTIAL: 여러 절로 된 요구사항 중 일부만 증거로 확인됨
    - DIFFERENT: 같은 영역을 다루지만 요구사항과 어긋남
    - EXTRA: 요구사항에 없는 동작이 관찰됨
    - SATISFIED: 요구사항이 증거로 완전히 확인됨
    """
    MISSING = "Missing"
    PARTIAL = "Partial"
    DIFFERENT = "Different"
    EXTRA = "Extra"
    SATISFIED = "Satisfied"


class Severity(str, Enum):
    """심각도입니다. rank가 작을수록 심각합니다."""

    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @property
    def rank(self) -> int:
        return _SEVERITY_ORDER.index(self)


_SEVERITY_ORDER = [Severity.CRITICAL, Severity.HIGH, Severity.MEDIUM, Severity.LOW]


class GapFinding(BaseModel):
    """분류된 불일치 하나입니다."""

    model_config = ConfigDict(frozen=True)

    feature_key: str
    category: GapCategory
    severity: Optional[Severity] = Field(
        default=None, description="Satisfied 결과는 심각도가 없음"
    )
    criterion_ref: Optional[CriterionRef] = None
    evidence_ref: Optional[str] = Field(
        default=None, description="증거 위치 (evidenceLocation)"
    )
    rationale: str = ""
    provenance_chain: tuple[ProvenanceEntry, ...] = ()
    similarity: Optional[float] = Field(
        default=None, description="매칭 시 사용된 유사도 점수"
    )

    def sort_key(self) -> tuple:
        """심각도 → 기능 키 → 종류 → 기준 → 증거 순의 전순서 키."""
        severity_rank = self.severity.rank if self.severity else len(_SEVERITY_ORDER)
        return (
            severity_rank,
            self.feature_key,
            self.category.value,
            str(self.criterion_ref) if self.criterion_ref else "",
            self.evidence_ref or "",
        )


class EngineWarning(BaseModel):
    """실행을 중단하지 않는 경고입니다. 보고서 메타데이터에 포함됩니다."""

    error_code: str
    message: str
    details: Optional[Any] = None

    @classmethod
    def from_exception(cls, exc: DriftEngineError) -> "EngineWarning":
        return cls(error_code=exc.error_code, message=exc.message, details=exc.details)
