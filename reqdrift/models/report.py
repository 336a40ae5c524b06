"""
감사 보고서(Audit Report) 데이터 모델입니다.
정렬된 갭 분석 결과를 기능별로 묶고 심각도별 요약을 붙입니다.
"""

from datetime import datetime
from pydantic import BaseModel, Field

from .error import ErrorResponse
from .finding import GapFinding, EngineWarning


class ReportSummary(BaseModel):
    """보고서 상단 요약입니다."""

    total_findings: int = 0
    by_severity: dict[str, int] = Field(default_factory=dict)
    by_category: dict[str, int] = Field(default_factory=dict)
    feature_count: int = 0
    failed_feature_count: int = 0
    skipped_fact_count: int = Field(
        default=0, description="실패한 기능을 가리켜 분석에서 제외된 증거 수"
    )


class FeatureReport(BaseModel):
    """기능 하나에 대한 결과 묶음입니다."""

    feature_key: str
    findings: list[GapFinding] = Field(default_factory=list)
    unratified: bool = False


class AuditReport(BaseModel):
    """최종 감사 보고서입니다."""

    summary: ReportSummary
    features: list[FeatureReport] = Field(default_factory=list)
    findings: list[GapFinding] = Field(default_factory=list)
    warnings: list[EngineWarning] = Field(default_factory=list)
    failures: list[ErrorResponse] = Field(default_factory=list)
    generated_at: datetime = Field(default_factory=datetime.now)

    def to_json(self) -> str:
        """JSON 문자열로 변환합니다."""
        return self.model_dump_json(indent=2)
