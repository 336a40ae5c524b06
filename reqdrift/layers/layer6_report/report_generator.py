"""Report generator for Layer 6.

정렬과 그룹화만 수행하는 서식 단계이며 새로운 에러를 만들지 않습니다.
"""

import logging
from typing import Iterable, Optional

from reqdrift.models import (
    AuditReport,
    CanonicalFeatureState,
    EngineWarning,
    ErrorResponse,
    FeatureReport,
    GapCategory,
    GapFinding,
    ReportSummary,
    Severity,
)

logger = logging.getLogger(__name__)


class ReportGenerator:
    """
    Layer 6: 심각도(Critical→Low) → 기능 키 순으로 정렬하고 기능별로 묶습니다.
    """

    def generate(
        self,
        findings: Iterable[GapFinding],
        states: Optional[dict[str, CanonicalFeatureState]] = None,
        warnings: Iterable[EngineWarning] = (),
        failures: Iterable[ErrorResponse] = (),
        skipped_fact_count: int = 0,
    ) -> AuditReport:
        """
        최종 보고서 생성.

        Args:
            findings: 분류된 결과 전체
            states: 기능별 정규 상태 (unratified 표시용)
            warnings: 비치명적 경고
            failures: 기능별 실패
            skipped_fact_count: 실패한 기능을 가리켜 제외된 증거 수
        """
        states = states or {}
        ordered = sorted(findings, key=lambda f: f.sort_key())
        failures = sorted(failures, key=lambda e: e.feature_key or "")

        features: dict[str, FeatureReport] = {}
        for finding in ordered:
            report = features.get(finding.feature_key)
            if report is None:
                state = states.get(finding.feature_key)
                report = FeatureReport(
                    feature_key=finding.feature_key,
                    unratified=state.unratified if state else False,
                )
                features[finding.feature_key] = report
            report.findings.append(finding)

        summary = ReportSummary(
            total_findings=len(ordered),
            by_severity=self._count_by_severity(ordered),
            by_category=self._count_by_category(ordered),
            feature_count=len(states) or len(features),
            failed_feature_count=len(failures),
            skipped_fact_count=skipped_fact_count,
        )

        logger.info(
            f"[ReportGenerator] 결과 {summary.total_findings}개 "
            f"({', '.join(f'{k}={v}' for k, v in summary.by_severity.items())})"
        )

        return AuditReport(
            summary=summary,
            features=list(features.values()),
            findings=ordered,
            warnings=list(warnings),
            failures=failures,
        )

    def _count_by_severity(self, findings: list[GapFinding]) -> dict[str, int]:
        counts = {severity.value: 0 for severity in Severity}
        for finding in findings:
            if finding.severity is not None:
                counts[finding.severity.value] += 1
        return counts

    def _count_by_category(self, findings: list[GapFinding]) -> dict[str, int]:
        counts = {category.value: 0 for category in GapCategory}
        for finding in findings:
            counts[finding.category.value] += 1
        return counts
