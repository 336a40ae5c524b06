"""Gap classifier for Layer 5."""

import logging
from typing import Iterable, Optional

from reqdrift.config import get_settings
from reqdrift.layers.layer4_matching.matcher import normalize_hint
from reqdrift.models import (
    CanonicalFeatureState,
    CriterionMatch,
    DocumentStatus,
    FeatureMatchResult,
    GapCategory,
    GapFinding,
    OrphanedFact,
)
from .coverage import CoverageJudge, KeywordCoverageJudge
from .severity import severity_for

logger = logging.getLogger(__name__)


class GapClassifier:
    """
    Layer 5: 정규 상태와 증거 사이의 불일치를 분류하고 심각도를 매깁니다.

    - 매칭된 쌍: CoverageJudge 판정에 따라 Satisfied / Partial / Different
    - 매칭되지 않은 기준: Missing
    - 고아 증거: Extra
    """

    def __init__(
        self,
        judge: Optional[CoverageJudge] = None,
        include_satisfied: Optional[bool] = None,
        threshold: Optional[float] = None,
    ):
        settings = get_settings()
        self.judge = judge or KeywordCoverageJudge()
        self.include_satisfied = (
            settings.include_satisfied if include_satisfied is None else include_satisfied
        )
        # Missing 사유 문구에만 사용
        self.threshold = settings.similarity_threshold if threshold is None else threshold

    def classify(self, result: FeatureMatchResult) -> list[GapFinding]:
        """기능 하나의 매칭 결과를 분류합니다."""
        findings = []
        for match in result.matches:
            finding = self._classify_match(result.feature_key, match)
            if finding.category == GapCategory.SATISFIED and not self.include_satisfied:
                continue
            findings.append(finding)

        logger.debug(f"[GapClassifier] {result.feature_key}: {len(findings)}개 결과")
        return findings

    def classify_orphans(
        self,
        orphans: Iterable[OrphanedFact],
        states: dict[str, CanonicalFeatureState],
    ) -> list[GapFinding]:
        """
        고아 증거를 Extra로 분류합니다.

        출처 상태는 힌트가 가리키는 기능의 최신 문서 상태이며,
        해석된 기능이 없으면 이미 동작 중인 코드로 보고 Done을 사용합니다.
        """
        by_hint = {normalize_hint(key): state for key, state in states.items()}
        findings = []
        for orphan in orphans:
            fact = orphan.fact
            state = states.get(fact.feature_key_hint) or by_hint.get(
                normalize_hint(fact.feature_key_hint)
            )
            status = state.latest_status if state else DocumentStatus.DONE
            findings.append(GapFinding(
                feature_key=state.feature_key if state else fact.feature_key_hint,
                category=GapCategory.EXTRA,
                severity=severity_for(GapCategory.EXTRA, status, fact.security_relevant),
                evidence_ref=fact.evidence_location or None,
                rationale=f"증거 '{fact.description}'에 대응하는 활성 요구사항이 없습니다",
                provenance_chain=state.provenance if state else (),
            ))
        return findings

    def _classify_match(self, feature_key: str, match: CriterionMatch) -> GapFinding:
        criterion = match.criterion

        if not match.is_matched:
            category = GapCategory.MISSING
            evidence_ref = None
            rationale = (
                f"기준 '{criterion.text}'에 대응하는 증거가 없습니다 "
                f"(최고 유사도 {match.similarity:.2f} < 기준 {self.threshold:.2f})"
            )
        else:
            verdict = self.judge.judge(criterion.text, match.fact.description)
            category = verdict.category
            evidence_ref = match.fact.evidence_location or None
            rationale = (
                f"증거 '{match.fact.description}' (유사도 {match.similarity:.2f}): "
                f"{verdict.reason}"
            )

        return GapFinding(
            feature_key=feature_key,
            category=category,
            severity=severity_for(
                category, criterion.source_status, criterion.security_relevant
            ),
            criterion_ref=criterion.key,
            evidence_ref=evidence_ref,
            rationale=rationale,
            provenance_chain=criterion.provenance,
            similarity=match.similarity,
        )
