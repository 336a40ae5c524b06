"""
감사 파이프라인의 전체 흐름을 관리하는 오케스트레이터입니다.

처리 단계(파이프라인):
1. 정규화 (Normalization): 문서 집합을 검증합니다.
2. 체인 구성 (Chaining): 기능 키별로 문서를 묶습니다.
3. 해석 (Resolution): 기능별로 병렬 폴딩합니다.
4. 매칭/분류 (Matching/Classification): 기능별로 병렬 실행합니다.
5. 보고서 (Report): 정렬된 결과를 조립합니다.

각 기능은 서로 독립이므로 조율 없이 워커 스레드에서 실행하고 결과만 모읍니다.
한 기능의 실패는 다른 기능의 처리를 막지 않습니다.
"""

import asyncio
import logging
from datetime import datetime
from typing import Iterable, Optional, Sequence

from reqdrift.config import get_settings
from reqdrift.exceptions import DanglingReferenceError
from reqdrift.layers.layer1_normalization.normalizer import RawDocument
from reqdrift.models import (
    AuditReport,
    CanonicalFeatureState,
    ErrorResponse,
    FeatureChain,
    FeatureMatchResult,
    GapFinding,
    ObservedFact,
)
from reqdrift.services.engine import DriftEngine, RawFact, coerce_facts

logger = logging.getLogger(__name__)


class AuditOrchestrator:
    """
    기능별 해석/분류를 비동기로 팬아웃하는 클래스입니다.
    순수 함수 자체는 DriftEngine의 구성 요소를 그대로 사용합니다.
    """

    def __init__(
        self,
        engine: Optional[DriftEngine] = None,
        max_concurrency: Optional[int] = None,
    ):
        self.engine = engine or DriftEngine()
        self.max_concurrency = max_concurrency or get_settings().max_concurrency

    async def run(
        self,
        documents: Iterable[RawDocument],
        evidence: Sequence[RawFact],
    ) -> AuditReport:
        """
        전체 파이프라인을 실행하는 메인 함수입니다.

        Raises:
            ValidationError: 집합 단위 검증 실패 (기능별 실패는 보고서에 포함)
        """
        start_time = datetime.now()
        logger.info("[Orchestrator] ===== 감사 시작 =====")

        facts = coerce_facts(evidence)

        # ========== 1~2단계: 정규화 + 체인 구성 ==========
        normalized = self.engine.normalizer.normalize(documents)
        chains = self.engine.chain_builder.build(normalized.documents)

        failures: dict[str, ErrorResponse] = {
            key: ErrorResponse.from_exception(error, feature_key=key)
            for key, error in normalized.failures.items()
        }

        # 동시 실행 수 제한
        semaphore = asyncio.Semaphore(self.max_concurrency)

        # ========== 3단계: 기능별 해석 (병렬) ==========
        resolved = await asyncio.gather(
            *[self._resolve_chain(semaphore, chain) for chain in chains]
        )

        states: dict[str, CanonicalFeatureState] = {}
        for feature_key, state, error in resolved:
            if error is not None:
                failures[feature_key] = error
            else:
                states[feature_key] = state

        # ========== 4단계: 기능별 매칭/분류 (병렬) ==========
        classified = await asyncio.gather(
            *[self._classify_feature(semaphore, states[key], facts) for key in sorted(states)]
        )

        match_results = [match_result for match_result, _ in classified]
        findings: list[GapFinding] = [f for _, feature_findings in classified for f in feature_findings]

        orphans, skipped = self.engine.matcher.find_orphans(
            match_results, facts, failures.keys()
        )
        findings.extend(self.engine.classifier.classify_orphans(orphans, states))

        # ========== 5단계: 보고서 ==========
        report = self.engine.report_generator.generate(
            findings,
            states=states,
            warnings=[w for result in match_results for w in result.warnings],
            failures=failures.values(),
            skipped_fact_count=skipped,
        )

        elapsed = (datetime.now() - start_time).total_seconds()
        logger.info(
            f"[Orchestrator] ===== 감사 완료: 기능 {len(states)}개 성공, "
            f"{len(failures)}개 실패, 소요시간 {elapsed:.2f}초 ====="
        )
        return report

    async def _resolve_chain(
        self, semaphore: asyncio.Semaphore, chain: FeatureChain
    ) -> tuple[str, Optional[CanonicalFeatureState], Optional[ErrorResponse]]:
        """체인 하나를 워커 스레드에서 해석합니다 (세마포어 적용)."""
        async with semaphore:
            try:
                state = await asyncio.to_thread(self.engine.resolver.resolve, chain)
                return chain.feature_key, state, None
            except DanglingReferenceError as e:
                logger.warning(f"[Orchestrator] {chain.feature_key} 해석 실패: {e.message}")
                return chain.feature_key, None, ErrorResponse.from_exception(
                    e, feature_key=chain.feature_key
                )

    async def _classify_feature(
        self,
        semaphore: asyncio.Semaphore,
        state: CanonicalFeatureState,
        facts: list[ObservedFact],
    ) -> tuple[FeatureMatchResult, list[GapFinding]]:
        """기능 하나의 매칭과 분류를 워커 스레드에서 실행합니다."""

        def work() -> tuple[FeatureMatchResult, list[GapFinding]]:
            match_result = self.engine.matcher.match(state, facts)
            return match_result, self.engine.classifier.classify(match_result)

        async with semaphore:
            return await asyncio.to_thread(work)


# 싱글톤 인스턴스 (프로그램 전체에서 하나만 생성됨)
_orchestrator: Optional[AuditOrchestrator] = None


def get_orchestrator() -> AuditOrchestrator:
    """오케스트레이터 인스턴스를 가져오거나 생성하는 함수"""
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = AuditOrchestrator()
    return _orchestrator
