"""
드리프트 엔진의 순수 진입점입니다.

- build_canonical_state: 요구사항 문서 → 기능별 정규 상태 (또는 기능별 에러)
- detect_gaps: 정규 상태 + 관찰 사실 → 갭 분석 결과
- run_audit: 두 단계를 이어서 실행하고 보고서까지 생성

모든 함수는 동기식이며 공유 가변 상태가 없습니다.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence, Union

import pydantic

from reqdrift.exceptions import InputValidationError
from reqdrift.layers.layer1_normalization import Normalizer
from reqdrift.layers.layer1_normalization.normalizer import RawDocument
from reqdrift.layers.layer2_chaining import ChainBuilder
from reqdrift.layers.layer3_resolution import Resolver
from reqdrift.layers.layer4_matching import EvidenceMatcher
from reqdrift.layers.layer5_classification import GapClassifier
from reqdrift.layers.layer6_report import ReportGenerator
from reqdrift.models import (
    AuditReport,
    CanonicalFeatureState,
    EngineWarning,
    ErrorResponse,
    GapFinding,
    ObservedFact,
    ResolutionResult,
)

logger = logging.getLogger(__name__)

RawFact = Union[dict, ObservedFact]


@dataclass
class GapDetection:
    """detect_gaps의 상세 결과 (경고와 제외된 증거 수 포함)."""

    findings: list[GapFinding] = field(default_factory=list)
    warnings: list[EngineWarning] = field(default_factory=list)
    skipped_fact_count: int = 0


def coerce_facts(evidence: Iterable[RawFact]) -> list[ObservedFact]:
    """dict 형태의 증거를 ObservedFact로 변환합니다."""
    facts = []
    for idx, item in enumerate(evidence):
        if isinstance(item, ObservedFact):
            facts.append(item)
            continue
        try:
            facts.append(ObservedFact.model_validate(item))
        except pydantic.ValidationError as e:
            raise InputValidationError(
                f"잘못된 증거 레코드 (index {idx})",
                details={
                    "index": idx,
                    "errors": e.errors(include_url=False, include_context=False),
                },
            ) from e
    return facts


class DriftEngine:
    """
    Layer 1~6을 순서대로 호출하는 동기식 엔진입니다.
    구성 요소를 주입하면 유사도/판정 전략을 교체할 수 있습니다.
    """

    def __init__(
        self,
        normalizer: Optional[Normalizer] = None,
        chain_builder: Optional[ChainBuilder] = None,
        resolver: Optional[Resolver] = None,
        matcher: Optional[EvidenceMatcher] = None,
        classifier: Optional[GapClassifier] = None,
        report_generator: Optional[ReportGenerator] = None,
    ):
        self.normalizer = normalizer or Normalizer()
        self.chain_builder = chain_builder or ChainBuilder()
        self.resolver = resolver or Resolver()
        self.matcher = matcher or EvidenceMatcher()
        self.classifier = classifier or GapClassifier()
        self.report_generator = report_generator or ReportGenerator()

    def build_canonical_state(self, documents: Iterable[RawDocument]) -> ResolutionResult:
        """
        문서 집합을 기능별 정규 상태로 해석합니다.

        Raises:
            ValidationError: 집합 단위 검증 실패 (sequenceNumber 중복 등)
        """
        normalized = self.normalizer.normalize(documents)
        chains = self.chain_builder.build(normalized.documents)
        result = self.resolver.resolve_all(chains)

        for feature_key, error in normalized.failures.items():
            result.failures[feature_key] = ErrorResponse.from_exception(
                error, feature_key=feature_key
            )
        return result

    def analyze(
        self,
        states: dict[str, CanonicalFeatureState],
        evidence: Iterable[RawFact],
        excluded_feature_keys: Iterable[str] = (),
    ) -> GapDetection:
        """매칭과 분류를 실행하고 경고까지 함께 반환합니다."""
        facts = coerce_facts(evidence)
        outcome = self.matcher.match_all(states, facts, excluded_feature_keys)

        findings: list[GapFinding] = []
        for result in outcome.results:
            findings.extend(self.classifier.classify(result))
        findings.extend(self.classifier.classify_orphans(outcome.orphans, states))

        return GapDetection(
            findings=findings,
            warnings=outcome.warnings,
            skipped_fact_count=outcome.skipped_fact_count,
        )

    def detect_gaps(
        self,
        states: dict[str, CanonicalFeatureState],
        evidence: Iterable[RawFact],
        excluded_feature_keys: Iterable[str] = (),
    ) -> list[GapFinding]:
        """정규 상태와 관찰 사실을 비교해 갭 분석 결과를 반환합니다."""
        return self.analyze(states, evidence, excluded_feature_keys).findings

    def run_audit(
        self,
        documents: Iterable[RawDocument],
        evidence: Sequence[RawFact],
    ) -> AuditReport:
        """문서 해석 → 갭 분석 → 보고서 생성을 한번에 실행합니다."""
        resolution = self.build_canonical_state(documents)
        detection = self.analyze(
            resolution.states, evidence, resolution.failed_feature_keys
        )
        return self.report_generator.generate(
            detection.findings,
            states=resolution.states,
            warnings=detection.warnings,
            failures=resolution.failures.values(),
            skipped_fact_count=detection.skipped_fact_count,
        )


# 싱글톤 인스턴스 (프로그램 전체에서 하나만 생성됨)
_engine: Optional[DriftEngine] = None


def get_engine() -> DriftEngine:
    """엔진 인스턴스를 가져오거나 생성하는 함수"""
    global _engine
    if _engine is None:
        _engine = DriftEngine()
    return _engine


def build_canonical_state(documents: Iterable[RawDocument]) -> ResolutionResult:
    return get_engine().build_canonical_state(documents)


def detect_gaps(
    states: dict[str, CanonicalFeatureState],
    evidence: Iterable[RawFact],
    excluded_feature_keys: Iterable[str] = (),
) -> list[GapFinding]:
    return get_engine().detect_gaps(states, evidence, excluded_feature_keys)


def run_audit(documents: Iterable[RawDocument], evidence: Sequence[RawFact]) -> AuditReport:
    return get_engine().run_audit(documents, evidence)
