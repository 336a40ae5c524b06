"""Evidence matcher for Layer 4.

Layer 4: 증거 매칭 서비스
정규 상태의 활성 기준마다 가장 잘 맞는 관찰 사실을 찾습니다.

매칭 2단계:
1. featureKeyHint == featureKey 인 증거만 후보로 선택
2. 후보 중 유사도가 가장 높은 증거를 선택하되, 기준값(기본 0.3) 이상일 때만 인정
   유사도는 원문 점수와 기능 키 단어를 뺀 점수 중 높은 값

동점 처리: evidenceLocation 사전순 → description 사전순 → 입력 순서.
모든 기능 처리 후 어떤 기준과도 매칭되지 않은 증거는 고아 증거(Extra 후보)가 됩니다.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

from reqdrift.config import get_settings
from reqdrift.exceptions import EvidenceMatchingDegraded
from reqdrift.models import (
    CanonicalCriterion,
    CanonicalFeatureState,
    CriterionMatch,
    EngineWarning,
    FeatureMatchResult,
    ObservedFact,
    OrphanedFact,
)
from .similarity import JaccardScorer, SimilarityScorer

logger = logging.getLogger(__name__)

_HINT_SEPARATORS = re.compile(r"[\s_\-]+")


def normalize_hint(hint: str) -> str:
    """힌트 비교용 정규화 (대소문자, 공백/밑줄/하이픈 통일)."""
    return _HINT_SEPARATORS.sub("-", hint.strip().lower())


@dataclass
class MatchOutcome:
    """전체 기능에 대한 매칭 결과."""

    results: list[FeatureMatchResult] = field(default_factory=list)
    orphans: list[OrphanedFact] = field(default_factory=list)
    skipped_fact_count: int = 0

    @property
    def warnings(self) -> list[EngineWarning]:
        return [w for result in self.results for w in result.warnings]


class EvidenceMatcher:
    """
    Layer 4: Link canonical criteria to externally supplied observed facts.

    Matching is pure and order-independent.
    """

    def __init__(
        self,
        scorer: Optional[SimilarityScorer] = None,
        threshold: Optional[float] = None,
        hint_fallback_enabled: Optional[bool] = None,
    ):
        settings = get_settings()
        self.scorer = scorer or JaccardScorer()
        self.threshold = settings.similarity_threshold if threshold is None else threshold
        self.hint_fallback_enabled = (
            settings.hint_fallback_enabled
            if hint_fallback_enabled is None
            else hint_fallback_enabled
        )

    def match(
        self, state: CanonicalFeatureState, facts: Sequence[ObservedFact]
    ) -> FeatureMatchResult:
        """
        기능 하나의 활성 기준 전체를 증거와 매칭합니다.

        Args:
            state: 정규 상태
            facts: 전체 관찰 사실 목록 (인덱스가 증거 식별자로 쓰임)

        Returns:
            FeatureMatchResult (기준별 매칭 + 경고)
        """
        candidates, degraded = self._candidates(state.feature_key, facts)
        result = FeatureMatchResult(state=state, degraded=degraded)

        if degraded:
            warning = EvidenceMatchingDegraded(
                f"[{state.feature_key}] 정확히 일치하는 featureKeyHint가 없어 "
                f"정규화된 힌트로 {len(candidates)}개 증거를 후보로 사용했습니다",
                details={
                    "feature_key": state.feature_key,
                    "hints": sorted({fact.feature_key_hint for _, fact in candidates}),
                },
            )
            logger.warning(f"[EvidenceMatcher] {warning.message}")
            result.warnings.append(EngineWarning.from_exception(warning))

        for criterion in state.criteria:
            result.matches.append(
                self._best_match(state.feature_key, criterion, candidates)
            )

        matched = sum(1 for m in result.matches if m.is_matched)
        logger.debug(
            f"[EvidenceMatcher] {state.feature_key}: "
            f"{matched}/{len(result.matches)}개 기준 매칭"
        )
        return result

    def match_all(
        self,
        states: dict[str, CanonicalFeatureState],
        facts: Sequence[ObservedFact],
        excluded_feature_keys: Iterable[str] = (),
    ) -> MatchOutcome:
        """
        모든 기능을 매칭하고 고아 증거를 모읍니다.

        Args:
            states: 기능 키 → 정규 상태
            facts: 전체 관찰 사실
            excluded_feature_keys: 해석에 실패한 기능 키. 이 기능을 가리키는 증거는
                고아 증거로 보고하지 않고 건너뜁니다.
        """
        outcome = MatchOutcome(
            results=[self.match(states[key], facts) for key in sorted(states)]
        )
        outcome.orphans, outcome.skipped_fact_count = self.find_orphans(
            outcome.results, facts, excluded_feature_keys
        )
        return outcome

    def find_orphans(
        self,
        results: Iterable[FeatureMatchResult],
        facts: Sequence[ObservedFact],
        excluded_feature_keys: Iterable[str] = (),
    ) -> tuple[list[OrphanedFact], int]:
        """어떤 기준과도 매칭되지 않은 증거와 건너뛴 증거 수를 반환합니다."""
        matched: set[int] = set()
        for result in results:
            matched |= result.matched_fact_indices

        excluded = {normalize_hint(key) for key in excluded_feature_keys}
        orphans: list[OrphanedFact] = []
        skipped = 0
        for idx, fact in enumerate(facts):
            if idx in matched:
                continue
            if normalize_hint(fact.feature_key_hint) in excluded:
                skipped += 1
                continue
            orphans.append(OrphanedFact(fact=fact, fact_index=idx))

        if skipped:
            logger.info(f"[EvidenceMatcher] 실패한 기능을 가리키는 증거 {skipped}개 제외")
        return orphans, skipped

    def _candidates(
        self, feature_key: str, facts: Sequence[ObservedFact]
    ) -> tuple[list[tuple[int, ObservedFact]], bool]:
        exact = [
            (idx, fact) for idx, fact in enumerate(facts)
            if fact.feature_key_hint == feature_key
        ]
        if exact or not self.hint_fallback_enabled:
            return exact, False

        target = normalize_hint(feature_key)
        fallback = [
            (idx, fact) for idx, fact in enumerate(facts)
            if normalize_hint(fact.feature_key_hint) == target
        ]
        return fallback, bool(fallback)

    def _best_match(
        self,
        feature_key: str,
        criterion: CanonicalCriterion,
        candidates: list[tuple[int, ObservedFact]],
    ) -> CriterionMatch:
        best: Optional[tuple[tuple, int, ObservedFact, float]] = None

        for idx, fact in candidates:
            score = self._score(criterion.text, fact.description, feature_key)
            rank = (-score, fact.evidence_location, fact.description, idx)
            if best is None or rank < best[0]:
                best = (rank, idx, fact, score)

        if best is None or best[3] < self.threshold:
            return CriterionMatch(
                criterion=criterion,
                similarity=best[3] if best else 0.0,
            )

        _, idx, fact, score = best
        return CriterionMatch(
            criterion=criterion, fact=fact, fact_index=idx, similarity=score
        )

    def _score(self, criterion_text: str, fact_text: str, feature_key: str) -> float:
        """
        원문 점수와 기능 키 단어를 뺀 점수 중 높은 값.
        기준이 기능 키 단어로만 이루어져 있으면 뺀 쪽은 0.0이므로 원문 점수가 쓰입니다.
        """
        raw = self.scorer.score(criterion_text, fact_text)
        stripped = self.scorer.score(
            strip_feature_terms(criterion_text, feature_key),
            strip_feature_terms(fact_text, feature_key),
        )
        return max(raw, stripped)


def strip_feature_terms(text: str, feature_key: str) -> str:
    """기능 키에 포함된 단어를 본문에서 제거합니다 (단어 경계 기준, 대소문자 무시)."""
    terms = [t for t in re.split(r"[\W_]+", feature_key.lower()) if t]
    if not terms:
        return text
    pattern = re.compile(
        r"\b(?:" + "|".join(re.escape(t) for t in terms) + r")\b", re.IGNORECASE
    )
    return pattern.sub(" ", text)
