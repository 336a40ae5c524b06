"""Coverage judgement for matched (criterion, fact) pairs.

매칭된 쌍이 요구사항을 얼마나 충족하는지 판정합니다.
판정 전략은 교체 가능하며(CoverageJudge), 기본 구현은 키워드 기반입니다.
"""

import re
from dataclasses import dataclass
from typing import Optional, Protocol

from reqdrift.config import get_settings
from reqdrift.layers.layer4_matching.similarity import normalize_tokens
from reqdrift.models import GapCategory

_CLAUSE_SPLIT = re.compile(r"[,;]|\b(?:and|or|then|but)\b", re.IGNORECASE)
_NEGATION = re.compile(
    r"\b(?:not|no|never|without|cannot|none|disabled|prohibited)\b|n't\b",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class CoverageVerdict:
    """판정 결과. category는 Satisfied, Partial, Different 중 하나입니다."""

    category: GapCategory
    covered_clauses: int
    total_clauses: int
    reason: str = ""


class CoverageJudge(Protocol):
    def judge(self, criterion_text: str, fact_text: str) -> CoverageVerdict:
        ...


def split_clauses(text: str) -> list[str]:
    """기준 본문을 절 단위로 나눕니다. 토큰이 없는 조각은 버립니다."""
    parts = [part.strip() for part in _CLAUSE_SPLIT.split(text)]
    return [part for part in parts if normalize_tokens(part)]


def has_negation(text: str) -> bool:
    return bool(_NEGATION.search(text))


class KeywordCoverageJudge:
    """
    절(clause) 단위 토큰 포함률로 충족 여부를 판정합니다.

    판정 기준:
    ┌──────────────────────────────────────┬────────────┐
    │ 조건                                 │ 결과       │
    ├──────────────────────────────────────┼────────────┤
    │ 기준과 증거의 부정 표현 여부가 다름  │ Different  │
    │ 모든 절이 충족됨                     │ Satisfied  │
    │ 일부 절만 충족됨                     │ Partial    │
    │ 충족된 절이 없음                     │ Different  │
    └──────────────────────────────────────┴────────────┘

    절의 토큰 중 clause_coverage_threshold(기본 0.5) 이상이 증거에 있으면 그 절은 충족입니다.
    """

    def __init__(self, clause_coverage_threshold: Optional[float] = None):
        if clause_coverage_threshold is None:
            clause_coverage_threshold = get_settings().clause_coverage_threshold
        self.clause_coverage_threshold = clause_coverage_threshold

    def judge(self, criterion_text: str, fact_text: str) -> CoverageVerdict:
        clauses = split_clauses(criterion_text) or [criterion_text]
        total = len(clauses)

        if has_negation(criterion_text) != has_negation(fact_text):
            return CoverageVerdict(
                GapCategory.DIFFERENT, 0, total,
                "기준과 증거의 부정 표현이 서로 어긋납니다",
            )

        fact_tokens = normalize_tokens(fact_text)
        covered = sum(1 for clause in clauses if self._is_covered(clause, fact_tokens))

        if covered == total:
            return CoverageVerdict(GapCategory.SATISFIED, covered, total, "모든 절이 충족됨")
        if covered > 0:
            return CoverageVerdict(
                GapCategory.PARTIAL, covered, total, f"{covered}/{total}개 절만 충족됨"
            )
        return CoverageVerdict(
            GapCategory.DIFFERENT, 0, total,
            "같은 영역을 다루지만 기준의 동작을 설명하지 않습니다",
        )

    def _is_covered(self, clause: str, fact_tokens: frozenset[str]) -> bool:
        clause_tokens = normalize_tokens(clause)
        if not clause_tokens:
            return False
        ratio = len(clause_tokens & fact_tokens) / len(clause_tokens)
        return ratio >= self.clause_coverage_threshold
