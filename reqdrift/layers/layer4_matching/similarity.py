"""Text similarity scoring for evidence matching.

유사도 계산은 단일 메서드 인터페이스(SimilarityScorer) 뒤에 있어서,
키워드 기반 구현을 임베딩/LLM 기반 구현으로 바꿔도 Resolver나 Classifier는 바뀌지 않습니다.
"""

import re
from typing import Iterable, Protocol

_TOKEN_PATTERN = re.compile(r"[^\W_]+", re.UNICODE)

# 의미 없는 영어 기능어. 부정어(not, no, never 등)는 분류 단계에서 쓰이므로 포함하지 않음
STOPWORDS = frozenset({
    "a", "an", "the", "and", "or", "of", "to", "in", "on", "for", "with",
    "by", "at", "from", "as", "into", "is", "are", "was", "were", "be",
    "been", "being", "it", "its", "this", "that", "these", "those",
    "can", "must", "should", "shall", "will", "would", "may", "might",
    "has", "have", "had", "do", "does", "via", "when", "then", "so",
})


def _fold_plural(token: str) -> str:
    """단순 복수형/3인칭 단수 접미사 제거 (cards → card)."""
    if len(token) > 3 and token.endswith("s") and not token.endswith(("ss", "us", "is")):
        return token[:-1]
    return token


def normalize_tokens(text: str) -> frozenset[str]:
    """
    정규화된 토큰 집합을 만듭니다.

    1. 소문자 변환
    2. 유니코드 단어 토큰 추출 (밑줄/구두점 제외)
    3. 불용어 제거
    4. 단순 복수형 접기
    """
    tokens = set()
    for raw in _TOKEN_PATTERN.findall(text.lower()):
        if raw in STOPWORDS:
            continue
        tokens.add(_fold_plural(raw))
    return frozenset(tokens)


def jaccard(left: Iterable[str], right: Iterable[str]) -> float:
    """자카드 지수 |A ∩ B| / |A ∪ B|. 둘 다 비어 있으면 0.0."""
    left, right = set(left), set(right)
    union = left | right
    if not union:
        return 0.0
    return len(left & right) / len(union)


class SimilarityScorer(Protocol):
    """기준 본문과 증거 설명 사이의 유사도(0.0 ~ 1.0)를 계산하는 인터페이스."""

    def score(self, criterion_text: str, fact_text: str) -> float:
        ...


class JaccardScorer:
    """정규화된 토큰의 자카드 지수를 유사도로 사용하는 기본 구현."""

    def score(self, criterion_text: str, fact_text: str) -> float:
        return jaccard(normalize_tokens(criterion_text), normalize_tokens(fact_text))
