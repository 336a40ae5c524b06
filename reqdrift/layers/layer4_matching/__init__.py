"""Layer 4: Matching - Link canonical criteria to observed facts."""

from .similarity import (
    SimilarityScorer,
    JaccardScorer,
    normalize_tokens,
    jaccard,
)
from .matcher import EvidenceMatcher, MatchOutcome, normalize_hint, strip_feature_terms

__all__ = [
    "SimilarityScorer",
    "JaccardScorer",
    "normalize_tokens",
    "jaccard",
    "EvidenceMatcher",
    "MatchOutcome",
    "normalize_hint",
    "strip_feature_terms",
]
