"""Layer 5: Classification - Categorize and rank discrepancies."""

from .coverage import CoverageJudge, CoverageVerdict, KeywordCoverageJudge
from .severity import severity_for, SEVERITY_TABLE
from .classifier import GapClassifier

__all__ = [
    "CoverageJudge",
    "CoverageVerdict",
    "KeywordCoverageJudge",
    "severity_for",
    "SEVERITY_TABLE",
    "GapClassifier",
]
