"""Data models for the requirement drift engine."""

from .error import ErrorResponse
from .document import (
    DocumentStatus,
    CriterionRef,
    AcceptanceCriterion,
    RequirementDocument,
    FeatureChain,
)
from .canonical import (
    ProvenanceAction,
    ProvenanceEntry,
    CanonicalCriterion,
    CanonicalFeatureState,
    ResolutionResult,
)
from .evidence import (
    ObservedFact,
    CriterionMatch,
    FeatureMatchResult,
    OrphanedFact,
)
from .finding import (
    GapCategory,
    Severity,
    GapFinding,
    EngineWarning,
)
from .report import (
    ReportSummary,
    FeatureReport,
    AuditReport,
)

__all__ = [
    # Error models
    "ErrorResponse",
    # Document models
    "DocumentStatus",
    "CriterionRef",
    "AcceptanceCriterion",
    "RequirementDocument",
    "FeatureChain",
    # Canonical state models
    "ProvenanceAction",
    "ProvenanceEntry",
    "CanonicalCriterion",
    "CanonicalFeatureState",
    "ResolutionResult",
    # Evidence models
    "ObservedFact",
    "CriterionMatch",
    "FeatureMatchResult",
    "OrphanedFact",
    # Finding models
    "GapCategory",
    "Severity",
    "GapFinding",
    "EngineWarning",
    # Report models
    "ReportSummary",
    "FeatureReport",
    "AuditReport",
]
