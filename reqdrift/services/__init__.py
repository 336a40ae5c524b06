"""Services for the requirement drift engine."""

from .engine import (
    DriftEngine,
    GapDetection,
    get_engine,
    build_canonical_state,
    detect_gaps,
    run_audit,
)
from .orchestrator import AuditOrchestrator, get_orchestrator

__all__ = [
    "DriftEngine",
    "GapDetection",
    "get_engine",
    "build_canonical_state",
    "detect_gaps",
    "run_audit",
    "AuditOrchestrator",
    "get_orchestrator",
]
