"""API endpoints package."""

from . import health
from . import audit

__all__ = ["health", "audit"]
