"""Layer 1: Normalization - Schema validation of raw requirement documents."""

from .normalizer import Normalizer, NormalizationResult

__all__ = ["Normalizer", "NormalizationResult"]
