"""Layer 3: Resolution - Fold feature chains into canonical state."""

from .operations import (
    Additive,
    Override,
    Remove,
    FoldOperation,
    FoldState,
    operation_for,
)
from .resolver import Resolver

__all__ = [
    "Additive",
    "Override",
    "Remove",
    "FoldOperation",
    "FoldState",
    "operation_for",
    "Resolver",
]
