"""Layer 2: Chaining - Group documents into per-feature ordered chains."""

from .chain_builder import ChainBuilder

__all__ = ["ChainBuilder"]
