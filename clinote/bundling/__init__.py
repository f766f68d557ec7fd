"""
Bundling Layer - Divides one input document into individual notes.

Submodules:
    strategies.py       → Split strategies (single, delimiter, structural)
    bundle_splitter.py  → BundleSplitter facade + strategy registry
"""

from clinote.bundling.bundle_splitter import BundleSplitter, STRATEGY_REGISTRY
from clinote.bundling.strategies import (
    SplitStrategyBase,
    SingleNoteStrategy,
    DelimiterSplitStrategy,
    StructuralSplitStrategy,
)

__all__ = [
    "BundleSplitter",
    "STRATEGY_REGISTRY",
    "SplitStrategyBase",
    "SingleNoteStrategy",
    "DelimiterSplitStrategy",
    "StructuralSplitStrategy",
]
