"""
Bundle Splitter - Facade for Split Strategies

Single entry point for dividing an input document into individual notes.

Usage:
    splitter = BundleSplitter(settings)
    result = splitter.split(text, BundleMode.DELIMITER, NoteFormat.SOAP)
    for ordinal, note_text in enumerate(result.notes, start=1):
        ...

Pipeline Position:
    Input → [BundleSplitter] → Candidate Extractor → Note Assembler
            ^^^^^^^^^^^^^^^^
            You are here
"""

from typing import Dict, Optional, Type

from loguru import logger

from clinote.core.config import ClinoteSettings
from clinote.core.enums import BundleMode, NoteFormat
from clinote.core.models import SplitResult
from clinote.bundling.strategies import (
    SplitStrategyBase,
    SingleNoteStrategy,
    DelimiterSplitStrategy,
    StructuralSplitStrategy,
)


# =============================================================================
# STAGE 1: STRATEGY REGISTRY
# =============================================================================
# Maps bundle mode to implementation class. The mode set is closed, so this
# table is complete; there is no runtime lookup by name.

STRATEGY_REGISTRY: Dict[BundleMode, Type[SplitStrategyBase]] = {
    BundleMode.SINGLE: SingleNoteStrategy,
    BundleMode.DELIMITER: DelimiterSplitStrategy,
    BundleMode.STRUCTURAL: StructuralSplitStrategy,
}


# =============================================================================
# STAGE 2: BUNDLE SPLITTER FACADE
# =============================================================================


class BundleSplitter:
    """
    Unified interface for bundle splitting.

    What it does:
        Resolves the bundle mode (explicit argument, else the configured
        default), lazily builds the matching strategy and delegates to it.

    Example:
        >>> splitter = BundleSplitter()
        >>> result = splitter.split("---\\nNote A\\n---\\nNote B", BundleMode.DELIMITER, NoteFormat.SOAP)
        >>> result.notes
        ['Note A', 'Note B']
        >>> result.warnings
        []
    """

    def __init__(self, settings: Optional[ClinoteSettings] = None):
        self._settings = settings or ClinoteSettings()
        self._strategy_cache: Dict[BundleMode, SplitStrategyBase] = {}
        logger.debug(f"BundleSplitter initialized | Default mode: {self._settings.default_bundle_mode.value}")

    def split(
        self,
        document_text: str,
        mode: Optional[BundleMode] = None,
        note_format: NoteFormat = NoteFormat.SOAP,
    ) -> SplitResult:
        """
        Split a document into an ordered sequence of note texts.

        Args:
            document_text: Raw document text
            mode: Bundle mode (defaults to settings.default_bundle_mode)
            note_format: Declared note format

        Returns:
            SplitResult; order of `notes` is document order and fixes ordinals
        """
        selected = BundleMode.from_string(mode) if mode is not None else self._settings.default_bundle_mode
        strategy = self._get_strategy(selected)
        return strategy.split(document_text, NoteFormat.from_string(note_format))

    def _get_strategy(self, mode: BundleMode) -> SplitStrategyBase:
        if mode not in self._strategy_cache:
            self._strategy_cache[mode] = STRATEGY_REGISTRY[mode](self._settings)
        return self._strategy_cache[mode]
