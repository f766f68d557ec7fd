"""
Split Strategies - Pluggable Bundle Splitting Policies

This module implements the Strategy Pattern for dividing one input document
into an ordered sequence of individual note texts.

Strategy Hierarchy:
    SplitStrategyBase (Abstract)
    ├── SingleNoteStrategy       → Whole document is one note
    ├── DelimiterSplitStrategy   → Split on boundary lines (e.g. "---")
    └── StructuralSplitStrategy  → Split where the format's leading heading recurs

Splitting is permissive: no strategy ever raises on document content. Any
unexpected shape (no delimiter, no marker) yields a single note plus a
bundle-split warning.

Pipeline Position:
    Input → [Bundle Splitter] → Candidate Extractor → Note Assembler → Renderer
            ^^^^^^^^^^^^^^^^^
            You are here
"""

import re
from abc import ABC, abstractmethod
from typing import List, Optional, Pattern

from loguru import logger

from clinote.core.config import ClinoteSettings
from clinote.core.constants import DEFAULT_DELIMITER_PATTERN, WARNING_MESSAGES
from clinote.core.enums import NoteFormat, WarningStage
from clinote.core.models import NoteWarning, SplitResult
from clinote.extraction.section_rules import get_rules, leading_rule


def _bundle_warning(message: str) -> NoteWarning:
    return NoteWarning(WarningStage.BUNDLE_SPLIT, message)


# =============================================================================
# STAGE 1: ABSTRACT BASE STRATEGY
# =============================================================================


class SplitStrategyBase(ABC):
    """
    Abstract base class for bundle split strategies.

    Template Method Pattern:
        Subclasses implement `_do_split()`; `split()` handles the common
        contract (document order, logging).
    """

    def __init__(self, settings: Optional[ClinoteSettings] = None):
        """
        Args:
            settings: Pipeline settings; strategies read what they need from it
        """
        self._settings = settings

    @property
    @abstractmethod
    def strategy_name(self) -> str:
        """Human-readable name of this strategy."""
        ...

    def split(self, document_text: str, note_format: NoteFormat) -> SplitResult:
        """
        Split a document into note texts.

        Args:
            document_text: Raw text of the whole input document
            note_format: Declared format (used by structural splitting)

        Returns:
            SplitResult with note texts in document order and bundle warnings
        """
        result = self._do_split(document_text, note_format)
        logger.debug(
            f"[{self.strategy_name}] {result.note_count} note(s), {len(result.warnings)} warning(s)"
        )
        return result

    @abstractmethod
    def _do_split(self, document_text: str, note_format: NoteFormat) -> SplitResult:
        ...


# =============================================================================
# STAGE 2: SINGLE NOTE STRATEGY
# =============================================================================


class SingleNoteStrategy(SplitStrategyBase):
    """The whole document is one note. Never produces warnings."""

    @property
    def strategy_name(self) -> str:
        return "SingleNote"

    def _do_split(self, document_text: str, note_format: NoteFormat) -> SplitResult:
        return SplitResult(notes=[document_text.strip()])


# =============================================================================
# STAGE 3: DELIMITER STRATEGY
# =============================================================================


class DelimiterSplitStrategy(SplitStrategyBase):
    """
    Split on boundary lines.

    What it does:
        A boundary line is any line whose stripped text fully matches the
        delimiter pattern (default `-{3,}`). Notes are the non-empty chunks
        between boundary lines, stripped, in document order. Empty chunks
        (leading delimiter, two delimiters in a row) are skipped, so
        "---\\nNote A\\n---\\nNote B" yields exactly two notes.

    Edge cases:
        - no boundary line          → one note + "delimiter not found" warning
        - boundaries but no content → one empty note + "no note content" warning
    """

    def __init__(self, settings: Optional[ClinoteSettings] = None):
        super().__init__(settings)
        pattern = settings.bundle_delimiter_pattern if settings else DEFAULT_DELIMITER_PATTERN
        self._delimiter: Pattern = re.compile(pattern)

    @property
    def strategy_name(self) -> str:
        return "DelimiterSplit"

    def _do_split(self, document_text: str, note_format: NoteFormat) -> SplitResult:
        chunks: List[List[str]] = [[]]
        boundaries = 0
        for line in document_text.splitlines():
            if self._delimiter.fullmatch(line.strip()):
                boundaries += 1
                chunks.append([])
            else:
                chunks[-1].append(line)

        if boundaries == 0:
            return SplitResult(
                notes=[document_text.strip()],
                warnings=[_bundle_warning(WARNING_MESSAGES["delimiter_missing"])],
            )

        notes = [text for text in ("\n".join(lines).strip() for lines in chunks) if text]
        if not notes:
            return SplitResult(notes=[""], warnings=[_bundle_warning(WARNING_MESSAGES["bundle_empty"])])
        return SplitResult(notes=notes)


# =============================================================================
# STAGE 4: STRUCTURAL STRATEGY
# =============================================================================


class StructuralSplitStrategy(SplitStrategyBase):
    """
    Split wherever a new note's leading marker recurs.

    What it does:
        The leading marker is the heading of the format's first mandatory
        section (Subjective for SOAP, Chief Complaint for H&P, Discharge
        Diagnosis for discharge summaries), recognized with the same matcher
        the extractor uses. Every marker occurrence after the first starts a
        new note; text before the first marker stays with note 1.

        Optional sections that come before the marker in canonical order
        (Admission Diagnosis) open the note they precede: the cut moves back
        to the earliest such heading between two markers.

    Edge cases:
        - no marker at all → one note + "leading marker not found" warning
    """

    @property
    def strategy_name(self) -> str:
        return "StructuralSplit"

    def _do_split(self, document_text: str, note_format: NoteFormat) -> SplitResult:
        rule = leading_rule(note_format)
        starts = [m.start() for m in rule.matcher.finditer(document_text)]

        if not starts:
            return SplitResult(
                notes=[document_text.strip()],
                warnings=[_bundle_warning(WARNING_MESSAGES["marker_missing"].format(marker=rule.label))],
            )

        openers = sorted(
            m.start()
            for earlier in get_rules(note_format)
            if earlier.index < rule.index
            for m in earlier.matcher.finditer(document_text)
        )
        cuts = [0]
        for previous, current in zip(starts, starts[1:]):
            cuts.append(min((s for s in openers if previous < s < current), default=current))
        cuts.append(len(document_text))

        notes = [document_text[a:b].strip() for a, b in zip(cuts, cuts[1:])]
        return SplitResult(notes=notes)
