"""
Candidate Reviewers - Human Review Hook

An optional, synchronous step between extraction and assembly. A reviewer
receives the extractor's candidates for one note and returns a possibly
edited subset/ordering. It is injected into the pipeline explicitly; when
absent, candidates pass through unchanged.

Architecture:
    CandidateReviewer (Protocol)
    ├── PassThroughReviewer  → Returns candidates unchanged
    └── ConsoleReviewer      → Interactive keep / drop / relabel prompts

Pipeline Position:
    Candidate Extractor → [Reviewer] → Note Assembler
                          ^^^^^^^^^^
                          You are here

Usage:
    from clinote.review import ConsoleReviewer

    reviewer = ConsoleReviewer()
    notes = pipeline.process_text(text, "visit.txt", NoteFormat.HP, reviewer=reviewer)
"""

from dataclasses import dataclass
from typing import Callable, List, Protocol, runtime_checkable

from loguru import logger

from clinote.core.enums import NoteFormat
from clinote.core.models import ExtractionCandidate


@dataclass(frozen=True)
class ReviewContext:
    """Which note is being reviewed."""

    source_id: str
    ordinal: int
    note_format: NoteFormat


# =============================================================================
# STAGE 1: REVIEWER PROTOCOL
# =============================================================================


@runtime_checkable
class CandidateReviewer(Protocol):
    """
    Protocol for candidate review implementations.

    Implementations:
        - PassThroughReviewer: Non-interactive default
        - ConsoleReviewer: Prompts on a terminal (or injected I/O functions)
    """

    def review(
        self, candidates: List[ExtractionCandidate], context: ReviewContext
    ) -> List[ExtractionCandidate]:
        """
        Return the candidates to assemble, in the order to apply them.

        Args:
            candidates: Extractor output for one note, in document order
            context: Note identity

        Returns:
            Possibly edited subset/ordering of candidates
        """
        ...


# =============================================================================
# STAGE 2: PASS-THROUGH REVIEWER
# =============================================================================


class PassThroughReviewer:
    """Returns candidates unchanged."""

    def review(
        self, candidates: List[ExtractionCandidate], context: ReviewContext
    ) -> List[ExtractionCandidate]:
        return list(candidates)


# =============================================================================
# STAGE 3: CONSOLE REVIEWER
# =============================================================================


class ConsoleReviewer:
    """
    Interactive reviewer for `clinote parse --interactive`.

    What it does:
        Shows each candidate (label, origin, content preview) and asks
        whether to keep it, drop it, or relabel it. An empty answer keeps
        the candidate. Input and output functions are injectable so the
        reviewer can be driven from tests.

    Example:
        >>> answers = iter(["k", "r", "Chief Complaint"])
        >>> reviewer = ConsoleReviewer(input_fn=lambda _: next(answers), output_fn=lambda _: None)
    """

    PREVIEW_CHARS = 120

    def __init__(
        self,
        input_fn: Callable[[str], str] = input,
        output_fn: Callable[[str], None] = print,
    ):
        self._input = input_fn
        self._output = output_fn

    def confirm_heuristics(self, default: bool = False) -> bool:
        """Ask whether to apply the heuristic fallback for this run."""
        hint = "Y/n" if default else "y/N"
        answer = self._input(f"Apply heuristic fallback for missing sections? [{hint}] ").strip().lower()
        if not answer:
            return default
        return answer in ("y", "yes")

    def review(
        self, candidates: List[ExtractionCandidate], context: ReviewContext
    ) -> List[ExtractionCandidate]:
        self._output(
            f"Reviewing note {context.ordinal} of {context.source_id} "
            f"({len(candidates)} candidate(s), format {context.note_format.value})"
        )
        selected: List[ExtractionCandidate] = []
        for position, candidate in enumerate(candidates, start=1):
            preview = candidate.content.replace("\n", " ")
            if len(preview) > self.PREVIEW_CHARS:
                preview = preview[: self.PREVIEW_CHARS] + "..."
            self._output(f"[{position}] {candidate.label} ({candidate.origin.value}): {preview}")

            action = self._ask_action()
            if action == "d":
                logger.info(f"Reviewer dropped '{candidate.label}' from note {context.ordinal}")
                continue
            if action == "r":
                new_label = self._input("New label: ").strip()
                if new_label:
                    logger.info(f"Reviewer relabeled '{candidate.label}' as '{new_label}'")
                    candidate = candidate.relabel(new_label)
            selected.append(candidate)
        return selected

    def _ask_action(self) -> str:
        while True:
            answer = self._input("[k]eep / [d]rop / [r]elabel (default keep): ").strip().lower()
            if not answer or answer in ("k", "keep"):
                return "k"
            if answer in ("d", "drop"):
                return "d"
            if answer in ("r", "relabel"):
                return "r"
            self._output(f"Unrecognized answer '{answer}'")
