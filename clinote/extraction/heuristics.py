"""
Heuristic Fallback - Secondary Section Assignment

Used by the Candidate Extractor when heuristics are enabled and one or more
mandatory sections had no heading match. It scores each unlabeled paragraph
against every mandatory section of the format and assigns the paragraph to
the best one, or keeps it as unclassified.

Scoring (integers, per paragraph span S and mandatory rule L):
    keyword    +2 per distinct keyword of L found in S (word-bounded)
    proximity  +1 if any keyword of L starts within the first N chars of S
    position   +1 if L's canonical index lies strictly between the indices of
               the rule-matched sections immediately before and after S

Decision:
    best label  → highest-scoring mandatory label not yet matched by a
                  format rule; ties go to the earlier label in the format
    score < min → unclassified + warning
    no missing label qualifies, but a rule-matched label would have
    → demoted to unclassified + precedence warning
    several spans claim one label → highest score wins (ties: earlier span),
                                    the others become unclassified

Every heuristic assignment carries a "fallback used" warning. No span is
dropped.
"""

import sys
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Set, Tuple

from loguru import logger

from clinote.core.config import ClinoteSettings
from clinote.core.constants import HEURISTIC_DEFAULTS, WARNING_MESSAGES
from clinote.core.enums import CandidateOrigin, WarningStage
from clinote.core.models import ExtractionCandidate, ExtractionResult, NoteWarning
from clinote.extraction.section_rules import SectionRule


@dataclass(frozen=True)
class TextSpan:
    """A paragraph of unlabeled note text with its offsets in the note."""

    start: int
    end: int
    text: str


@dataclass(frozen=True)
class SpanScore:
    span: TextSpan
    rule: SectionRule
    score: int


class HeuristicFallback:
    """
    Assign unlabeled paragraphs to missing mandatory sections.

    What it does:
        Turns paragraph spans into heuristic or unclassified candidates
        using keyword, proximity and positional signals. Output is fully
        determined by its inputs.

    Example:
        >>> fallback = HeuristicFallback()
        >>> result = fallback.assign(spans, rules, anchors=[(26, 7)], matched_labels={"Plan"})
        >>> [c.label for c in result.candidates]
        ['Chief Complaint']
    """

    def __init__(self, settings: Optional[ClinoteSettings] = None):
        if settings is not None:
            self.min_score = settings.heuristic_min_score
            self.proximity_chars = settings.heuristic_proximity_chars
        else:
            self.min_score = HEURISTIC_DEFAULTS["min_score"]
            self.proximity_chars = HEURISTIC_DEFAULTS["proximity_chars"]

    # =========================================================================
    # STAGE 1: SCORING
    # =========================================================================

    def score(self, span: TextSpan, rule: SectionRule, neighbours: Tuple[int, int]) -> int:
        """
        Score one span against one rule.

        Args:
            span: Paragraph span
            rule: Candidate section rule
            neighbours: (index before, index after) of surrounding rule matches
        """
        total = 0
        near_start = False
        for pattern in rule.keyword_patterns:
            match = pattern.search(span.text)
            if match is None:
                continue
            total += HEURISTIC_DEFAULTS["keyword_weight"]
            if match.start() < self.proximity_chars:
                near_start = True
        if near_start:
            total += HEURISTIC_DEFAULTS["proximity_bonus"]

        before, after = neighbours
        if before < rule.index < after:
            total += HEURISTIC_DEFAULTS["position_bonus"]
        return total

    def best_match(
        self, span: TextSpan, rules: Sequence[SectionRule], neighbours: Tuple[int, int]
    ) -> Optional[SpanScore]:
        """Highest-scoring rule for a span; earlier rule wins ties."""
        best: Optional[SpanScore] = None
        for rule in rules:
            value = self.score(span, rule, neighbours)
            if best is None or value > best.score:
                best = SpanScore(span, rule, value)
        return best

    # =========================================================================
    # STAGE 2: ASSIGNMENT
    # =========================================================================

    def assign(
        self,
        spans: Sequence[TextSpan],
        rules: Sequence[SectionRule],
        anchors: Sequence[Tuple[int, int]],
        matched_labels: Set[str],
    ) -> ExtractionResult:
        """
        Assign spans to mandatory sections.

        Args:
            spans: Unlabeled paragraph spans, in document order
            rules: Ordered rules of the note's format
            anchors: (offset, rule index) of every format-rule match, in document order
            matched_labels: Labels already filled by format rules

        Returns:
            ExtractionResult with one candidate per span and the fallback warnings
        """
        mandatory = [r for r in rules if r.mandatory]
        unmatched = [r for r in mandatory if r.label not in matched_labels]
        outcomes: List[Tuple[TextSpan, Optional[SpanScore], str]] = []
        claims: Dict[str, List[SpanScore]] = {}

        # 2.1 Score every span against the labels still missing
        for span in spans:
            neighbours = self._neighbours(span, anchors)
            best = self.best_match(span, unmatched, neighbours)
            if best is not None and best.score >= self.min_score:
                outcomes.append((span, best, "claim"))
                claims.setdefault(best.rule.label, []).append(best)
                continue

            # No missing label qualifies; report a rule-matched label that would have won
            overall = self.best_match(span, mandatory, neighbours)
            if overall is not None and overall.score >= self.min_score and overall.rule.label in matched_labels:
                outcomes.append((span, overall, "demoted"))
            else:
                outcomes.append((span, best, "low"))

        # 2.2 Resolve competing claims for one label
        winners: Dict[str, TextSpan] = {}
        for label, scored in claims.items():
            top = max(scored, key=lambda s: (s.score, -s.span.start))
            winners[label] = top.span

        # 2.3 Emit candidates and warnings in span order
        candidates: List[ExtractionCandidate] = []
        warnings: List[NoteWarning] = []
        for span, best, kind in outcomes:
            if kind == "claim" and winners[best.rule.label] == span:
                candidates.append(
                    ExtractionCandidate(best.rule.label, span.text, CandidateOrigin.HEURISTIC, span.start, span.end)
                )
                warnings.append(self._warning("fallback_used", label=best.rule.label))
                logger.debug(f"Heuristic assigned '{best.rule.label}' (score {best.score}) at offset {span.start}")
                continue

            candidates.append(ExtractionCandidate.unclassified(span.text, span.start, span.end))
            if kind == "low":
                warnings.append(self._warning("fallback_low_confidence", offset=span.start))
            elif kind == "demoted":
                warnings.append(self._warning("fallback_demoted", label=best.rule.label))
            else:
                warnings.append(self._warning("fallback_outscored", label=best.rule.label, offset=span.start))

        return ExtractionResult(candidates=candidates, warnings=warnings)

    @staticmethod
    def _neighbours(span: TextSpan, anchors: Sequence[Tuple[int, int]]) -> Tuple[int, int]:
        # -1 and maxsize stand in for "no match before/after"
        before, after = -1, sys.maxsize
        for offset, index in anchors:
            if offset < span.start:
                before = index
            elif offset >= span.end:
                after = index
                break
        return before, after

    @staticmethod
    def _warning(key: str, **fields) -> NoteWarning:
        return NoteWarning(WarningStage.EXTRACTION, WARNING_MESSAGES[key].format(**fields))
