"""
Candidate Extractor - Format-Aware Section Recognition

Given one note's text and its declared format, produces an ordered sequence
of extraction candidates plus note-level warnings.

Algorithm:
    1. Run every section rule's heading matcher over the note, in table order.
    2. Sort hits by (offset, longest first, table order) and drop overlaps.
    3. Each accepted heading owns the text up to the next accepted heading.
    4. Text before the first heading is split into paragraphs.
    5. If heuristics are enabled and a mandatory section is missing, the
       paragraphs go through the HeuristicFallback; otherwise they become
       unclassified candidates.
    6. Warn for every mandatory section still without a candidate.

Candidates are returned in document order. Identical input always produces
identical candidates and warnings.

Pipeline Position:
    Bundle Splitter → [Candidate Extractor] → (review) → Note Assembler
                      ^^^^^^^^^^^^^^^^^^^^^
                      You are here
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence

from loguru import logger

from clinote.core.config import ClinoteSettings
from clinote.core.constants import WARNING_MESSAGES
from clinote.core.enums import CandidateOrigin, NoteFormat, WarningStage
from clinote.core.models import ExtractionCandidate, ExtractionResult, NoteWarning, ParseOptions
from clinote.extraction.heuristics import HeuristicFallback, TextSpan
from clinote.extraction.section_rules import SectionRule, get_rules


_PARAGRAPH_BREAK = re.compile(r"\r?\n[ \t\r]*\n")


@dataclass(frozen=True)
class HeadingHit:
    """One accepted heading match."""

    rule: SectionRule
    start: int
    content_start: int


def split_paragraphs(text: str, base_offset: int = 0) -> List[TextSpan]:
    """
    Split text on blank lines into stripped, non-empty paragraph spans.

    Offsets are relative to the note (text starts at base_offset).
    """
    spans: List[TextSpan] = []
    cursor = 0
    breaks = [(m.start(), m.end()) for m in _PARAGRAPH_BREAK.finditer(text)]
    for stop, resume in breaks + [(len(text), len(text))]:
        chunk = text[cursor:stop]
        stripped = chunk.strip()
        if stripped:
            lead = len(chunk) - len(chunk.lstrip())
            start = base_offset + cursor + lead
            spans.append(TextSpan(start, start + len(stripped), stripped))
        cursor = resume
    return spans


class CandidateExtractor:
    """
    Extract section candidates from one note.

    What it does:
        Applies the static rule table of the note's format, then optionally
        the heuristic fallback, and reports missing mandatory sections as
        warnings. It never raises on note content.

    Example:
        >>> extractor = CandidateExtractor()
        >>> result = extractor.extract("Plan: rest and fluids.", NoteFormat.HP)
        >>> [(c.label, c.content) for c in result.candidates]
        [('Plan', 'rest and fluids.')]
        >>> [w.message for w in result.warnings]
        ["missing mandatory section 'Chief Complaint'"]
    """

    def __init__(
        self,
        settings: Optional[ClinoteSettings] = None,
        fallback: Optional[HeuristicFallback] = None,
    ):
        self._fallback = fallback or HeuristicFallback(settings)

    # =========================================================================
    # STAGE 1: PUBLIC API
    # =========================================================================

    def extract(
        self,
        note_text: str,
        note_format: NoteFormat,
        options: Optional[ParseOptions] = None,
    ) -> ExtractionResult:
        """
        Extract ordered candidates and warnings for one note.

        Args:
            note_text: Text of a single note
            note_format: Declared note format
            options: ParseOptions (apply_heuristics defaults to False)

        Returns:
            ExtractionResult with candidates in document order
        """
        options = options or ParseOptions()
        rules = get_rules(note_format)

        # 1.1 Format-rule matches
        hits = self._match_headings(note_text, rules)
        candidates = self._rule_candidates(note_text, hits)
        matched = {c.label for c in candidates}
        missing = [r for r in rules if r.mandatory and r.label not in matched]

        # 1.2 Unlabeled text before the first heading
        preamble_end = hits[0].start if hits else len(note_text)
        spans = split_paragraphs(note_text[:preamble_end])

        warnings: List[NoteWarning] = []
        if spans and missing and options.apply_heuristics:
            anchors = [(h.start, h.rule.index) for h in hits]
            fallback_result = self._fallback.assign(spans, rules, anchors, matched)
            candidates.extend(fallback_result.candidates)
            warnings.extend(fallback_result.warnings)
        else:
            candidates.extend(ExtractionCandidate.unclassified(s.text, s.start, s.end) for s in spans)

        candidates.sort(key=lambda c: (c.start, c.end))

        # 1.3 Mandatory sections still missing after the fallback
        filled = {c.label for c in candidates if not c.is_unclassified}
        for rule in rules:
            if rule.mandatory and rule.label not in filled:
                warnings.append(
                    NoteWarning(
                        WarningStage.EXTRACTION,
                        WARNING_MESSAGES["missing_mandatory"].format(label=rule.label),
                    )
                )

        logger.debug(
            f"Extracted {len(candidates)} candidate(s) | format={NoteFormat.from_string(note_format).value} "
            f"| heuristics={options.apply_heuristics} | warnings={len(warnings)}"
        )
        return ExtractionResult(candidates=candidates, warnings=warnings)

    # =========================================================================
    # STAGE 2: HEADING MATCHING
    # =========================================================================

    @staticmethod
    def _match_headings(note_text: str, rules: Sequence[SectionRule]) -> List[HeadingHit]:
        raw = []
        for rule in rules:
            for m in rule.matcher.finditer(note_text):
                raw.append((m.start(), -(m.end() - m.start()), rule.index, HeadingHit(rule, m.start(), m.end())))
        raw.sort(key=lambda item: item[:3])

        accepted: List[HeadingHit] = []
        for _, _, _, hit in raw:
            if accepted and hit.start < accepted[-1].content_start:
                continue
            accepted.append(hit)
        return accepted

    @staticmethod
    def _rule_candidates(note_text: str, hits: Sequence[HeadingHit]) -> List[ExtractionCandidate]:
        candidates = []
        for i, hit in enumerate(hits):
            end = hits[i + 1].start if i + 1 < len(hits) else len(note_text)
            content = note_text[hit.content_start:end].strip()
            candidates.append(ExtractionCandidate(hit.rule.label, content, CandidateOrigin.FORMAT_RULE, hit.start, end))
        return candidates
