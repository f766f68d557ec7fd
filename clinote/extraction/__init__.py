"""
Extraction Layer - Turns one note's text into section candidates.

Submodules:
    section_rules.py        → Static per-format rule tables (label, matcher)
    candidate_extractor.py  → CandidateExtractor (format rules first)
    heuristics.py           → HeuristicFallback (keyword/proximity/position scoring)
"""

from clinote.extraction.section_rules import (
    FORMAT_RULES,
    SectionRule,
    find_rule,
    get_rules,
    leading_rule,
    mandatory_labels,
)
from clinote.extraction.heuristics import HeuristicFallback, TextSpan
from clinote.extraction.candidate_extractor import CandidateExtractor, split_paragraphs

__all__ = [
    "FORMAT_RULES",
    "SectionRule",
    "find_rule",
    "get_rules",
    "leading_rule",
    "mandatory_labels",
    "HeuristicFallback",
    "TextSpan",
    "CandidateExtractor",
    "split_paragraphs",
]
