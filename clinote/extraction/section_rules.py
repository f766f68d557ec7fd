"""
Section Rules - Static Per-Format Matcher Tables

Compiles SECTION_VOCABULARY into an immutable table of SectionRule objects per
NoteFormat. Each rule owns a compiled heading matcher and compiled keyword
patterns, so matching never iterates over an unordered collection and never
recompiles a regex per note.

A heading is recognized when a line starts (after optional indentation, a
markdown `#` prefix or `**` bold marker) with one of the section's aliases
followed by a colon:

    Chief Complaint: headache          → inline content
    ## HPI:                            → markdown heading
    **Plan:**                          → bold heading

Pipeline Position:
    [Section Rules] → Bundle Splitter (structural mode)
                    → Candidate Extractor → Heuristic Fallback
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Pattern, Tuple

from clinote.core.constants import SECTION_VOCABULARY
from clinote.core.enums import NoteFormat


def _alias_pattern(alias: str) -> str:
    # Words may be separated by any run of spaces/tabs in the source text.
    return r"[ \t]+".join(re.escape(word) for word in alias.split())


def build_heading_matcher(aliases: List[str]) -> Pattern:
    """
    Compile the heading regex for one section.

    Aliases are tried longest first so "Physical Examination" wins over
    "Physical Exam" at the same position.
    """
    ordered = sorted(aliases, key=lambda a: (-len(a), a))
    alternation = "|".join(_alias_pattern(a) for a in ordered)
    return re.compile(
        r"^[ \t]*(?:#{1,6}[ \t]*)?(?:\*\*)?"
        rf"(?:{alternation})"
        r"[ \t]*(?:\*\*[ \t]*:|:(?:\*\*)?)",
        re.IGNORECASE | re.MULTILINE,
    )


def build_keyword_pattern(keyword: str) -> Pattern:
    """Word-bounded, case-insensitive keyword matcher."""
    return re.compile(rf"(?<!\w){_alias_pattern(keyword)}(?!\w)", re.IGNORECASE)


@dataclass(frozen=True)
class SectionRule:
    """
    One section of a note format.

    Attributes:
        label: Canonical section label
        index: Position in the format's canonical order
        mandatory: Whether a missing section produces a warning
        aliases: Accepted heading spellings
        keywords: Heuristic keywords (plain text)
        matcher: Compiled heading regex
        keyword_patterns: Compiled keyword regexes, same order as keywords
    """

    label: str
    index: int
    mandatory: bool
    aliases: Tuple[str, ...]
    keywords: Tuple[str, ...]
    matcher: Pattern
    keyword_patterns: Tuple[Pattern, ...]


def _compile_format(note_format: NoteFormat) -> Tuple[SectionRule, ...]:
    rules = []
    for index, entry in enumerate(SECTION_VOCABULARY[note_format]):
        aliases = tuple(entry["aliases"])
        keywords = tuple(entry.get("keywords", ()))
        rules.append(
            SectionRule(
                label=entry["label"],
                index=index,
                mandatory=bool(entry["mandatory"]),
                aliases=aliases,
                keywords=keywords,
                matcher=build_heading_matcher(list(aliases)),
                keyword_patterns=tuple(build_keyword_pattern(k) for k in keywords),
            )
        )
    return tuple(rules)


# =============================================================================
# STATIC RULE TABLE
# =============================================================================
# Built once at import. Read-only afterwards.

FORMAT_RULES: Dict[NoteFormat, Tuple[SectionRule, ...]] = {
    note_format: _compile_format(note_format) for note_format in NoteFormat
}


def get_rules(note_format: NoteFormat) -> Tuple[SectionRule, ...]:
    """Ordered section rules for a format."""
    return FORMAT_RULES[NoteFormat.from_string(note_format)]


def mandatory_labels(note_format: NoteFormat) -> List[str]:
    return [rule.label for rule in get_rules(note_format) if rule.mandatory]


def leading_rule(note_format: NoteFormat) -> SectionRule:
    """First mandatory rule; its heading marks the start of a new note in structural mode."""
    return next(rule for rule in get_rules(note_format) if rule.mandatory)


def find_rule(note_format: NoteFormat, label: str) -> Optional[SectionRule]:
    for rule in get_rules(note_format):
        if rule.label == label:
            return rule
    return None
