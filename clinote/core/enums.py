"""
Enumerations for Clinical Note Structuring

This module defines the closed categorical types used throughout the clinote
pipeline. Every value that arrives from the CLI, a config file or an
environment variable is converted into one of these enums at the boundary, so
the rest of the code never compares raw strings.

Enumeration Categories:
    NoteFormat        → Declared input dialect (section schema)
    BundleMode        → Policy for splitting one document into notes
    WarningStage      → Pipeline stage that raised a warning
    CandidateOrigin   → How an extraction candidate was recognized
    OutputFormat      → Serialization format for rendered notes
    CsvLayout         → Row layout for CSV output
    FileStatus        → Outcome of one file in a batch run
"""

from enum import Enum


def _normalize(value: str) -> str:
    return value.strip().lower().replace("_", "-").replace(" ", "-")


class _LookupMixin:
    """Case-insensitive string lookup shared by all clinote enums."""

    @classmethod
    def get_all_values(cls) -> list:
        """Return all enum values as a list."""
        return [member.value for member in cls]

    @classmethod
    def from_string(cls, value: str):
        """
        Convert a string to the enum member with case-insensitive matching.

        Underscores, hyphens and spaces are treated as equivalent, so
        "bundle_split", "Bundle-Split" and "bundle split" all resolve to the
        same member.

        Raises:
            ValueError: If the string doesn't match any member
        """
        if isinstance(value, cls):
            return value
        normalized = _normalize(str(value))
        for member in cls:
            if _normalize(member.value) == normalized or _normalize(member.name) == normalized:
                return member
        raise ValueError(f"Unknown {cls.__name__}: '{value}'. Valid values: {cls.get_all_values()}")


# =============================================================================
# STAGE 1: NOTE FORMAT ENUMERATION
# =============================================================================
# The closed set of note dialects. Each one maps to a static table of section
# rules in clinote.extraction.section_rules.


class NoteFormat(_LookupMixin, str, Enum):
    """
    Declared section schema of an input note.

    What it does:
        Selects which section labels the extractor recognizes, which of them
        are mandatory, and which heading marks the start of a new note in
        structural bundle mode.

    Formats:
        SOAP       → Subjective, Objective, Assessment, Plan
        HP         → History and Physical (Chief Complaint ... Plan)
        DISCHARGE  → Discharge summary (Admission Diagnosis ... Follow-Up)
    """

    SOAP = "soap"
    HP = "hp"
    DISCHARGE = "discharge"


# =============================================================================
# STAGE 2: BUNDLE MODE ENUMERATION
# =============================================================================


class BundleMode(_LookupMixin, str, Enum):
    """
    How one input document is divided into individual notes.

    SINGLE      → whole document is one note, never warns
    DELIMITER   → split on lines matching the configured delimiter pattern
    STRUCTURAL  → split wherever the format's leading section heading recurs
    """

    SINGLE = "single"
    DELIMITER = "delimiter"
    STRUCTURAL = "structural"


# =============================================================================
# STAGE 3: WARNING STAGE ENUMERATION
# =============================================================================


class WarningStage(_LookupMixin, str, Enum):
    """Pipeline stage that produced a warning."""

    BUNDLE_SPLIT = "bundle-split"
    EXTRACTION = "extraction"
    ASSEMBLY = "assembly"


# =============================================================================
# STAGE 4: CANDIDATE ORIGIN ENUMERATION
# =============================================================================


class CandidateOrigin(_LookupMixin, str, Enum):
    """
    How an extraction candidate was recognized.

    FORMAT_RULE   → matched a section heading from the format's rule table
    HEURISTIC     → assigned by the heuristic fallback (lower confidence)
    UNCLASSIFIED  → text that could not be assigned to any section
    """

    FORMAT_RULE = "format-rule"
    HEURISTIC = "heuristic"
    UNCLASSIFIED = "unclassified"


# =============================================================================
# STAGE 5: OUTPUT ENUMERATIONS
# =============================================================================


class OutputFormat(_LookupMixin, str, Enum):
    """Serialization format produced by the renderer."""

    JSON = "json"
    CSV = "csv"
    MARKDOWN = "markdown"

    @property
    def extension(self) -> str:
        """File extension (without dot) for this format."""
        return {"json": "json", "csv": "csv", "markdown": "md"}[self.value]


class CsvLayout(_LookupMixin, str, Enum):
    """
    Row layout for CSV output.

    WIDE  → one row per note, one column per section label
    LONG  → one row per section (and per unclassified span)
    """

    WIDE = "wide"
    LONG = "long"


class FileStatus(_LookupMixin, str, Enum):
    """Outcome of one input file in a batch run."""

    OK = "ok"
    FAILED = "failed"
