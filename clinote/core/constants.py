"""
Constants for Clinical Note Structuring

This module defines constant values used throughout the clinote pipeline.
The section vocabulary lives here as plain data; clinote.extraction.section_rules
compiles it into the per-format matcher tables once at import time.

Constant Categories:
    SECTION_VOCABULARY     → Per-format ordered section definitions
    BUNDLE DEFAULTS        → Delimiter pattern and join string
    WARNING MESSAGES       → Message templates for pipeline warnings
    LOGGING                → loguru format string
"""

from typing import Any, Dict, List

from clinote.core.enums import NoteFormat


TOOL_NAME = "clinote"
TOOL_VERSION = "0.1.0"

# Label assigned to candidates the extractor could not place in a section.
UNCLASSIFIED_LABEL = "Unclassified"


# =============================================================================
# STAGE 1: SECTION VOCABULARY
# =============================================================================
# Ordered list of sections per note format. Order matters: it is the canonical
# document order used for tie-breaking and positional heuristics, and the
# first entry is the leading marker for structural bundle splitting.
#
# Each entry:
#   label      → canonical section label used in the output
#   mandatory  → a warning is emitted when the section is missing
#   aliases    → heading spellings accepted before the colon
#   keywords   → secondary signals for the heuristic fallback

SECTION_VOCABULARY: Dict[NoteFormat, List[Dict[str, Any]]] = {
    # -------------------------------------------------------------------------
    # 1.1 SOAP progress note
    # -------------------------------------------------------------------------
    NoteFormat.SOAP: [
        {
            "label": "Subjective",
            "mandatory": True,
            "aliases": ["Subjective"],
            "keywords": ["reports", "complains", "states", "denies", "feels", "symptoms", "c/o"],
        },
        {
            "label": "Objective",
            "mandatory": True,
            "aliases": ["Objective"],
            "keywords": ["vitals", "bp", "blood pressure", "heart rate", "temperature", "afebrile", "exam", "labs"],
        },
        {
            "label": "Assessment",
            "mandatory": True,
            "aliases": ["Assessment", "Impression"],
            "keywords": ["likely", "consistent with", "diagnosis", "impression", "suspect", "differential"],
        },
        {
            "label": "Plan",
            "mandatory": True,
            "aliases": ["Plan", "Recommendations"],
            "keywords": ["plan", "follow up", "follow-up", "continue", "start", "recommend", "return", "prescribe", "refer"],
        },
    ],
    # -------------------------------------------------------------------------
    # 1.2 History and Physical
    # -------------------------------------------------------------------------
    NoteFormat.HP: [
        {
            "label": "Chief Complaint",
            "mandatory": True,
            "aliases": ["Chief Complaint", "CC", "Reason for Visit"],
            "keywords": ["reports", "complains", "complaint", "presents", "presenting", "c/o", "here for", "concern"],
        },
        {
            "label": "History of Present Illness",
            "mandatory": False,
            "aliases": ["History of Present Illness", "HPI"],
            "keywords": ["onset", "duration", "began", "started", "worsening", "days ago", "weeks ago"],
        },
        {
            "label": "Past Medical History",
            "mandatory": False,
            "aliases": ["Past Medical History", "PMH"],
            "keywords": ["history of", "hypertension", "diabetes", "prior", "chronic"],
        },
        {
            "label": "Medications",
            "mandatory": False,
            "aliases": ["Medications", "Current Medications", "Meds"],
            "keywords": ["mg", "daily", "bid", "tid", "prn", "tablet"],
        },
        {
            "label": "Allergies",
            "mandatory": False,
            "aliases": ["Allergies", "Allergy"],
            "keywords": ["nkda", "allergic", "allergy", "rash", "anaphylaxis"],
        },
        {
            "label": "Physical Exam",
            "mandatory": False,
            "aliases": ["Physical Exam", "Physical Examination", "Exam", "PE"],
            "keywords": ["vitals", "bp", "heart rate", "lungs", "auscultation", "afebrile", "tender"],
        },
        {
            "label": "Assessment",
            "mandatory": False,
            "aliases": ["Assessment", "Impression"],
            "keywords": ["likely", "consistent with", "diagnosis", "impression", "suspect"],
        },
        {
            "label": "Plan",
            "mandatory": True,
            "aliases": ["Plan"],
            "keywords": ["plan", "follow up", "follow-up", "continue", "start", "recommend", "return", "prescribe", "refer"],
        },
    ],
    # -------------------------------------------------------------------------
    # 1.3 Discharge summary
    # -------------------------------------------------------------------------
    NoteFormat.DISCHARGE: [
        {
            "label": "Admission Diagnosis",
            "mandatory": False,
            "aliases": ["Admission Diagnosis", "Admission Diagnoses", "Admitting Diagnosis"],
            "keywords": ["admitted", "admission", "presented"],
        },
        {
            "label": "Discharge Diagnosis",
            "mandatory": True,
            "aliases": ["Discharge Diagnosis", "Discharge Diagnoses", "Final Diagnosis"],
            "keywords": ["diagnosis", "diagnosed", "final", "resolved", "secondary"],
        },
        {
            "label": "Hospital Course",
            "mandatory": True,
            "aliases": ["Hospital Course", "Brief Hospital Course"],
            "keywords": ["hospital day", "was treated", "improved", "admitted", "course", "received", "underwent"],
        },
        {
            "label": "Discharge Medications",
            "mandatory": False,
            "aliases": ["Discharge Medications", "Discharge Meds"],
            "keywords": ["mg", "daily", "bid", "tablet", "prn"],
        },
        {
            "label": "Follow-Up",
            "mandatory": False,
            "aliases": ["Follow-Up", "Follow Up", "Followup"],
            "keywords": ["follow up", "appointment", "clinic", "weeks", "call"],
        },
    ],
}


# =============================================================================
# STAGE 2: BUNDLE DEFAULTS
# =============================================================================

# A boundary line is a line whose stripped text fully matches this pattern.
DEFAULT_DELIMITER_PATTERN = r"-{3,}"

# Delimiter line written between notes when a bundle is reassembled.
BUNDLE_JOIN_DELIMITER = "---"

DEFAULT_GLOB = "*.txt"
DEFAULT_REPORT_FILENAME = "batch_report.json"


# =============================================================================
# STAGE 3: HEURISTIC DEFAULTS
# =============================================================================

HEURISTIC_DEFAULTS = {
    "min_score": 2,          # below this a span stays unclassified
    "proximity_chars": 80,   # window at the start of a span for the proximity bonus
    "keyword_weight": 2,
    "proximity_bonus": 1,
    "position_bonus": 1,
}


# =============================================================================
# STAGE 4: WARNING MESSAGES
# =============================================================================

WARNING_MESSAGES = {
    "delimiter_missing": "expected bundle delimiter not found, treating as single note",
    "bundle_empty": "bundle contained no note content",
    "marker_missing": "leading marker '{marker}' not found, treating as single note",
    "missing_mandatory": "missing mandatory section '{label}'",
    "fallback_used": "heuristic fallback used for '{label}'",
    "fallback_demoted": (
        "heuristic claim for '{label}' demoted to unclassified: format rule match takes precedence"
    ),
    "fallback_outscored": (
        "heuristic claim for '{label}' at offset {offset} lost to a higher-scoring span; kept as unclassified"
    ),
    "fallback_low_confidence": (
        "heuristic fallback could not assign text at offset {offset}; kept as unclassified"
    ),
    "section_overwritten": "section '{label}' overwritten by a later candidate",
}


# =============================================================================
# STAGE 5: LOGGING CONFIGURATION
# =============================================================================

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)
