"""
Clinote - Deterministic Clinical Note Structuring

Extracts structured sections from semi-structured clinical note text and
converts them into normalized, serializable records. The same input always
yields the same output; ambiguity surfaces as explicit warnings.

Architecture Overview:
    clinote/
    ├── core/         → Models, enums, constants, settings, exceptions (Layer 0)
    ├── extraction/   → Section rule tables, candidate extractor, heuristic fallback
    ├── bundling/     → Bundle splitter (single / delimiter / structural)
    ├── assembly/     → Note assembler
    ├── review/       → Optional human review hook
    ├── rendering/    → JSON / CSV / Markdown renderer
    ├── samples/      → Deterministic sample generator
    ├── utils/        → File operations
    ├── pipeline.py   → Main orchestrator (Public API)
    └── cli.py        → Command-line interface

Quick Start:
    from clinote import ClinotePipeline, NoteFormat

    pipeline = ClinotePipeline.from_config()
    notes = pipeline.process_text("Plan: rest and fluids.", "inline", NoteFormat.HP)
"""

from clinote.core.constants import TOOL_VERSION

__version__ = TOOL_VERSION

# =============================================================================
# PUBLIC API EXPORTS
# =============================================================================

# Main Entry Point
from clinote.pipeline import ClinotePipeline

# Core Models
from clinote.core.models import (
    NoteWarning,
    ExtractionCandidate,
    ParseOptions,
    StructuredNote,
    FileOutcome,
    BatchReport,
)

# Enums
from clinote.core.enums import (
    NoteFormat,
    BundleMode,
    WarningStage,
    CandidateOrigin,
    OutputFormat,
    CsvLayout,
)

# Configuration
from clinote.core.config import ClinoteSettings

# Exceptions
from clinote.core.exceptions import ClinoteError

__all__ = [
    # Main Entry Point
    "ClinotePipeline",
    # Core Models
    "NoteWarning",
    "ExtractionCandidate",
    "ParseOptions",
    "StructuredNote",
    "FileOutcome",
    "BatchReport",
    # Enums
    "NoteFormat",
    "BundleMode",
    "WarningStage",
    "CandidateOrigin",
    "OutputFormat",
    "CsvLayout",
    # Configuration
    "ClinoteSettings",
    # Exceptions
    "ClinoteError",
]
