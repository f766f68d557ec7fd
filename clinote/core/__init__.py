"""
Core Layer - Domain Models, Enums, Constants and Configuration

This layer holds the foundation of the clinote pipeline. Apart from the
settings class (pydantic-settings) it is free of side effects.

Submodules:
    models.py     → Data structures (ExtractionCandidate, StructuredNote, BatchReport)
    enums.py      → Enumerations (NoteFormat, BundleMode, WarningStage, ...)
    constants.py  → Section vocabulary, defaults, warning messages, LOG_FORMAT
    config.py     → ClinoteSettings
    exceptions.py → Domain-specific exceptions

Dependency Rule:
    This layer depends on NOTHING else in the package.
    All other layers may depend on this layer.
"""

from clinote.core.models import (
    NoteWarning,
    ExtractionCandidate,
    ParseOptions,
    SplitResult,
    ExtractionResult,
    StructuredNote,
    FileOutcome,
    BatchReport,
)
from clinote.core.enums import (
    NoteFormat,
    BundleMode,
    WarningStage,
    CandidateOrigin,
    OutputFormat,
    CsvLayout,
    FileStatus,
)
from clinote.core.config import ClinoteSettings
from clinote.core.exceptions import (
    ClinoteError,
    ConfigurationError,
    FilePatternError,
    InputReadError,
    OutputWriteError,
    RenderError,
    ReportStateError,
)

__all__ = [
    # Models
    "NoteWarning",
    "ExtractionCandidate",
    "ParseOptions",
    "SplitResult",
    "ExtractionResult",
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
    "FileStatus",
    # Configuration
    "ClinoteSettings",
    # Exceptions
    "ClinoteError",
    "ConfigurationError",
    "FilePatternError",
    "InputReadError",
    "OutputWriteError",
    "RenderError",
    "ReportStateError",
]
