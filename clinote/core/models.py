"""
Domain Models for Clinical Note Structuring

This module defines the data structures that flow through the clinote
pipeline. All models are dataclasses with `to_dict()` for JSON serialization.

Model Hierarchy:
    NoteWarning          → (stage, message) pair attached to a note
    ExtractionCandidate  → One recognized (or unclassified) section span
    ParseOptions         → Per-invocation extraction options
    SplitResult          → Bundle Splitter output
    ExtractionResult     → Candidate Extractor output
    StructuredNote       → Final assembled record
    FileOutcome          → Per-file success/failure in a batch
    BatchReport          → Aggregate over one batch run

Usage:
    from clinote.core.models import StructuredNote, NoteWarning
    from clinote.core.enums import NoteFormat, WarningStage

    note = StructuredNote(source_id="visit.txt", ordinal=1, note_format=NoteFormat.HP)
    note.warnings.append(NoteWarning(WarningStage.EXTRACTION, "missing mandatory section 'Plan'"))
"""

import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from clinote.core.constants import TOOL_NAME, TOOL_VERSION, UNCLASSIFIED_LABEL
from clinote.core.enums import CandidateOrigin, FileStatus, NoteFormat, WarningStage
from clinote.core.exceptions import ReportStateError


# =============================================================================
# STAGE 1: WARNING MODEL
# =============================================================================


@dataclass(frozen=True)
class NoteWarning:
    """
    A recoverable problem found while processing one note.

    Warnings never abort processing. They are carried forward from the
    splitter and extractor and attached to the final StructuredNote.

    Attributes:
        stage: Pipeline stage that raised the warning
        message: Human-readable description
    """

    stage: WarningStage
    message: str

    def __str__(self) -> str:
        return f"{self.stage.value}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {"stage": self.stage.value, "message": self.message}


# =============================================================================
# STAGE 2: EXTRACTION MODELS
# =============================================================================


@dataclass(frozen=True)
class ExtractionCandidate:
    """
    One tentative section extracted from a note.

    What it does:
        Pairs a section label with the captured text and an origin tag.
        A sequence of candidates for one note is ordered by `start`, the
        character offset of the span in the note text.

    Attributes:
        label: Section label from the format vocabulary, or UNCLASSIFIED_LABEL
        content: Captured text (heading removed, whitespace stripped)
        origin: FORMAT_RULE, HEURISTIC or UNCLASSIFIED
        start: Offset of the span start in the note text
        end: Offset one past the span end in the note text

    Example:
        >>> ExtractionCandidate("Plan", "rest and fluids.", CandidateOrigin.FORMAT_RULE, 0, 22)
    """

    label: str
    content: str
    origin: CandidateOrigin
    start: int = 0
    end: int = 0

    @property
    def is_unclassified(self) -> bool:
        return self.origin == CandidateOrigin.UNCLASSIFIED

    @classmethod
    def unclassified(cls, content: str, start: int = 0, end: int = 0) -> "ExtractionCandidate":
        """Build an unclassified candidate for text no section could claim."""
        return cls(UNCLASSIFIED_LABEL, content, CandidateOrigin.UNCLASSIFIED, start, end)

    def relabel(self, label: str) -> "ExtractionCandidate":
        """Return a copy under a new label (used by human review)."""
        origin = self.origin
        if label == UNCLASSIFIED_LABEL:
            origin = CandidateOrigin.UNCLASSIFIED
        elif origin == CandidateOrigin.UNCLASSIFIED:
            origin = CandidateOrigin.HEURISTIC
        return ExtractionCandidate(label, self.content, origin, self.start, self.end)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "label": self.label,
            "content": self.content,
            "origin": self.origin.value,
            "start": self.start,
            "end": self.end,
        }


@dataclass(frozen=True)
class ParseOptions:
    """Options for a single extraction call."""

    apply_heuristics: bool = False


@dataclass
class SplitResult:
    """Ordered note texts for one document plus bundle-level warnings."""

    notes: List[str]
    warnings: List[NoteWarning] = field(default_factory=list)

    @property
    def note_count(self) -> int:
        return len(self.notes)


@dataclass
class ExtractionResult:
    """Ordered candidates for one note plus extraction warnings."""

    candidates: List[ExtractionCandidate]
    warnings: List[NoteWarning] = field(default_factory=list)

    @property
    def labels(self) -> List[str]:
        return [c.label for c in self.candidates]


# =============================================================================
# STAGE 3: STRUCTURED NOTE MODEL
# =============================================================================
# The assembled output of the pipeline for one note.


@dataclass
class StructuredNote:
    """
    Normalized record for one clinical note.

    What it does:
        Maps each recognized section label to its content (insertion
        ordered, labels unique), keeps unassignable text in `unclassified`,
        and carries every warning raised upstream for this note.

    Invariants:
        - ordinal is 1-based and unique within one bundle's output
        - section labels are unique (last write wins, with a warning)

    Attributes:
        source_id: File path or logical name of the source document
        ordinal: Position of the note within its source bundle (1-based)
        note_format: Declared note format
        sections: Ordered mapping of section label → content
        unclassified: Text spans the extractor could not place, in document order
        warnings: All warnings collected for this note
    """

    source_id: str
    ordinal: int
    note_format: NoteFormat
    sections: Dict[str, str] = field(default_factory=dict)
    unclassified: List[str] = field(default_factory=list)
    warnings: List[NoteWarning] = field(default_factory=list)

    @property
    def section_labels(self) -> List[str]:
        return list(self.sections.keys())

    @property
    def warning_count(self) -> int:
        return len(self.warnings)

    def has_section(self, label: str) -> bool:
        return label in self.sections

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "source_id": self.source_id,
            "ordinal": self.ordinal,
            "format": self.note_format.value,
            "sections": dict(self.sections),
            "unclassified": list(self.unclassified),
            "warnings": [w.to_dict() for w in self.warnings],
        }


# =============================================================================
# STAGE 4: BATCH MODELS
# =============================================================================
# Per-file result type and the run-level report that collects them.


@dataclass
class FileOutcome:
    """
    Result of processing one input file in a batch.

    Created through `FileOutcome.success()` or `FileOutcome.failure()` so the
    batch loop never passes exceptions across file boundaries.
    """

    path: str
    status: FileStatus
    note_count: int = 0
    warning_count: int = 0
    output_path: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == FileStatus.OK

    @classmethod
    def success(
        cls, path: str, notes: List[StructuredNote], output_path: Optional[str] = None
    ) -> "FileOutcome":
        return cls(
            path=str(path),
            status=FileStatus.OK,
            note_count=len(notes),
            warning_count=sum(n.warning_count for n in notes),
            output_path=str(output_path) if output_path else None,
        )

    @classmethod
    def failure(cls, path: str, message: str) -> "FileOutcome":
        return cls(path=str(path), status=FileStatus.FAILED, error=message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data: Dict[str, Any] = {"path": self.path, "status": self.status.value}
        if self.ok:
            data["notes"] = self.note_count
            data["warnings"] = self.warning_count
            data["output"] = self.output_path
        else:
            data["error"] = self.error
        return data


@dataclass
class BatchReport:
    """
    Aggregate over one batch run.

    Lifecycle:
        created empty at batch start → record() once per file → finalize()
        exactly once → to_dict() / persisted by the report writer.

    Mutation is serialized with a lock, so a concurrent driver can share one
    report between workers.

    Attributes:
        tool: Tool identity
        version: Tool version
        started_at: ISO-8601 UTC timestamp of batch start
        runtime_ms: Total runtime, set by finalize()
        files: Per-file outcomes in processing order
        summary: Summary counts, computed by finalize()
    """

    tool: str = TOOL_NAME
    version: str = TOOL_VERSION
    started_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    runtime_ms: int = 0
    files: List[FileOutcome] = field(default_factory=list)
    summary: Dict[str, int] = field(default_factory=dict)
    finalized: bool = False
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    # -------------------------------------------------------------------------
    # 4.1 Recording
    # -------------------------------------------------------------------------

    def record(self, outcome: FileOutcome) -> None:
        """Append one file outcome."""
        with self._lock:
            if self.finalized:
                raise ReportStateError(
                    "Cannot record outcome on a finalized report", context={"path": outcome.path}
                )
            self.files.append(outcome)

    def record_success(
        self, path: str, notes: List[StructuredNote], output_path: Optional[str] = None
    ) -> None:
        self.record(FileOutcome.success(path, notes, output_path))

    def record_failure(self, path: str, message: str) -> None:
        self.record(FileOutcome.failure(path, message))

    # -------------------------------------------------------------------------
    # 4.2 Finalization
    # -------------------------------------------------------------------------

    def finalize(self, runtime_ms: int) -> None:
        """Compute summary counts and freeze the report."""
        with self._lock:
            if self.finalized:
                raise ReportStateError("BatchReport already finalized")
            succeeded = [f for f in self.files if f.ok]
            self.summary = {
                "files_processed": len(self.files),
                "files_succeeded": len(succeeded),
                "files_failed": len(self.files) - len(succeeded),
                "notes_produced": sum(f.note_count for f in succeeded),
                "warnings_total": sum(f.warning_count for f in succeeded),
            }
            self.runtime_ms = int(runtime_ms)
            self.finalized = True

    @property
    def failures(self) -> List[FileOutcome]:
        return [f for f in self.files if not f.ok]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "tool": self.tool,
            "version": self.version,
            "started_at": self.started_at,
            "runtime_ms": self.runtime_ms,
            "summary": dict(self.summary),
            "files": [f.to_dict() for f in self.files],
        }
