"""
Clinote Pipeline - Main Orchestrator

This is the PUBLIC API entry point of the clinote system. It coordinates the
splitter, extractor, optional reviewer and assembler for one document, and
drives them over every matched file in a batch.

Architecture Diagram:
    ┌──────────────────────────────────────────────────────────────────────┐
    │                          ClinotePipeline                             │
    ├──────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  ┌──────────┐   ┌───────────┐   ┌──────────┐   ┌──────────┐          │
    │  │ Splitter │ → │ Extractor │ → │ Reviewer │ → │Assembler │ → notes  │
    │  └──────────┘   └───────────┘   └──────────┘   └──────────┘          │
    │                  (per note)      (optional)     (per note)           │
    │                                                                      │
    │  run_batch(): the above per file → render → write → FileOutcome      │
    └──────────────────────────────────────────────────────────────────────┘

Error model:
    - Warnings are data on each StructuredNote and never abort anything
    - parse_file() propagates file-level errors; nothing is written unless
      rendering succeeded
    - run_batch() turns file-level errors into FileOutcome failures and
      continues; only run-level problems (missing input directory, bad
      pattern, output directory not creatable) raise

Usage:
    from clinote import ClinotePipeline, NoteFormat, OutputFormat

    pipeline = ClinotePipeline.from_config("clinote.json")
    report = pipeline.run_batch("notes/", NoteFormat.SOAP, "out/", OutputFormat.JSON)
    pipeline.write_report(report, "out/")
"""

import time
from pathlib import Path, PurePath
from typing import Dict, List, Optional, Union

from loguru import logger

from clinote.assembly import NoteAssembler
from clinote.bundling import BundleSplitter
from clinote.core.config import ClinoteSettings
from clinote.core.enums import BundleMode, CsvLayout, NoteFormat, OutputFormat
from clinote.core.exceptions import ClinoteError, FilePatternError, InputReadError, OutputWriteError
from clinote.core.models import BatchReport, FileOutcome, ParseOptions, StructuredNote
from clinote.extraction import CandidateExtractor
from clinote.rendering import render_notes
from clinote.review import CandidateReviewer, ReviewContext
from clinote.utils import ensure_directory, output_name, read_text, save_batch_report, write_text


PathLike = Union[str, Path]


# =============================================================================
# STAGE 1: PIPELINE CLASS
# =============================================================================


class ClinotePipeline:
    """
    Main orchestrator for clinical note structuring.

    What it does:
        Turns raw documents into StructuredNote records and, for batch runs,
        into rendered output files plus a BatchReport.

    How it works:
        STAGE 1: Initialize components from settings (overridable for tests)
        STAGE 2: process_text() → split, extract, review, assemble
        STAGE 3: parse_file() → single document, errors propagate
        STAGE 4: run_batch() → every matched file, failures isolated

    Example:
        >>> pipeline = ClinotePipeline(ClinoteSettings())
        >>> notes = pipeline.process_text("Plan: rest and fluids.", "inline", NoteFormat.HP)
        >>> notes[0].sections
        {'Plan': 'rest and fluids.'}
    """

    def __init__(
        self,
        settings: Optional[ClinoteSettings] = None,
        splitter: Optional[BundleSplitter] = None,
        extractor: Optional[CandidateExtractor] = None,
        assembler: Optional[NoteAssembler] = None,
    ):
        """
        Initialize pipeline with settings and optional component overrides.

        Args:
            settings: Pipeline settings (defaults + environment if omitted)
            splitter: Optional splitter override (for testing)
            extractor: Optional extractor override (for testing)
            assembler: Optional assembler override (for testing)
        """
        self._settings = settings or ClinoteSettings.load()
        self._splitter = splitter or BundleSplitter(self._settings)
        self._extractor = extractor or CandidateExtractor(self._settings)
        self._assembler = assembler or NoteAssembler()

        logger.debug(
            f"ClinotePipeline initialized | bundle={self._settings.default_bundle_mode.value} "
            f"| heuristics={self._settings.enable_fallback_heuristics}"
        )

    @property
    def settings(self) -> ClinoteSettings:
        return self._settings

    # =========================================================================
    # STAGE 2: CORE PROCESSING
    # =========================================================================

    def process_text(
        self,
        text: str,
        source_id: str,
        note_format: NoteFormat,
        bundle_mode: Optional[BundleMode] = None,
        apply_heuristics: Optional[bool] = None,
        reviewer: Optional[CandidateReviewer] = None,
    ) -> List[StructuredNote]:
        """
        Structure every note of one document.

        Args:
            text: Raw document text
            source_id: File path or logical name recorded on each note
            note_format: Declared note format
            bundle_mode: Split policy (defaults to settings)
            apply_heuristics: Heuristic fallback toggle (defaults to settings)
            reviewer: Optional human review step, invoked once per note

        Returns:
            Notes in document order with ordinals 1..N
        """
        note_format = NoteFormat.from_string(note_format)
        if apply_heuristics is None:
            apply_heuristics = self._settings.enable_fallback_heuristics
        options = ParseOptions(apply_heuristics=apply_heuristics)

        split = self._splitter.split(text, bundle_mode, note_format)

        notes: List[StructuredNote] = []
        for ordinal, note_text in enumerate(split.notes, start=1):
            extraction = self._extractor.extract(note_text, note_format, options)
            candidates = extraction.candidates
            if reviewer is not None:
                candidates = reviewer.review(candidates, ReviewContext(str(source_id), ordinal, note_format))
            notes.append(
                self._assembler.assemble(
                    candidates,
                    note_format,
                    source_id,
                    ordinal,
                    split.warnings + extraction.warnings,
                )
            )

        logger.info(
            f"Structured {len(notes)} note(s) from {source_id} | "
            f"warnings={sum(n.warning_count for n in notes)}"
        )
        return notes

    # =========================================================================
    # STAGE 3: SINGLE DOCUMENT
    # =========================================================================

    def parse_file(
        self,
        input_path: PathLike,
        note_format: NoteFormat,
        output_path: PathLike,
        output_format: OutputFormat,
        bundle_mode: Optional[BundleMode] = None,
        apply_heuristics: Optional[bool] = None,
        reviewer: Optional[CandidateReviewer] = None,
        csv_layout: Optional[CsvLayout] = None,
    ) -> List[StructuredNote]:
        """
        Parse one document and write the rendered notes.

        Raises:
            InputReadError: Input cannot be read
            RenderError: Notes cannot be rendered (nothing is written)
            OutputWriteError: Output cannot be written
        """
        text = read_text(input_path)
        notes = self.process_text(text, str(input_path), note_format, bundle_mode, apply_heuristics, reviewer)
        rendered = render_notes(notes, output_format, csv_layout or self._settings.csv_layout)
        write_text(output_path, rendered)
        logger.info(f"Wrote {len(notes)} note(s) to {output_path}")
        return notes

    # =========================================================================
    # STAGE 4: BATCH ORCHESTRATION
    # =========================================================================

    def run_batch(
        self,
        input_dir: PathLike,
        note_format: NoteFormat,
        output_dir: PathLike,
        output_format: OutputFormat,
        pattern: Optional[str] = None,
        bundle_mode: Optional[BundleMode] = None,
    ) -> BatchReport:
        """
        Process every file matched by `pattern` under `input_dir`.

        Run-level checks happen before any file is touched. After that, one
        file's failure is recorded in the report and the loop continues.

        Args:
            input_dir: Directory to search
            note_format: Declared note format for every file
            output_dir: Directory for rendered output (created if missing)
            output_format: json, csv or markdown
            pattern: Glob relative to input_dir (defaults to settings.glob_default)
            bundle_mode: Split policy (defaults to settings)

        Returns:
            Finalized BatchReport

        Raises:
            InputReadError: input_dir does not exist or is not a directory
            FilePatternError: pattern is invalid
            OutputWriteError: output_dir cannot be created
        """
        started = time.perf_counter()
        report = BatchReport()

        # 4.1 Run-level (fatal) checks
        root = Path(input_dir)
        if not root.is_dir():
            raise InputReadError(str(root), "input directory does not exist")
        files = self._select_files(root, pattern or self._settings.glob_default)
        out_root = ensure_directory(output_dir)
        output_format = OutputFormat.from_string(output_format)

        logger.info(f"Batch start | {len(files)} file(s) | format={NoteFormat.from_string(note_format).value}")

        # 4.2 Per-file loop; written maps each output file to the input that produced it
        written: Dict[Path, Path] = {}
        for path in files:
            outcome = self._process_file(path, root, note_format, out_root, output_format, bundle_mode, written)
            report.record(outcome)

        # 4.3 Finalize
        report.finalize(runtime_ms=int((time.perf_counter() - started) * 1000))
        logger.info(
            f"Batch complete | files={report.summary['files_processed']} "
            f"| ok={report.summary['files_succeeded']} | failed={report.summary['files_failed']} "
            f"| notes={report.summary['notes_produced']} | runtime={report.runtime_ms}ms"
        )
        return report

    def write_report(self, report: BatchReport, output_dir: PathLike) -> Path:
        """Persist the report as JSON under settings.report_filename."""
        return save_batch_report(report, output_dir, self._settings.report_filename)

    def _process_file(
        self,
        path: Path,
        root: Path,
        note_format: NoteFormat,
        out_root: Path,
        output_format: OutputFormat,
        bundle_mode: Optional[BundleMode],
        written: Dict[Path, Path],
    ) -> FileOutcome:
        """
        Run one file to completion; domain errors become a failed outcome.

        A file whose output name was already written in this run fails
        instead of replacing the earlier output.
        """
        target = out_root / output_name(path, root, output_format.extension)
        try:
            if target in written:
                raise OutputWriteError(str(target), f"output already written for {written[target]}")
            text = read_text(path)
            notes = self.process_text(text, str(path), note_format, bundle_mode)
            rendered = render_notes(notes, output_format, self._settings.csv_layout)
            write_text(target, rendered)
        except ClinoteError as error:
            logger.warning(f"File failed: {error}")
            return FileOutcome.failure(str(path), str(error))
        written[target] = path
        return FileOutcome.success(str(path), notes, str(target))

    @staticmethod
    def _select_files(root: Path, pattern: str) -> List[Path]:
        """
        Resolve the file-selection pattern to sorted regular files.

        Raises:
            FilePatternError: Blank, absolute, parent-escaping or malformed pattern
        """
        if not pattern or not pattern.strip():
            raise FilePatternError(pattern, "pattern is empty")
        if PurePath(pattern).is_absolute():
            raise FilePatternError(pattern, "pattern must be relative to the input directory")
        if ".." in PurePath(pattern).parts:
            raise FilePatternError(pattern, "pattern must stay inside the input directory")
        try:
            matched = sorted(root.glob(pattern))
        except (ValueError, NotImplementedError) as e:
            raise FilePatternError(pattern, str(e)) from e
        return [p for p in matched if p.is_file()]

    # =========================================================================
    # STAGE 5: FACTORIES
    # =========================================================================

    @classmethod
    def from_config(cls, config_path: Optional[PathLike] = None) -> "ClinotePipeline":
        """
        Create a pipeline from an optional JSON config file plus environment.

        Raises:
            ConfigurationError: If the configuration is invalid
        """
        return cls(ClinoteSettings.load(config_path))
