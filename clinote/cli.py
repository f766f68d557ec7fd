"""
Clinote CLI - Deterministic Clinical Note Structuring

Command-line front end for the clinote pipeline.

Subcommands:
    parse     → structure one document and write the rendered notes
    batch     → structure every matched file in a directory + batch report
    sample    → write deterministic sample notes and bundles
    validate  → load a config file and print its summary

Exit codes:
    0  success
    1  processing error, or a batch with at least one failed file
    2  invalid configuration
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from loguru import logger

from clinote.core.config import ClinoteSettings
from clinote.core.constants import LOG_FORMAT, TOOL_NAME, TOOL_VERSION
from clinote.core.enums import BundleMode, NoteFormat, OutputFormat
from clinote.core.exceptions import ClinoteError, ConfigurationError
from clinote.pipeline import ClinotePipeline
from clinote.review import ConsoleReviewer
from clinote.samples import generate_samples


# =============================================================================
# STAGE 1: LOGGING
# =============================================================================


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Replace loguru's default sink with the project format on stderr (and a file)."""
    logger.remove()
    logger.add(sys.stderr, level=level, format=LOG_FORMAT)
    if log_file:
        logger.add(log_file, level="DEBUG", format=LOG_FORMAT, encoding="utf-8")


# =============================================================================
# STAGE 2: ARGUMENT PARSER
# =============================================================================


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the command-line argument parser.

    Returns:
        ArgumentParser: Configured argument parser

    Example:
        >>> parser = create_argument_parser()
        >>> args = parser.parse_args(["validate", "--config", "clinote.json"])
    """
    parser = argparse.ArgumentParser(
        prog=TOOL_NAME,
        description="Clinote CLI: deterministic clinical note structuring",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Structure one H&P note as JSON:
    clinote parse --input visit.txt --format hp --out visit.json --out-format json

  Structure a bundle of SOAP notes separated by "---" lines:
    clinote parse --input bundle.txt --format soap --bundle delimiter --out notes.md --out-format markdown

  Structure a directory of discharge summaries as CSV:
    clinote batch --input-dir notes/ --format discharge --out-dir out/ --out-format csv

  Write 5 sample notes and 2 bundles:
    clinote sample --out-dir samples/ --n 5 --bundles 2

Environment:
  Settings can be overridden with CLINOTE_* variables or a .env file,
  e.g. CLINOTE_ENABLE_FALLBACK_HEURISTICS=true
        """,
    )
    parser.add_argument("--version", action="version", version=f"{TOOL_NAME} {TOOL_VERSION}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-file", default=None, help="Also write debug logs to this file")

    subparsers = parser.add_subparsers(dest="command", required=True)

    formats = NoteFormat.get_all_values()
    out_formats = OutputFormat.get_all_values()
    modes = BundleMode.get_all_values()

    # 2.1 parse
    parse_cmd = subparsers.add_parser("parse", help="Structure one document")
    parse_cmd.add_argument("--input", required=True, type=Path, help="Input text file")
    parse_cmd.add_argument("--format", required=True, choices=formats, help="Declared note format")
    parse_cmd.add_argument("--out", required=True, type=Path, help="Output file")
    parse_cmd.add_argument("--out-format", required=True, choices=out_formats, help="Output format")
    parse_cmd.add_argument("--config", type=Path, default=None, help="JSON config file")
    parse_cmd.add_argument("--bundle", choices=modes, default=None, help="Bundle mode (default from config)")
    parse_cmd.add_argument(
        "--heuristics",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Force the heuristic fallback on or off (default from config)",
    )
    parse_cmd.add_argument(
        "--interactive", action="store_true", help="Review candidates before assembly"
    )

    # 2.2 batch
    batch_cmd = subparsers.add_parser("batch", help="Structure every matched file in a directory")
    batch_cmd.add_argument("--input-dir", required=True, type=Path, help="Directory to search")
    batch_cmd.add_argument("--glob", default=None, help="File pattern relative to input dir (default from config)")
    batch_cmd.add_argument("--format", required=True, choices=formats, help="Declared note format")
    batch_cmd.add_argument("--out-dir", required=True, type=Path, help="Output directory")
    batch_cmd.add_argument("--out-format", required=True, choices=out_formats, help="Output format")
    batch_cmd.add_argument("--config", type=Path, default=None, help="JSON config file")
    batch_cmd.add_argument("--bundle", choices=modes, default=None, help="Bundle mode (default from config)")

    # 2.3 sample
    sample_cmd = subparsers.add_parser("sample", help="Write deterministic sample notes")
    sample_cmd.add_argument("--out-dir", required=True, type=Path, help="Output directory")
    sample_cmd.add_argument("--n", required=True, type=int, help="Number of single-note files")
    sample_cmd.add_argument("--bundles", type=int, default=0, help="Number of bundle files")
    sample_cmd.add_argument("--format", choices=formats, default=None, help="Only this note format")
    sample_cmd.add_argument("--seed", type=int, default=42, help="Random seed")

    # 2.4 validate
    validate_cmd = subparsers.add_parser("validate", help="Validate a config file and print a summary")
    validate_cmd.add_argument("--config", required=True, type=Path, help="JSON config file")

    return parser


# =============================================================================
# STAGE 3: COMMAND HANDLERS
# =============================================================================


def run_parse(args: argparse.Namespace, settings: ClinoteSettings) -> int:
    pipeline = ClinotePipeline(settings)
    apply_heuristics = args.heuristics
    reviewer = None
    if args.interactive:
        reviewer = ConsoleReviewer()
        if apply_heuristics is None:
            apply_heuristics = reviewer.confirm_heuristics(default=settings.enable_fallback_heuristics)

    notes = pipeline.parse_file(
        input_path=args.input,
        note_format=NoteFormat.from_string(args.format),
        output_path=args.out,
        output_format=OutputFormat.from_string(args.out_format),
        bundle_mode=BundleMode.from_string(args.bundle) if args.bundle else None,
        apply_heuristics=apply_heuristics,
        reviewer=reviewer,
    )
    warnings = sum(n.warning_count for n in notes)
    print(f"Wrote {len(notes)} note(s) with {warnings} warning(s) to {args.out}")
    return 0


def run_batch(args: argparse.Namespace, settings: ClinoteSettings) -> int:
    pipeline = ClinotePipeline(settings)
    report = pipeline.run_batch(
        input_dir=args.input_dir,
        note_format=NoteFormat.from_string(args.format),
        output_dir=args.out_dir,
        output_format=OutputFormat.from_string(args.out_format),
        pattern=args.glob,
        bundle_mode=BundleMode.from_string(args.bundle) if args.bundle else None,
    )
    report_path = pipeline.write_report(report, args.out_dir)

    summary = report.summary
    print(
        f"Processed {summary['files_processed']} file(s): {summary['files_succeeded']} ok, "
        f"{summary['files_failed']} failed, {summary['notes_produced']} note(s), "
        f"{summary['warnings_total']} warning(s). Report: {report_path}"
    )
    for failure in report.failures:
        print(f"  FAILED {failure.path}: {failure.error}")
    return 1 if summary["files_failed"] else 0


def run_sample(args: argparse.Namespace, settings: ClinoteSettings) -> int:
    note_format = NoteFormat.from_string(args.format) if args.format else None
    try:
        written = generate_samples(args.out_dir, args.n, args.bundles, note_format, args.seed)
    except ValueError as e:
        logger.error(str(e))
        return 1
    print(f"Wrote {len(written)} file(s) to {args.out_dir}")
    return 0


def run_validate(args: argparse.Namespace, settings: ClinoteSettings) -> int:
    print(settings.summary())
    return 0


COMMANDS = {
    "parse": run_parse,
    "batch": run_batch,
    "sample": run_sample,
    "validate": run_validate,
}


# =============================================================================
# STAGE 4: ENTRY POINT
# =============================================================================


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the clinote CLI.

    Step 1: Load .env from the working directory
    Step 2: Parse arguments and configure logging
    Step 3: Load settings (config file if given)
    Step 4: Dispatch to the subcommand handler

    Returns:
        Process exit code
    """
    load_dotenv()
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    configure_logging("DEBUG" if args.verbose else "INFO", args.log_file)

    try:
        settings = ClinoteSettings.load(getattr(args, "config", None))
    except ConfigurationError as e:
        logger.error(str(e))
        return 2

    if not args.verbose and settings.log_level != "INFO":
        configure_logging(settings.log_level, args.log_file)

    try:
        return COMMANDS[args.command](args, settings)
    except ConfigurationError as e:
        logger.error(str(e))
        return 2
    except ClinoteError as e:
        logger.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
