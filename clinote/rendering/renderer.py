"""
Renderer - Serializes StructuredNote records

Turns the ordered notes of one invocation into a single string in the
requested output format. The core pipeline makes no assumption about the
encoding; this module is the only place that knows about JSON, CSV and
Markdown layouts.

Formats:
    json      → list of note objects (indent 2, UTF-8 preserved)
    csv/wide  → one row per note, one column per section label
    csv/long  → one row per section and per unclassified span
    markdown  → one "## Note N" block per note
"""

import csv
import io
import json
from typing import Callable, Dict, List, Optional, Sequence

from clinote.core.constants import UNCLASSIFIED_LABEL
from clinote.core.enums import CsvLayout, OutputFormat
from clinote.core.exceptions import RenderError
from clinote.core.models import StructuredNote


WARNING_JOINER = " | "


def _warning_cell(note: StructuredNote) -> str:
    return WARNING_JOINER.join(str(w) for w in note.warnings)


# =============================================================================
# STAGE 1: JSON
# =============================================================================


def render_json(notes: Sequence[StructuredNote]) -> str:
    return json.dumps([n.to_dict() for n in notes], indent=2, ensure_ascii=False) + "\n"


# =============================================================================
# STAGE 2: CSV
# =============================================================================


def _csv_text(header: List[str], rows: List[Dict[str, object]]) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=header, lineterminator="\n")
    writer.writeheader()
    writer.writerows(rows)
    return buffer.getvalue()


_WIDE_FIXED_COLUMNS = ("source_id", "ordinal", "format", "unclassified", "warnings")


def _section_column(label: str) -> str:
    """Column name for a section; labels that clash with a fixed column get a prefix."""
    return f"section:{label}" if label in _WIDE_FIXED_COLUMNS else label


def render_csv_wide(notes: Sequence[StructuredNote]) -> str:
    labels: List[str] = []
    for note in notes:
        for label in note.section_labels:
            if label not in labels:
                labels.append(label)

    columns = [_section_column(label) for label in labels]
    header = ["source_id", "ordinal", "format"] + columns + ["unclassified", "warnings"]
    rows = []
    for note in notes:
        row: Dict[str, object] = {
            "source_id": note.source_id,
            "ordinal": note.ordinal,
            "format": note.note_format.value,
            "unclassified": "\n\n".join(note.unclassified),
            "warnings": _warning_cell(note),
        }
        for label in labels:
            row[_section_column(label)] = note.sections.get(label, "")
        rows.append(row)
    return _csv_text(header, rows)


def render_csv_long(notes: Sequence[StructuredNote]) -> str:
    header = ["source_id", "ordinal", "format", "label", "kind", "content", "warnings"]
    rows = []
    for note in notes:
        base = {
            "source_id": note.source_id,
            "ordinal": note.ordinal,
            "format": note.note_format.value,
            "warnings": _warning_cell(note),
        }
        for label, content in note.sections.items():
            rows.append({**base, "label": label, "kind": "section", "content": content})
        for content in note.unclassified:
            rows.append({**base, "label": UNCLASSIFIED_LABEL, "kind": "unclassified", "content": content})
        if not note.sections and not note.unclassified:
            rows.append({**base, "label": "", "kind": "empty", "content": ""})
    return _csv_text(header, rows)


# =============================================================================
# STAGE 3: MARKDOWN
# =============================================================================


def render_markdown(notes: Sequence[StructuredNote]) -> str:
    blocks = []
    for note in notes:
        lines = [f"## Note {note.ordinal}", "", f"- Source: `{note.source_id}`", f"- Format: {note.note_format.value}", ""]
        for label, content in note.sections.items():
            lines += [f"### {label}", "", content, ""]
        if note.unclassified:
            lines += [f"### {UNCLASSIFIED_LABEL}", ""]
            for content in note.unclassified:
                lines += [content, ""]
        if note.warnings:
            lines += ["### Warnings", ""]
            lines += [f"- {w}" for w in note.warnings]
            lines.append("")
        blocks.append("\n".join(lines))
    return "\n".join(blocks)


# =============================================================================
# STAGE 4: DISPATCH
# =============================================================================


def render_notes(
    notes: Sequence[StructuredNote],
    output_format: OutputFormat,
    csv_layout: Optional[CsvLayout] = None,
) -> str:
    """
    Render notes to a string.

    Args:
        notes: Notes of one invocation, in order
        output_format: json, csv or markdown
        csv_layout: wide (default) or long; ignored for non-CSV formats

    Raises:
        RenderError: Unknown format or serialization failure
    """
    try:
        fmt = OutputFormat.from_string(output_format)
        layout = CsvLayout.from_string(csv_layout) if csv_layout else CsvLayout.WIDE
    except ValueError as e:
        raise RenderError(str(e)) from e

    renderers: Dict[OutputFormat, Callable[[Sequence[StructuredNote]], str]] = {
        OutputFormat.JSON: render_json,
        OutputFormat.CSV: render_csv_long if layout == CsvLayout.LONG else render_csv_wide,
        OutputFormat.MARKDOWN: render_markdown,
    }
    try:
        return renderers[fmt](notes)
    except (TypeError, ValueError, csv.Error) as e:
        raise RenderError(f"Failed to render {fmt.value}: {e}", context={"notes": len(notes)}) from e
