"""
File Operations Utilities

Reading input documents, writing rendered output and persisting batch
reports. OS-level failures are converted into the domain's file-level
exceptions so the batch loop can record them against the right file.
"""

import json
from pathlib import Path
from typing import Union

from loguru import logger

from clinote.core.exceptions import InputReadError, OutputWriteError
from clinote.core.models import BatchReport


PathLike = Union[str, Path]


def read_text(path: PathLike) -> str:
    """
    Read a UTF-8 text document.

    Raises:
        InputReadError: Missing file, directory, permission problem or invalid UTF-8
    """
    input_path = Path(path)
    try:
        return input_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as error:
        raise InputReadError(str(input_path), f"not valid UTF-8 text ({error.reason})") from error
    except OSError as error:
        raise InputReadError(str(input_path), error.strerror or str(error)) from error


def write_text(path: PathLike, content: str) -> Path:
    """
    Write text to a file, creating parent directories.

    Step 1: Create the parent directory if it doesn't exist
    Step 2: Write the content as UTF-8
    Step 3: Return the path

    Raises:
        OutputWriteError: If the directory or file cannot be written
    """
    output_path = Path(path)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(content, encoding="utf-8")
    except OSError as error:
        raise OutputWriteError(str(output_path), error.strerror or str(error)) from error
    logger.debug(f"Wrote {len(content)} chars to {output_path}")
    return output_path


def ensure_directory(path: PathLike) -> Path:
    """
    Create a directory (and parents) if missing.

    Raises:
        OutputWriteError: If the path cannot be created or is not a directory
    """
    directory = Path(path)
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as error:
        raise OutputWriteError(str(directory), error.strerror or str(error)) from error
    return directory


def output_name(input_path: Path, input_root: Path, extension: str) -> str:
    """
    Flat output file name for an input file.

    The input path relative to the batch root, without suffix, with path
    separators replaced by "__", so files with the same stem in different
    subdirectories get distinct names: "a/visit.txt" → "a__visit.json".
    Inputs that differ only by suffix still share a name; the batch loop
    fails the later file rather than overwrite the earlier output.
    """
    relative = input_path.relative_to(input_root).with_suffix("")
    return "__".join(relative.parts) + f".{extension}"


def save_batch_report(report: BatchReport, output_dir: PathLike, filename: str) -> Path:
    """
    Persist a finalized batch report as JSON in the output directory.

    Raises:
        OutputWriteError: If the report cannot be written
    """
    report_path = Path(output_dir) / filename
    write_text(report_path, json.dumps(report.to_dict(), indent=2, ensure_ascii=False) + "\n")
    logger.info(f"Batch report saved to: {report_path}")
    return report_path
