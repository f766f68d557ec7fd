"""
Domain Exceptions for Clinical Note Structuring

This module defines the custom exceptions raised by the clinote pipeline.
Recoverable problems (missing sections, fallback use, overwrites, absent
bundle delimiters) are NOT exceptions: they travel as NoteWarning records on
the structured note. Exceptions are reserved for failures that stop either a
single file or the whole run.

Exception Hierarchy:
    ClinoteError (base)
    ├── ConfigurationError      → Invalid configuration (fatal)
    ├── FilePatternError        → Invalid batch file-selection pattern (fatal)
    ├── InputReadError          → Input cannot be read (file-level)
    ├── OutputWriteError        → Output cannot be written (file-level / fatal for a directory)
    ├── RenderError             → Renderer failed for one set of notes (file-level)
    └── ReportStateError        → BatchReport lifecycle misuse

Usage:
    from clinote.core.exceptions import InputReadError

    try:
        text = read_text(path)
    except InputReadError as e:
        logger.warning(f"Skipping unreadable file: {e}")
"""

from typing import Optional


# =============================================================================
# STAGE 1: BASE EXCEPTION
# =============================================================================
# All domain exceptions inherit from this base class.


class ClinoteError(Exception):
    """
    Base exception for all clinote errors.

    What it does:
        Provides a common base class for domain-specific exceptions so the
        batch loop can isolate any domain failure with a single
        `except ClinoteError` while letting programming errors surface.

    Attributes:
        message: Human-readable error description
        context: Dictionary of additional context for debugging
    """

    def __init__(self, message: str, context: Optional[dict] = None):
        self.message = message
        self.context = context or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format message with context for display."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} [{context_str}]"
        return self.message


# =============================================================================
# STAGE 2: RUN-LEVEL (FATAL) ERRORS
# =============================================================================
# Raised before any per-file work starts; they abort the whole invocation.


class ConfigurationError(ClinoteError):
    """
    Error in clinote configuration.

    When raised:
        - Config file missing or not valid JSON
        - Config file is not a JSON object
        - A setting fails validation (unknown bundle mode, bad regex, ...)

    Example:
        >>> raise ConfigurationError(
        ...     "Config file not found",
        ...     context={"path": "clinote.json"}
        ... )
    """

    pass


class FilePatternError(ClinoteError):
    """
    Batch file-selection pattern is invalid.

    When raised:
        - Empty pattern
        - Pattern rejected by pathlib (absolute or malformed)
    """

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        super().__init__(f"Invalid file pattern: {reason}", context={"pattern": pattern})


# =============================================================================
# STAGE 3: FILE-LEVEL ERRORS
# =============================================================================
# In batch mode these are recorded against a single file and the run goes on.
# In single-note mode they propagate to the caller.


class InputReadError(ClinoteError):
    """
    Input document could not be read.

    When raised:
        - File does not exist or is a directory
        - Permission denied
        - Content is not valid UTF-8 text
    """

    def __init__(self, path: str, reason: str):
        self.path = str(path)
        super().__init__(f"Cannot read input: {reason}", context={"path": self.path})


class OutputWriteError(ClinoteError):
    """
    Output file or directory could not be written.

    When raised:
        - Output directory cannot be created (fatal in batch mode)
        - Output file path is not writable (file-level in batch mode)
    """

    def __init__(self, path: str, reason: str):
        self.path = str(path)
        super().__init__(f"Cannot write output: {reason}", context={"path": self.path})


class RenderError(ClinoteError):
    """
    Structured notes could not be serialized to the requested format.
    """

    pass


# =============================================================================
# STAGE 4: LIFECYCLE ERRORS
# =============================================================================


class ReportStateError(ClinoteError):
    """
    BatchReport used outside its lifecycle.

    When raised:
        - finalize() called twice
        - outcome recorded after finalize()
    """

    pass
