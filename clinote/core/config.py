"""
Configuration for Clinical Note Structuring

WHAT THIS MODULE DOES:
Provides the single source of truth for every tunable parameter of the clinote
pipeline: default bundle mode, delimiter pattern, heuristic fallback toggle
and scoring thresholds, batch glob, CSV layout and logging level.

HOW IT WORKS:
- Defaults are declared on ClinoteSettings (pydantic-settings BaseSettings)
- Environment variables prefixed with CLINOTE_ override defaults
  (a .env file in the working directory is read too)
- An optional JSON config file passed to ClinoteSettings.load() overrides both
- Validation failures are converted to ConfigurationError, which is fatal:
  it is raised before any file is touched

Usage:
    from clinote.core.config import ClinoteSettings

    settings = ClinoteSettings.load("clinote.json")
    print(settings.summary())
"""

import json
import re
from pathlib import Path
from typing import Any, Dict, Optional, Union

from loguru import logger
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from clinote.core.constants import (
    DEFAULT_DELIMITER_PATTERN,
    DEFAULT_GLOB,
    DEFAULT_REPORT_FILENAME,
    HEURISTIC_DEFAULTS,
)
from clinote.core.enums import BundleMode, CsvLayout
from clinote.core.exceptions import ConfigurationError


_LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


class ClinoteSettings(BaseSettings):
    """
    Centralized configuration for the clinote pipeline.

    Parameters can be overridden via environment variables prefixed with
    CLINOTE_ (e.g. CLINOTE_ENABLE_FALLBACK_HEURISTICS=true) or via a JSON
    config file loaded with `ClinoteSettings.load(path)`.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="CLINOTE_",
        case_sensitive=False,
        extra="ignore",
    )

    # ============================================================================
    # BUNDLE SPLITTING
    # ============================================================================

    default_bundle_mode: BundleMode = Field(
        default=BundleMode.SINGLE,
        description="Bundle mode used when the caller does not choose one",
    )

    bundle_delimiter_pattern: str = Field(
        default=DEFAULT_DELIMITER_PATTERN,
        description="Regex a whole (stripped) line must match to count as a note boundary",
    )

    # ============================================================================
    # EXTRACTION
    # ============================================================================

    enable_fallback_heuristics: bool = Field(
        default=False,
        description="Run the heuristic fallback when mandatory sections are missing",
    )

    heuristic_min_score: int = Field(
        default=HEURISTIC_DEFAULTS["min_score"],
        ge=1,
        description="Minimum heuristic score needed to assign a text span to a section",
    )

    heuristic_proximity_chars: int = Field(
        default=HEURISTIC_DEFAULTS["proximity_chars"],
        ge=0,
        description="Keywords within this many leading characters of a span earn a proximity bonus",
    )

    # ============================================================================
    # BATCH AND OUTPUT
    # ============================================================================

    glob_default: str = Field(
        default=DEFAULT_GLOB,
        description="File-selection pattern used by batch runs when none is given",
    )

    csv_layout: CsvLayout = Field(
        default=CsvLayout.WIDE,
        description="Row layout for CSV output",
    )

    report_filename: str = Field(
        default=DEFAULT_REPORT_FILENAME,
        description="Name of the batch report written into the output directory",
    )

    log_level: str = Field(
        default="INFO",
        description="loguru level for the CLI stderr sink",
    )

    # ============================================================================
    # VALIDATORS
    # ============================================================================

    @field_validator("default_bundle_mode", mode="before")
    @classmethod
    def parse_bundle_mode(cls, v: Any) -> BundleMode:
        return BundleMode.from_string(v)

    @field_validator("csv_layout", mode="before")
    @classmethod
    def parse_csv_layout(cls, v: Any) -> CsvLayout:
        return CsvLayout.from_string(v)

    @field_validator("bundle_delimiter_pattern")
    @classmethod
    def validate_delimiter_pattern(cls, v: str) -> str:
        """The pattern must compile and must not match an empty line."""
        if not v:
            raise ValueError("bundle_delimiter_pattern must not be empty")
        try:
            compiled = re.compile(v)
        except re.error as e:
            raise ValueError(f"bundle_delimiter_pattern is not a valid regex: {e}") from e
        if compiled.fullmatch(""):
            raise ValueError("bundle_delimiter_pattern must not match an empty line")
        return v

    @field_validator("glob_default", "report_filename")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("value must not be blank")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {_LOG_LEVELS}")
        return level

    # ============================================================================
    # LOADING
    # ============================================================================

    @classmethod
    def load(cls, path: Optional[Union[str, Path]] = None, **overrides: Any) -> "ClinoteSettings":
        """
        Build settings from defaults, environment and an optional JSON file.

        Args:
            path: Optional JSON config file; its keys override env values
            **overrides: Explicit values that win over the file

        Raises:
            ConfigurationError: Missing/unreadable file, malformed JSON,
                non-object JSON, or any setting failing validation
        """
        values: Dict[str, Any] = {}
        if path is not None:
            values.update(cls._read_config_file(Path(path)))
        values.update(overrides)

        try:
            settings = cls(**values)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'settings'}: {err['msg']}" for err in e.errors()
            )
            raise ConfigurationError(
                f"Invalid configuration: {problems}",
                context={"path": str(path) if path else "<environment>"},
            ) from e

        logger.debug(f"Configuration loaded: {settings.to_dict()}")
        return settings

    @staticmethod
    def _read_config_file(path: Path) -> Dict[str, Any]:
        if not path.is_file():
            raise ConfigurationError("Config file not found", context={"path": str(path)})
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigurationError(f"Config file unreadable: {e}", context={"path": str(path)}) from e
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Config file is not valid JSON: {e.msg} (line {e.lineno})",
                context={"path": str(path)},
            ) from e
        if not isinstance(data, dict):
            raise ConfigurationError("Config file must contain a JSON object", context={"path": str(path)})
        return data

    # ============================================================================
    # REPORTING
    # ============================================================================

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging (enums as plain values)."""
        return self.model_dump(mode="json")

    def summary(self) -> str:
        """Human-readable multi-line description, printed by `clinote validate`."""
        lines = [
            "clinote configuration",
            f"  bundle mode (default):   {self.default_bundle_mode.value}",
            f"  delimiter pattern:       {self.bundle_delimiter_pattern}",
            f"  fallback heuristics:     {'enabled' if self.enable_fallback_heuristics else 'disabled'}",
            f"  heuristic min score:     {self.heuristic_min_score}",
            f"  proximity window:        {self.heuristic_proximity_chars} chars",
            f"  batch glob (default):    {self.glob_default}",
            f"  csv layout:              {self.csv_layout.value}",
            f"  report filename:         {self.report_filename}",
            f"  log level:               {self.log_level}",
        ]
        return "\n".join(lines)
