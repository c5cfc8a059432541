"""
CLI context and configuration.

Manages CLI state, exit codes, and shared settings.
"""

from __future__ import annotations

import logging
import os
from enum import IntEnum
from pathlib import Path

from pydantic import BaseModel, Field

from ini_lint.core.rules.models import SEVERITY_ORDER, Severity

MAX_BYTES_ENV = "INI_LINT_MAX_BYTES"

# Default input size limit for CLI usage (can be overridden via flag/env).
DEFAULT_MAX_BYTES = 100 * 1024 * 1024  # 100 MiB


class ExitCode(IntEnum):
    """CLI exit codes following Unix conventions."""

    SUCCESS = 0  # No findings at the fail level
    ERROR = 1  # Findings at or above the fail level
    FATAL = 2  # Input could not be read
    USAGE = 64  # Command line usage error
    CONFIG = 78  # Configuration error


class CliContext(BaseModel):
    """Shared settings for CLI commands."""

    format: str = Field(default="terminal")
    output_file: Path | None = Field(default=None)
    color: bool = Field(default=True)
    quiet: bool = Field(default=False)

    profile: str = Field(default="default")
    fail_on: str = Field(default="error")  # fatal, error, warn, info, hint
    max_bytes: int | None = Field(default=DEFAULT_MAX_BYTES)

    model_config = {"frozen": False}

    def should_fail_on(self, severity: Severity | str) -> bool:
        """Check if severity should trigger failure."""
        if isinstance(severity, str):
            severity = Severity(severity.lower())
        fail_level = SEVERITY_ORDER.get(_parse_severity(self.fail_on), 1)
        return SEVERITY_ORDER[severity] <= fail_level


def _parse_severity(value: str) -> Severity:
    try:
        return Severity(value.lower())
    except ValueError:
        return Severity.ERROR


def resolve_max_bytes(max_bytes: int | None) -> int | None:
    """
    Resolve the input size limit.

    Priority: explicit flag, then INI_LINT_MAX_BYTES, then 100 MiB.
    Zero or negative means unlimited.

    Raises:
        ValueError: If INI_LINT_MAX_BYTES is not an integer
    """
    if max_bytes is not None:
        return None if max_bytes <= 0 else max_bytes

    env_value = os.environ.get(MAX_BYTES_ENV)
    if env_value:
        try:
            parsed = int(env_value)
        except ValueError:
            raise ValueError(f"{MAX_BYTES_ENV} must be an integer") from None
        return None if parsed <= 0 else parsed

    return DEFAULT_MAX_BYTES


def configure_logging(verbose: bool) -> None:
    """Send library logs to stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def get_exit_code(severities: list[Severity], fail_on: str) -> ExitCode:
    """Determine exit code based on finding severities and fail_on setting."""
    if Severity.FATAL in severities:
        return ExitCode.FATAL

    fail_level = SEVERITY_ORDER[_parse_severity(fail_on)]
    if any(SEVERITY_ORDER[s] <= fail_level for s in severities):
        return ExitCode.ERROR

    return ExitCode.SUCCESS
