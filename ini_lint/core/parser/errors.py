"""
Parser error models.

The tokenizer itself never fails. These structured errors cover the input
layer around it (size limits, decoding). All codes follow the INI-XXX-NNN
taxonomy.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class Severity(Enum):
    """Error severity levels."""

    FATAL = "fatal"  # Input could not be read
    ERROR = "error"
    WARN = "warn"  # Input was read with losses
    INFO = "info"


class Location(BaseModel, frozen=True):
    """Error location in file."""

    file: str | None = None
    line_no: int | None = None
    column: int | None = None

    def __str__(self) -> str:
        """Format location for display."""
        parts = []
        if self.file:
            parts.append(self.file)
        if self.line_no is not None:
            parts.append(f"line {self.line_no}")
        if self.column is not None:
            parts.append(f"col {self.column}")
        return ", ".join(parts) if parts else "<unknown>"


class ParserError(BaseModel, frozen=True):
    """
    Structured input error.

    Error domains:
    - INI-IO-*: Reading errors
    - INI-ENC-*: Decoding errors
    """

    code: str = Field(
        pattern=r"^INI-[A-Z]{2,5}-\d{3}$",
        description="Error code, e.g., 'INI-ENC-001'",
    )
    severity: Severity
    title: str = Field(description="Short error title")
    message: str = Field(description="Detailed error message")
    location: Location = Field(
        default_factory=Location,
        description="Where the error occurred",
    )
    context: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional context (max_bytes, encoding, etc.)",
    )

    @classmethod
    def fatal(
        cls,
        code: str,
        title: str,
        message: str,
        *,
        location: Location | None = None,
        context: dict[str, Any] | None = None,
    ) -> ParserError:
        """Create a FATAL severity error."""
        return cls(
            code=code,
            severity=Severity.FATAL,
            title=title,
            message=message,
            location=location or Location(),
            context=context or {},
        )

    @classmethod
    def warn(
        cls,
        code: str,
        title: str,
        message: str,
        *,
        location: Location | None = None,
        context: dict[str, Any] | None = None,
    ) -> ParserError:
        """Create a WARN severity error."""
        return cls(
            code=code,
            severity=Severity.WARN,
            title=title,
            message=message,
            location=location or Location(),
            context=context or {},
        )

    def __str__(self) -> str:
        return f"[{self.code}] {self.severity.value.upper()}: {self.title} - {self.message}"


# =============================================================================
# Error Codes Registry
# =============================================================================

PARSER_ERROR_CODES: dict[str, str] = {
    "INI-IO-001": "Input too large (exceeds maximum)",
    "INI-ENC-001": "Invalid byte sequence for detected encoding",
}


def get_error_description(code: str) -> str | None:
    """Get the description for an error code."""
    return PARSER_ERROR_CODES.get(code)
