"""
Rule Engine data models.

Core models for rules, findings, profiles, and execution.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

# =============================================================================
# Enums
# =============================================================================


class Severity(Enum):
    """Finding severity levels."""

    FATAL = "fatal"  # Input could not be read
    ERROR = "error"  # Almost certainly a mistake
    WARN = "warn"  # Suspicious
    INFO = "info"  # Informational
    HINT = "hint"  # Style


SEVERITY_ORDER: dict[Severity, int] = {
    Severity.FATAL: 0,
    Severity.ERROR: 1,
    Severity.WARN: 2,
    Severity.INFO: 3,
    Severity.HINT: 4,
}


# =============================================================================
# Rule Model
# =============================================================================


class Check(BaseModel, frozen=True):
    """Which checker a rule runs, with its parameters."""

    type: str = Field(description="Checker type: empty_section, duplicate_key, etc.")
    params: dict[str, Any] = Field(default_factory=dict)

    model_config = {"frozen": True}


class Rule(BaseModel, frozen=True):
    """
    Rule definition (from YAML).

    CRITICAL: version is required so findings can be traced to a rule revision.
    """

    id: str = Field(description="Rule ID, e.g., INI-SEC-001")
    version: str = Field(description="Rule version, e.g., 1.0.0")
    title: str = Field(description="Short title")
    severity: Severity = Field(description="Default severity")
    check: Check = Field(description="The checker to run")

    docs_url: str | None = Field(default=None, description="Documentation URL")

    tags: list[str] = Field(default_factory=list, description="Tags for filtering")
    deprecated: bool = Field(default=False)

    model_config = {"frozen": True}


# =============================================================================
# Finding Model
# =============================================================================


class Location(BaseModel, frozen=True):
    """Where a finding occurred."""

    file: str | None = None
    line_no: int | None = None
    column: int | None = None

    model_config = {"frozen": True}

    def __str__(self) -> str:
        parts = []
        if self.file:
            parts.append(self.file)
        if self.line_no is not None:
            parts.append(f"line {self.line_no}")
        if self.column is not None:
            parts.append(f"col {self.column}")
        return ", ".join(parts) if parts else "<unknown>"


class Finding(BaseModel, frozen=True):
    """Result of a rule violation."""

    code: str = Field(description="Rule ID that generated this finding")
    rule_version: str = Field(description="Version of the rule")
    engine_version: str = Field(description="Version of ini-lint")

    severity: Severity
    title: str
    message: str

    location: Location = Field(default_factory=Location)
    context: dict[str, Any] = Field(default_factory=dict)
    related: list[Location] = Field(
        default_factory=list,
        description="Earlier lines involved, e.g. the first occurrence of a duplicate",
    )

    docs_url: str | None = None

    model_config = {"frozen": True}


# =============================================================================
# Profile Model
# =============================================================================


class ProfileOverrides(BaseModel, frozen=True):
    """Overrides for rules in this profile."""

    severity: dict[str, str] = Field(
        default_factory=dict,
        description="Override severity: {'INI-KEY-004': 'warn'}",
    )
    disabled: list[str] = Field(
        default_factory=list,
        description="Disabled rule IDs",
    )

    model_config = {"frozen": True}


class Profile(BaseModel, frozen=True):
    """
    Rule profile configuration.

    Supports inheritance via 'base' field.
    """

    id: str = Field(description="Profile ID, e.g., strict")
    version: str = Field(description="Profile version")
    label: str = Field(description="Human-readable label")
    base: str | None = Field(default=None, description="Parent profile ID for inheritance")

    enable: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Glob patterns for enabled rules",
    )
    disable: list[str] = Field(
        default_factory=list,
        description="Glob patterns for disabled rules",
    )

    overrides: ProfileOverrides = Field(default_factory=ProfileOverrides)

    model_config = {"frozen": True}


# =============================================================================
# Execution Result Models
# =============================================================================


class ValidationSummary(BaseModel):
    """Summary of a lint run."""

    file: str
    encoding: str
    item_count: int

    engine_version: str
    profile_id: str
    profile_version: str

    fatal_count: int = 0
    error_count: int = 0
    warn_count: int = 0
    info_count: int = 0
    hint_count: int = 0

    top_codes: list[tuple[str, int]] = Field(default_factory=list)

    duration_ms: int = 0

    @property
    def total_findings(self) -> int:
        return (
            self.fatal_count
            + self.error_count
            + self.warn_count
            + self.info_count
            + self.hint_count
        )

    @property
    def has_errors(self) -> bool:
        """Check if there are any fatal or error findings."""
        return self.fatal_count > 0 or self.error_count > 0
