"""
INI Rule Engine.

Provides rule-based checks over parsed INI files.

Usage:
    from ini_lint.core.parser import parse_file
    from ini_lint.core.rules import validate

    result = parse_file("settings.ini")
    validation = validate(result)

    for finding in validation.findings:
        print(f"{finding.code}: {finding.message}")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .checks import CheckRegistry, ItemChecker, ScanState
from .models import (
    SEVERITY_ORDER,
    Check,
    Finding,
    Location,
    Profile,
    ProfileOverrides,
    Rule,
    Severity,
    ValidationSummary,
)
from .pipeline import ExecutionPipeline, PipelineResult
from .registry import RuleRegistry, get_registry, reset_registry

if TYPE_CHECKING:
    from ini_lint.core.parser import ParseResult


def validate(
    parse_result: ParseResult,
    profile: Profile | str | None = None,
) -> PipelineResult:
    """
    Check a parsed INI file.

    Args:
        parse_result: Result from parse_file()
        profile: Profile instance, profile ID, or None for all rules

    Returns:
        PipelineResult with findings and summary

    Raises:
        KeyError: If a profile ID is given that is not registered
    """
    registry = get_registry()

    resolved_profile: Profile | None = None
    if isinstance(profile, str):
        resolved_profile = registry.get_profile(profile)
        if resolved_profile is None:
            raise KeyError(f"Profile not found: {profile}")
    elif isinstance(profile, Profile):
        resolved_profile = profile

    pipeline = ExecutionPipeline(registry=registry, profile=resolved_profile)
    return pipeline.run(parse_result)


__all__ = [
    "SEVERITY_ORDER",
    "Check",
    "CheckRegistry",
    "ExecutionPipeline",
    "Finding",
    "ItemChecker",
    "Location",
    "PipelineResult",
    "Profile",
    "ProfileOverrides",
    "Rule",
    "RuleRegistry",
    "ScanState",
    "Severity",
    "ValidationSummary",
    "get_registry",
    "reset_registry",
    "validate",
]
