"""
Execution Pipeline.

Runs every enabled rule over the item stream in a single pass.
"""

from __future__ import annotations

import logging
import time
from collections import Counter
from typing import TYPE_CHECKING

import ini_lint

from .checks import CheckRegistry, ScanState
from .models import Finding, Location, Profile, Rule, Severity, ValidationSummary
from .registry import RuleRegistry, get_registry

if TYPE_CHECKING:
    from ini_lint.core.parser import Item, ParseResult, ParserError

logger = logging.getLogger(__name__)


class PipelineResult:
    """Result of pipeline execution."""

    def __init__(
        self,
        findings: list[Finding],
        engine_version: str = "",
        profile_version: str = "",
        stats: dict[str, int] | None = None,
        file: str | None = None,
        encoding: str | None = None,
        item_count: int | None = None,
        profile_id: str = "default",
        aborted: bool = False,
    ) -> None:
        self.findings = findings
        self.engine_version = engine_version or ini_lint.__version__
        self.profile_version = profile_version
        self.stats = stats or {}
        self.file = file
        self.encoding = encoding
        self.item_count = item_count
        self.profile_id = profile_id
        self.aborted = aborted

    @property
    def has_fatal(self) -> bool:
        return any(f.severity == Severity.FATAL for f in self.findings)

    @property
    def has_errors(self) -> bool:
        """Check if any error or fatal findings."""
        return any(f.severity in (Severity.FATAL, Severity.ERROR) for f in self.findings)

    def get_summary(self) -> ValidationSummary:
        """Create a validation summary."""
        severity_counts = Counter(f.severity for f in self.findings)
        code_counts = Counter(f.code for f in self.findings)

        return ValidationSummary(
            file=self.file or "<unknown>",
            encoding=self.encoding or "<unknown>",
            item_count=self.item_count or 0,
            engine_version=self.engine_version,
            profile_id=self.profile_id,
            profile_version=self.profile_version,
            fatal_count=severity_counts.get(Severity.FATAL, 0),
            error_count=severity_counts.get(Severity.ERROR, 0),
            warn_count=severity_counts.get(Severity.WARN, 0),
            info_count=severity_counts.get(Severity.INFO, 0),
            hint_count=severity_counts.get(Severity.HINT, 0),
            top_codes=code_counts.most_common(10),
            duration_ms=self.stats.get("duration_ms", 0),
        )


class ExecutionPipeline:
    """
    Runs rules over a parsed INI file.

    CRITICAL: Aborts before checking items if reading the input failed fatally.
    """

    def __init__(
        self,
        registry: RuleRegistry | None = None,
        profile: Profile | None = None,
    ) -> None:
        self.registry = registry or get_registry()
        self.profile = profile

    def _select_rules(self) -> list[Rule]:
        if self.profile:
            return self.registry.get_rules_for_profile(self.profile)
        return [r for r in self.registry.rules.values() if not r.deprecated]

    def run(self, parse_result: ParseResult) -> PipelineResult:
        """Run all rules, collecting findings."""
        start_time = time.perf_counter()

        filename = str(parse_result.file_path)
        rules = self._select_rules()
        stats: dict[str, int] = {"rules_run": len(rules), "items_checked": 0}

        # Input errors come first
        findings = [self._parser_error_to_finding(e, filename) for e in parse_result.errors]

        if parse_result.has_fatal:
            stats["duration_ms"] = int((time.perf_counter() - start_time) * 1000)
            logger.info("Aborting %s: input could not be read", filename)
            return self._result(findings, stats, parse_result, item_count=0, aborted=True)

        state = ScanState()
        item_count = 0
        for item in parse_result.items:
            item_count += 1
            for rule in rules:
                finding = self._run_rule(rule, item, state, filename)
                if finding is not None:
                    findings.append(finding)
            state.advance(item)

        stats["items_checked"] = item_count
        stats["duration_ms"] = int((time.perf_counter() - start_time) * 1000)
        logger.debug(
            "Checked %d items in %s with %d rules: %d findings",
            item_count,
            filename,
            len(rules),
            len(findings),
        )

        return self._result(findings, stats, parse_result, item_count=item_count)

    def _result(
        self,
        findings: list[Finding],
        stats: dict[str, int],
        parse_result: ParseResult,
        *,
        item_count: int,
        aborted: bool = False,
    ) -> PipelineResult:
        return PipelineResult(
            findings=findings,
            profile_version=self.profile.version if self.profile else "1.0.0",
            stats=stats,
            file=str(parse_result.file_path),
            encoding=parse_result.encoding,
            item_count=item_count,
            profile_id=self.profile.id if self.profile else "default",
            aborted=aborted,
        )

    def _run_rule(
        self,
        rule: Rule,
        item: Item,
        state: ScanState,
        filename: str,
    ) -> Finding | None:
        """Run a single rule against one item."""
        context = CheckRegistry.check(item, state, rule.check)
        if context is None:
            return None

        related: list[Location] = []
        first_line = context.get("first_line")
        if first_line is not None:
            related.append(Location(file=filename, line_no=first_line))

        return Finding(
            code=rule.id,
            rule_version=rule.version,
            engine_version=ini_lint.__version__,
            severity=rule.severity,
            title=rule.title,
            message=CheckRegistry.get_message(rule.check, context),
            location=Location(file=filename, line_no=item.line_no),
            context=context,
            related=related,
            docs_url=rule.docs_url,
        )

    def _parser_error_to_finding(self, error: ParserError, filename: str) -> Finding:
        """Convert a ParserError to a Finding."""
        return Finding(
            code=error.code,
            rule_version="1.0.0",
            engine_version=ini_lint.__version__,
            severity=Severity(error.severity.value),
            title=error.title,
            message=error.message,
            location=Location(
                file=error.location.file or filename,
                line_no=error.location.line_no,
                column=error.location.column,
            ),
            context=error.context,
        )
