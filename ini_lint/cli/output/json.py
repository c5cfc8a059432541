"""
JSON output adapter.

Renders findings as JSON and items as JSON lines for machine processing.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, TextIO

from ini_lint.cli.output.base import OutputAdapter, OutputFormat

if TYPE_CHECKING:
    from ini_lint.core.parser import Item
    from ini_lint.core.rules.models import Finding, ValidationSummary
    from ini_lint.core.rules.pipeline import PipelineResult


class JsonOutput(OutputAdapter):
    """JSON output adapter."""

    format = OutputFormat.JSON

    def __init__(self, stream: TextIO | None = None, color: bool = False, indent: int = 2):
        super().__init__(stream=stream, color=False)  # Never colorize JSON
        self.indent = indent

    def render_findings(
        self,
        findings: list[Finding],
        summary: ValidationSummary | None = None,
    ) -> str:
        """Render findings as JSON."""
        output: dict[str, Any] = {
            "findings": [self._finding_to_dict(f) for f in findings],
        }

        if summary:
            output["summary"] = self._summary_to_dict(summary)

        return json.dumps(output, indent=self.indent, default=str)

    def render_result(self, result: PipelineResult) -> str:
        return self.render_findings(result.findings, result.get_summary())

    def render_item(self, item: Item) -> str:
        """One compact JSON object per item (JSON lines)."""
        return json.dumps(item.to_dict(), ensure_ascii=False)

    def _finding_to_dict(self, finding: Finding) -> dict[str, Any]:
        return {
            "code": finding.code,
            "rule_version": finding.rule_version,
            "engine_version": finding.engine_version,
            "severity": finding.severity.value,
            "title": finding.title,
            "message": finding.message,
            "location": {
                "file": finding.location.file,
                "line_no": finding.location.line_no,
                "column": finding.location.column,
            },
            "related": [{"file": r.file, "line_no": r.line_no} for r in finding.related],
            "context": finding.context,
            "docs_url": finding.docs_url,
        }

    def _summary_to_dict(self, summary: ValidationSummary) -> dict[str, Any]:
        return {
            "file": summary.file,
            "encoding": summary.encoding,
            "item_count": summary.item_count,
            "engine_version": summary.engine_version,
            "profile_id": summary.profile_id,
            "profile_version": summary.profile_version,
            "fatal_count": summary.fatal_count,
            "error_count": summary.error_count,
            "warn_count": summary.warn_count,
            "info_count": summary.info_count,
            "hint_count": summary.hint_count,
            "total_findings": summary.total_findings,
            "has_errors": summary.has_errors,
            "top_codes": [list(pair) for pair in summary.top_codes],
        }
