"""
Terminal output adapter.

Renders findings with ANSI colors when writing to a TTY.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, TextIO

from ini_lint.cli.output.base import OutputAdapter, OutputFormat

if TYPE_CHECKING:
    from ini_lint.core.parser import Item
    from ini_lint.core.rules.models import Finding, ValidationSummary
    from ini_lint.core.rules.pipeline import PipelineResult


def _supports_unicode() -> bool:
    """Check if terminal supports Unicode."""
    try:
        "\u2713".encode(sys.stdout.encoding or "utf-8")
        return True
    except (UnicodeEncodeError, LookupError):
        return False


SEVERITY_COLORS = {
    "fatal": "bold red",
    "error": "red",
    "warn": "yellow",
    "info": "blue",
    "hint": "dim",
}

SEVERITY_SYMBOLS_UNICODE = {
    "fatal": "\u2716",
    "error": "\u2716",
    "warn": "\u26a0",
    "info": "\u2139",
    "hint": "\u2022",
}

SEVERITY_SYMBOLS_ASCII = {
    "fatal": "X",
    "error": "X",
    "warn": "!",
    "info": "i",
    "hint": "*",
}

SUCCESS_SYMBOL_UNICODE = "\u2713"
SUCCESS_SYMBOL_ASCII = "OK"

ANSI_CODES = {
    "bold": "\033[1m",
    "dim": "\033[2m",
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "blue": "\033[34m",
    "cyan": "\033[36m",
    "bold red": "\033[1;31m",
    "white": "\033[37m",
}
ANSI_RESET = "\033[0m"


class TerminalOutput(OutputAdapter):
    """Terminal output with ANSI colors."""

    format = OutputFormat.TERMINAL

    def __init__(self, stream: TextIO | None = None, color: bool = True):
        super().__init__(stream=stream, color=color)
        self._use_color = color and self._is_tty()
        self._use_unicode = _supports_unicode()
        self._severity_symbols = (
            SEVERITY_SYMBOLS_UNICODE if self._use_unicode else SEVERITY_SYMBOLS_ASCII
        )
        self._success_symbol = (
            SUCCESS_SYMBOL_UNICODE if self._use_unicode else SUCCESS_SYMBOL_ASCII
        )

    def _is_tty(self) -> bool:
        return hasattr(self.stream, "isatty") and self.stream.isatty()

    def render_findings(
        self,
        findings: list[Finding],
        summary: ValidationSummary | None = None,
    ) -> str:
        """Render findings to terminal string."""
        if not findings:
            return self._style(f"{self._success_symbol} No issues found.", "green")

        lines: list[str] = []

        # Group by file
        by_file: dict[str, list[Finding]] = {}
        for finding in findings:
            by_file.setdefault(finding.location.file or "<unknown>", []).append(finding)

        for file_path, file_findings in by_file.items():
            lines.append(self._style(f"\n{file_path}", "bold"))

            for finding in sorted(file_findings, key=lambda f: f.location.line_no or 0):
                lines.append(self._format_finding(finding))

        if summary:
            lines.append("")
            lines.append(self._format_summary(summary))

        return "\n".join(lines)

    def render_result(self, result: PipelineResult) -> str:
        return self.render_findings(result.findings, result.get_summary())

    def render_item(self, item: Item) -> str:
        """Render an item as `line: kind text`."""
        data = item.to_dict()
        kind = self._style(f"{data['kind']:<9}", "cyan")
        if "value" in data:
            text = f"{data['key']!r} = {data['value']!r}"
        else:
            text = repr(data["name"])
        return f"{item.line_no:>5}: {kind} {text}"

    def _format_finding(self, finding: Finding) -> str:
        """Format a single finding."""
        severity = finding.severity.value
        color = SEVERITY_COLORS.get(severity, "white")
        symbol = self._severity_symbols.get(severity, "*")

        loc_parts = []
        if finding.location.line_no is not None:
            loc_parts.append(f"L{finding.location.line_no}")
        if finding.location.column is not None:
            loc_parts.append(f"C{finding.location.column}")

        location_str = ":".join(loc_parts)

        styled_symbol = self._style(symbol, color)
        styled_code = self._style(finding.code, "dim")

        if location_str:
            return f"  {styled_symbol} {location_str}: {finding.message} [{styled_code}]"
        return f"  {styled_symbol} {finding.message} [{styled_code}]"

    def _format_summary(self, summary: ValidationSummary) -> str:
        parts = []

        if summary.fatal_count > 0:
            parts.append(self._style(f"{summary.fatal_count} fatal", "bold red"))
        if summary.error_count > 0:
            parts.append(self._style(f"{summary.error_count} error(s)", "red"))
        if summary.warn_count > 0:
            parts.append(self._style(f"{summary.warn_count} warning(s)", "yellow"))
        if summary.info_count > 0:
            parts.append(self._style(f"{summary.info_count} info", "blue"))
        if summary.hint_count > 0:
            parts.append(self._style(f"{summary.hint_count} hint(s)", "dim"))

        if not parts:
            return self._style(f"{self._success_symbol} No issues found.", "green")

        return f"Found: {', '.join(parts)}"

    def _style(self, text: str, style: str) -> str:
        """Apply style to text if colors are enabled."""
        if not self._use_color:
            return text

        code = ANSI_CODES.get(style, "")
        if code:
            return f"{code}{text}{ANSI_RESET}"
        return text
