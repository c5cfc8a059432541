"""
Output adapters for CLI.

Provides different output formats: terminal and JSON.
"""

from ini_lint.cli.output.base import OutputAdapter, OutputFormat, get_output_adapter
from ini_lint.cli.output.json import JsonOutput
from ini_lint.cli.output.terminal import TerminalOutput

__all__ = [
    "JsonOutput",
    "OutputAdapter",
    "OutputFormat",
    "TerminalOutput",
    "get_output_adapter",
]
