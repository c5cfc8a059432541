"""
Main CLI application.

Entry point for ini-lint command.
"""

from __future__ import annotations

import logging
from pathlib import Path  # noqa: TC003
from typing import TYPE_CHECKING, Annotated

import typer

import ini_lint
from ini_lint.cli.context import (
    CliContext,
    ExitCode,
    configure_logging,
    get_exit_code,
    resolve_max_bytes,
)
from ini_lint.cli.output import OutputFormat, get_output_adapter

if TYPE_CHECKING:
    from ini_lint.core.parser import ParseResult

logger = logging.getLogger(__name__)

MAX_BYTES_HELP = "Maximum input size in bytes (0 = unlimited). Defaults to INI_LINT_MAX_BYTES or 100MiB."

app = typer.Typer(
    name="ini-lint",
    help="Streaming INI tokenizer and linter",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"ini-lint {ini_lint.__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log debug output to stderr"),
    ] = False,
) -> None:
    """Streaming INI tokenizer and linter."""
    configure_logging(verbose)


def _max_bytes_or_exit(max_bytes: int | None) -> int | None:
    try:
        return resolve_max_bytes(max_bytes)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from None


def _parse_or_exit(file: Path, max_bytes: int | None) -> ParseResult:
    from ini_lint.core.parser import parse_file

    try:
        return parse_file(file, max_bytes=max_bytes)
    except OSError as e:
        typer.echo(f"Error reading file: {e}", err=True)
        raise typer.Exit(ExitCode.FATAL) from None


# =============================================================================
# Tokens Command
# =============================================================================


@app.command()
def tokens(
    file: Annotated[Path, typer.Argument(help="INI file to tokenize", exists=True)],
    format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: json (JSON lines), terminal"),
    ] = "json",
    color: Annotated[
        bool,
        typer.Option("--color/--no-color", help="Enable/disable colored output"),
    ] = True,
    max_bytes: Annotated[
        int | None,
        typer.Option("--max-bytes", help=MAX_BYTES_HELP),
    ] = None,
) -> None:
    """Print every section, key and key/value item of an INI file."""
    max_bytes_value = _max_bytes_or_exit(max_bytes)

    try:
        adapter = get_output_adapter(format, color=color)
    except ValueError:
        typer.echo(f"Unknown format: {format}", err=True)
        typer.echo("Available formats: json, terminal", err=True)
        raise typer.Exit(ExitCode.USAGE) from None

    parse_result = _parse_or_exit(file, max_bytes_value)

    for error in parse_result.errors:
        typer.echo(str(error), err=True)
    if parse_result.has_fatal:
        raise typer.Exit(ExitCode.FATAL)

    count = 0
    for item in parse_result.items:
        typer.echo(adapter.render_item(item))
        count += 1

    logger.info("Wrote %d items for %s", count, file)


# =============================================================================
# Check Command
# =============================================================================


@app.command()
def check(
    file: Annotated[Path, typer.Argument(help="INI file to check", exists=True)],
    format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: terminal, json"),
    ] = "terminal",
    profile: Annotated[
        str,
        typer.Option("--profile", "-p", help="Rule profile to use"),
    ] = "default",
    fail_on: Annotated[
        str,
        typer.Option("--fail-on", help="Severity that triggers failure: fatal, error, warn, info, hint"),
    ] = "error",
    output: Annotated[
        Path | None,
        typer.Option("--out", "-o", help="Write output to file"),
    ] = None,
    color: Annotated[
        bool,
        typer.Option("--color/--no-color", help="Enable/disable colored output"),
    ] = True,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Suppress non-error output"),
    ] = False,
    max_bytes: Annotated[
        int | None,
        typer.Option("--max-bytes", help=MAX_BYTES_HELP),
    ] = None,
) -> None:
    """Check an INI file for common mistakes."""
    from ini_lint.core.rules import get_registry
    from ini_lint.core.rules import validate as run_validation

    ctx = CliContext(
        format=format,
        output_file=output,
        color=color,
        quiet=quiet,
        profile=profile,
        fail_on=fail_on,
        max_bytes=_max_bytes_or_exit(max_bytes),
    )

    try:
        output_format = OutputFormat(ctx.format)
    except ValueError:
        typer.echo(f"Unknown format: {ctx.format}", err=True)
        typer.echo("Available formats: terminal, json", err=True)
        raise typer.Exit(ExitCode.USAGE) from None

    registry = get_registry()
    profile_obj = registry.get_profile(ctx.profile)
    if profile_obj is None:
        typer.echo(f"Profile not found: {ctx.profile}", err=True)
        typer.echo("Available profiles:", err=True)
        for p in registry.profiles.values():
            typer.echo(f"  - {p.id}: {p.label}", err=True)
        raise typer.Exit(ExitCode.CONFIG)

    parse_result = _parse_or_exit(file, ctx.max_bytes)
    result = run_validation(parse_result, profile=profile_obj)

    adapter = get_output_adapter(output_format, color=ctx.color)
    rendered = adapter.render_result(result)

    if ctx.output_file:
        ctx.output_file.write_text(rendered, encoding="utf-8")
        if not ctx.quiet:
            typer.echo(f"Output written to {ctx.output_file}")
    elif not ctx.quiet or result.has_errors:
        typer.echo(rendered)

    exit_code = get_exit_code([f.severity for f in result.findings], ctx.fail_on)
    raise typer.Exit(exit_code)


# =============================================================================
# Profiles Command
# =============================================================================


@app.command()
def profiles() -> None:
    """List available rule profiles."""
    from ini_lint.core.rules import get_registry

    registry = get_registry()
    for p in sorted(registry.profiles.values(), key=lambda p: p.id):
        base = f" (base: {p.base})" if p.base else ""
        typer.echo(f"{p.id}: {p.label}{base}")


if __name__ == "__main__":
    app()
