"""
INI Parser Core.

Public API for tokenizing INI text.

Usage:
    from ini_lint.core.parser import parse, parse_file

    for item in parse("[server]\\nport = 8080\\n"):
        print(item)

    result = parse_file("settings.ini")
    for item in result.items:
        print(item.line_no, item.to_dict())

API Functions:
    parse(text) -> IniParser
    parse_text(text, filename) -> ParseResult
    parse_file(path) -> ParseResult
    parse_bytes(data, filename) -> ParseResult
    parse_stream(stream, filename) -> ParseResult
    detect_encoding(data) -> str
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO

from .encoding import decode_with_fallback, detect_encoding
from .errors import Location, ParserError, Severity
from .models import Dialect, Item, ItemKind, Key, KeyValue, ParseResult, Section, Span
from .tokenizer import IniParser, parse_line

logger = logging.getLogger(__name__)


def parse(text: str, dialect: Dialect | None = None) -> IniParser:
    """
    Create a tokenizer over `text`.

    The text is not scanned until items are requested.
    """
    return IniParser(text, dialect)


def parse_text(
    text: str, filename: str = "<text>", *, dialect: Dialect | None = None
) -> ParseResult:
    """Wrap already-decoded text in a ParseResult."""
    return ParseResult(
        file_path=Path(filename),
        encoding="utf-8",
        dialect=dialect or Dialect(),
        text=text,
    )


def parse_file(
    path: Path | str,
    *,
    max_bytes: int | None = None,
    dialect: Dialect | None = None,
) -> ParseResult:
    """
    Read and parse an INI file.

    Args:
        path: Path to the INI file
        max_bytes: Maximum bytes to read (None = unlimited)

    Returns:
        ParseResult with a streaming item iterator

    Raises:
        FileNotFoundError: If file does not exist
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    if max_bytes is not None and max_bytes > 0:
        with path.open("rb") as f:
            data = f.read(max_bytes + 1)
    else:
        data = path.read_bytes()

    return parse_bytes(data, str(path), max_bytes=max_bytes, dialect=dialect)


def parse_bytes(
    data: bytes,
    filename: str = "<bytes>",
    *,
    max_bytes: int | None = None,
    dialect: Dialect | None = None,
) -> ParseResult:
    """
    Parse INI data from bytes.

    Args:
        data: Raw file content
        filename: Optional filename for error messages

    Returns:
        ParseResult with a streaming item iterator
    """
    dialect = dialect or Dialect()

    if max_bytes is not None and max_bytes > 0 and len(data) > max_bytes:
        logger.warning("%s exceeds max_bytes=%d", filename, max_bytes)
        return _create_error_result(
            filename=filename,
            dialect=dialect,
            error=ParserError.fatal(
                code="INI-IO-001",
                title="File too large",
                message=f"Input exceeds maximum size of {max_bytes} bytes",
                location=Location(file=filename),
                context={"max_bytes": max_bytes},
            ),
        )

    encoding = detect_encoding(data)
    text, lossy = decode_with_fallback(data, encoding)
    logger.debug("Decoded %s as %s (%d chars)", filename, encoding, len(text))

    errors: list[ParserError] = []
    if lossy:
        errors.append(
            ParserError.warn(
                code="INI-ENC-001",
                title="Invalid byte sequence",
                message=f"Some bytes are not valid {encoding} and were replaced",
                location=Location(file=filename),
                context={"encoding": encoding},
            )
        )

    return ParseResult(
        file_path=Path(filename),
        encoding=encoding,
        dialect=dialect,
        text=text,
        errors=errors,
    )


def parse_stream(
    stream: BinaryIO,
    filename: str = "<stream>",
    *,
    max_bytes: int | None = None,
    dialect: Dialect | None = None,
) -> ParseResult:
    """Parse INI data from a binary stream."""
    data = stream.read(max_bytes + 1) if max_bytes is not None and max_bytes > 0 else stream.read()

    return parse_bytes(data, filename, max_bytes=max_bytes, dialect=dialect)


def _create_error_result(filename: str, dialect: Dialect, error: ParserError) -> ParseResult:
    """Create a ParseResult for fatal errors."""
    return ParseResult(
        file_path=Path(filename),
        encoding="<unknown>",
        dialect=dialect,
        text="",
        errors=[error],
    )


__all__ = [
    "Dialect",
    "IniParser",
    "Item",
    "ItemKind",
    "Key",
    "KeyValue",
    "Location",
    "ParseResult",
    "ParserError",
    "Section",
    "Severity",
    "Span",
    "decode_with_fallback",
    "detect_encoding",
    "parse",
    "parse_bytes",
    "parse_file",
    "parse_line",
    "parse_stream",
    "parse_text",
]
