"""
Line-oriented INI tokenizer.

Each non-blank, non-comment line becomes exactly one item:
- `[name]`      -> Section
- `key = value` -> KeyValue (split at the first separator only)
- `key`         -> Key

The tokenizer never fails. Malformed-looking lines (unterminated brackets,
missing separator, empty names) degrade to one of the three item shapes and
are left for callers to judge.

Items are views into the source text: the tokenizer only computes offsets
and never slices or copies the buffer.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from .models import Dialect, Item, Key, KeyValue, Section, Span

if TYPE_CHECKING:
    from collections.abc import Iterator

# Same terminators as str.splitlines(); CRLF counts as one break
_LINE_BREAK = re.compile(r"\r\n|[\n\r\v\f\x1c\x1d\x1e\x85\u2028\u2029]")


def iter_line_spans(text: str) -> Iterator[tuple[int, int, int]]:
    """
    Lazily split text into lines.

    Args:
        text: The full text

    Yields:
        Tuples of (line_no, start, end) with 1-indexed line numbers and
        offsets that exclude the line terminator
    """
    pos = 0
    line_no = 0

    for match in _LINE_BREAK.finditer(text):
        line_no += 1
        yield line_no, pos, match.start()
        pos = match.end()

    # Final line without terminator
    if pos < len(text):
        yield line_no + 1, pos, len(text)


def trim_span(text: str, start: int, end: int) -> Span:
    """Shrink [start, end) past leading and trailing whitespace."""
    while start < end and text[start].isspace():
        start += 1
    while end > start and text[end - 1].isspace():
        end -= 1
    return Span(start, end)


def classify_line(
    text: str,
    start: int,
    end: int,
    line_no: int = 0,
    dialect: Dialect | None = None,
) -> Item | None:
    """
    Classify one line of `text` given by [start, end).

    Returns:
        The item for the line, or None for blank and comment lines
    """
    if dialect is None:
        dialect = Dialect()

    start, end = trim_span(text, start, end)

    if start == end or text.startswith(dialect.comment_prefix, start, end):
        return None

    open_len = len(dialect.section_open)
    close_len = len(dialect.section_close)
    if (
        end - start >= open_len + close_len
        and text.startswith(dialect.section_open, start, end)
        and text.endswith(dialect.section_close, start, end)
    ):
        # Section name is not trimmed again
        return Section(text, Span(start + open_len, end - close_len), line_no)

    sep = text.find(dialect.separator, start, end)
    if sep == -1:
        return Key(text, Span(start, end), line_no)

    return KeyValue(
        text,
        trim_span(text, start, sep),
        trim_span(text, sep + len(dialect.separator), end),
        line_no,
    )


def parse_line(line: str, dialect: Dialect | None = None) -> Item | None:
    """
    Parse a single line.

    Note: The line must NOT contain a line terminator. For full texts, use
    IniParser.
    """
    return classify_line(line, 0, len(line), 1, dialect)


class IniParser:
    """
    Pull-based cursor over the items of an INI text.

    Construction is O(1): no line is looked at until the first item is
    requested. Once the text is exhausted every further request signals
    end-of-input again.

    Not thread-safe: one instance is one consumer's cursor. Independent
    instances over the same text do not interact.
    """

    def __init__(self, source: str, dialect: Dialect | None = None) -> None:
        self.source = source
        self.dialect = dialect or Dialect()
        self._lines = iter_line_spans(source)

    def __iter__(self) -> IniParser:
        return self

    def __next__(self) -> Item:
        item = self.next_item()
        if item is None:
            raise StopIteration
        return item

    def next_item(self) -> Item | None:
        """
        Produce the next item.

        Blank and comment lines are skipped inside this call.

        Returns:
            The next Item, or None at end-of-input
        """
        for line_no, start, end in self._lines:
            item = classify_line(self.source, start, end, line_no, self.dialect)
            if item is not None:
                return item

        return None
