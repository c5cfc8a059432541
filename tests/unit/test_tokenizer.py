"""Tests for the INI tokenizer."""

from __future__ import annotations

import gc
import sys
import threading

import pytest
from pydantic import ValidationError

from ini_lint.core.parser import (
    Dialect,
    IniParser,
    Item,
    ItemKind,
    Key,
    KeyValue,
    Section,
    parse,
    parse_line,
)
from ini_lint.core.parser.tokenizer import iter_line_spans, trim_span


class TestParseLine:
    """Tests for single-line classification."""

    def test_section(self) -> None:
        """Test section header."""
        assert parse_line("[server]") == Section.from_text("server")

    def test_comment_line(self) -> None:
        """Test indented comment produces no item."""
        assert parse_line("  # comment ") is None

    @pytest.mark.parametrize("line", ["", "   ", "\t", " \t  "])
    def test_blank_line(self, line: str) -> None:
        """Test blank lines produce no item."""
        assert parse_line(line) is None

    def test_bare_key(self) -> None:
        """Test a line without separator."""
        assert parse_line("enabled") == Key.from_text("enabled")

    def test_key_value_first_separator_only(self) -> None:
        """Test only the first '=' splits; both sides trimmed."""
        item = parse_line("  name = value with = sign ")
        assert isinstance(item, KeyValue)
        assert item.key == "name"
        assert item.value == "value with = sign"

    def test_unterminated_section_is_key(self) -> None:
        """Test '[' without ']' falls through to bare key."""
        assert parse_line("[incomplete") == Key.from_text("[incomplete")

    def test_unterminated_section_with_separator(self) -> None:
        """Test '[' without ']' but with '=' becomes a key/value pair."""
        assert parse_line("[a = b") == KeyValue.from_text("[a", "b")

    def test_empty_section(self) -> None:
        """Test '[]' yields an empty section name."""
        assert parse_line("[]") == Section.from_text("")

    def test_section_name_not_retrimmed(self) -> None:
        """Test whitespace inside brackets is kept."""
        item = parse_line("  [ spaced ]  ")
        assert isinstance(item, Section)
        assert item.name == " spaced "

    def test_section_with_trailing_text_is_not_section(self) -> None:
        """Test a line must end with ']' to be a section."""
        assert parse_line("[a] = b") == KeyValue.from_text("[a]", "b")

    def test_hash_inside_value_is_literal(self) -> None:
        """Test comment detection applies only to the line start."""
        assert parse_line("color = #ff0000 # red") == KeyValue.from_text(
            "color", "#ff0000 # red"
        )

    def test_hash_after_key_is_literal(self) -> None:
        """Test '#' not at line start is part of the key."""
        assert parse_line("key#1") == Key.from_text("key#1")

    def test_semicolon_is_not_comment(self) -> None:
        """Test ';' has no special meaning."""
        assert parse_line("; not a comment") == Key.from_text("; not a comment")

    def test_escapes_and_quotes_are_literal(self) -> None:
        """Test backslashes and quotes pass through untouched."""
        assert parse_line('path = "C:\\temp\\n"') == KeyValue.from_text(
            "path", '"C:\\temp\\n"'
        )

    def test_empty_key_and_value(self) -> None:
        """Test '=' alone gives empty key and value."""
        assert parse_line("=") == KeyValue.from_text("", "")

    def test_empty_value(self) -> None:
        """Test 'key =' gives an empty value, not a bare key."""
        item = parse_line("key =")
        assert isinstance(item, KeyValue)
        assert item.value == ""

    def test_unicode_whitespace_is_trimmed(self) -> None:
        """Test non-ASCII whitespace is trimmed like ASCII whitespace."""
        assert parse_line("\u00a0key\u3000=\u2003value\u00a0") == KeyValue.from_text(
            "key", "value"
        )


class TestIniParser:
    """Tests for the streaming IniParser."""

    def test_items_in_source_order(self, sample_ini_text: str) -> None:
        """Test every item shape, in order, with line numbers."""
        items = list(parse(sample_ini_text))

        assert items == [
            Section.from_text("server"),
            KeyValue.from_text("host", "localhost"),
            Key.from_text("enabled"),
            KeyValue.from_text("url", "http://example.com/?a=b"),
        ]
        assert [i.line_no for i in items] == [2, 3, 5, 6]

    def test_item_kinds(self, sample_ini_text: str) -> None:
        """Test item kind tags."""
        kinds = [i.kind for i in parse(sample_ini_text)]
        assert kinds == [ItemKind.SECTION, ItemKind.KEY_VALUE, ItemKind.KEY, ItemKind.KEY_VALUE]

    def test_item_count_excludes_blank_and_comment_lines(self) -> None:
        """Test one item per non-blank, non-comment line."""
        lines = ["[a]", "", "# c", "x=1", "   ", "  #d", "y", "[b]"]
        text = "\n".join(lines)
        skipped = sum(1 for line in lines if not line.strip() or line.strip().startswith("#"))

        assert len(list(parse(text))) == len(lines) - skipped

    def test_empty_text(self) -> None:
        """Test empty input yields nothing."""
        assert list(parse("")) == []

    def test_comments_only(self) -> None:
        """Test skipped lines do not surface as items."""
        parser = parse("# a\n\n  # b\n")
        assert parser.next_item() is None

    def test_exhaustion_is_idempotent(self) -> None:
        """Test end-of-input is signalled again on every call."""
        parser = parse("[a]\nkey = value\n")
        assert len(list(parser)) == 2

        for _ in range(5):
            assert parser.next_item() is None
            with pytest.raises(StopIteration):
                next(parser)

    def test_not_rewindable(self) -> None:
        """Test iterating twice does not restart the cursor."""
        parser = parse("[a]\n[b]\n")
        assert next(parser) == Section.from_text("a")
        assert list(parser) == [Section.from_text("b")]
        assert list(parser) == []

    def test_fresh_instances_are_independent(self) -> None:
        """Test a new parser is not affected by an exhausted one."""
        text = "[a]\nx = 1\n"
        first = parse(text)
        list(first)

        second = parse(text)
        assert len(list(second)) == 2

    def test_interleaved_instances(self) -> None:
        """Test two cursors over the same text advance separately."""
        text = "a\nb\nc\n"
        p1 = parse(text)
        p2 = parse(text)

        assert next(p1).texts() == ("a",)
        assert next(p1).texts() == ("b",)
        assert next(p2).texts() == ("a",)
        assert next(p1).texts() == ("c",)
        assert next(p2).texts() == ("b",)

    def test_construction_is_lazy(self) -> None:
        """Test no line is scanned before the first request."""

        class ExplodingText(str):
            def __getitem__(self, key: object) -> str:
                raise AssertionError("text was read during construction")

        IniParser(ExplodingText("[a]\n"))

    def test_iter_returns_self(self) -> None:
        """Test the parser is its own iterator."""
        parser = parse("a")
        assert iter(parser) is parser

    def test_crlf_line_endings(self) -> None:
        """Test CRLF counts as one terminator and no '\\r' leaks into text."""
        items = list(parse("[a]\r\nkey = value\r\n\r\nbare\r\n"))
        assert items == [
            Section.from_text("a"),
            KeyValue.from_text("key", "value"),
            Key.from_text("bare"),
        ]
        assert [i.line_no for i in items] == [1, 2, 4]

    def test_cr_only_line_endings(self) -> None:
        """Test CR alone terminates a line."""
        assert len(list(parse("[a]\rb = 1\rc"))) == 3

    def test_no_trailing_newline(self) -> None:
        """Test the last line is read without terminator."""
        assert list(parse("[a]\nlast = one")) == [
            Section.from_text("a"),
            KeyValue.from_text("last", "one"),
        ]

    def test_line_numbers_match_splitlines(self) -> None:
        """Test line numbering uses the same terminators as str.splitlines."""
        text = "a\x0bb\x0cc\x1cd\x85e\u2028f\u2029g\r\nh"
        items = list(parse(text))

        assert [i.texts()[0] for i in items] == text.splitlines()
        assert [i.line_no for i in items] == list(range(1, 9))

    def test_keyvalue_round_trip(self) -> None:
        """Test key + '=' + value re-parses to the same pair."""
        for line in ["a=b", " name = value ", "x = 1", "k=", "=v"]:
            item = parse_line(line)
            assert isinstance(item, KeyValue)
            again = parse_line(f"{item.key}={item.value}")
            assert again == item


class TestItemViews:
    """Tests for the borrowed-view item representation."""

    def test_item_references_source_buffer(self) -> None:
        """Test items share the parser's buffer instead of copying it."""
        text = "[server]\nhost = localhost\n"
        section, pair = list(parse(text))

        assert section.source is text
        assert pair.source is text
        assert text[section.name_span.start : section.name_span.end] == "server"
        assert text[pair.key_span.start : pair.key_span.end] == "host"
        assert text[pair.value_span.start : pair.value_span.end] == "localhost"

    def test_spans_point_into_buffer(self) -> None:
        """Test span offsets lie within the source buffer."""
        text = "  [ a ]  \n x = y \n z \n"
        for item in parse(text):
            for span in item.spans:
                assert 0 <= span.start <= span.end <= len(text)

    def test_item_keeps_buffer_alive(self) -> None:
        """Test an item still resolves its text after the caller drops the buffer."""
        text = "".join(["[", "dyn", "amic", "]"])
        refs_before = sys.getrefcount(text)
        item = next(parse(text))

        assert sys.getrefcount(text) > refs_before
        del text
        gc.collect()

        assert item.name == "dynamic"

    def test_items_from_different_buffers_compare_by_text(self) -> None:
        """Test equality ignores which buffer an item views."""
        a = next(parse("[x]"))
        b = next(parse("\n\n   [x]   "))
        assert a == b
        assert hash(a) == hash(b)
        assert a.line_no != b.line_no

    def test_different_kinds_never_equal(self) -> None:
        """Test a key and a section with the same text differ."""
        assert Key.from_text("x") != Section.from_text("x")

    def test_to_dict(self) -> None:
        """Test dict form used for JSON output."""
        section, key, pair = list(parse("[s]\nk\na = b\n"))

        assert section.to_dict() == {"kind": "section", "line_no": 1, "name": "s"}
        assert key.to_dict() == {"kind": "key", "line_no": 2, "name": "k"}
        assert pair.to_dict() == {"kind": "key_value", "line_no": 3, "key": "a", "value": "b"}

    def test_repr(self) -> None:
        """Test repr shows the variant and text."""
        assert repr(KeyValue.from_text("a", "b")) == "KeyValue('a', 'b')"

    def test_base_item_is_abstract(self) -> None:
        """Test only concrete item kinds can be built."""
        with pytest.raises(TypeError):
            Item("[s]", 1)


class TestDialect:
    """Tests for non-default dialects."""

    def test_custom_separator_and_comment(self) -> None:
        """Test a ':' separator and ';' comments."""
        dialect = Dialect(comment_prefix=";", separator=":")
        items = list(parse("; comment\n# not a comment\nkey: value = x\n", dialect))

        assert items == [
            Key.from_text("# not a comment"),
            KeyValue.from_text("key", "value = x"),
        ]

    def test_multi_char_delimiters(self) -> None:
        """Test section delimiters longer than one character."""
        dialect = Dialect(section_open="[[", section_close="]]")
        assert list(parse("[[a]]\n[[]]\n[[x]\n", dialect)) == [
            Section.from_text("a"),
            Section.from_text(""),
            Key.from_text("[[x]"),
        ]

    def test_dialect_is_frozen(self) -> None:
        """Test dialects cannot be mutated."""
        dialect = Dialect()
        with pytest.raises(ValidationError):
            dialect.separator = ":"  # type: ignore[misc]


class TestHelpers:
    """Tests for line splitting and trimming helpers."""

    def test_iter_line_spans(self) -> None:
        """Test spans exclude terminators."""
        text = "ab\r\ncd\n\nef"
        assert [(n, text[s:e]) for n, s, e in iter_line_spans(text)] == [
            (1, "ab"),
            (2, "cd"),
            (3, ""),
            (4, "ef"),
        ]

    def test_iter_line_spans_trailing_newline(self) -> None:
        """Test a trailing terminator does not add an empty line."""
        assert len(list(iter_line_spans("a\nb\n"))) == len("a\nb\n".splitlines())

    def test_trim_span(self) -> None:
        """Test trimming matches str.strip."""
        text = " \t x y \n"
        start, end = trim_span(text, 0, len(text))
        assert text[start:end] == text.strip()

    def test_trim_span_all_whitespace(self) -> None:
        """Test an all-whitespace range collapses to empty."""
        start, end = trim_span("    ", 0, 4)
        assert start == end


class TestConcurrency:
    """Tests for independent instances on several threads."""

    def test_parallel_instances_over_shared_text(self) -> None:
        """Test each thread's parser sees the full item stream."""
        text = "\n".join(f"[s{i}]\nk{i} = v{i}" for i in range(200))
        expected = list(parse(text))
        results: list[list[object]] = []
        lock = threading.Lock()

        def worker() -> None:
            items = list(parse(text))
            with lock:
                results.append(items)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(results) == 4
        assert all(r == expected for r in results)
