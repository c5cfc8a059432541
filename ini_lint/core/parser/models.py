"""
Parser data models.

Core data models for INI tokenizing.

CRITICAL DESIGN DECISIONS:
- Items never copy the source text: they hold the source buffer plus offsets
- Text is materialized only when a caller reads .name / .key / .value
- Items compare by kind and text, not by buffer identity
- Settings models are frozen (immutable) for safety
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar, NamedTuple

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from collections.abc import Iterator

# =============================================================================
# Enums
# =============================================================================


class ItemKind(Enum):
    """Shape of a parsed item."""

    SECTION = "section"  # [name]
    KEY = "key"  # bare key, no separator
    KEY_VALUE = "key_value"  # key = value


# =============================================================================
# Basic Models
# =============================================================================


class Dialect(BaseModel, frozen=True):
    """INI dialect settings."""

    comment_prefix: str = Field(default="#", min_length=1)
    separator: str = Field(default="=", min_length=1)
    section_open: str = Field(default="[", min_length=1)
    section_close: str = Field(default="]", min_length=1)

    model_config = {"frozen": True}


class Span(NamedTuple):
    """Half-open [start, end) offsets into a source buffer."""

    start: int
    end: int


# =============================================================================
# Items
# =============================================================================


class Item(ABC):
    """
    Base class for parsed items.

    An item is a view into the buffer it was parsed from. The buffer is kept
    alive by the item itself, so a view never outlives its text.
    """

    __slots__ = ("line_no", "source")

    kind: ClassVar[ItemKind]

    def __init__(self, source: str, line_no: int = 0) -> None:
        self.source = source
        self.line_no = line_no

    @property
    @abstractmethod
    def spans(self) -> tuple[Span, ...]:
        """Offsets of every text part, in order."""
        ...

    def texts(self) -> tuple[str, ...]:
        """Materialize the text of every span."""
        return tuple(self.source[s.start : s.end] for s in self.spans)

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """JSON-ready mapping of kind, line number and texts."""
        ...

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Item):
            return NotImplemented
        return self.kind is other.kind and self.texts() == other.texts()

    def __hash__(self) -> int:
        return hash((self.kind, self.texts()))

    def __repr__(self) -> str:
        args = ", ".join(repr(t) for t in self.texts())
        return f"{type(self).__name__}({args})"


class Section(Item):
    """Section header: `[name]`."""

    __slots__ = ("name_span",)

    kind = ItemKind.SECTION

    def __init__(self, source: str, name_span: Span, line_no: int = 0) -> None:
        super().__init__(source, line_no)
        self.name_span = name_span

    @classmethod
    def from_text(cls, name: str) -> Section:
        """Build a section that owns its own buffer (for callers and tests)."""
        return cls(name, Span(0, len(name)))

    @property
    def spans(self) -> tuple[Span, ...]:
        return (self.name_span,)

    @property
    def name(self) -> str:
        return self.source[self.name_span.start : self.name_span.end]

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "line_no": self.line_no, "name": self.name}


class Key(Item):
    """Bare key: a line without separator."""

    __slots__ = ("name_span",)

    kind = ItemKind.KEY

    def __init__(self, source: str, name_span: Span, line_no: int = 0) -> None:
        super().__init__(source, line_no)
        self.name_span = name_span

    @classmethod
    def from_text(cls, name: str) -> Key:
        return cls(name, Span(0, len(name)))

    @property
    def spans(self) -> tuple[Span, ...]:
        return (self.name_span,)

    @property
    def name(self) -> str:
        return self.source[self.name_span.start : self.name_span.end]

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "line_no": self.line_no, "name": self.name}


class KeyValue(Item):
    """Key/value pair split at the first separator."""

    __slots__ = ("key_span", "value_span")

    kind = ItemKind.KEY_VALUE

    def __init__(
        self, source: str, key_span: Span, value_span: Span, line_no: int = 0
    ) -> None:
        super().__init__(source, line_no)
        self.key_span = key_span
        self.value_span = value_span

    @classmethod
    def from_text(cls, key: str, value: str) -> KeyValue:
        source = key + value
        return cls(source, Span(0, len(key)), Span(len(key), len(source)))

    @property
    def spans(self) -> tuple[Span, ...]:
        return (self.key_span, self.value_span)

    @property
    def key(self) -> str:
        return self.source[self.key_span.start : self.key_span.end]

    @property
    def value(self) -> str:
        return self.source[self.value_span.start : self.value_span.end]

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "line_no": self.line_no,
            "key": self.key,
            "value": self.value,
        }


# =============================================================================
# Parse Result
# =============================================================================


class ParseResult(BaseModel):
    """
    Result of reading an INI input.

    The items are provided as a lazy iterator to support streaming.
    Every access to `items` starts a fresh tokenizer over the same text.
    """

    # File metadata
    file_path: Path
    encoding: str
    dialect: Dialect = Field(default_factory=Dialect)

    # Decoded source buffer
    text: str = Field(default="", repr=False)

    # Errors raised while reading/decoding the input
    # Note: ParserError is imported lazily to avoid a circular import
    errors: list[Any] = Field(default_factory=list)

    model_config = {"arbitrary_types_allowed": True}

    @property
    def items(self) -> Iterator[Item]:
        """
        Iterate over parsed items.

        IMPORTANT: This is a streaming iterator. Each item is parsed on-demand.
        """
        from .tokenizer import IniParser

        if self.has_fatal:
            return iter(())
        return IniParser(self.text, self.dialect)

    @property
    def has_fatal(self) -> bool:
        """Check if reading the input failed fatally."""
        from .errors import Severity

        return any(e.severity == Severity.FATAL for e in self.errors)

    def materialize(self) -> list[Item]:
        """
        Materialize all items into memory.

        Items still reference the shared source text, so this is cheap.
        """
        return list(self.items)
