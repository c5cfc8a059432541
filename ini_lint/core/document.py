"""
INI document model.

Folds the flat item stream from the tokenizer into sections and entries.
Nothing is coerced or merged: duplicate sections and keys are kept in
source order, and bare keys keep `value=None`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from ini_lint.core.parser import Key, KeyValue, Section

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ini_lint.core.parser import Item


class Entry(BaseModel, frozen=True):
    """One key line inside a section."""

    key: str
    value: str | None = Field(default=None, description="None for bare keys")
    line_no: int = 0


class SectionBlock(BaseModel):
    """A section header and the entries that follow it."""

    name: str | None = Field(description="None for entries before any header")
    line_no: int = 0
    entries: list[Entry] = Field(default_factory=list)

    def get(self, key: str) -> Entry | None:
        """First entry with this key."""
        return next((e for e in self.entries if e.key == key), None)

    def get_all(self, key: str) -> list[Entry]:
        return [e for e in self.entries if e.key == key]


class IniDocument(BaseModel):
    """Sections in source order."""

    blocks: list[SectionBlock] = Field(default_factory=list)

    @property
    def sections(self) -> list[SectionBlock]:
        """Named sections (the leading anonymous block is excluded)."""
        return [b for b in self.blocks if b.name is not None]

    def section(self, name: str | None) -> SectionBlock | None:
        """First block with this name; None selects the leading block."""
        return next((b for b in self.blocks if b.name == name), None)

    def get(self, section: str | None, key: str) -> str | None:
        """
        Value of the first matching entry.

        Returns None if the section or key is missing, or the key is bare.
        Use get_all() to see duplicates.
        """
        block = self.section(section)
        if block is None:
            return None
        entry = block.get(key)
        return entry.value if entry is not None else None

    def get_all(self, section: str | None, key: str) -> list[Entry]:
        """All matching entries across every block with this section name."""
        return [e for b in self.blocks if b.name == section for e in b.get_all(key)]


def build_document(items: Iterable[Item]) -> IniDocument:
    """
    Build a document from an item stream.

    Entries before the first section header go into a block with name None.
    """
    doc = IniDocument()
    current: SectionBlock | None = None

    for item in items:
        if isinstance(item, Section):
            current = SectionBlock(name=item.name, line_no=item.line_no)
            doc.blocks.append(current)
            continue

        if current is None:
            current = SectionBlock(name=None, line_no=item.line_no)
            doc.blocks.append(current)

        if isinstance(item, KeyValue):
            current.entries.append(Entry(key=item.key, value=item.value, line_no=item.line_no))
        elif isinstance(item, Key):
            current.entries.append(Entry(key=item.name, line_no=item.line_no))

    return doc
