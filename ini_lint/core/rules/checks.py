"""
Checker implementations for rule validation.

Each check type has a corresponding checker. Checkers look at one item at a
time; the pipeline feeds them a ScanState describing everything seen before
that item.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ini_lint.core.parser import Item, Key, KeyValue, Section

if TYPE_CHECKING:
    from .models import Check


@dataclass
class ScanState:
    """What the pipeline has seen so far in one file."""

    current_section: str | None = None
    in_section: bool = False
    # section name -> line of first header
    sections: dict[str, int] = field(default_factory=dict)
    # (section, key) -> line of first occurrence
    keys: dict[tuple[str | None, str], int] = field(default_factory=dict)

    def advance(self, item: Item) -> None:
        """Record `item` after all checks for it have run."""
        if isinstance(item, Section):
            self.current_section = item.name
            self.in_section = True
            self.sections.setdefault(item.name, item.line_no)
            return

        key = _entry_key(item)
        if key is not None:
            self.keys.setdefault((self.current_section, key), item.line_no)


def _entry_key(item: Item) -> str | None:
    if isinstance(item, KeyValue):
        return item.key
    if isinstance(item, Key):
        return item.name
    return None


class ItemChecker(ABC):
    """Base class for item checkers."""

    @abstractmethod
    def check(self, item: Item, state: ScanState, check: Check) -> dict[str, Any] | None:
        """
        Check one item.

        Args:
            item: The item to check
            state: Everything seen before this item
            check: The rule's check definition (type and params)

        Returns:
            None if valid, otherwise a context dict describing the violation.
            A "first_line" entry marks an earlier related line.
        """
        ...

    @abstractmethod
    def get_message(self, context: dict[str, Any]) -> str:
        """Get message for a violation."""
        ...


class EmptySectionNameCheck(ItemChecker):
    """`[]` or `[   ]` headers."""

    def check(self, item: Item, state: ScanState, check: Check) -> dict[str, Any] | None:
        if isinstance(item, Section) and not item.name.strip():
            return {"raw_value": item.name}
        return None

    def get_message(self, context: dict[str, Any]) -> str:
        return "Section header has an empty name"


class DuplicateSectionCheck(ItemChecker):
    """A section header that already appeared earlier."""

    def check(self, item: Item, state: ScanState, check: Check) -> dict[str, Any] | None:
        if isinstance(item, Section) and item.name in state.sections:
            return {"section": item.name, "first_line": state.sections[item.name]}
        return None

    def get_message(self, context: dict[str, Any]) -> str:
        return (
            f"Section '{context['section']}' is already defined on line {context['first_line']}"
        )


class UnterminatedSectionCheck(ItemChecker):
    """A `[`-prefixed line that did not parse as a section header."""

    def check(self, item: Item, state: ScanState, check: Check) -> dict[str, Any] | None:
        opener = check.params.get("open", "[")
        text = _entry_key(item)
        if text is not None and text.startswith(opener):
            return {"raw_value": text, "open": opener}
        return None

    def get_message(self, context: dict[str, Any]) -> str:
        return (
            f"'{context['raw_value']}' starts with '{context['open']}' "
            "but the line is not a section header"
        )


class DuplicateKeyCheck(ItemChecker):
    """A key repeated within the same section."""

    def check(self, item: Item, state: ScanState, check: Check) -> dict[str, Any] | None:
        key = _entry_key(item)
        if key is None:
            return None
        first_line = state.keys.get((state.current_section, key))
        if first_line is None:
            return None
        return {"key": key, "section": state.current_section, "first_line": first_line}

    def get_message(self, context: dict[str, Any]) -> str:
        where = f"section '{context['section']}'" if context["section"] is not None else "global scope"
        return (
            f"Key '{context['key']}' in {where} is already defined on line {context['first_line']}"
        )


class EmptyKeyCheck(ItemChecker):
    """`= value` lines."""

    def check(self, item: Item, state: ScanState, check: Check) -> dict[str, Any] | None:
        if isinstance(item, KeyValue) and not item.key:
            return {"value": item.value}
        return None

    def get_message(self, context: dict[str, Any]) -> str:
        return f"Value '{context['value']}' has no key"


class OrphanEntryCheck(ItemChecker):
    """An entry before the first section header."""

    def check(self, item: Item, state: ScanState, check: Check) -> dict[str, Any] | None:
        key = _entry_key(item)
        if key is not None and not state.in_section:
            return {"key": key}
        return None

    def get_message(self, context: dict[str, Any]) -> str:
        return f"Key '{context['key']}' appears before any section header"


class BareKeyCheck(ItemChecker):
    """A key line without separator."""

    def check(self, item: Item, state: ScanState, check: Check) -> dict[str, Any] | None:
        if not isinstance(item, Key):
            return None
        # Unterminated headers are reported by their own rule
        if item.name.startswith(check.params.get("ignore_prefix", "[")):
            return None
        return {"key": item.name}

    def get_message(self, context: dict[str, Any]) -> str:
        return f"Key '{context['key']}' has no value"


# =============================================================================
# Checker Registry
# =============================================================================


class CheckRegistry:
    """Registry of available item checkers."""

    _checkers: dict[str, ItemChecker] = {}

    @classmethod
    def register(cls, check_type: str, checker: ItemChecker) -> None:
        cls._checkers[check_type] = checker

    @classmethod
    def get(cls, check_type: str) -> ItemChecker | None:
        return cls._checkers.get(check_type)

    @classmethod
    def check(cls, item: Item, state: ScanState, check: Check) -> dict[str, Any] | None:
        """Run a check against an item."""
        checker = cls.get(check.type)
        if checker is None:
            # Unknown check type - pass
            return None
        return checker.check(item, state, check)

    @classmethod
    def get_message(cls, check: Check, context: dict[str, Any]) -> str:
        checker = cls.get(check.type)
        if checker is None:
            return f"Check '{check.type}' violated"
        return checker.get_message(context)


CheckRegistry.register("empty_section_name", EmptySectionNameCheck())
CheckRegistry.register("duplicate_section", DuplicateSectionCheck())
CheckRegistry.register("unterminated_section", UnterminatedSectionCheck())
CheckRegistry.register("duplicate_key", DuplicateKeyCheck())
CheckRegistry.register("empty_key", EmptyKeyCheck())
CheckRegistry.register("orphan_entry", OrphanEntryCheck())
CheckRegistry.register("bare_key", BareKeyCheck())
