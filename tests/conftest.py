"""
Pytest configuration and fixtures for ini-lint tests.

Provides fixtures for:
- Golden test files (INI samples)
- Large file generation for streaming checks
- Common test utilities
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from collections.abc import Iterator

# =============================================================================
# Path Fixtures
# =============================================================================

FIXTURES_DIR = Path(__file__).parent / "fixtures"
GOLDEN_DIR = FIXTURES_DIR / "golden"


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the fixtures directory path."""
    return FIXTURES_DIR


@pytest.fixture
def golden_dir() -> Path:
    """Return the golden files directory path."""
    return GOLDEN_DIR


# =============================================================================
# Golden File Fixtures
# =============================================================================


@pytest.fixture
def valid_basic(golden_dir: Path) -> Path:
    """Two sections, key/value pairs and a comment; no lint findings."""
    return golden_dir / "valid_basic.ini"


@pytest.fixture
def messy(golden_dir: Path) -> Path:
    """One instance of every built-in rule violation."""
    return golden_dir / "messy.ini"


@pytest.fixture
def encoding_utf8_bom(golden_dir: Path) -> Path:
    """UTF-8 with BOM and CRLF line endings."""
    return golden_dir / "encoding_utf8_bom.ini"


@pytest.fixture
def encoding_windows1252(golden_dir: Path) -> Path:
    """Windows-1252 encoded file with Umlaute."""
    return golden_dir / "encoding_windows1252.ini"


@pytest.fixture
def comments_only(golden_dir: Path) -> Path:
    """Only comments and blank lines."""
    return golden_dir / "comments_only.ini"


# =============================================================================
# Large File Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def large_file_50k(tmp_path_factory: pytest.TempPathFactory) -> Iterator[Path]:
    """Generate an INI file with 1,000 sections of 50 keys each."""
    tmp_dir = tmp_path_factory.mktemp("large")
    file_path = tmp_dir / "large_50k.ini"

    _generate_large_ini_file(file_path, sections=1_000, keys_per_section=50)

    yield file_path


def _generate_large_ini_file(path: Path, sections: int, keys_per_section: int) -> None:
    """
    Generate a large INI file.

    Every section is preceded by a comment and followed by a blank line.
    """
    lines: list[str] = []
    for s in range(sections):
        lines.append(f"# section {s}")
        lines.append(f"[section_{s:05d}]")
        for k in range(keys_per_section):
            lines.append(f"key_{k} = value {s}.{k}")
        lines.append("")

    path.write_text("\n".join(lines) + "\n", encoding="utf-8")


# =============================================================================
# Utility Fixtures
# =============================================================================


@pytest.fixture
def sample_ini_text() -> str:
    """Return a small INI text covering every item shape."""
    return (
        "# comment\n"
        "[server]\n"
        "host = localhost\n"
        "\n"
        "enabled\n"
        "  url = http://example.com/?a=b \n"
    )
