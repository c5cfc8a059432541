"""
Encoding detection for INI files.

INI files in the wild come as:
- UTF-8, with or without BOM
- UTF-16 with BOM (Windows tools)
- UTF-32 with BOM (rare)
- Windows-1252 / Latin-1 (legacy)

Detection uses charset-normalizer after checking for BOMs.
"""

from __future__ import annotations

from charset_normalizer import from_bytes

# Size of data to use for encoding detection
DETECTION_SAMPLE_SIZE = 8192


def detect_encoding(data: bytes) -> str:
    """
    Detect encoding of INI file data.

    Detection priority:
    1. BOM (UTF-8, UTF-32, UTF-16)
    2. charset-normalizer detection
    3. Fallback to UTF-8, then Windows-1252

    Returns:
        Python codec name, e.g. "utf-8-sig", "utf-8", "utf-16", "windows-1252"
    """
    if data.startswith(b"\xef\xbb\xbf"):
        return "utf-8-sig"

    # UTF-32-LE starts with the UTF-16-LE BOM
    if data.startswith(b"\xff\xfe\x00\x00") or data.startswith(b"\x00\x00\xfe\xff"):
        return "utf-32"

    if data.startswith(b"\xff\xfe") or data.startswith(b"\xfe\xff"):
        return "utf-16"

    sample = data[:DETECTION_SAMPLE_SIZE]
    results = from_bytes(sample)

    best = results.best() if results else None
    if best is not None:
        encoding = best.encoding.lower()

        if encoding in ("ascii", "utf-8", "utf_8", "utf8"):
            return "utf-8"

        if encoding in ("cp1252", "windows-1252", "latin_1", "latin-1", "iso-8859-1"):
            return "windows-1252"

        return encoding

    try:
        sample.decode("utf-8")
        return "utf-8"
    except UnicodeDecodeError:
        return "windows-1252"


def decode_with_fallback(data: bytes, encoding: str) -> tuple[str, bool]:
    """
    Decode bytes, using replacement characters for invalid sequences.

    Returns:
        (text, lossy) where lossy is True if any byte had to be replaced
    """
    try:
        return data.decode(encoding), False
    except UnicodeDecodeError:
        return data.decode(encoding, errors="replace"), True
