"""
ini-lint: streaming INI tokenizer and linter.

A library and CLI tool for reading INI configuration text as a lazy stream
of sections, keys and key/value pairs, and for checking it for common
mistakes.

Usage:
    from ini_lint.core.parser import parse
    for item in parse(text):
        print(item)
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
