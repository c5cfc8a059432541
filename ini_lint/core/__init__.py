"""
ini-lint core library.

This package contains the core functionality:
- parser: INI tokenizing and input decoding
- document: Sections and entries built from the item stream
- rules: Lint rules and execution
"""

__all__: list[str] = []
