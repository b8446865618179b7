"""
GeoDiary Test Suite.

This package contains:
- unit/: Unit tests (no external dependencies)
- integration/: Integration tests (SQLite-backed sessions and long operation sequences)
"""
