"""
API module for GeoDiary.

This module provides the in-process interface used by an authenticated
front end:
- EntrySession: operations bound to one caller identity and clock

Invariants:
    - The caller identity comes from the front end, never from arguments
    - Creation time comes from the session clock, never from user input

How to change safely:
    - Add new operations without changing existing signatures
    - Keep session methods thin; semantics live in EntryStore
"""

from .session import EntrySession, RequestContext

__all__ = [
    "EntrySession",
    "RequestContext",
]
