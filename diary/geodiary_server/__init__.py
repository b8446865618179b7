"""
GeoDiary Server - ledger-backed store for geotagged audio-diary entries.

This package implements a record store built on:
- Entries owned by the identity that created them
- Discretionary read access via per-entry access lists
- Per-user entry indexes kept in creation order
- SQLite as the persisted record set

Architecture:
    ┌──────────────┐     ┌──────────────┐     ┌──────────────────┐
    │  Front end   │────▶│ EntrySession │────▶│    EntryStore    │
    │ (auth'd id)  │     │ caller+clock │     │ (lock + txn)     │
    └──────────────┘     └──────────────┘     └────────┬─────────┘
                                                       │
                        ┌──────────────┬───────────────┼──────────────┐
                        ▼              ▼               ▼              ▼
                   ┌─────────┐  ┌─────────────┐  ┌────────────┐  ┌─────────┐
                   │ entries │  │user_entries │  │entry_access│  │ counter │
                   └─────────┘  └─────────────┘  └────────────┘  └─────────┘

Invariants:
    - The caller identity is supplied by the front end, never by arguments
    - Entry identifiers are monotonic and never reused
    - Indexes never drift from the primary records
    - Coordinates stay within fixed-point latitude/longitude bounds

How to change safely:
    - Keep every public store operation inside one transaction
    - Add new entry fields as nullable columns
"""

from ._version import __version__

__all__ = ["__version__"]
