"""
Store module for GeoDiary - entries, indexes and access control.

This module handles:
- The SQLite entry store (entries, user indexes, access lists, id counter)
- Access evaluation for reads and creator-only mutations
- Fixed-point coordinate validation
- The error taxonomy surfaced to callers

Invariants:
    - Each public store operation is atomic and serialized
    - Indexes are always consistent with the primary entry records
    - All failures are detected before any mutation

How to change safely:
    - Use transactions for all multi-statement operations
    - Verify consistency with EntryStore.verify_integrity()
"""

from .acl import AccessEvaluator, Permission, get_access_evaluator
from .coordinates import from_fixed_point, to_fixed_point, valid_coordinates
from .entry_store import Entry, EntryStore
from .errors import (
    CapacityExceededError,
    EntryNotFoundError,
    EntryStoreError,
    FieldTooLongError,
    InvalidCoordinatesError,
    NotAuthorizedError,
    StoreNotInitializedError,
    UnauthorizedAccessError,
)

__all__ = [
    "AccessEvaluator",
    "Permission",
    "get_access_evaluator",
    "valid_coordinates",
    "to_fixed_point",
    "from_fixed_point",
    "Entry",
    "EntryStore",
    "EntryStoreError",
    "StoreNotInitializedError",
    "EntryNotFoundError",
    "NotAuthorizedError",
    "UnauthorizedAccessError",
    "InvalidCoordinatesError",
    "CapacityExceededError",
    "FieldTooLongError",
]
