"""
Error types for the GeoDiary entry store.

This module defines all exception types raised by store operations:
- EntryStoreError: Base exception
- NotAuthorizedError: Non-creator attempted a creator-only mutation
- EntryNotFoundError: Referenced entry has no record
- InvalidCoordinatesError: Coordinate pair outside the valid range
- UnauthorizedAccessError: Caller lacks read permission on an entry
- CapacityExceededError: A bounded list or field would overflow

Invariants:
    - All errors inherit from EntryStoreError
    - Every error is raised before the operation writes anything
    - Errors carry a stable code for programmatic handling
"""

from __future__ import annotations

from typing import Any


class EntryStoreError(Exception):
    """Base exception for all entry store errors.

    Attributes:
        message: Error message
        code: Error code for programmatic handling
        details: Additional error context
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or "ENTRY_STORE_ERROR"
        self.details = details or {}


class StoreNotInitializedError(EntryStoreError):
    """Entry database does not exist yet."""

    def __init__(self, db_path: str) -> None:
        super().__init__(
            f"Entry database not found: {db_path}",
            code="STORE_NOT_INITIALIZED",
            details={"db_path": db_path},
        )
        self.db_path = db_path


class EntryNotFoundError(EntryStoreError):
    """No entry exists for the given identifier."""

    def __init__(self, entry_id: int) -> None:
        super().__init__(
            f"Entry not found: {entry_id}",
            code="ENTRY_NOT_FOUND",
            details={"entry_id": entry_id},
        )
        self.entry_id = entry_id


class NotAuthorizedError(EntryStoreError):
    """Caller is not the creator of the entry it tried to modify.

    Raised for update, delete, grant and revoke regardless of whether the
    caller can read the entry.
    """

    def __init__(self, caller: str, entry_id: int, action: str) -> None:
        super().__init__(
            f"Not authorized: {caller} cannot {action} entry {entry_id}",
            code="NOT_AUTHORIZED",
            details={"caller": caller, "entry_id": entry_id, "action": action},
        )
        self.caller = caller
        self.entry_id = entry_id
        self.action = action


class UnauthorizedAccessError(EntryStoreError):
    """Caller lacks read permission on an existing entry."""

    def __init__(self, caller: str, entry_id: int) -> None:
        super().__init__(
            f"Access denied: {caller} cannot read entry {entry_id}",
            code="UNAUTHORIZED_ACCESS",
            details={"caller": caller, "entry_id": entry_id},
        )
        self.caller = caller
        self.entry_id = entry_id


class InvalidCoordinatesError(EntryStoreError):
    """Latitude or longitude lies outside the valid fixed-point range."""

    def __init__(self, latitude: Any, longitude: Any) -> None:
        super().__init__(
            f"Invalid coordinates: latitude={latitude}, longitude={longitude}",
            code="INVALID_COORDINATES",
            details={"latitude": latitude, "longitude": longitude},
        )
        self.latitude = latitude
        self.longitude = longitude


class CapacityExceededError(EntryStoreError):
    """A bounded collection would exceed its capacity.

    Raised when:
    - A user already holds the maximum number of entries
    - An entry's access list is already full
    """

    def __init__(
        self,
        message: str,
        limit: int,
        code: str = "CAPACITY_EXCEEDED",
        details: dict[str, Any] | None = None,
    ) -> None:
        merged = {"limit": limit}
        merged.update(details or {})
        super().__init__(message, code=code, details=merged)
        self.limit = limit


class FieldTooLongError(CapacityExceededError):
    """A text field exceeds its maximum length."""

    def __init__(self, field_name: str, length: int, limit: int) -> None:
        super().__init__(
            f"Field '{field_name}' is {length} characters, maximum is {limit}",
            limit=limit,
            code="FIELD_TOO_LONG",
            details={"field": field_name, "length": length},
        )
        self.field_name = field_name
        self.length = length
