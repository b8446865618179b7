"""
Access control for diary entries.

This module is the single place where read and mutation rights are decided:
- Read: creator, anyone when the entry is public, or a listed grantee
- Update, delete, grant, revoke: creator only

Invariants:
    - The creator always has full access
    - Public entries are readable by every identity
    - A missing access list is treated as an empty one
    - Grantees gain read access only, never mutation rights

How to change safely:
    - New permissions must be additive
    - Keep every read check routed through can_read
"""

from __future__ import annotations

import logging
from collections.abc import Collection
from enum import Enum

from .errors import NotAuthorizedError, UnauthorizedAccessError

logger = logging.getLogger(__name__)


class Permission(Enum):
    """Actions that can be performed on an entry."""

    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    MANAGE_ACCESS = "manage_access"


# Everything except READ is reserved for the creator
CREATOR_ONLY = frozenset({Permission.UPDATE, Permission.DELETE, Permission.MANAGE_ACCESS})


class AccessEvaluator:
    """Evaluates access rights against an entry's ownership and access list.

    Thread safety:
        This class is stateless and thread-safe.

    Example:
        >>> evaluator = AccessEvaluator()
        >>> evaluator.can_read("bob", creator="alice", is_public=False, grantees=["bob"])
        True
    """

    def is_creator(self, identity: str, creator: str) -> bool:
        return identity == creator

    def can_read(
        self,
        identity: str,
        creator: str,
        is_public: bool,
        grantees: Collection[str] | None,
    ) -> bool:
        """Check read access.

        Args:
            identity: Identity requesting access
            creator: Entry creator
            is_public: Entry visibility flag
            grantees: Entry access list, or None if the entry has none

        Returns:
            True if access is granted
        """
        if self.is_creator(identity, creator):
            return True
        if is_public:
            return True
        return grantees is not None and identity in grantees

    def check_permission(
        self,
        identity: str,
        required: Permission,
        creator: str,
        is_public: bool,
        grantees: Collection[str] | None,
    ) -> bool:
        if required in CREATOR_ONLY:
            return self.is_creator(identity, creator)
        return self.can_read(identity, creator, is_public, grantees)

    def check_permission_or_raise(
        self,
        identity: str,
        entry_id: int,
        required: Permission,
        creator: str,
        is_public: bool,
        grantees: Collection[str] | None,
    ) -> None:
        """Check permission and raise if denied.

        Args:
            identity: Identity requesting access
            entry_id: Entry being accessed
            required: Required permission
            creator: Entry creator
            is_public: Entry visibility flag
            grantees: Entry access list, or None

        Raises:
            UnauthorizedAccessError: If read access is denied
            NotAuthorizedError: If a creator-only action is denied
        """
        if self.check_permission(identity, required, creator, is_public, grantees):
            return

        logger.info(
            "Access denied",
            extra={
                "entry_id": entry_id,
                "identity": identity,
                "permission": required.value,
            },
        )
        if required is Permission.READ:
            raise UnauthorizedAccessError(identity, entry_id)
        raise NotAuthorizedError(identity, entry_id, required.value)


# Default evaluator instance
_default_evaluator: AccessEvaluator | None = None


def get_access_evaluator() -> AccessEvaluator:
    """Get the default access evaluator instance."""
    global _default_evaluator
    if _default_evaluator is None:
        _default_evaluator = AccessEvaluator()
    return _default_evaluator
