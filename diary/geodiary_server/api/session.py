"""
Caller-bound entry operations.

The front end authenticates the calling identity and hands it to an
EntrySession together with a clock. Session methods mirror the public
operation table without a caller argument, so the identity can never be
forged through operation arguments.

Invariants:
    - Every session has a non-empty caller
    - create_entry stamps created_at from the session clock
    - Errors from the store propagate unchanged
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from ..store.entry_store import Entry, EntryStore

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class RequestContext:
    """Authenticated request context.

    Attributes:
        caller: Identity of the calling account
        trace_id: Optional trace identifier for log correlation
    """

    caller: str
    trace_id: str | None = None


class EntrySession:
    """Entry operations on behalf of one authenticated caller.

    Example:
        >>> session = EntrySession(store, "alice")
        >>> entry_id = await session.create_entry(
        ...     "Harbor", "Foghorns at dawn", "ipfs://bafy...", 40689247, -74044502, False
        ... )
        >>> await session.grant_access(entry_id, "bob")
        True
    """

    def __init__(
        self,
        store: EntryStore,
        caller: str | RequestContext,
        clock: Callable[[], int] | None = None,
    ) -> None:
        """Initialize a session.

        Args:
            store: Entry store to operate on
            caller: Authenticated caller identity or request context
            clock: Returns the current time in Unix ms (wall clock if not provided)

        Raises:
            ValueError: If the caller identity is empty
        """
        context = caller if isinstance(caller, RequestContext) else RequestContext(caller)
        if not context.caller:
            raise ValueError("caller is required")

        self._store = store
        self._context = context
        self._clock = clock or _now_ms

    @property
    def caller(self) -> str:
        return self._context.caller

    @property
    def context(self) -> RequestContext:
        return self._context

    async def create_entry(
        self,
        title: str,
        description: str,
        audio_url: str,
        latitude: int,
        longitude: int,
        is_public: bool,
    ) -> int:
        entry_id = await self._store.create_entry(
            title=title,
            description=description,
            audio_url=audio_url,
            latitude=latitude,
            longitude=longitude,
            is_public=is_public,
            caller=self.caller,
            now=self._clock(),
        )
        logger.info(
            "Entry created",
            extra={"entry_id": entry_id, "caller": self.caller, "trace_id": self._context.trace_id},
        )
        return entry_id

    async def update_entry(
        self,
        entry_id: int,
        title: str,
        description: str,
        audio_url: str,
        latitude: int,
        longitude: int,
        is_public: bool,
    ) -> bool:
        return await self._store.update_entry(
            entry_id=entry_id,
            title=title,
            description=description,
            audio_url=audio_url,
            latitude=latitude,
            longitude=longitude,
            is_public=is_public,
            caller=self.caller,
        )

    async def delete_entry(self, entry_id: int) -> bool:
        deleted = await self._store.delete_entry(entry_id, caller=self.caller)
        logger.info(
            "Entry deleted",
            extra={"entry_id": entry_id, "caller": self.caller, "trace_id": self._context.trace_id},
        )
        return deleted

    async def grant_access(self, entry_id: int, identity: str) -> bool:
        return await self._store.grant_access(entry_id, identity, caller=self.caller)

    async def revoke_access(self, entry_id: int, identity: str) -> bool:
        return await self._store.revoke_access(entry_id, identity, caller=self.caller)

    async def get_entry(self, entry_id: int) -> Entry:
        return await self._store.get_entry(entry_id, caller=self.caller)

    async def get_user_entries(self, identity: str) -> list[int]:
        return await self._store.get_user_entries(identity)

    async def check_access(self, entry_id: int, identity: str) -> bool:
        return await self._store.check_access(entry_id, identity)

    async def get_access_list(self, entry_id: int) -> list[str]:
        return await self._store.get_access_list(entry_id, caller=self.caller)

    async def get_readable_entries(self, identity: str) -> list[Entry]:
        """Entries created by identity that this session's caller may read."""
        return await self._store.get_readable_entries(identity, caller=self.caller)
