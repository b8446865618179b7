"""
SQLite entry store for GeoDiary.

This module manages the SQLite database that stores:
- Entries with their metadata, coordinates and visibility flag
- Per-user entry indexes in creation order
- Per-entry access lists in grant order
- The monotonic entry identifier counter

Invariants:
    - Every public operation holds the store lock for its full duration
    - All writes of one operation commit in a single transaction
    - Every failure is raised before the first write
    - Entry identifiers start at 1 and are never reused
    - Each entry id appears exactly once, in its creator's index
    - An access list exists only while its entry exists

How to change safely:
    - Schema migrations must be backward compatible
    - Keep index maintenance in the same transaction as the entry write
    - Route every read check through AccessEvaluator
    - Run verify_integrity() after changing any mutation path

Table schema:
    counters:
        - name TEXT PRIMARY KEY ('next_entry_id')
        - value INTEGER

    entries:
        - entry_id INTEGER PRIMARY KEY
        - creator TEXT
        - title TEXT
        - description TEXT
        - audio_url TEXT
        - latitude INTEGER (degrees x 1e6)
        - longitude INTEGER (degrees x 1e6)
        - created_at INTEGER (Unix ms)
        - is_public INTEGER (0/1)

    user_indexes / user_entries:
        - identity TEXT
        - position INTEGER (append order)
        - entry_id INTEGER

    access_lists / entry_access:
        - entry_id INTEGER
        - position INTEGER (grant order)
        - identity TEXT
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3
import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from ..config import LimitsConfig, StoreConfig
from .acl import AccessEvaluator, Permission, get_access_evaluator
from .coordinates import valid_coordinates
from .errors import (
    CapacityExceededError,
    EntryNotFoundError,
    FieldTooLongError,
    InvalidCoordinatesError,
    StoreNotInitializedError,
)

logger = logging.getLogger(__name__)

NEXT_ENTRY_ID = "next_entry_id"

# Largest value SQLite stores in an INTEGER column
MAX_ENTRY_ID = 2**63 - 1


@dataclass
class Entry:
    """A geotagged audio-diary entry.

    Attributes:
        entry_id: Unique entry identifier
        creator: Identity that created the entry
        title: Entry title
        description: Entry description
        audio_url: Opaque media reference
        latitude: Latitude in degrees x 1,000,000
        longitude: Longitude in degrees x 1,000,000
        created_at: Creation timestamp (Unix ms)
        is_public: Whether any identity may read the entry
    """

    entry_id: int
    creator: str
    title: str
    description: str
    audio_url: str
    latitude: int
    longitude: int
    created_at: int
    is_public: bool

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> Entry:
        return cls(
            entry_id=row["entry_id"],
            creator=row["creator"],
            title=row["title"],
            description=row["description"],
            audio_url=row["audio_url"],
            latitude=row["latitude"],
            longitude=row["longitude"],
            created_at=row["created_at"],
            is_public=bool(row["is_public"]),
        )


class EntryStore:
    """SQLite store for diary entries and their indexes.

    This class provides:
    - Entry create, read, update and delete
    - Access grants and revocations
    - Per-user entry listing
    - Integrity verification across the four collections

    Thread safety:
        Operations are serialized by an asyncio lock. Each operation opens
        its own connection and writes inside one IMMEDIATE transaction.

    Example:
        >>> store = EntryStore("/var/lib/geodiary")
        >>> await store.initialize()
        >>> entry_id = await store.create_entry(
        ...     title="Harbor",
        ...     description="Foghorns at dawn",
        ...     audio_url="ipfs://bafy...",
        ...     latitude=40689247,
        ...     longitude=-74044502,
        ...     is_public=False,
        ...     caller="alice",
        ... )
    """

    # SQLite schema version for migrations
    SCHEMA_VERSION = 1

    def __init__(
        self,
        data_dir: str,
        db_filename: str = "entries.db",
        wal_mode: bool = True,
        busy_timeout_ms: int = 5000,
        cache_size_pages: int = -64000,
        limits: LimitsConfig | None = None,
        evaluator: AccessEvaluator | None = None,
    ) -> None:
        """Initialize the entry store.

        Args:
            data_dir: Directory for the SQLite database file
            db_filename: Database file name
            wal_mode: Enable SQLite WAL mode
            busy_timeout_ms: SQLite busy timeout
            cache_size_pages: SQLite cache size (negative = KB)
            limits: Field and collection bounds
            evaluator: Access evaluator (shared default if not provided)
        """
        self.data_dir = Path(data_dir)
        self.db_path = self.data_dir / db_filename
        self.wal_mode = wal_mode
        self.busy_timeout_ms = busy_timeout_ms
        self.cache_size_pages = cache_size_pages
        self.limits = limits or LimitsConfig()
        self.evaluator = evaluator or get_access_evaluator()
        self._lock = asyncio.Lock()

    @classmethod
    def from_config(cls, config: StoreConfig) -> EntryStore:
        """Create a store from loaded configuration."""
        return cls(
            data_dir=config.storage.data_dir,
            db_filename=config.storage.db_filename,
            wal_mode=config.storage.wal_mode,
            busy_timeout_ms=config.storage.busy_timeout_ms,
            cache_size_pages=config.storage.cache_size_pages,
            limits=config.limits,
        )

    @contextmanager
    def _get_connection(self, create: bool = False) -> Iterator[sqlite3.Connection]:
        """Get a database connection.

        Args:
            create: Whether to create the database if it does not exist

        Yields:
            SQLite connection

        Raises:
            StoreNotInitializedError: If database doesn't exist and create=False
        """
        if not create and not self.db_path.exists():
            raise StoreNotInitializedError(str(self.db_path))

        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(
            str(self.db_path),
            timeout=self.busy_timeout_ms / 1000.0,
            isolation_level=None,  # Autocommit by default, explicit transactions
        )
        conn.row_factory = sqlite3.Row

        try:
            conn.execute(f"PRAGMA busy_timeout = {self.busy_timeout_ms}")
            conn.execute(f"PRAGMA cache_size = {self.cache_size_pages}")
            if self.wal_mode:
                conn.execute("PRAGMA journal_mode = WAL")
            conn.execute("PRAGMA synchronous = NORMAL")
            conn.execute("PRAGMA foreign_keys = ON")

            yield conn
        finally:
            conn.close()

    @contextmanager
    def _transaction(self, conn: sqlite3.Connection) -> Iterator[sqlite3.Connection]:
        """Run a block inside one IMMEDIATE transaction, rolling back on error."""
        conn.execute("BEGIN IMMEDIATE")
        try:
            yield conn
        except Exception:
            conn.execute("ROLLBACK")
            raise
        conn.execute("COMMIT")

    def _create_schema(self, conn: sqlite3.Connection) -> None:
        """Create database schema."""
        conn.executescript("""
            -- Schema version tracking
            CREATE TABLE IF NOT EXISTS schema_version (
                version INTEGER PRIMARY KEY,
                applied_at INTEGER NOT NULL
            );

            -- Monotonic counters
            CREATE TABLE IF NOT EXISTS counters (
                name TEXT PRIMARY KEY,
                value INTEGER NOT NULL
            );

            -- Primary entry records
            CREATE TABLE IF NOT EXISTS entries (
                entry_id INTEGER PRIMARY KEY,
                creator TEXT NOT NULL,
                title TEXT NOT NULL,
                description TEXT NOT NULL,
                audio_url TEXT NOT NULL,
                latitude INTEGER NOT NULL,
                longitude INTEGER NOT NULL,
                created_at INTEGER NOT NULL,
                is_public INTEGER NOT NULL
            );

            CREATE INDEX IF NOT EXISTS idx_entries_creator ON entries(creator);

            -- Per-user entry index
            CREATE TABLE IF NOT EXISTS user_indexes (
                identity TEXT PRIMARY KEY,
                created_at INTEGER NOT NULL
            );

            CREATE TABLE IF NOT EXISTS user_entries (
                identity TEXT NOT NULL,
                position INTEGER NOT NULL,
                entry_id INTEGER NOT NULL,
                PRIMARY KEY (identity, entry_id)
            );

            CREATE INDEX IF NOT EXISTS idx_user_entries_position
                ON user_entries(identity, position);

            -- Per-entry access lists
            CREATE TABLE IF NOT EXISTS access_lists (
                entry_id INTEGER PRIMARY KEY
            );

            CREATE TABLE IF NOT EXISTS entry_access (
                entry_id INTEGER NOT NULL,
                position INTEGER NOT NULL,
                identity TEXT NOT NULL,
                PRIMARY KEY (entry_id, identity)
            );

            CREATE INDEX IF NOT EXISTS idx_entry_access_position
                ON entry_access(entry_id, position);

            -- Identifiers start at 1
            INSERT OR IGNORE INTO counters (name, value) VALUES ('next_entry_id', 1);

            -- Record schema version
            INSERT OR IGNORE INTO schema_version (version, applied_at)
            VALUES (1, strftime('%s', 'now') * 1000);
        """)

    async def initialize(self) -> None:
        """Create the database file and schema if they don't exist."""
        async with self._lock:
            with self._get_connection(create=True) as conn:
                self._create_schema(conn)
                logger.info(f"Initialized entry database: {self.db_path}")

    async def exists(self) -> bool:
        """Check if the database file exists."""
        return self.db_path.exists()

    # ------------------------------------------------------------------
    # Validation and row helpers (no locking, caller owns the connection)
    # ------------------------------------------------------------------

    def _validate_fields(
        self,
        title: str,
        description: str,
        audio_url: str,
        latitude: int,
        longitude: int,
    ) -> None:
        if not valid_coordinates(latitude, longitude):
            raise InvalidCoordinatesError(latitude, longitude)

        for name, value, limit in (
            ("title", title, self.limits.max_title_length),
            ("description", description, self.limits.max_description_length),
            ("audio_url", audio_url, self.limits.max_audio_url_length),
        ):
            if len(value) > limit:
                raise FieldTooLongError(name, len(value), limit)

    def _load_entry(self, conn: sqlite3.Connection, entry_id: int) -> Entry | None:
        # Ids outside SQLite's INTEGER range can never have been allocated
        if not 1 <= entry_id <= MAX_ENTRY_ID:
            return None
        row = conn.execute("SELECT * FROM entries WHERE entry_id = ?", (entry_id,)).fetchone()
        return Entry.from_row(row) if row else None

    def _require_entry(self, conn: sqlite3.Connection, entry_id: int) -> Entry:
        entry = self._load_entry(conn, entry_id)
        if entry is None:
            raise EntryNotFoundError(entry_id)
        return entry

    def _load_grantees(self, conn: sqlite3.Connection, entry_id: int) -> list[str] | None:
        """Load an entry's access list in grant order, or None if it has none."""
        has_list = conn.execute(
            "SELECT 1 FROM access_lists WHERE entry_id = ?", (entry_id,)
        ).fetchone()
        if not has_list:
            return None

        cursor = conn.execute(
            "SELECT identity FROM entry_access WHERE entry_id = ? ORDER BY position",
            (entry_id,),
        )
        return [row["identity"] for row in cursor.fetchall()]

    def _load_user_entries(self, conn: sqlite3.Connection, identity: str) -> list[int]:
        cursor = conn.execute(
            "SELECT entry_id FROM user_entries WHERE identity = ? ORDER BY position",
            (identity,),
        )
        return [row["entry_id"] for row in cursor.fetchall()]

    def _next_position(self, conn: sqlite3.Connection, table: str, key: str, value: Any) -> int:
        cursor = conn.execute(
            f"SELECT COALESCE(MAX(position), -1) + 1 FROM {table} WHERE {key} = ?",
            (value,),
        )
        return cursor.fetchone()[0]

    def _readable(self, conn: sqlite3.Connection, entry: Entry, identity: str) -> bool:
        grantees = self._load_grantees(conn, entry.entry_id)
        return self.evaluator.can_read(identity, entry.creator, entry.is_public, grantees)

    def _authorize(
        self,
        conn: sqlite3.Connection,
        entry: Entry,
        identity: str,
        required: Permission,
    ) -> None:
        grantees = None
        if required is Permission.READ:
            grantees = self._load_grantees(conn, entry.entry_id)
        self.evaluator.check_permission_or_raise(
            identity,
            entry.entry_id,
            required,
            entry.creator,
            entry.is_public,
            grantees,
        )

    # ------------------------------------------------------------------
    # Entry lifecycle
    # ------------------------------------------------------------------

    async def create_entry(
        self,
        title: str,
        description: str,
        audio_url: str,
        latitude: int,
        longitude: int,
        is_public: bool,
        caller: str,
        now: int | None = None,
    ) -> int:
        """Create a new entry owned by the caller.

        Args:
            title: Entry title
            description: Entry description
            audio_url: Opaque media reference
            latitude: Latitude in degrees x 1,000,000
            longitude: Longitude in degrees x 1,000,000
            is_public: Whether any identity may read the entry
            caller: Authenticated identity creating the entry
            now: Creation timestamp (Unix ms), current time if not provided

        Returns:
            The new entry identifier

        Raises:
            InvalidCoordinatesError: If the coordinate pair is out of range
            FieldTooLongError: If a text field exceeds its bound
            CapacityExceededError: If the caller's entry index is full
        """
        self._validate_fields(title, description, audio_url, latitude, longitude)
        created_at = now if now is not None else int(time.time() * 1000)

        async with self._lock:
            with self._get_connection() as conn, self._transaction(conn):
                owned = conn.execute(
                    "SELECT COUNT(*) FROM user_entries WHERE identity = ?", (caller,)
                ).fetchone()[0]
                if owned >= self.limits.max_entries_per_user:
                    raise CapacityExceededError(
                        f"{caller} already owns {owned} entries",
                        limit=self.limits.max_entries_per_user,
                        details={"identity": caller},
                    )

                entry_id = conn.execute(
                    "SELECT value FROM counters WHERE name = ?", (NEXT_ENTRY_ID,)
                ).fetchone()[0]
                conn.execute(
                    "UPDATE counters SET value = value + 1 WHERE name = ?", (NEXT_ENTRY_ID,)
                )

                conn.execute(
                    """
                    INSERT INTO entries (entry_id, creator, title, description, audio_url,
                                         latitude, longitude, created_at, is_public)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        entry_id,
                        caller,
                        title,
                        description,
                        audio_url,
                        latitude,
                        longitude,
                        created_at,
                        int(bool(is_public)),
                    ),
                )

                if not is_public:
                    conn.execute("INSERT INTO access_lists (entry_id) VALUES (?)", (entry_id,))

                conn.execute(
                    "INSERT OR IGNORE INTO user_indexes (identity, created_at) VALUES (?, ?)",
                    (caller, created_at),
                )
                position = self._next_position(conn, "user_entries", "identity", caller)
                conn.execute(
                    "INSERT INTO user_entries (identity, position, entry_id) VALUES (?, ?, ?)",
                    (caller, position, entry_id),
                )

        logger.debug(
            "Created entry",
            extra={"entry_id": entry_id, "creator": caller, "is_public": bool(is_public)},
        )
        return entry_id

    async def get_entry(self, entry_id: int, caller: str) -> Entry:
        """Get an entry the caller is allowed to read.

        Raises:
            EntryNotFoundError: If the entry does not exist
            UnauthorizedAccessError: If the caller lacks read access
        """
        async with self._lock:
            with self._get_connection() as conn:
                entry = self._require_entry(conn, entry_id)
                self._authorize(conn, entry, caller, Permission.READ)
                return entry

    async def update_entry(
        self,
        entry_id: int,
        title: str,
        description: str,
        audio_url: str,
        latitude: int,
        longitude: int,
        is_public: bool,
        caller: str,
    ) -> bool:
        """Replace an entry's mutable fields.

        creator and created_at are preserved. The access list is left as it
        is, even when is_public changes.

        Returns:
            True on success

        Raises:
            EntryNotFoundError: If the entry does not exist
            NotAuthorizedError: If the caller is not the creator
            InvalidCoordinatesError: If the coordinate pair is out of range
            FieldTooLongError: If a text field exceeds its bound
        """
        async with self._lock:
            with self._get_connection() as conn, self._transaction(conn):
                entry = self._require_entry(conn, entry_id)
                self._authorize(conn, entry, caller, Permission.UPDATE)
                self._validate_fields(title, description, audio_url, latitude, longitude)

                conn.execute(
                    """
                    UPDATE entries
                    SET title = ?, description = ?, audio_url = ?,
                        latitude = ?, longitude = ?, is_public = ?
                    WHERE entry_id = ?
                    """,
                    (
                        title,
                        description,
                        audio_url,
                        latitude,
                        longitude,
                        int(bool(is_public)),
                        entry_id,
                    ),
                )

        logger.debug(
            "Updated entry",
            extra={"entry_id": entry_id, "creator": caller, "is_public": bool(is_public)},
        )
        return True

    async def delete_entry(self, entry_id: int, caller: str) -> bool:
        """Delete an entry together with its access list and index slot.

        Returns:
            True on success

        Raises:
            EntryNotFoundError: If the entry does not exist
            NotAuthorizedError: If the caller is not the creator
        """
        async with self._lock:
            with self._get_connection() as conn, self._transaction(conn):
                entry = self._require_entry(conn, entry_id)
                self._authorize(conn, entry, caller, Permission.DELETE)

                conn.execute("DELETE FROM entry_access WHERE entry_id = ?", (entry_id,))
                conn.execute("DELETE FROM access_lists WHERE entry_id = ?", (entry_id,))
                conn.execute(
                    "DELETE FROM user_entries WHERE identity = ? AND entry_id = ?",
                    (entry.creator, entry_id),
                )
                conn.execute("DELETE FROM entries WHERE entry_id = ?", (entry_id,))

        logger.debug("Deleted entry", extra={"entry_id": entry_id, "creator": caller})
        return True

    # ------------------------------------------------------------------
    # Access control
    # ------------------------------------------------------------------

    async def grant_access(self, entry_id: int, identity: str, caller: str) -> bool:
        """Grant an identity read access to an entry.

        Granting an identity that is already listed is a no-op. An entry
        created public gets its access list on first grant.

        Returns:
            True on success

        Raises:
            EntryNotFoundError: If the entry does not exist
            NotAuthorizedError: If the caller is not the creator
            CapacityExceededError: If the access list is full
        """
        async with self._lock:
            with self._get_connection() as conn, self._transaction(conn):
                entry = self._require_entry(conn, entry_id)
                self._authorize(conn, entry, caller, Permission.MANAGE_ACCESS)

                grantees = self._load_grantees(conn, entry_id) or []
                if identity in grantees:
                    return True

                if len(grantees) >= self.limits.max_grants_per_entry:
                    raise CapacityExceededError(
                        f"Access list for entry {entry_id} is full",
                        limit=self.limits.max_grants_per_entry,
                        details={"entry_id": entry_id, "identity": identity},
                    )

                conn.execute(
                    "INSERT OR IGNORE INTO access_lists (entry_id) VALUES (?)", (entry_id,)
                )
                position = self._next_position(conn, "entry_access", "entry_id", entry_id)
                conn.execute(
                    "INSERT INTO entry_access (entry_id, position, identity) VALUES (?, ?, ?)",
                    (entry_id, position, identity),
                )

        logger.debug(
            "Granted access",
            extra={"entry_id": entry_id, "identity": identity, "creator": caller},
        )
        return True

    async def revoke_access(self, entry_id: int, identity: str, caller: str) -> bool:
        """Revoke an identity's read access. Revoking an absent identity is a no-op.

        Returns:
            True on success

        Raises:
            EntryNotFoundError: If the entry does not exist
            NotAuthorizedError: If the caller is not the creator
        """
        async with self._lock:
            with self._get_connection() as conn, self._transaction(conn):
                entry = self._require_entry(conn, entry_id)
                self._authorize(conn, entry, caller, Permission.MANAGE_ACCESS)

                cursor = conn.execute(
                    "DELETE FROM entry_access WHERE entry_id = ? AND identity = ?",
                    (entry_id, identity),
                )

        if cursor.rowcount > 0:
            logger.debug(
                "Revoked access",
                extra={"entry_id": entry_id, "identity": identity, "creator": caller},
            )
        return True

    async def has_access(self, entry_id: int, identity: str) -> bool:
        """Check whether an identity may read an entry.

        Returns False for entries that do not exist.
        """
        async with self._lock:
            with self._get_connection() as conn:
                entry = self._load_entry(conn, entry_id)
                if entry is None:
                    return False
                return self._readable(conn, entry, identity)

    async def check_access(self, entry_id: int, identity: str) -> bool:
        return await self.has_access(entry_id, identity)

    async def get_access_list(self, entry_id: int, caller: str) -> list[str]:
        """Get an entry's grantees in grant order. Creator only.

        Raises:
            EntryNotFoundError: If the entry does not exist
            NotAuthorizedError: If the caller is not the creator
        """
        async with self._lock:
            with self._get_connection() as conn:
                entry = self._require_entry(conn, entry_id)
                self._authorize(conn, entry, caller, Permission.MANAGE_ACCESS)
                return self._load_grantees(conn, entry_id) or []

    # ------------------------------------------------------------------
    # Index queries
    # ------------------------------------------------------------------

    async def get_user_entries(self, identity: str) -> list[int]:
        """Get the ids of an identity's entries in creation order.

        No access filtering is applied. Returns an empty list for identities
        that never created an entry.
        """
        async with self._lock:
            with self._get_connection() as conn:
                return self._load_user_entries(conn, identity)

    async def get_readable_entries(self, identity: str, caller: str) -> list[Entry]:
        """Get the entries created by identity that caller may read.

        Args:
            identity: Creator whose index is listed
            caller: Identity the read check is evaluated for

        Returns:
            Readable entries in creation order
        """
        async with self._lock:
            with self._get_connection() as conn:
                readable = []
                for entry_id in self._load_user_entries(conn, identity):
                    entry = self._load_entry(conn, entry_id)
                    if entry is not None and self._readable(conn, entry, caller):
                        readable.append(entry)
                return readable

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    async def get_stats(self) -> dict[str, int]:
        """Get row counts for every collection and the id counter."""
        async with self._lock:
            with self._get_connection() as conn:
                stats = {}

                for name, table in (
                    ("entries", "entries"),
                    ("user_indexes", "user_indexes"),
                    ("access_lists", "access_lists"),
                    ("grants", "entry_access"),
                ):
                    cursor = conn.execute(f"SELECT COUNT(*) FROM {table}")
                    stats[name] = cursor.fetchone()[0]

                cursor = conn.execute(
                    "SELECT value FROM counters WHERE name = ?", (NEXT_ENTRY_ID,)
                )
                stats[NEXT_ENTRY_ID] = cursor.fetchone()[0]

                return stats

    async def verify_integrity(self) -> list[str]:
        """Check that the indexes agree with the primary entry records.

        Returns:
            List of problems found (empty if consistent)
        """
        async with self._lock:
            with self._get_connection() as conn:
                return self._find_inconsistencies(conn)

    def _find_inconsistencies(self, conn: sqlite3.Connection) -> list[str]:
        problems: list[str] = []

        next_id = conn.execute(
            "SELECT value FROM counters WHERE name = ?", (NEXT_ENTRY_ID,)
        ).fetchone()[0]
        creators = {
            row["entry_id"]: row["creator"]
            for row in conn.execute("SELECT entry_id, creator FROM entries")
        }

        for entry_id in creators:
            if entry_id < 1 or entry_id >= next_id:
                problems.append(f"Entry {entry_id} is outside the allocated range [1, {next_id})")

        indexed: dict[int, list[str]] = {}
        for row in conn.execute("SELECT identity, entry_id FROM user_entries"):
            indexed.setdefault(row["entry_id"], []).append(row["identity"])

        for entry_id, owners in indexed.items():
            if entry_id not in creators:
                problems.append(f"User index references missing entry {entry_id}")
            elif owners != [creators[entry_id]]:
                problems.append(
                    f"Entry {entry_id} indexed under {owners}, creator is {creators[entry_id]}"
                )

        for entry_id, creator in creators.items():
            if entry_id not in indexed:
                problems.append(f"Entry {entry_id} is missing from {creator}'s index")

        orphans = conn.execute(
            "SELECT DISTINCT identity FROM user_entries "
            "WHERE identity NOT IN (SELECT identity FROM user_indexes)"
        )
        for row in orphans:
            problems.append(f"Index rows for {row['identity']} have no user index record")

        for row in conn.execute("SELECT entry_id FROM access_lists"):
            if row["entry_id"] not in creators:
                problems.append(f"Access list exists for missing entry {row['entry_id']}")

        for row in conn.execute(
            "SELECT DISTINCT entry_id FROM entry_access "
            "WHERE entry_id NOT IN (SELECT entry_id FROM access_lists)"
        ):
            problems.append(f"Grants for entry {row['entry_id']} have no access list record")

        for row in conn.execute(
            "SELECT identity, COUNT(*) AS n FROM user_entries GROUP BY identity"
        ):
            if row["n"] > self.limits.max_entries_per_user:
                problems.append(f"{row['identity']} owns {row['n']} entries")

        for row in conn.execute(
            "SELECT entry_id, COUNT(*) AS n FROM entry_access GROUP BY entry_id"
        ):
            if row["n"] > self.limits.max_grants_per_entry:
                problems.append(f"Entry {row['entry_id']} has {row['n']} grants")

        return problems
