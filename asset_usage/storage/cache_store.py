"""
Cache stores for usage statistics.

Entries are namespaced per owning module: every key is built with
``scoped_key(scope, name)``. Pattern deletion compares the scope literally
and globs only the name, so it never touches another scope's entries.
"""

import copy
import json
import logging
import sqlite3
import threading
import time
from dataclasses import dataclass
from fnmatch import fnmatchcase
from typing import Any, Dict, Optional, Tuple

from .db import DEFAULT_DB_PATH, get_connection

logger = logging.getLogger(__name__)

KEY_SEPARATOR = "__"


class CacheUnavailableError(Exception):
    """Raised when the cache backend cannot be read or written."""


def scoped_key(scope: str, name: str) -> str:
    """Build the cache key for name within scope.

    The first separator in a key always ends its scope, so a scope may not
    contain the separator or end with an underscore.
    """
    if not scope:
        raise ValueError("scope is required and cannot be empty")
    if KEY_SEPARATOR in scope or scope.endswith("_"):
        raise ValueError(f"scope cannot contain '{KEY_SEPARATOR}' or end with '_': {scope!r}")
    return f"{scope}{KEY_SEPARATOR}{name}"


def split_key(key: str) -> Tuple[str, str]:
    """Split a key built by scoped_key into its scope and name."""
    scope, _, name = key.partition(KEY_SEPARATOR)
    return scope, name


class CacheStore:
    """Key/value store holding JSON-compatible values with an optional TTL.

    Implementations must replace entries whole: a reader sees either the
    previous value or the new one, never a mix.
    """

    def get(self, key: str) -> Optional[Any]:
        """Return the value stored under key, or None if absent or expired."""
        raise NotImplementedError

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        """Store value under key, expiring after ttl seconds (never if None)."""
        raise NotImplementedError

    def delete_by_pattern(self, scope: str, pattern: str) -> int:
        """Delete every entry of scope whose name matches the glob pattern.

        Returns:
            Number of entries deleted
        """
        raise NotImplementedError


@dataclass(frozen=True)
class _MemoryEntry:
    value: Any
    expires_at: Optional[float]

    def is_expired(self, now: float) -> bool:
        return self.expires_at is not None and now >= self.expires_at


class MemoryCacheStore(CacheStore):
    """Thread-safe in-process cache store."""

    def __init__(self, clock=time.time):
        self._entries: Dict[str, _MemoryEntry] = {}
        self._lock = threading.Lock()
        self._clock = clock

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.is_expired(self._clock()):
                del self._entries[key]
                return None
            return copy.deepcopy(entry.value)

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        expires_at = self._clock() + ttl if ttl is not None else None
        with self._lock:
            self._entries[key] = _MemoryEntry(value=copy.deepcopy(value), expires_at=expires_at)

    def delete_by_pattern(self, scope: str, pattern: str) -> int:
        scoped_key(scope, pattern)  # rejects invalid scopes
        with self._lock:
            doomed = [key for key in self._entries if self._matches(key, scope, pattern)]
            for key in doomed:
                del self._entries[key]
        return len(doomed)

    @staticmethod
    def _matches(key: str, scope: str, pattern: str) -> bool:
        key_scope, name = split_key(key)
        return key_scope == scope and fnmatchcase(name, pattern)

    def __len__(self) -> int:
        return len(self._entries)


def initialize_schema(db_path: str = DEFAULT_DB_PATH) -> None:
    """Create the usage_cache table if it doesn't exist.

    Args:
        db_path: Path to SQLite database file
    """
    conn = get_connection(db_path)
    try:
        conn.execute("""
            CREATE TABLE IF NOT EXISTS usage_cache (
                name TEXT PRIMARY KEY,
                data TEXT NOT NULL,
                expires REAL
            )
        """)
        conn.commit()
    finally:
        conn.close()


class SqliteCacheStore(CacheStore):
    """Cache store persisted in a SQLite table.

    Values are stored as JSON. Every SQLite failure surfaces as
    CacheUnavailableError so callers can fall back to recomputation.
    """

    def __init__(self, db_path: str = DEFAULT_DB_PATH, clock=time.time):
        """Initialize the store with a database path.

        Args:
            db_path: Path to SQLite database file
            clock: Callable returning the current time in seconds
        """
        self.db_path = db_path
        self._clock = clock

    def initialize(self) -> None:
        """Create the backing table, wrapping failures in CacheUnavailableError."""
        try:
            initialize_schema(self.db_path)
        except sqlite3.Error as e:
            raise CacheUnavailableError(f"Cannot initialize cache at {self.db_path}: {e}") from e

    def get(self, key: str) -> Optional[Any]:
        try:
            conn = get_connection(self.db_path)
            try:
                row = conn.execute(
                    "SELECT data FROM usage_cache WHERE name = ? AND (expires IS NULL OR expires > ?)",
                    (key, self._clock())
                ).fetchone()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise CacheUnavailableError(f"Cache read failed for {key}: {e}") from e

        if row is None:
            return None
        try:
            return json.loads(row[0])
        except ValueError:
            logger.warning(f"Discarding unreadable cache entry {key}")
            return None

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        expires = self._clock() + ttl if ttl is not None else None
        data = json.dumps(value)
        try:
            conn = get_connection(self.db_path)
            try:
                conn.execute(
                    "INSERT OR REPLACE INTO usage_cache (name, data, expires) VALUES (?, ?, ?)",
                    (key, data, expires)
                )
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise CacheUnavailableError(f"Cache write failed for {key}: {e}") from e

    def delete_by_pattern(self, scope: str, pattern: str) -> int:
        # Scope compared literally, only the name part is globbed
        prefix = scoped_key(scope, "")
        key_pattern = scoped_key(scope, pattern)
        try:
            conn = get_connection(self.db_path)
            try:
                cursor = conn.execute(
                    "DELETE FROM usage_cache WHERE substr(name, 1, ?) = ? AND substr(name, ?) GLOB ?",
                    (len(prefix), prefix, len(prefix) + 1, pattern)
                )
                conn.commit()
                return cursor.rowcount
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise CacheUnavailableError(f"Cache delete failed for {key_pattern}: {e}") from e
