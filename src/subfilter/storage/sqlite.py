"""SQLite rule store implementation.

Keeps every key as one JSON document in a single key/value table.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any

import aiosqlite

from subfilter.exceptions import ConfigCorruptionError, StorageError

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS store_values (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL
)
"""


class SQLiteRuleStore:
    """SQLite-based key/value store for rules and engine flags."""

    def __init__(self, db_path: Path):
        """Initialize SQLite store.

        Args:
            db_path: Path to the SQLite database file.
        """
        self._db_path = db_path
        self._initialized = False

    async def initialize(self) -> None:
        """Create the table if needed. Safe to call more than once."""
        if self._initialized:
            return

        self._db_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            async with aiosqlite.connect(self._db_path) as db:
                await db.execute(SCHEMA_SQL)
                await db.commit()
        except aiosqlite.Error as e:
            raise StorageError(f"Failed to initialize {self._db_path}: {e}") from e

        self._initialized = True

    async def get(self, key: str, default: Any = None) -> Any:
        """Read and decode the JSON value stored under ``key``."""
        await self.initialize()

        try:
            async with aiosqlite.connect(self._db_path) as db:
                async with db.execute(
                    "SELECT value FROM store_values WHERE key = ?", (key,)
                ) as cursor:
                    row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise StorageError(f"Failed to read {key!r}: {e}") from e

        if row is None:
            return default

        try:
            return json.loads(row[0])
        except json.JSONDecodeError as e:
            raise ConfigCorruptionError(key, f"invalid JSON ({e})") from e

    async def set(self, key: str, value: Any) -> None:
        """Encode ``value`` as JSON and upsert it."""
        await self.initialize()

        try:
            async with aiosqlite.connect(self._db_path) as db:
                await db.execute(
                    """
                    INSERT INTO store_values (key, value, updated_at) VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value, updated_at = excluded.updated_at
                    """,
                    (key, json.dumps(value), datetime.utcnow().isoformat()),
                )
                await db.commit()
        except aiosqlite.Error as e:
            raise StorageError(f"Failed to write {key!r}: {e}") from e

    async def close(self) -> None:
        """Close storage (no-op, a connection is opened per operation)."""
        pass
