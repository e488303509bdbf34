"""
Key/value persistence for CostPrint.

Two stores share one small protocol:
- MappingStore: wraps any mutable mapping (st.session_state, a dict in tests).
  Holds the per-session auth token and user.
- SqliteStore: durable store in a local SQLite file. Holds display
  preferences such as the preferred currency.

Store methods are allowed to raise; callers that must never fail (the
currency preference helpers) catch at their boundary.
"""

import logging
import sqlite3
from collections.abc import MutableMapping
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Minimal string key/value capability."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


# =============================================================================
# IN-MEMORY / SESSION STORE
# =============================================================================


class MappingStore:
    """Store backed by a mutable mapping."""

    def __init__(self, mapping: MutableMapping | None = None):
        self._mapping = mapping if mapping is not None else {}

    def get(self, key: str) -> str | None:
        value = self._mapping.get(key)
        return None if value is None else str(value)

    def set(self, key: str, value: str) -> None:
        self._mapping[key] = value

    def delete(self, key: str) -> None:
        self._mapping.pop(key, None)


# =============================================================================
# SQLITE STORE
# =============================================================================


@contextmanager
def get_connection(db_path: Path):
    """Context manager for database connections."""
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    try:
        yield conn
        conn.commit()
    finally:
        conn.close()


def init_db(db_path: Path) -> None:
    """Initialize the preferences schema."""
    db_path.parent.mkdir(parents=True, exist_ok=True)
    with get_connection(db_path) as conn:
        conn.execute("""
            CREATE TABLE IF NOT EXISTS preferences (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)


class SqliteStore:
    """Durable key/value store in the ``preferences`` table."""

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)

    def get(self, key: str) -> str | None:
        with get_connection(self.db_path) as conn:
            row = conn.execute(
                "SELECT value FROM preferences WHERE key = ?", (key,)
            ).fetchone()
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        with get_connection(self.db_path) as conn:
            conn.execute(
                """
                INSERT INTO preferences (key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
                """,
                (key, value, datetime.now().isoformat()),
            )

    def delete(self, key: str) -> None:
        with get_connection(self.db_path) as conn:
            conn.execute("DELETE FROM preferences WHERE key = ?", (key,))


def open_preference_store(settings) -> SqliteStore | None:
    """
    Open the durable preference store described by ``settings``.

    Returns None when preferences are disabled or the database cannot be
    initialised; callers treat None as "no persistent store available".
    """
    if not settings.persist_preferences or settings.db_path is None:
        return None
    try:
        init_db(settings.db_path)
    except (sqlite3.Error, OSError):
        logger.warning(
            "preference store unavailable at %s", settings.db_path, exc_info=True
        )
        return None
    return SqliteStore(settings.db_path)
