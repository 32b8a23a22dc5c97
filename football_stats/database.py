"""SQLite connection management.

Holds the durable method cache rows and the per-user history rows.
"""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from .settings import DATABASE_PATH

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS method_cache (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    signature TEXT NOT NULL UNIQUE,
    last_result TEXT NOT NULL,
    created_at REAL NOT NULL,
    expires_at REAL NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_method_cache_expires_at ON method_cache (expires_at);

CREATE TABLE IF NOT EXISTS history (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL UNIQUE,
    predictions_json TEXT,
    performance_json TEXT
);
"""


def get_connection(db_path: Path | str | None = None) -> sqlite3.Connection:
    """Open a connection with ``sqlite3.Row`` rows.

    ``timeout`` makes concurrent writers wait on the database lock instead of
    failing immediately.
    """
    path = Path(db_path) if db_path else Path(DATABASE_PATH)
    conn = sqlite3.connect(path, timeout=30)
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def get_db(db_path: Path | str | None = None) -> Iterator[sqlite3.Connection]:
    """Context manager for one unit of work: commits on success, rolls back on error.

    Usage:
        with get_db() as conn:
            conn.execute("SELECT * FROM method_cache")
    """
    conn = get_connection(db_path)
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_db(db_path: Path | str | None = None) -> None:
    """Create tables if they don't exist. Safe to call multiple times."""
    with get_db(db_path) as conn:
        conn.executescript(SCHEMA_SQL)
