"""SQLite repositories for the durable method cache and the user history."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .database import get_db, init_db
from .ports.history import HistoryRow, HistoryStorePort


@dataclass
class MethodCacheRow:
    signature: str
    last_result: str
    created_at: float
    expires_at: float
    id: Optional[int] = None


def _to_method_row(row) -> MethodCacheRow:
    return MethodCacheRow(
        id=row["id"],
        signature=row["signature"],
        last_result=row["last_result"],
        created_at=row["created_at"],
        expires_at=row["expires_at"],
    )


class MethodCacheRepository:
    def __init__(self, db_path: Path | str | None = None) -> None:
        self.db_path = db_path
        init_db(db_path)

    def find_valid(self, signature: str, now: float) -> Optional[MethodCacheRow]:
        """Row for ``signature`` whose ``expires_at`` is still after ``now``."""
        with get_db(self.db_path) as conn:
            row = conn.execute(
                "SELECT * FROM method_cache WHERE signature = ? AND expires_at > ?",
                (signature, now),
            ).fetchone()
        return _to_method_row(row) if row else None

    def find_by_signature(self, signature: str) -> Optional[MethodCacheRow]:
        with get_db(self.db_path) as conn:
            row = conn.execute(
                "SELECT * FROM method_cache WHERE signature = ?", (signature,)
            ).fetchone()
        return _to_method_row(row) if row else None

    def upsert(self, signature: str, payload: str, created_at: float, expires_at: float) -> None:
        """Insert the row or refresh it in place; one row per signature."""
        with get_db(self.db_path) as conn:
            conn.execute(
                """
                INSERT INTO method_cache (signature, last_result, created_at, expires_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(signature) DO UPDATE SET
                    last_result = excluded.last_result,
                    created_at = excluded.created_at,
                    expires_at = excluded.expires_at
                """,
                (signature, payload, created_at, expires_at),
            )

    def delete_expired(self, now: float) -> int:
        with get_db(self.db_path) as conn:
            cursor = conn.execute("DELETE FROM method_cache WHERE expires_at <= ?", (now,))
            return cursor.rowcount

    def count_valid(self, now: float) -> int:
        with get_db(self.db_path) as conn:
            row = conn.execute(
                "SELECT COUNT(*) FROM method_cache WHERE expires_at > ?", (now,)
            ).fetchone()
        return int(row[0])

    def count(self) -> int:
        with get_db(self.db_path) as conn:
            row = conn.execute("SELECT COUNT(*) FROM method_cache").fetchone()
        return int(row[0])

    def delete_all(self) -> int:
        with get_db(self.db_path) as conn:
            cursor = conn.execute("DELETE FROM method_cache")
            return cursor.rowcount


class HistoryRepository(HistoryStorePort):
    def __init__(self, db_path: Path | str | None = None) -> None:
        self.db_path = db_path
        init_db(db_path)

    def find_by_user_id(self, user_id: int) -> Optional[HistoryRow]:
        with get_db(self.db_path) as conn:
            row = conn.execute("SELECT * FROM history WHERE user_id = ?", (user_id,)).fetchone()
        if row is None:
            return None
        return HistoryRow(
            id=row["id"],
            user_id=row["user_id"],
            predictions_json=row["predictions_json"],
            performance_json=row["performance_json"],
        )

    def save(self, row: HistoryRow) -> HistoryRow:
        with get_db(self.db_path) as conn:
            conn.execute(
                """
                INSERT INTO history (user_id, predictions_json, performance_json)
                VALUES (?, ?, ?)
                ON CONFLICT(user_id) DO UPDATE SET
                    predictions_json = excluded.predictions_json,
                    performance_json = excluded.performance_json
                """,
                (row.user_id, row.predictions_json, row.performance_json),
            )
            stored = conn.execute(
                "SELECT id FROM history WHERE user_id = ?", (row.user_id,)
            ).fetchone()
        row.id = stored["id"]
        return row
