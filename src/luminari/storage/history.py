"""Combat history persistence.

When an encounter ends the engine hands a read-only CombatSnapshot to a
history sink. Sinks attach the user identity and write the record
durably. Writing is fire-and-forget from the engine's point of view:
``save_combat_history`` logs any failure and returns False, it never
raises into combat flow and never retries.

Storage location defaults to ``data/combat_history.db`` (see StorageSettings).
"""

from __future__ import annotations

import json
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Generator, Protocol
from uuid import uuid4

from luminari.core.exceptions import PersistenceError
from luminari.core.logging import get_logger
from luminari.models.combat import CombatSnapshot


logger = get_logger(__name__)


class CombatHistorySink(Protocol):
    """Anything that can durably store a finished encounter."""

    def save(self, snapshot: CombatSnapshot) -> Any:
        """Persist ``snapshot``; raise on failure."""
        ...


# =============================================================================
# Records
# =============================================================================


@dataclass
class CombatHistoryRecord:
    """A stored encounter.

    Attributes:
        id: Record identifier.
        user_id: Owner attached by the sink.
        combat_id: Engine-side encounter id.
        enemy_id: Archetype id.
        victory: Whether the player won.
        turns_taken: Turns the encounter lasted.
        created_at: When the encounter ended.
        snapshot_json: The full serialized snapshot.
    """

    id: str
    user_id: str
    combat_id: str
    enemy_id: str
    victory: bool
    turns_taken: int
    created_at: datetime
    snapshot_json: str

    @classmethod
    def from_row(cls, row: tuple[Any, ...]) -> CombatHistoryRecord:
        """Create from database row."""
        return cls(
            id=row[0],
            user_id=row[1],
            combat_id=row[2],
            enemy_id=row[3],
            victory=bool(row[4]),
            turns_taken=row[5],
            created_at=datetime.fromisoformat(row[6]),
            snapshot_json=row[7],
        )

    def get_snapshot(self) -> CombatSnapshot:
        """Parse the stored snapshot."""
        return CombatSnapshot.model_validate_json(self.snapshot_json)


# =============================================================================
# Sinks
# =============================================================================


class InMemoryCombatHistory:
    """Keeps snapshots in a list. Useful for headless runs and tests."""

    def __init__(self) -> None:
        self.snapshots: list[CombatSnapshot] = []

    def save(self, snapshot: CombatSnapshot) -> CombatSnapshot:
        self.snapshots.append(snapshot)
        return snapshot


class SQLiteCombatHistory:
    """SQLite-backed combat history for one user.

    Example:
        >>> history = SQLiteCombatHistory("data/combat_history.db", user_id="player-1")
        >>> history.count()
        0
    """

    SCHEMA_VERSION = 1

    def __init__(self, db_path: str | Path, *, user_id: str) -> None:
        """Initialize the store and create its schema if needed.

        Args:
            db_path: Path to the database file.
            user_id: Identity attached to every saved record.
        """
        self.db_path = Path(db_path)
        self.user_id = user_id
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()
        logger.info("Combat history initialized", db_path=str(self.db_path), user_id=user_id)

    @contextmanager
    def _get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Get a database connection with proper cleanup."""
        conn = sqlite3.connect(str(self.db_path))
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_schema(self) -> None:
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS schema_version (
                    version INTEGER PRIMARY KEY
                )
            """)
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS combat_history (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    combat_id TEXT NOT NULL,
                    enemy_id TEXT NOT NULL,
                    victory INTEGER NOT NULL,
                    turns_taken INTEGER NOT NULL,
                    created_at TEXT NOT NULL,
                    snapshot_json TEXT NOT NULL
                )
            """)
            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_combat_history_user
                ON combat_history(user_id, created_at DESC)
            """)
            cursor.execute(
                "INSERT OR REPLACE INTO schema_version (version) VALUES (?)",
                (self.SCHEMA_VERSION,),
            )

    def save(self, snapshot: CombatSnapshot) -> CombatHistoryRecord:
        """Store a snapshot for this user.

        Raises:
            PersistenceError: If the write fails.
        """
        record = CombatHistoryRecord(
            id=str(uuid4()),
            user_id=self.user_id,
            combat_id=snapshot.combat_id,
            enemy_id=snapshot.enemy_id,
            victory=snapshot.victory,
            turns_taken=snapshot.turns_taken,
            created_at=snapshot.created_at,
            snapshot_json=snapshot.model_dump_json(),
        )
        try:
            with self._get_connection() as conn:
                conn.execute(
                    """
                    INSERT INTO combat_history
                    (id, user_id, combat_id, enemy_id, victory, turns_taken, created_at, snapshot_json)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        record.id,
                        record.user_id,
                        record.combat_id,
                        record.enemy_id,
                        int(record.victory),
                        record.turns_taken,
                        record.created_at.isoformat(),
                        record.snapshot_json,
                    ),
                )
        except sqlite3.Error as exc:
            raise PersistenceError(
                f"Failed to save combat history: {exc}",
                details={"combat_id": snapshot.combat_id, "db_path": str(self.db_path)},
            ) from exc

        logger.info("Saved combat history", record_id=record.id, enemy_id=record.enemy_id)
        return record

    def get_history(self, limit: int = 20) -> list[CombatHistoryRecord]:
        """Most recent encounters for this user, newest first."""
        with self._get_connection() as conn:
            cursor = conn.execute(
                """
                SELECT id, user_id, combat_id, enemy_id, victory, turns_taken, created_at, snapshot_json
                FROM combat_history WHERE user_id = ?
                ORDER BY created_at DESC LIMIT ?
                """,
                (self.user_id, limit),
            )
            return [CombatHistoryRecord.from_row(tuple(row)) for row in cursor.fetchall()]

    def get_statistics(self) -> dict[str, Any]:
        """Win/loss totals and favourite enemy for this user."""
        with self._get_connection() as conn:
            total, wins = conn.execute(
                "SELECT COUNT(*), COALESCE(SUM(victory), 0) FROM combat_history WHERE user_id = ?",
                (self.user_id,),
            ).fetchone()
            row = conn.execute(
                """
                SELECT enemy_id, COUNT(*) AS n FROM combat_history WHERE user_id = ?
                GROUP BY enemy_id ORDER BY n DESC, enemy_id LIMIT 1
                """,
                (self.user_id,),
            ).fetchone()
        return {
            "total": total,
            "victories": wins,
            "defeats": total - wins,
            "most_faced_enemy": row[0] if row else None,
        }

    def count(self) -> int:
        with self._get_connection() as conn:
            return conn.execute(
                "SELECT COUNT(*) FROM combat_history WHERE user_id = ?",
                (self.user_id,),
            ).fetchone()[0]


def snapshot_to_dict(snapshot: CombatSnapshot) -> dict[str, Any]:
    """JSON-safe dictionary form of a snapshot, for sinks that post documents."""
    return json.loads(snapshot.model_dump_json())


def save_combat_history(sink: CombatHistorySink | None, snapshot: CombatSnapshot) -> bool:
    """Hand a snapshot to ``sink`` without letting failures escape.

    Returns:
        True if the sink accepted the snapshot, False if there is no sink
        or it failed (the failure is logged with its traceback).
    """
    if sink is None:
        return False
    try:
        sink.save(snapshot)
    except Exception:
        logger.exception(
            "Failed to save combat history",
            combat_id=snapshot.combat_id,
            enemy_id=snapshot.enemy_id,
        )
        return False
    return True


__all__ = [
    "CombatHistorySink",
    "CombatHistoryRecord",
    "InMemoryCombatHistory",
    "SQLiteCombatHistory",
    "snapshot_to_dict",
    "save_combat_history",
]
