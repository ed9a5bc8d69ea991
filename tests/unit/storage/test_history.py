"""Tests for combat history sinks."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from luminari.models.combat import CombatSnapshot, LogEntry
from luminari.models.enums import Actor, CombatAction, CombatEndReason
from luminari.models.resources import ResourceSnapshot
from luminari.storage.history import (
    InMemoryCombatHistory,
    SQLiteCombatHistory,
    save_combat_history,
    snapshot_to_dict,
)


def make_snapshot(
    *,
    enemy_id: str = "whisper-of-doubt",
    victory: bool = True,
    turns: int = 3,
    minutes_ago: int = 0,
) -> CombatSnapshot:
    resources = ResourceSnapshot(light_points=10, shadow_points=5, health=100, energy=100)
    return CombatSnapshot(
        combat_id=f"combat-{enemy_id}-{minutes_ago}",
        enemy_id=enemy_id,
        enemy_name=enemy_id.replace("-", " ").title(),
        victory=victory,
        outcome=CombatEndReason.VICTORY if victory else CombatEndReason.DEFEAT,
        turns_taken=turns,
        final_player_hp=80,
        final_enemy_hp=0 if victory else 4,
        resources_at_start=resources,
        resources_at_end=resources,
        actions_used={action: 0 for action in CombatAction} | {CombatAction.ILLUMINATE: 2},
        combat_log=[
            LogEntry(turn=1, actor=Actor.PLAYER, action="ILLUMINATE", damage=4),
            LogEntry(turn=1, actor=Actor.SHADOW, action="Shadow Strike", damage=3),
        ],
        player_level=1,
        scene_index=2,
        created_at=datetime.now(UTC) - timedelta(minutes=minutes_ago),
    )


@pytest.fixture
def sqlite_history(tmp_path: Path) -> SQLiteCombatHistory:
    return SQLiteCombatHistory(tmp_path / "history" / "combat.db", user_id="player-1")


class TestInMemoryCombatHistory:
    """Tests for the in-memory sink."""

    def test_collects_snapshots(self) -> None:
        """Test snapshots are kept in save order."""
        history = InMemoryCombatHistory()
        first, second = make_snapshot(), make_snapshot(enemy_id="veil-of-isolation")

        history.save(first)
        history.save(second)

        assert history.snapshots == [first, second]


class TestSQLiteCombatHistory:
    """Tests for the SQLite sink."""

    def test_creates_database(self, tmp_path: Path) -> None:
        """Test the database file and parent directories are created."""
        path = tmp_path / "nested" / "dir" / "combat.db"

        history = SQLiteCombatHistory(path, user_id="player-1")

        assert path.exists()
        assert history.count() == 0

    def test_save_and_load(self, sqlite_history: SQLiteCombatHistory) -> None:
        """Test a saved snapshot round-trips through the record."""
        snapshot = make_snapshot()

        record = sqlite_history.save(snapshot)

        assert record.user_id == "player-1"
        assert record.combat_id == snapshot.combat_id
        assert record.victory is True
        stored = sqlite_history.get_history()
        assert len(stored) == 1
        assert stored[0].id == record.id
        assert stored[0].get_snapshot() == snapshot

    def test_history_newest_first(self, sqlite_history: SQLiteCombatHistory) -> None:
        """Test history is ordered by end time and limited."""
        sqlite_history.save(make_snapshot(enemy_id="whisper-of-doubt", minutes_ago=30))
        sqlite_history.save(make_snapshot(enemy_id="storm-of-overwhelm", minutes_ago=5))
        sqlite_history.save(make_snapshot(enemy_id="veil-of-isolation", minutes_ago=10))

        records = sqlite_history.get_history(limit=2)

        assert [r.enemy_id for r in records] == ["storm-of-overwhelm", "veil-of-isolation"]

    def test_records_scoped_to_user(self, tmp_path: Path) -> None:
        """Test two users sharing a file only see their own encounters."""
        path = tmp_path / "combat.db"
        alice = SQLiteCombatHistory(path, user_id="alice")
        bob = SQLiteCombatHistory(path, user_id="bob")

        alice.save(make_snapshot())
        alice.save(make_snapshot(minutes_ago=1))
        bob.save(make_snapshot())

        assert alice.count() == 2
        assert bob.count() == 1
        assert all(r.user_id == "bob" for r in bob.get_history())

    def test_statistics(self, sqlite_history: SQLiteCombatHistory) -> None:
        """Test win/loss totals and the most faced enemy."""
        sqlite_history.save(make_snapshot(enemy_id="echo-of-past-pain", victory=False, minutes_ago=3))
        sqlite_history.save(make_snapshot(enemy_id="echo-of-past-pain", victory=True, minutes_ago=2))
        sqlite_history.save(make_snapshot(enemy_id="whisper-of-doubt", victory=True, minutes_ago=1))

        stats = sqlite_history.get_statistics()

        assert stats == {
            "total": 3,
            "victories": 2,
            "defeats": 1,
            "most_faced_enemy": "echo-of-past-pain",
        }

    def test_statistics_empty(self, sqlite_history: SQLiteCombatHistory) -> None:
        """Test statistics for a user with no encounters."""
        stats = sqlite_history.get_statistics()

        assert stats["total"] == 0
        assert stats["victories"] == 0
        assert stats["most_faced_enemy"] is None


class TestSaveCombatHistory:
    """Tests for the fire-and-forget save helper."""

    def test_without_sink(self) -> None:
        """Test a missing sink is a quiet no-op."""
        assert save_combat_history(None, make_snapshot()) is False

    def test_successful_save(self) -> None:
        """Test a working sink reports success."""
        history = InMemoryCombatHistory()

        assert save_combat_history(history, make_snapshot()) is True
        assert len(history.snapshots) == 1

    def test_failure_is_contained(self) -> None:
        """Test a raising sink is logged and reported, never raised."""

        class FailingSink:
            def save(self, snapshot: CombatSnapshot) -> None:
                raise ConnectionError("history service unavailable")

        assert save_combat_history(FailingSink(), make_snapshot()) is False

    def test_snapshot_to_dict(self) -> None:
        """Test the document form is JSON-safe."""
        document = snapshot_to_dict(make_snapshot(victory=False))

        assert document["victory"] is False
        assert document["outcome"] == "defeat"
        assert document["combat_log"][0]["actor"] == "player"
        assert isinstance(document["created_at"], str)
