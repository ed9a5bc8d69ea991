"""Combat history sinks."""

from __future__ import annotations

from luminari.storage.history import (
    CombatHistoryRecord,
    CombatHistorySink,
    InMemoryCombatHistory,
    SQLiteCombatHistory,
    save_combat_history,
    snapshot_to_dict,
)


__all__ = [
    "CombatHistoryRecord",
    "CombatHistorySink",
    "InMemoryCombatHistory",
    "SQLiteCombatHistory",
    "save_combat_history",
    "snapshot_to_dict",
]
