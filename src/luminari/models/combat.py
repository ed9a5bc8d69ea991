"""Combat session models.

Models:
    CombatResources: LP/SP pool used inside an encounter.
    ActionCost: Static price of a player action.
    LogEntry: One append-only combat log line.
    CombatLog: The live, unbounded log of an encounter.
    CombatEndStatus: Terminal marker set when an encounter ends.
    CombatSnapshot: Read-only record handed to history sinks.
    CombatSession: Aggregate root of an encounter.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, model_validator

from luminari.core.constants import DEFAULT_MAX_ENERGY, DEFAULT_MAX_HEALTH
from luminari.models.enemies import ShadowManifestation
from luminari.models.enums import Actor, CombatAction, CombatEndReason
from luminari.models.resources import ResourceSnapshot
from luminari.models.status import StatusEffects


NonNegativeInt = Annotated[int, Field(ge=0)]


# =============================================================================
# Resources & Costs
# =============================================================================


class CombatResources(BaseModel):
    """Light and Shadow Points as they stand inside an encounter."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    lp: NonNegativeInt = 0
    sp: NonNegativeInt = 0


class ActionCost(BaseModel):
    """Price of a player action.

    Attributes:
        lp: Light Points spent.
        sp: Shadow Points spent (or required, for EMBRACE).
        energy: Energy spent.
        consumes_all_sp: The action spends every SP held.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    lp: NonNegativeInt = 0
    sp: NonNegativeInt = 0
    energy: NonNegativeInt = 0
    consumes_all_sp: bool = False


# =============================================================================
# Combat Log
# =============================================================================


class LogEntry(BaseModel):
    """A single combat log line.

    Attributes:
        turn: Encounter turn the entry belongs to.
        actor: Who acted.
        action: Action or ability name.
        effect: Short mechanical summary.
        message: Narrative text.
        damage: Damage dealt by this entry, if any.
        timestamp: When the entry was written (UTC).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    turn: Annotated[int, Field(ge=1)]
    actor: Actor
    action: str
    effect: str = ""
    message: str = ""
    damage: NonNegativeInt | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))


class CombatLog(BaseModel):
    """Append-only encounter log.

    The live log is unbounded; ``tail`` produces the bounded view that is
    persisted.
    """

    model_config = ConfigDict(extra="forbid")

    entries: list[LogEntry] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.entries)

    def append(self, entry: LogEntry) -> None:
        self.entries.append(entry)

    def tail(self, limit: int) -> list[LogEntry]:
        """Return the most recent ``limit`` entries, oldest first."""
        if limit <= 0:
            return []
        return list(self.entries[-limit:])

    @property
    def last(self) -> LogEntry | None:
        return self.entries[-1] if self.entries else None

    def by_actor(self, actor: Actor) -> list[LogEntry]:
        return [e for e in self.entries if e.actor == actor]


# =============================================================================
# End Status & Snapshot
# =============================================================================


class CombatEndStatus(BaseModel):
    """Terminal marker of an encounter.

    Attributes:
        is_ended: Whether the encounter has ended.
        victory: Whether the player won.
        reason: Human-readable reason (includes the enemy name on victory).
        outcome: Machine-readable reason.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    is_ended: bool = False
    victory: bool = False
    reason: str = ""
    outcome: CombatEndReason | None = None


class CombatSnapshot(BaseModel):
    """Immutable record of a finished encounter for history sinks.

    The sink attaches the user identity; the engine never knows it.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    combat_id: str
    enemy_id: str
    enemy_name: str
    victory: bool
    outcome: CombatEndReason
    turns_taken: Annotated[int, Field(ge=1)]
    final_player_hp: NonNegativeInt
    final_enemy_hp: NonNegativeInt
    resources_at_start: ResourceSnapshot
    resources_at_end: ResourceSnapshot
    actions_used: dict[CombatAction, int]
    combat_log: list[LogEntry]
    player_level: Annotated[int, Field(ge=1)]
    scene_index: NonNegativeInt
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


# =============================================================================
# Session
# =============================================================================


def _empty_action_counts() -> dict[CombatAction, int]:
    return {action: 0 for action in CombatAction}


class CombatSession(BaseModel):
    """Aggregate root of a single encounter.

    Created by ``CombatEngine.start_combat`` and mutated in place by the
    engine. When the encounter ends, ``combat_end_status.is_ended`` is set
    first and then the session is torn down (``is_active=False``,
    ``enemy=None``); the end status stays readable until cleared.

    Attributes:
        combat_id: Unique id of the encounter, bound into log context.
        is_active: Whether an encounter is in progress.
        enemy: The shadow being fought.
        resources: In-combat LP/SP.
        player_health: Current health, ``0..max_player_health``.
        max_player_health: Health ceiling.
        player_energy: Current energy, ``0..max_player_energy``.
        max_player_energy: Energy ceiling.
        player_level: Level used for damage and heal scaling.
        turn: Encounter turn, starting at 1.
        is_player_turn: Whether player input is accepted.
        status_effects: Player-side status record.
        enemy_status: Shadow-side status record.
        log: Live combat log.
        preferred_actions: Per-action use counts.
        combat_end_status: Terminal marker.
        resources_at_start: Resources when the encounter began.
        scene_index: Scene that triggered the encounter.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    combat_id: str | None = None
    is_active: bool = False
    enemy: ShadowManifestation | None = None
    resources: CombatResources = Field(default_factory=CombatResources)
    player_health: NonNegativeInt = DEFAULT_MAX_HEALTH
    max_player_health: Annotated[int, Field(ge=1)] = DEFAULT_MAX_HEALTH
    player_energy: NonNegativeInt = DEFAULT_MAX_ENERGY
    max_player_energy: Annotated[int, Field(ge=1)] = DEFAULT_MAX_ENERGY
    player_level: Annotated[int, Field(ge=1)] = 1
    turn: Annotated[int, Field(ge=1)] = 1
    is_player_turn: bool = False
    status_effects: StatusEffects = Field(default_factory=StatusEffects)
    enemy_status: StatusEffects = Field(default_factory=StatusEffects)
    log: CombatLog = Field(default_factory=CombatLog)
    preferred_actions: dict[CombatAction, int] = Field(default_factory=_empty_action_counts)
    combat_end_status: CombatEndStatus = Field(default_factory=CombatEndStatus)
    resources_at_start: ResourceSnapshot | None = None
    scene_index: NonNegativeInt = 0

    @model_validator(mode="after")
    def validate_ceilings(self) -> CombatSession:
        if self.player_health > self.max_player_health:
            msg = f"player_health ({self.player_health}) exceeds max ({self.max_player_health})"
            raise ValueError(msg)
        if self.player_energy > self.max_player_energy:
            msg = f"player_energy ({self.player_energy}) exceeds max ({self.max_player_energy})"
            raise ValueError(msg)
        return self

    @property
    def is_ended(self) -> bool:
        return self.combat_end_status.is_ended

    @property
    def is_in_progress(self) -> bool:
        """Active, with an enemy, and not yet ended."""
        return self.is_active and self.enemy is not None and not self.is_ended

    @property
    def most_used_action(self) -> CombatAction | None:
        """The player's most used action; ties resolve in action order."""
        best: CombatAction | None = None
        best_count = 0
        for action in CombatAction:
            count = self.preferred_actions.get(action, 0)
            if count > best_count:
                best, best_count = action, count
        return best

    def current_resources(self) -> ResourceSnapshot:
        return ResourceSnapshot(
            light_points=self.resources.lp,
            shadow_points=self.resources.sp,
            health=self.player_health,
            energy=self.player_energy,
        )


__all__ = [
    "CombatResources",
    "ActionCost",
    "LogEntry",
    "CombatLog",
    "CombatEndStatus",
    "CombatSnapshot",
    "CombatSession",
]
