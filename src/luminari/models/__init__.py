"""Pydantic models for the encounter core.

Submodules:
    enums: Actions, actors, scene and shadow categories.
    progression: XP curve and level benefits.
    resources: PlayerResources and its modifier operations.
    status: StatusEffects and the damage formula.
    enemies: Shadow manifestations and their abilities.
    combat: CombatSession, the combat log and history snapshots.
    scenes: Scene definitions and SceneOutcome.
"""

from __future__ import annotations

from luminari.models.combat import (
    ActionCost,
    CombatEndStatus,
    CombatLog,
    CombatResources,
    CombatSession,
    CombatSnapshot,
    LogEntry,
)
from luminari.models.enemies import (
    AbilityEffect,
    ShadowAbility,
    ShadowManifestation,
    VictoryReward,
)
from luminari.models.enums import (
    Actor,
    ChoiceType,
    CombatAction,
    CombatEndReason,
    SceneType,
    ShadowType,
)
from luminari.models.progression import (
    LevelBenefits,
    LevelProgress,
    calculate_level_progression,
    get_level_benefits,
    get_level_roll_bonus,
    xp_required_for_level,
)
from luminari.models.resources import PlayerResources, ResourceSnapshot
from luminari.models.scenes import (
    EnergyChanges,
    ExperienceChanges,
    ResourceChanges,
    Scene,
    SceneChoices,
    SceneOutcome,
    TrustModifiers,
)
from luminari.models.status import StatusEffects, compute_damage, round_half_up


__all__ = [
    # Enums
    "Actor",
    "ChoiceType",
    "CombatAction",
    "CombatEndReason",
    "SceneType",
    "ShadowType",
    # Progression
    "LevelBenefits",
    "LevelProgress",
    "calculate_level_progression",
    "get_level_benefits",
    "get_level_roll_bonus",
    "xp_required_for_level",
    # Resources & status
    "PlayerResources",
    "ResourceSnapshot",
    "StatusEffects",
    "compute_damage",
    "round_half_up",
    # Enemies
    "AbilityEffect",
    "ShadowAbility",
    "ShadowManifestation",
    "VictoryReward",
    # Combat
    "ActionCost",
    "CombatEndStatus",
    "CombatLog",
    "CombatResources",
    "CombatSession",
    "CombatSnapshot",
    "LogEntry",
    # Scenes
    "EnergyChanges",
    "ExperienceChanges",
    "ResourceChanges",
    "Scene",
    "SceneChoices",
    "SceneOutcome",
    "TrustModifiers",
]
