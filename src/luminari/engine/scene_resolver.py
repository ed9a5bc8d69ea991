"""Scene resolution.

``handle_scene_outcome`` is pure: it turns a scene and a check result into a
SceneOutcome without touching player state. ``apply_scene_outcome`` is the
impure counterpart the caller uses to push those deltas through the named
PlayerResources modifiers.

Rules:
    * The attempt always costs energy and always awards XP (reduced on
      failure).
    * A failed combat scene escalates into an encounter: ``triggered_combat``
      is set, ``shadow_type`` names the archetype and no LP/SP changes are
      produced; the encounter decides those.
    * Otherwise success grants LP and an energy reward, failure adds SP.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from luminari.core.config import SceneSettings
from luminari.core.logging import get_logger
from luminari.engine.dice import DiceResult, DiceSource, roll_dice
from luminari.models.enums import ChoiceType, SceneType
from luminari.models.progression import get_level_benefits, get_level_roll_bonus
from luminari.models.resources import PlayerResources
from luminari.models.scenes import (
    EnergyChanges,
    ExperienceChanges,
    ResourceChanges,
    Scene,
    SceneOutcome,
    TrustModifiers,
)


logger = get_logger(__name__)


# =============================================================================
# Level & Choice Modifiers
# =============================================================================


@dataclass(frozen=True)
class LevelModifiers:
    """Level-derived adjustments passed into resolution.

    Attributes:
        roll_bonus: Added to the d20 face.
        energy_cost_reduction: Subtracted from the scene's energy cost.
        trust_multiplier: Scales positive trust changes.
    """

    roll_bonus: int = 0
    energy_cost_reduction: int = 0
    trust_multiplier: float = 1.0

    @classmethod
    def for_level(cls, level: int) -> LevelModifiers:
        benefits = get_level_benefits(level)
        return cls(
            roll_bonus=get_level_roll_bonus(level),
            energy_cost_reduction=benefits.energy_cost_reduction,
            trust_multiplier=benefits.trust_gain_multiplier,
        )


@dataclass(frozen=True)
class ChoiceModifiers:
    """How the chosen approach shifts a scene.

    Attributes:
        dc_modifier: Added to the scene DC.
        trust_bonus_on_success: Extra trust for succeeding this way.
    """

    dc_modifier: int = 0
    trust_bonus_on_success: int = 0


def get_choice_modifiers(choice: ChoiceType, settings: SceneSettings | None = None) -> ChoiceModifiers:
    """Bold choices are harder but earn more trust; cautious ones are easier."""
    settings = settings or SceneSettings()
    if choice == ChoiceType.BOLD:
        return ChoiceModifiers(
            dc_modifier=settings.bold_dc_modifier,
            trust_bonus_on_success=settings.bold_trust_bonus,
        )
    return ChoiceModifiers(dc_modifier=settings.cautious_dc_modifier)


# =============================================================================
# Rewards
# =============================================================================


def scene_xp_reward(
    scene_type: SceneType,
    success: bool,
    scene_index: int = 0,
    settings: SceneSettings | None = None,
) -> int:
    """XP for attempting a scene.

    Later scenes are worth more: every ``xp_difficulty_step`` scenes add
    ``xp_difficulty_bonus`` XP. Failed attempts earn ``failure_xp_ratio``
    of the total.
    """
    settings = settings or SceneSettings()
    difficulty_bonus = (max(0, scene_index) // settings.xp_difficulty_step) * settings.xp_difficulty_bonus
    ratio = 1.0 if success else settings.failure_xp_ratio
    return math.floor((settings.base_xp[scene_type] + difficulty_bonus) * ratio)


def _trust_modifiers(
    success: bool,
    settings: SceneSettings,
    level: LevelModifiers,
    choice: ChoiceModifiers | None,
) -> TrustModifiers:
    if not success:
        return TrustModifiers(trust_change=-settings.trust_change)
    bonus = choice.trust_bonus_on_success if choice else 0
    return TrustModifiers(
        trust_change=math.floor(settings.trust_change * level.trust_multiplier),
        trust_bonus=bonus,
    )


# =============================================================================
# Resolution
# =============================================================================


def handle_scene_outcome(
    scene: Scene,
    success: bool,
    roll: int | None = None,
    *,
    scene_index: int = 0,
    level_modifiers: LevelModifiers | None = None,
    choice: ChoiceType | None = None,
    settings: SceneSettings | None = None,
) -> SceneOutcome:
    """Compute the outcome of a scene check without side effects.

    Args:
        scene: The scene that was attempted.
        success: Whether the check succeeded.
        roll: The check total, recorded on the outcome.
        scene_index: Position of the scene in the journey (scales XP).
        level_modifiers: Level-based adjustments; neutral when omitted.
        choice: The approach taken, for trust bonuses.
        settings: Scene economy; defaults when omitted.

    Returns:
        The SceneOutcome.
    """
    settings = settings or SceneSettings()
    level = level_modifiers or LevelModifiers()
    choice_mods = get_choice_modifiers(choice, settings) if choice else None

    base_cost = settings.energy_costs[scene.type]
    energy_cost = -max(0, base_cost - level.energy_cost_reduction)
    xp_gained = scene_xp_reward(scene.type, success, scene_index, settings)
    experience = ExperienceChanges(
        xp_gained=xp_gained,
        reason=f"{scene.type.value} scene {'completed' if success else 'attempted'}",
    )
    trust = _trust_modifiers(success, settings, level, choice_mods)

    if scene.type == SceneType.COMBAT and not success and scene.shadow_type:
        logger.info("Scene escalated to combat", scene_id=scene.id, shadow_type=scene.shadow_type)
        return SceneOutcome(
            scene=scene,
            success=False,
            roll=roll,
            triggered_combat=True,
            shadow_type=scene.shadow_type,
            energy_changes=EnergyChanges(energy_cost=energy_cost),
            experience_changes=experience,
            trust_modifiers=trust,
        )

    if success:
        lp_reward = scene.lp_reward if scene.lp_reward is not None else settings.lp_rewards[scene.type]
        resource_changes = ResourceChanges(lp_change=lp_reward)
        energy = EnergyChanges(energy_cost=energy_cost, energy_reward=settings.energy_rewards[scene.type])
    else:
        sp_penalty = scene.sp_penalty if scene.sp_penalty is not None else settings.sp_penalties[scene.type]
        resource_changes = ResourceChanges(sp_change=sp_penalty)
        energy = EnergyChanges(energy_cost=energy_cost)

    logger.debug(
        "Scene resolved",
        scene_id=scene.id,
        success=success,
        roll=roll,
        lp_change=resource_changes.lp_change,
        sp_change=resource_changes.sp_change,
        xp=xp_gained,
    )
    return SceneOutcome(
        scene=scene,
        success=success,
        roll=roll,
        resource_changes=resource_changes,
        energy_changes=energy,
        experience_changes=experience,
        trust_modifiers=trust,
    )


def resolve_scene(
    scene: Scene,
    *,
    player_level: int = 1,
    choice: ChoiceType | None = None,
    scene_index: int = 0,
    source: DiceSource | None = None,
    settings: SceneSettings | None = None,
) -> tuple[DiceResult, SceneOutcome]:
    """Roll the check for a scene and compute its outcome.

    The choice shifts the DC; the player's level supplies the roll bonus,
    energy discount and trust multiplier.

    Returns:
        The dice result and the scene outcome.
    """
    settings = settings or SceneSettings()
    level = LevelModifiers.for_level(player_level)
    dc = scene.dc
    if choice is not None:
        dc = max(1, dc + get_choice_modifiers(choice, settings).dc_modifier)
    dice = roll_dice(dc, level_bonus=level.roll_bonus, source=source)
    outcome = handle_scene_outcome(
        scene,
        dice.success,
        dice.total,
        scene_index=scene_index,
        level_modifiers=level,
        choice=choice,
        settings=settings,
    )
    return dice, outcome


def apply_scene_outcome(resources: PlayerResources, outcome: SceneOutcome) -> bool:
    """Apply an outcome's deltas through the named resource modifiers.

    Resource deltas go first, then energy, guardian trust and finally XP,
    so level-up benefits land on top of the updated pools. A triggered
    encounter carries no LP/SP changes.

    Returns:
        True if the XP award caused a level-up.
    """
    changes = outcome.resource_changes
    if changes.lp_change:
        resources.modify_light_points(changes.lp_change)
    if changes.sp_change:
        resources.modify_shadow_points(changes.sp_change)
    if outcome.energy_changes.energy_cost:
        resources.modify_player_energy(outcome.energy_changes.energy_cost)
    if outcome.success and outcome.energy_changes.energy_reward:
        resources.modify_player_energy(outcome.energy_changes.energy_reward)
    if outcome.trust_modifiers.total:
        resources.modify_guardian_trust(outcome.trust_modifiers.total)
    leveled_up = False
    if outcome.experience_changes.xp_gained:
        leveled_up = resources.modify_experience_points(
            outcome.experience_changes.xp_gained,
            outcome.experience_changes.reason,
        )
    logger.info(
        "Scene outcome applied",
        scene_id=outcome.scene.id,
        triggered_combat=outcome.triggered_combat,
        leveled_up=leveled_up,
    )
    return leveled_up


__all__ = [
    "LevelModifiers",
    "ChoiceModifiers",
    "get_choice_modifiers",
    "scene_xp_reward",
    "handle_scene_outcome",
    "resolve_scene",
    "apply_scene_outcome",
]
