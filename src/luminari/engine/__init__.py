"""Encounter engine.

Submodules:
    dice: d20 checks with an injectable face source
    scene_resolver: Pure scene outcome computation and its application
    scheduler: Cancelable delayed tasks for the shadow's turn
    shadow_ai: Shadow ability selection and enemy turn resolution
    combat: The combat state machine

Example:
    >>> from luminari.engine import CombatEngine, ManualScheduler
    >>> from luminari.models import CombatAction
    >>>
    >>> scheduler = ManualScheduler()
    >>> engine = CombatEngine(scheduler=scheduler)
    >>> session = engine.start_combat("veil-of-isolation")
    >>> engine.execute_action(CombatAction.ENDURE)
    True
    >>> _ = scheduler.run_all()
"""

from __future__ import annotations

# =============================================================================
# Dice
# =============================================================================
from luminari.engine.dice import (
    DiceResult,
    DiceRoller,
    DiceSource,
    d20_source,
    fixed_source,
    roll_dice,
)

# =============================================================================
# Scenes
# =============================================================================
from luminari.engine.scene_resolver import (
    ChoiceModifiers,
    LevelModifiers,
    apply_scene_outcome,
    get_choice_modifiers,
    handle_scene_outcome,
    resolve_scene,
    scene_xp_reward,
)

# =============================================================================
# Scheduling
# =============================================================================
from luminari.engine.scheduler import (
    AsyncioScheduler,
    CancellationToken,
    EnemyTurnScheduler,
    ManualScheduler,
    ScheduledTask,
    Scheduler,
)

# =============================================================================
# Combat
# =============================================================================
from luminari.engine.shadow_ai import (
    EnemyTurnResult,
    resolve_enemy_turn,
    select_shadow_ability,
)
from luminari.engine.combat import CombatEngine, GrowthInsights


__all__ = [
    # Dice
    "DiceResult",
    "DiceRoller",
    "DiceSource",
    "d20_source",
    "fixed_source",
    "roll_dice",
    # Scenes
    "ChoiceModifiers",
    "LevelModifiers",
    "apply_scene_outcome",
    "get_choice_modifiers",
    "handle_scene_outcome",
    "resolve_scene",
    "scene_xp_reward",
    # Scheduling
    "AsyncioScheduler",
    "CancellationToken",
    "EnemyTurnScheduler",
    "ManualScheduler",
    "ScheduledTask",
    "Scheduler",
    # Combat
    "CombatEngine",
    "EnemyTurnResult",
    "GrowthInsights",
    "resolve_enemy_turn",
    "select_shadow_ability",
]
