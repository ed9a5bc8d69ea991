"""Shadow decision making and enemy turn resolution.

Selection is deterministic. Among abilities that are off cooldown the
shadow picks, in priority order:

1. its signature ability (the first one) when the player's LP is below the
   vulnerability threshold;
2. an aggressive ability when its own HP ratio is below the aggressive
   threshold;
3. an ability that counters the player's most used action;
4. the first available ability.

When every ability is cooling down the shadow only strikes. Every enemy
turn deals the basic strike ``max(min, base - floor(lp * mitigation))``
through the status damage formula and hands the player SP.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from luminari.core.config import CombatSettings
from luminari.core.exceptions import CombatError
from luminari.core.logging import get_logger
from luminari.models.combat import CombatSession, LogEntry
from luminari.models.enemies import AbilityEffect, ShadowAbility, ShadowManifestation
from luminari.models.enums import Actor
from luminari.models.status import compute_damage


logger = get_logger(__name__)

BASIC_STRIKE = "Shadow Strike"


@dataclass
class EnemyTurnResult:
    """What happened during one shadow turn.

    Attributes:
        ability: Ability used, or None for a plain strike.
        damage: Damage dealt to the player.
        sp_gained: SP handed to the player by the strike.
        effects: Human-readable effect fragments.
        skipped: The shadow lost its turn.
        entry: Log entry written for the turn.
    """

    ability: ShadowAbility | None = None
    damage: int = 0
    sp_gained: int = 0
    effects: list[str] = field(default_factory=list)
    skipped: bool = False
    entry: LogEntry | None = None


# =============================================================================
# Selection
# =============================================================================


def select_shadow_ability(
    enemy: ShadowManifestation,
    session: CombatSession,
    settings: CombatSettings,
) -> ShadowAbility | None:
    """Pick the ability the shadow uses this turn, or None to only strike."""
    available = enemy.available_abilities
    if not available:
        return None

    signature = enemy.abilities[0]
    if session.resources.lp < settings.shadow_vulnerable_lp_threshold and signature.is_ready:
        logger.debug("Shadow presses vulnerable player", ability=signature.id)
        return signature

    if enemy.hp_ratio < settings.shadow_aggressive_hp_ratio:
        for ability in available:
            if ability.aggressive:
                logger.debug("Shadow turns aggressive", ability=ability.id)
                return ability

    favourite = session.most_used_action
    if favourite is not None:
        for ability in available:
            if favourite in ability.counters:
                logger.debug("Shadow counters player", ability=ability.id, action=favourite)
                return ability

    return available[0]


# =============================================================================
# Effects
# =============================================================================


def apply_ability_effect(effect: AbilityEffect, session: CombatSession) -> list[str]:
    """Apply a declarative ability effect to the session.

    Returns:
        Short descriptions of what changed, in application order.
    """
    resources = session.resources
    player = session.status_effects
    fragments: list[str] = []

    if effect.lp_drain:
        drained = min(resources.lp, effect.lp_drain)
        resources.lp -= drained
        fragments.append(f"-{drained} LP")
    if effect.sp_drain:
        drained = min(resources.sp, effect.sp_drain)
        resources.sp -= drained
        fragments.append(f"-{drained} SP")
    if effect.lp_to_sp:
        converted = min(resources.lp, effect.lp_to_sp)
        resources.lp -= converted
        resources.sp += converted
        fragments.append(f"{converted} LP turned to SP")
    if effect.sp_gain:
        resources.sp += effect.sp_gain
        fragments.append(f"+{effect.sp_gain} SP")
    if effect.block_healing:
        player.block_healing(effect.block_healing)
        fragments.append(f"healing blocked {player.healing_blocked} turns")
    if effect.block_lp_generation:
        player.block_lp_generation(effect.block_lp_generation)
        fragments.append(f"LP generation blocked {player.lp_generation_blocked} turns")
    if effect.skip_next_turn:
        player.skip_next_turn = True
        fragments.append("next turn lost")
    if effect.amplify is not None:
        session.enemy_status.scale_outgoing(effect.amplify)
        fragments.append(f"next strike x{session.enemy_status.damage_multiplier:g}")
    if effect.expose is not None:
        player.scale_incoming(effect.expose)
        fragments.append(f"exposed x{player.damage_reduction:g}")
    return fragments


def basic_strike_damage(lp: int, settings: CombatSettings) -> int:
    """Base strike before status modifiers: more LP, less damage."""
    mitigated = settings.enemy_base_damage - math.floor(lp * settings.enemy_lp_mitigation)
    return max(settings.enemy_min_damage, mitigated)


# =============================================================================
# Turn resolution
# =============================================================================


def resolve_enemy_turn(session: CombatSession, settings: CombatSettings) -> EnemyTurnResult:
    """Resolve one shadow turn against the session.

    Ticks the shadow's status counters, strikes, applies the chosen ability,
    advances cooldowns and writes exactly one log entry. Defeat detection
    and turn hand-off are left to the caller.

    Raises:
        CombatError: If the session has no enemy.
    """
    enemy = session.enemy
    if enemy is None:
        raise CombatError("Enemy turn requested without an enemy", turn=session.turn)

    result = EnemyTurnResult()
    if session.enemy_status.tick_turn_start():
        for ability in enemy.abilities:
            ability.tick_cooldown()
        result.skipped = True
        result.entry = LogEntry(
            turn=session.turn,
            actor=Actor.SYSTEM,
            action="skip",
            effect="Shadow turn skipped",
            message=f"{enemy.name} falters and loses its turn.",
        )
        session.log.append(result.entry)
        logger.info("Shadow turn skipped", enemy_id=enemy.id, turn=session.turn)
        return result

    ability = select_shadow_ability(enemy, session, settings)
    result.ability = ability

    base = basic_strike_damage(session.resources.lp, settings)
    damage = compute_damage(base, session.enemy_status, session.status_effects)
    session.player_health = max(0, session.player_health - damage)
    result.damage = damage

    session.resources.sp += settings.enemy_sp_gain
    result.sp_gained = settings.enemy_sp_gain

    for cooling in enemy.abilities:
        cooling.tick_cooldown()

    result.effects.append(f"Dealt {damage} damage")
    if settings.enemy_sp_gain:
        result.effects.append(f"+{settings.enemy_sp_gain} SP")
    if ability is not None:
        result.effects.extend(apply_ability_effect(ability.effect, session))
        ability.start_cooldown()

    message = (
        f"{enemy.name} uses {ability.name}: {ability.description}"
        if ability is not None
        else f"{enemy.name} lashes out."
    )
    result.entry = LogEntry(
        turn=session.turn,
        actor=Actor.SHADOW,
        action=ability.name if ability is not None else BASIC_STRIKE,
        effect="; ".join(result.effects),
        message=message,
        damage=damage,
    )
    session.log.append(result.entry)

    logger.info(
        "Shadow acted",
        enemy_id=enemy.id,
        ability=ability.id if ability is not None else None,
        damage=damage,
        player_health=session.player_health,
        turn=session.turn,
    )
    return result


__all__ = [
    "BASIC_STRIKE",
    "EnemyTurnResult",
    "select_shadow_ability",
    "apply_ability_effect",
    "basic_strike_damage",
    "resolve_enemy_turn",
]
