"""Combat state machine for shadow encounters.

The CombatEngine owns one CombatSession at a time and drives it through

    Idle -> Active(PlayerTurn) <-> Active(EnemyTurn) -> Ended

Player intents arrive through ``execute_action``, ``end_turn`` and
``surrender``. Illegal intents (wrong turn, not enough LP/SP/energy, no
encounter) are rejected by returning False: nothing in the session
changes, the engine only bumps ``rejected_actions`` and writes a debug
event.

When the player's turn ends the shadow's answer is scheduled through an
EnemyTurnScheduler. The scheduled callback checks its cancellation token
and the session state before touching anything, and every path that ends
the encounter cancels the pending turn first.

Victory and defeat are detected at the exact step that drops a health
value to zero. Ending an encounter grants the victory reward, freezes a
CombatSnapshot, writes the session's pools back to PlayerResources and
hands the snapshot to the history sink.

Example:
    >>> from luminari.engine.scheduler import ManualScheduler
    >>> scheduler = ManualScheduler()
    >>> engine = CombatEngine(scheduler=scheduler)
    >>> session = engine.start_combat("whisper-of-doubt")
    >>> session.is_player_turn, session.turn
    (True, 1)
    >>> engine.execute_action(CombatAction.ILLUMINATE)
    True
    >>> _ = scheduler.advance(engine.settings.enemy_turn_delay_seconds)
    >>> session.turn
    2
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from uuid import uuid4

from luminari.core.config import CombatSettings
from luminari.core.exceptions import CombatError, InvalidGameStateError
from luminari.core.logging import bind_context, get_logger, unbind_context
from luminari.data.shadows import EnemyRegistry, default_registry
from luminari.engine.scheduler import (
    CancellationToken,
    EnemyTurnScheduler,
    ManualScheduler,
    ScheduledTask,
    Scheduler,
)
from luminari.engine.shadow_ai import BASIC_STRIKE, resolve_enemy_turn
from luminari.models.combat import (
    ActionCost,
    CombatEndStatus,
    CombatResources,
    CombatSession,
    CombatSnapshot,
    LogEntry,
)
from luminari.models.enemies import ShadowManifestation
from luminari.models.enums import Actor, CombatAction, CombatEndReason
from luminari.models.resources import PlayerResources
from luminari.models.scenes import SceneOutcome
from luminari.models.status import compute_damage
from luminari.storage.history import CombatHistorySink, save_combat_history


logger = get_logger(__name__)


@dataclass(frozen=True)
class GrowthInsights:
    """Reflection material from the most recent encounter.

    Attributes:
        enemy_name: Shadow that was faced.
        therapeutic_insight: What the shadow represents.
        growth_message: Earned only by victory.
        permanent_benefit: Earned only by victory.
    """

    enemy_name: str
    therapeutic_insight: str
    growth_message: str | None = None
    permanent_benefit: str | None = None


class CombatEngine:
    """Runs shadow encounters against an explicit player resource record.

    Args:
        registry: Archetype registry used to build enemies from ids.
        settings: Combat balance and pacing numbers.
        scheduler: Delay provider for the shadow's turn. Defaults to a
            ManualScheduler, which only fires when advanced.
        history: Sink receiving the snapshot of every finished encounter.
        player: Persistent resources the encounter draws from and syncs
            back into.
    """

    def __init__(
        self,
        *,
        registry: EnemyRegistry | None = None,
        settings: CombatSettings | None = None,
        scheduler: Scheduler | None = None,
        history: CombatHistorySink | None = None,
        player: PlayerResources | None = None,
    ) -> None:
        self.registry = registry or default_registry()
        self.settings = settings or CombatSettings()
        self.scheduler = scheduler or ManualScheduler()
        self.history = history
        self.player = player or PlayerResources()
        self.session = CombatSession()
        self.rejected_actions = 0
        self.last_snapshot: CombatSnapshot | None = None
        self._last_enemy: ShadowManifestation | None = None
        self._enemy_turns = EnemyTurnScheduler(self.scheduler, self.settings.enemy_turn_delay_seconds)
        logger.info(
            "CombatEngine initialized",
            archetypes=len(self.registry),
            enemy_turn_delay=self.settings.enemy_turn_delay_seconds,
        )

    # =========================================================================
    # Read-only views
    # =========================================================================

    @property
    def pending_enemy_turn(self) -> ScheduledTask | None:
        return self._enemy_turns.pending

    @property
    def growth_insights(self) -> GrowthInsights | None:
        """Insights from the last finished encounter, if any."""
        enemy = self._last_enemy
        snapshot = self.last_snapshot
        if enemy is None or snapshot is None:
            return None
        if not snapshot.victory:
            return GrowthInsights(enemy_name=enemy.name, therapeutic_insight=enemy.therapeutic_insight)
        return GrowthInsights(
            enemy_name=enemy.name,
            therapeutic_insight=enemy.therapeutic_insight,
            growth_message=enemy.victory_reward.growth_message,
            permanent_benefit=enemy.victory_reward.permanent_benefit,
        )

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start_combat(
        self,
        enemy: str | ShadowManifestation,
        *,
        scene_index: int = 0,
        player: PlayerResources | None = None,
    ) -> CombatSession:
        """Begin an encounter on the player's turn.

        Args:
            enemy: Archetype id to build from the registry, or a ready enemy.
            scene_index: Scene that led to the encounter, kept for history.
            player: Replaces the engine's player resources when given.

        Returns:
            The new active session.

        Raises:
            InvalidGameStateError: If an encounter is active or a finished
                encounter's end status has not been cleared.
            UnknownEnemyError: If ``enemy`` is an unregistered id.
        """
        if self.session.is_active:
            raise InvalidGameStateError(
                "Cannot start combat while another encounter is active",
                current_state="active",
                expected_states=["idle"],
            )
        if self.session.is_ended:
            raise InvalidGameStateError(
                "Clear the previous combat end status before starting a new encounter",
                current_state="ended",
                expected_states=["idle"],
            )

        if player is not None:
            self.player = player
        shadow = self.registry.create(enemy) if isinstance(enemy, str) else enemy
        resources = self.player

        self._enemy_turns.cancel()
        self.session = CombatSession(
            combat_id=str(uuid4()),
            is_active=True,
            enemy=shadow,
            resources=CombatResources(lp=resources.light_points, sp=resources.shadow_points),
            player_health=resources.health,
            max_player_health=resources.max_health,
            player_energy=resources.energy,
            max_player_energy=resources.max_energy,
            player_level=resources.level,
            turn=1,
            is_player_turn=True,
            resources_at_start=resources.snapshot(),
            scene_index=scene_index,
        )

        bind_context(combat_id=self.session.combat_id, enemy_id=shadow.id)
        logger.info(
            "Combat started",
            enemy_name=shadow.name,
            enemy_hp=shadow.current_hp,
            lp=resources.light_points,
            sp=resources.shadow_points,
            health=resources.health,
            scene_index=scene_index,
        )
        return self.session

    def start_encounter(self, outcome: SceneOutcome, *, scene_index: int = 0) -> CombatSession | None:
        """Start the encounter a failed combat scene asks for.

        Returns:
            The new session, or None if the outcome did not trigger combat.
        """
        if not outcome.triggered_combat or outcome.shadow_type is None:
            return None
        return self.start_combat(outcome.shadow_type, scene_index=scene_index)

    def clear_combat_end(self) -> None:
        """Forget the last end status so a new encounter can start."""
        if self.session.is_active:
            logger.debug("Ignoring clear_combat_end during an active encounter")
            return
        self.session.combat_end_status = CombatEndStatus()

    # =========================================================================
    # Action rules
    # =========================================================================

    def get_action_cost(self, action: CombatAction) -> ActionCost:
        """Static price of ``action`` under the current settings."""
        s = self.settings
        costs = {
            CombatAction.ILLUMINATE: ActionCost(lp=s.illuminate_lp_cost),
            CombatAction.REFLECT: ActionCost(sp=s.reflect_sp_cost),
            CombatAction.ENDURE: ActionCost(energy=s.endure_energy_cost),
            CombatAction.EMBRACE: ActionCost(sp=s.embrace_min_sp, consumes_all_sp=True),
        }
        return costs[action]

    def get_action_description(self, action: CombatAction, level: int | None = None) -> str:
        """Player-facing summary of what ``action`` does at ``level``."""
        s = self.settings
        level = level if level is not None else self.session.player_level
        if action is CombatAction.ILLUMINATE:
            damage = s.illuminate_base_damage + math.floor(level * s.illuminate_level_scaling)
            return f"Spend {s.illuminate_lp_cost} LP to deal {damage} damage with the light of understanding."
        if action is CombatAction.REFLECT:
            heal = s.reflect_heal_base + level
            return (
                f"Spend {s.reflect_sp_cost} SP to gain {s.reflect_lp_gain} LP "
                f"and recover {heal} health through reflection."
            )
        if action is CombatAction.ENDURE:
            cost = f"Spend {s.endure_energy_cost} energy to" if s.endure_energy_cost else "Steady yourself to"
            reduction = round((1 - s.endure_damage_reduction) * 100)
            return (
                f"{cost} reduce the next hit by {reduction}% and gain {s.endure_lp_gain} LP. "
                f"Enduring {s.fortified_threshold} times in a row makes you Fortified."
            )
        return "Spend all SP to turn your shadow into strength, dealing half of it as damage."

    def can_use_action(self, action: CombatAction) -> bool:
        """Whether ``action`` is legal right now."""
        return self._rejection_reason(action) is None

    def _rejection_reason(self, action: CombatAction) -> str | None:
        session = self.session
        if not session.is_in_progress:
            return "no_active_combat"
        if not session.is_player_turn:
            return "not_player_turn"
        cost = self.get_action_cost(action)
        if session.resources.lp < cost.lp:
            return "insufficient_lp"
        if session.resources.sp < cost.sp:
            return "insufficient_sp"
        if cost.energy and session.player_energy < cost.energy:
            return "insufficient_energy"
        return None

    def _reject(self, operation: str, reason: str) -> bool:
        self.rejected_actions += 1
        logger.debug(
            "Rejected combat input",
            operation=operation,
            reason=reason,
            rejected_actions=self.rejected_actions,
        )
        return False

    # =========================================================================
    # Player turn
    # =========================================================================

    def execute_action(self, action: CombatAction) -> bool:
        """Resolve a player action.

        Returns:
            True if the action was applied, False if it was rejected.
        """
        reason = self._rejection_reason(action)
        if reason is not None:
            return self._reject(action.value, reason)

        session = self.session
        if action is CombatAction.ILLUMINATE:
            effect, damage = self._illuminate()
        elif action is CombatAction.REFLECT:
            effect, damage = self._reflect()
        elif action is CombatAction.ENDURE:
            effect, damage = self._endure()
        else:
            effect, damage = self._embrace()

        if action is not CombatAction.ENDURE:
            session.status_effects.consecutive_endures = 0
        session.preferred_actions[action] += 1

        session.log.append(
            LogEntry(
                turn=session.turn,
                actor=Actor.PLAYER,
                action=action.value,
                effect=effect,
                message=self._action_message(action),
                damage=damage,
            )
        )
        logger.info(
            "Player action",
            action=action.value,
            effect=effect,
            damage=damage,
            lp=session.resources.lp,
            sp=session.resources.sp,
            turn=session.turn,
        )

        enemy = session.enemy
        if enemy is not None and enemy.is_defeated:
            self._end_combat(
                victory=True,
                outcome=CombatEndReason.VICTORY,
                reason=f"You overcame {enemy.name}",
            )
            return True

        self._hand_over_turn()
        return True

    def end_turn(self) -> bool:
        """Pass without acting.

        Returns:
            True if the turn passed, False if passing was not allowed.
        """
        session = self.session
        if not session.is_in_progress:
            return self._reject("end_turn", "no_active_combat")
        if not session.is_player_turn:
            return self._reject("end_turn", "not_player_turn")

        session.status_effects.consecutive_endures = 0
        session.log.append(
            LogEntry(
                turn=session.turn,
                actor=Actor.PLAYER,
                action="pass",
                effect="Turn passed",
                message="You hold still and wait.",
            )
        )
        logger.info("Player passed", turn=session.turn)
        self._hand_over_turn()
        return True

    def surrender(self) -> bool:
        """Give up the encounter, whoever's turn it is.

        Returns:
            True if an encounter was ended, False if none was in progress.
        """
        session = self.session
        if not session.is_in_progress:
            return self._reject("surrender", "no_active_combat")

        session.log.append(
            LogEntry(
                turn=session.turn,
                actor=Actor.SYSTEM,
                action="surrender",
                effect="Encounter abandoned",
                message="You step back from the shadow. It will be waiting.",
            )
        )
        self._end_combat(
            victory=False,
            outcome=CombatEndReason.SURRENDER,
            reason="You chose to retreat",
        )
        return True

    def _illuminate(self) -> tuple[str, int]:
        s = self.settings
        session = self.session
        enemy = self._require_enemy()
        session.resources.lp -= s.illuminate_lp_cost
        base = s.illuminate_base_damage + math.floor(session.player_level * s.illuminate_level_scaling)
        damage = compute_damage(base, session.status_effects, session.enemy_status)
        enemy.take_damage(damage)
        return f"Dealt {damage} damage (-{s.illuminate_lp_cost} LP)", damage

    def _reflect(self) -> tuple[str, int | None]:
        s = self.settings
        session = self.session
        status = session.status_effects
        session.resources.sp -= s.reflect_sp_cost
        parts = [f"-{s.reflect_sp_cost} SP"]

        if status.is_lp_generation_blocked:
            parts.append("LP gain blocked")
        else:
            session.resources.lp += s.reflect_lp_gain
            parts.append(f"+{s.reflect_lp_gain} LP")

        if status.is_healing_blocked:
            parts.append("healing blocked")
        else:
            before = session.player_health
            session.player_health = min(
                session.max_player_health,
                before + s.reflect_heal_base + session.player_level,
            )
            parts.append(f"+{session.player_health - before} health")
        return ", ".join(parts), None

    def _endure(self) -> tuple[str, int | None]:
        s = self.settings
        session = self.session
        status = session.status_effects
        parts: list[str] = []

        if s.endure_energy_cost:
            session.player_energy -= s.endure_energy_cost
            parts.append(f"-{s.endure_energy_cost} energy")

        status.consecutive_endures += 1
        status.scale_incoming(s.endure_damage_reduction)
        if status.consecutive_endures >= s.fortified_threshold:
            status.scale_incoming(s.fortified_damage_reduction)
            parts.append(f"Fortified: incoming damage x{status.damage_reduction:g}")
        else:
            parts.append(f"Incoming damage x{status.damage_reduction:g}")

        if status.is_lp_generation_blocked:
            parts.append("LP gain blocked")
        else:
            session.resources.lp += s.endure_lp_gain
            parts.append(f"+{s.endure_lp_gain} LP")
        return ", ".join(parts), None

    def _embrace(self) -> tuple[str, int]:
        session = self.session
        enemy = self._require_enemy()
        spent = session.resources.sp
        session.resources.sp = 0
        damage = compute_damage(max(1, spent // 2), session.status_effects, session.enemy_status)
        enemy.take_damage(damage)
        return f"Dealt {damage} damage (-{spent} SP)", damage

    @staticmethod
    def _action_message(action: CombatAction) -> str:
        messages = {
            CombatAction.ILLUMINATE: "You shine the light of understanding on the shadow.",
            CombatAction.REFLECT: "You pause and turn the struggle into insight.",
            CombatAction.ENDURE: "You brace yourself and hold your ground.",
            CombatAction.EMBRACE: "You accept the shadow as part of you and it loses its hold.",
        }
        return messages[action]

    def _require_enemy(self) -> ShadowManifestation:
        enemy = self.session.enemy
        if enemy is None:
            raise CombatError("Encounter has no enemy", turn=self.session.turn)
        return enemy

    def _hand_over_turn(self) -> None:
        self.session.is_player_turn = False
        self._enemy_turns.schedule(self._enemy_turn)

    # =========================================================================
    # Shadow turn
    # =========================================================================

    def _enemy_turn(self, token: CancellationToken) -> None:
        session = self.session
        if token.is_cancelled or not session.is_in_progress or session.is_player_turn:
            logger.debug("Discarding stale enemy turn", turn=session.turn)
            return

        enemy = self._require_enemy()
        result = resolve_enemy_turn(session, self.settings)

        if session.player_health <= 0:
            finisher = result.ability.name if result.ability is not None else BASIC_STRIKE
            self._end_combat(
                victory=False,
                outcome=CombatEndReason.DEFEAT,
                reason=f"{enemy.name} overwhelmed you with {finisher}",
            )
            return

        if session.turn >= self.settings.max_combat_turns:
            session.log.append(
                LogEntry(
                    turn=session.turn,
                    actor=Actor.SYSTEM,
                    action="outlasted",
                    effect="Turn limit reached",
                    message="The shadow outlasts you and you withdraw to recover.",
                )
            )
            self._end_combat(
                victory=False,
                outcome=CombatEndReason.OUTLASTED,
                reason=f"The shadow outlasted you after {session.turn} turns",
            )
            return

        session.turn += 1
        self._begin_player_turn()

    def _begin_player_turn(self) -> None:
        # The skip flag is one-shot: consumed here, the player still acts.
        session = self.session
        skip_cleared = session.status_effects.tick_turn_start()
        session.is_player_turn = True
        logger.debug("Player turn started", turn=session.turn, skip_cleared=skip_cleared)

    # =========================================================================
    # Ending
    # =========================================================================

    def _end_combat(self, *, victory: bool, outcome: CombatEndReason, reason: str) -> None:
        self._enemy_turns.cancel()
        session = self.session
        enemy = self._require_enemy()

        if victory and enemy.victory_reward.lp_bonus:
            session.resources.lp += enemy.victory_reward.lp_bonus

        session.combat_end_status = CombatEndStatus(
            is_ended=True,
            victory=victory,
            reason=reason,
            outcome=outcome,
        )
        session.is_player_turn = False

        snapshot = self._build_snapshot(enemy, victory, outcome)
        self.last_snapshot = snapshot
        self._sync_player()
        save_combat_history(self.history, snapshot)

        self._last_enemy = enemy
        session.is_active = False
        session.enemy = None

        logger.info(
            "Combat ended",
            victory=victory,
            outcome=outcome.value,
            turns=session.turn,
            player_health=snapshot.final_player_hp,
            enemy_hp=snapshot.final_enemy_hp,
        )
        unbind_context("combat_id", "enemy_id")

    def _build_snapshot(
        self,
        enemy: ShadowManifestation,
        victory: bool,
        outcome: CombatEndReason,
    ) -> CombatSnapshot:
        session = self.session
        resources_at_end = session.current_resources()
        return CombatSnapshot(
            combat_id=session.combat_id or "",
            enemy_id=enemy.id,
            enemy_name=enemy.name,
            victory=victory,
            outcome=outcome,
            turns_taken=session.turn,
            final_player_hp=session.player_health,
            final_enemy_hp=enemy.current_hp,
            resources_at_start=session.resources_at_start or resources_at_end,
            resources_at_end=resources_at_end,
            actions_used=dict(session.preferred_actions),
            combat_log=session.log.tail(self.settings.history_log_limit),
            player_level=session.player_level,
            scene_index=session.scene_index,
        )

    def _sync_player(self) -> None:
        """Write the encounter's pools back through the modifier operations."""
        session = self.session
        player = self.player
        player.modify_light_points(session.resources.lp - player.light_points)
        player.modify_shadow_points(session.resources.sp - player.shadow_points)
        player.modify_player_energy(session.player_energy - player.energy)
        player.modify_health(session.player_health - player.health)
        if self.settings.restore_health_on_end:
            player.modify_health(player.max_health - player.health)


__all__ = [
    "CombatEngine",
    "GrowthInsights",
]
