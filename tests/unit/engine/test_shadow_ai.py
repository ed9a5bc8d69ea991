"""Tests for shadow ability selection and enemy turn resolution."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from luminari.core.config import CombatSettings
from luminari.core.exceptions import CombatError
from luminari.data.shadows import (
    ECHO_OF_PAST_PAIN,
    STORM_OF_OVERWHELM,
    VEIL_OF_ISOLATION,
    WHISPER_OF_DOUBT,
    EnemyRegistry,
)
from luminari.engine.shadow_ai import (
    BASIC_STRIKE,
    apply_ability_effect,
    basic_strike_damage,
    resolve_enemy_turn,
    select_shadow_ability,
)
from luminari.models.combat import CombatResources, CombatSession
from luminari.models.enemies import AbilityEffect, ShadowManifestation
from luminari.models.enums import Actor, CombatAction


def _session(enemy: ShadowManifestation, *, lp: int = 10, sp: int = 5) -> CombatSession:
    return CombatSession(
        combat_id="test",
        is_active=True,
        enemy=enemy,
        resources=CombatResources(lp=lp, sp=sp),
        is_player_turn=False,
    )


class TestSelectShadowAbility:
    """Tests for the deterministic ability priorities."""

    def test_signature_when_player_vulnerable(
        self, registry: EnemyRegistry, combat_settings: CombatSettings
    ) -> None:
        """Test low player LP draws the signature ability."""
        enemy = registry.create(STORM_OF_OVERWHELM)
        session = _session(enemy, lp=2)
        session.preferred_actions[CombatAction.ILLUMINATE] = 3

        assert select_shadow_ability(enemy, session, combat_settings).id == "cascade"

    def test_aggressive_when_badly_hurt(
        self, registry: EnemyRegistry, combat_settings: CombatSettings
    ) -> None:
        """Test a shadow below 30% HP prefers an aggressive ability."""
        enemy = registry.create(WHISPER_OF_DOUBT)
        enemy.current_hp = 3

        assert select_shadow_ability(enemy, _session(enemy), combat_settings).id == "magnification"

    def test_counters_favourite_action(
        self, registry: EnemyRegistry, combat_settings: CombatSettings
    ) -> None:
        """Test the shadow punishes the player's most used action."""
        enemy = registry.create(VEIL_OF_ISOLATION)
        session = _session(enemy)
        session.preferred_actions[CombatAction.ILLUMINATE] = 2
        session.preferred_actions[CombatAction.REFLECT] = 1

        assert select_shadow_ability(enemy, session, combat_settings).id == "loneliness"

    def test_first_available_by_default(
        self, registry: EnemyRegistry, combat_settings: CombatSettings
    ) -> None:
        """Test with no other signal the first ready ability is used."""
        enemy = registry.create(ECHO_OF_PAST_PAIN)

        assert select_shadow_ability(enemy, _session(enemy), combat_settings).id == "flashback"

    def test_signature_on_cooldown_falls_through(
        self, registry: EnemyRegistry, combat_settings: CombatSettings
    ) -> None:
        """Test a cooling signature ability is not forced."""
        enemy = registry.create(WHISPER_OF_DOUBT)
        enemy.abilities[0].start_cooldown()

        selected = select_shadow_ability(enemy, _session(enemy, lp=0), combat_settings)

        assert selected is not None
        assert selected.id == "magnification"

    def test_none_when_all_cooling(
        self, registry: EnemyRegistry, combat_settings: CombatSettings
    ) -> None:
        """Test no ability is chosen when every ability cools down."""
        enemy = registry.create(WHISPER_OF_DOUBT)
        for ability in enemy.abilities:
            ability.start_cooldown()

        assert select_shadow_ability(enemy, _session(enemy), combat_settings) is None


class TestBasicStrike:
    """Tests for basic_strike_damage."""

    @pytest.mark.parametrize(("lp", "damage"), [(0, 8), (5, 6), (10, 3), (20, 1), (99, 1)])
    def test_light_mitigates(self, combat_settings: CombatSettings, lp: int, damage: int) -> None:
        """Test LP reduces the strike down to its floor."""
        assert basic_strike_damage(lp, combat_settings) == damage


class TestApplyAbilityEffect:
    """Tests for the declarative effect interpreter."""

    def test_drains_capped_by_pool(
        self, training_shadow: Callable[..., ShadowManifestation]
    ) -> None:
        """Test drains never push a pool below zero."""
        session = _session(training_shadow(), lp=1, sp=0)

        apply_ability_effect(AbilityEffect(lp_drain=3, sp_drain=2), session)

        assert session.resources.lp == 0
        assert session.resources.sp == 0

    def test_lp_to_sp_conversion(
        self, training_shadow: Callable[..., ShadowManifestation]
    ) -> None:
        """Test conversion moves up to the requested amount."""
        session = _session(training_shadow(), lp=2, sp=1)

        fragments = apply_ability_effect(AbilityEffect(lp_to_sp=3), session)

        assert (session.resources.lp, session.resources.sp) == (0, 3)
        assert fragments == ["2 LP turned to SP"]

    def test_status_effects(self, training_shadow: Callable[..., ShadowManifestation]) -> None:
        """Test blocks, skip, amplify and expose land on the right side."""
        session = _session(training_shadow())

        apply_ability_effect(
            AbilityEffect(
                block_healing=2,
                block_lp_generation=1,
                skip_next_turn=True,
                amplify=2.0,
                expose=1.5,
            ),
            session,
        )

        player = session.status_effects
        assert player.healing_blocked == 2
        assert player.lp_generation_blocked == 1
        assert player.skip_next_turn is True
        assert player.damage_reduction == 1.5
        assert session.enemy_status.damage_multiplier == 2.0


class TestResolveEnemyTurn:
    """Tests for resolve_enemy_turn."""

    def test_basic_strike(
        self,
        training_shadow: Callable[..., ShadowManifestation],
        combat_settings: CombatSettings,
    ) -> None:
        """Test an ability-less shadow strikes and hands the player SP."""
        session = _session(training_shadow())

        result = resolve_enemy_turn(session, combat_settings)

        assert result.ability is None
        assert result.damage == 3
        assert session.player_health == 97
        assert session.resources.sp == 6
        entry = session.log.last
        assert entry is not None
        assert entry.actor == Actor.SHADOW
        assert entry.action == BASIC_STRIKE
        assert entry.damage == 3

    def test_reduction_applied_and_consumed(
        self,
        training_shadow: Callable[..., ShadowManifestation],
        combat_settings: CombatSettings,
    ) -> None:
        """Test the player's damage reduction applies to one strike only."""
        session = _session(training_shadow(), lp=0)
        session.status_effects.scale_incoming(0.5)

        first = resolve_enemy_turn(session, combat_settings)
        second = resolve_enemy_turn(session, combat_settings)

        assert first.damage == 4
        assert second.damage == 8

    def test_ability_applied_and_cooling(
        self, registry: EnemyRegistry, combat_settings: CombatSettings
    ) -> None:
        """Test the chosen ability's effect lands and its cooldown starts."""
        enemy = registry.create(VEIL_OF_ISOLATION)
        session = _session(enemy)

        result = resolve_enemy_turn(session, combat_settings)

        assert result.ability is not None
        assert result.ability.id == "withdrawal"
        assert session.status_effects.healing_blocked == 3
        assert enemy.abilities[0].current_cooldown == 4
        assert session.log.last is not None
        assert session.log.last.action == "Withdrawal"

    def test_cooldowns_tick_each_turn(
        self, registry: EnemyRegistry, combat_settings: CombatSettings
    ) -> None:
        """Test every ability cooldown drops by one per enemy turn."""
        enemy = registry.create(VEIL_OF_ISOLATION)
        session = _session(enemy)

        resolve_enemy_turn(session, combat_settings)
        resolve_enemy_turn(session, combat_settings)

        assert enemy.abilities[0].current_cooldown == 3
        assert enemy.abilities[1].current_cooldown == 6

    def test_amplified_next_strike(
        self, registry: EnemyRegistry, combat_settings: CombatSettings
    ) -> None:
        """Test Magnification doubles the following strike."""
        enemy = registry.create(WHISPER_OF_DOUBT)
        enemy.current_hp = 2
        session = _session(enemy, lp=10)

        first = resolve_enemy_turn(session, combat_settings)
        second = resolve_enemy_turn(session, combat_settings)

        assert first.ability is not None
        assert first.ability.id == "magnification"
        assert first.damage == 3
        assert second.damage == 6

    def test_skipped_turn(
        self, registry: EnemyRegistry, combat_settings: CombatSettings
    ) -> None:
        """Test a skipping shadow deals nothing but still cools down."""
        enemy = registry.create(WHISPER_OF_DOUBT)
        enemy.abilities[0].current_cooldown = 2
        session = _session(enemy)
        session.enemy_status.skip_next_turn = True

        result = resolve_enemy_turn(session, combat_settings)

        assert result.skipped is True
        assert session.player_health == 100
        assert enemy.abilities[0].current_cooldown == 1
        assert session.log.last is not None
        assert session.log.last.actor == Actor.SYSTEM
        assert session.log.by_actor(Actor.SHADOW) == []

    def test_requires_enemy(self, combat_settings: CombatSettings) -> None:
        """Test resolving without an enemy is a programming error."""
        with pytest.raises(CombatError):
            resolve_enemy_turn(CombatSession(is_active=True), combat_settings)
