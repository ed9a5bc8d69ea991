"""Tests for the shadow archetype registry and enemy models."""

from __future__ import annotations

import pytest

from luminari.core.exceptions import UnknownEnemyError
from luminari.data.shadows import (
    ECHO_OF_PAST_PAIN,
    STORM_OF_OVERWHELM,
    VEIL_OF_ISOLATION,
    WHISPER_OF_DOUBT,
    EnemyRegistry,
    default_registry,
    whisper_of_doubt,
)
from luminari.models.enemies import ShadowAbility, ShadowManifestation
from luminari.models.enums import ShadowType


class TestEnemyRegistry:
    """Tests for EnemyRegistry."""

    def test_default_archetypes(self, registry: EnemyRegistry) -> None:
        """Test the four built-in archetypes are registered."""
        assert len(registry) == 4
        assert set(registry) == {
            WHISPER_OF_DOUBT,
            VEIL_OF_ISOLATION,
            STORM_OF_OVERWHELM,
            ECHO_OF_PAST_PAIN,
        }

    @pytest.mark.parametrize(
        ("enemy_id", "max_hp", "lp_bonus"),
        [
            (WHISPER_OF_DOUBT, 15, 5),
            (VEIL_OF_ISOLATION, 18, 6),
            (STORM_OF_OVERWHELM, 20, 7),
            (ECHO_OF_PAST_PAIN, 22, 8),
        ],
    )
    def test_create_fresh_enemy(
        self, registry: EnemyRegistry, enemy_id: str, max_hp: int, lp_bonus: int
    ) -> None:
        """Test archetypes start at full HP with their reward."""
        enemy = registry.create(enemy_id)

        assert enemy.id == enemy_id
        assert enemy.current_hp == enemy.max_hp == max_hp
        assert enemy.victory_reward.lp_bonus == lp_bonus
        assert len(enemy.abilities) == 2
        assert all(ability.is_ready for ability in enemy.abilities)

    def test_create_returns_independent_instances(self, registry: EnemyRegistry) -> None:
        """Test damage to one instance does not leak into the next."""
        first = registry.create(WHISPER_OF_DOUBT)
        first.take_damage(5)

        assert registry.create(WHISPER_OF_DOUBT).current_hp == 15

    def test_unknown_enemy(self, registry: EnemyRegistry) -> None:
        """Test unknown ids raise with the known ids attached."""
        with pytest.raises(UnknownEnemyError) as exc_info:
            registry.create("mist-of-apathy")

        assert exc_info.value.details["enemy_id"] == "mist-of-apathy"
        assert WHISPER_OF_DOUBT in exc_info.value.details["known"]

    def test_register_custom(self) -> None:
        """Test new archetypes can be registered."""
        registry = EnemyRegistry()
        registry.register("echo", whisper_of_doubt)

        assert "echo" in registry
        assert "whisper-of-doubt" not in registry


class TestShadowModels:
    """Tests for ShadowManifestation and ShadowAbility behaviour."""

    def test_take_damage_floors_at_zero(self) -> None:
        """Test overkill is clamped and reported."""
        enemy = default_registry().create(WHISPER_OF_DOUBT)

        removed = enemy.take_damage(40)

        assert removed == 15
        assert enemy.current_hp == 0
        assert enemy.is_defeated

    def test_hp_above_max_rejected(self) -> None:
        """Test current_hp cannot exceed max_hp."""
        with pytest.raises(ValueError, match="exceeds max_hp"):
            ShadowManifestation(
                id="x",
                name="X",
                type=ShadowType.DOUBT,
                current_hp=12,
                max_hp=10,
            )

    def test_cooldown_cycle(self) -> None:
        """Test an ability goes on cooldown and ticks back to ready."""
        ability = ShadowAbility(id="a", name="A", cooldown_turns=2)

        ability.start_cooldown()
        assert not ability.is_ready

        ability.tick_cooldown()
        ability.tick_cooldown()
        ability.tick_cooldown()
        assert ability.is_ready
        assert ability.current_cooldown == 0

    def test_available_abilities_in_order(self) -> None:
        """Test cooling abilities are skipped and order is kept."""
        enemy = default_registry().create(WHISPER_OF_DOUBT)
        enemy.abilities[0].start_cooldown()

        assert [a.id for a in enemy.available_abilities] == ["magnification"]
