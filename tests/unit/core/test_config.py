"""Tests for configuration management."""

from __future__ import annotations

from pathlib import Path

import pytest

from luminari.core.config import (
    CombatSettings,
    SceneSettings,
    Settings,
    StorageSettings,
    clear_settings_cache,
    get_settings,
)
from luminari.core.exceptions import ConfigurationError
from luminari.models.enums import SceneType


class TestCombatSettings:
    """Tests for CombatSettings configuration."""

    def test_defaults(self) -> None:
        """Test the shipped balance numbers."""
        settings = CombatSettings()

        assert settings.enemy_turn_delay_seconds == 2.5
        assert settings.max_combat_turns == 20
        assert settings.history_log_limit == 50
        assert settings.fortified_threshold == 3
        assert settings.illuminate_lp_cost == 2
        assert settings.reflect_sp_cost == 3
        assert settings.endure_energy_cost == 0
        assert settings.restore_health_on_end is True

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test values can be tuned through the environment."""
        monkeypatch.setenv("LUMINARI_COMBAT_ENEMY_TURN_DELAY_SECONDS", "0.5")
        monkeypatch.setenv("LUMINARI_COMBAT_FORTIFIED_THRESHOLD", "2")

        settings = CombatSettings()

        assert settings.enemy_turn_delay_seconds == 0.5
        assert settings.fortified_threshold == 2

    def test_damage_floor_above_base_rejected(self) -> None:
        """Test the strike floor cannot exceed the base strike."""
        with pytest.raises(ConfigurationError) as exc_info:
            CombatSettings(enemy_base_damage=2, enemy_min_damage=5)

        assert exc_info.value.details["config_key"] == "enemy_min_damage"

    def test_out_of_range_reduction_rejected(self) -> None:
        """Test ENDURE cannot be configured to amplify damage."""
        with pytest.raises(ValueError):
            CombatSettings(endure_damage_reduction=1.5)


class TestSceneSettings:
    """Tests for SceneSettings configuration."""

    def test_tables_cover_every_scene_type(self) -> None:
        """Test every default table has an entry per scene type."""
        settings = SceneSettings()

        for table in (
            settings.energy_costs,
            settings.energy_rewards,
            settings.lp_rewards,
            settings.sp_penalties,
            settings.base_xp,
        ):
            assert set(table) == set(SceneType)

    def test_default_costs(self) -> None:
        """Test a few default scene costs and rewards."""
        settings = SceneSettings()

        assert settings.energy_costs[SceneType.COMBAT] == 15
        assert settings.energy_rewards[SceneType.SKILL] == 5
        assert settings.base_xp[SceneType.JOURNAL] == 20

    def test_incomplete_table_rejected(self) -> None:
        """Test a table missing a scene type is a configuration error."""
        with pytest.raises(ConfigurationError) as exc_info:
            SceneSettings(energy_costs={SceneType.SOCIAL: 8})

        assert exc_info.value.details["config_key"] == "energy_costs"


class TestStorageSettings:
    """Tests for StorageSettings configuration."""

    def test_default_path(self) -> None:
        """Test the default history database location."""
        settings = StorageSettings()

        assert settings.history_db_path == Path("data/combat_history.db")

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Test the database path can be set from the environment."""
        db_path = tmp_path / "history.db"
        monkeypatch.setenv("LUMINARI_HISTORY_DB_PATH", str(db_path))

        assert StorageSettings().history_db_path == db_path


class TestSettings:
    """Tests for main Settings class."""

    def test_default_settings(self) -> None:
        """Test default application settings."""
        settings = Settings()

        assert settings.app_name == "Luminari's Quest"
        assert settings.debug is False
        assert settings.log_level == "INFO"
        assert isinstance(settings.combat, CombatSettings)
        assert isinstance(settings.scene, SceneSettings)
        assert isinstance(settings.storage, StorageSettings)

    def test_invalid_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test invalid log level is rejected."""
        monkeypatch.setenv("LUMINARI_LOG_LEVEL", "VERBOSE")

        with pytest.raises(ValueError):
            Settings()


class TestGetSettings:
    """Tests for the cached settings accessor."""

    def test_singleton_pattern(self) -> None:
        """Test get_settings returns the same instance."""
        assert get_settings() is get_settings()

    def test_cache_clear(self) -> None:
        """Test clearing the cache produces a new instance."""
        first = get_settings()
        clear_settings_cache()

        assert get_settings() is not first

    def test_nested_env_values(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test section values come through the environment."""
        monkeypatch.setenv("LUMINARI_COMBAT_MAX_COMBAT_TURNS", "12")
        monkeypatch.setenv("LUMINARI_SCENE_TRUST_CHANGE", "7")

        settings = get_settings()

        assert settings.combat.max_combat_turns == 12
        assert settings.scene.trust_change == 7

    def test_load_failure_wrapped(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test invalid configuration surfaces as ConfigurationError."""
        monkeypatch.setenv("LUMINARI_LOG_LEVEL", "VERBOSE")

        with pytest.raises(ConfigurationError, match="Failed to load application settings"):
            get_settings()
