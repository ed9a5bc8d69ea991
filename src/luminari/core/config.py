"""Configuration management for the Luminari encounter core.

This module provides centralized configuration management using pydantic-settings,
supporting environment variables, .env files, and runtime overrides. All balance
numbers (action costs, enemy damage, scene energy) are settings rather than
hard-coded rules so designers can tune them without touching engine code.

The engine itself never calls ``get_settings()``: callers build or fetch a
settings object and pass the relevant section in explicitly.

Example:
    >>> from luminari.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.combat.enemy_turn_delay_seconds
    2.5

Environment Variables:
    LUMINARI_COMBAT_ENEMY_TURN_DELAY_SECONDS: Pause before the shadow acts
    LUMINARI_COMBAT_MAX_COMBAT_TURNS: Turn limit before the player is outlasted
    LUMINARI_SCENE_TRUST_CHANGE: Guardian trust delta per scene
    LUMINARI_HISTORY_DB_PATH: Path to the SQLite combat history database
    LUMINARI_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from luminari.core.exceptions import ConfigurationError
from luminari.models.enums import SceneType


class CombatSettings(BaseSettings):
    """Balance and pacing numbers for shadow combat.

    Attributes:
        enemy_turn_delay_seconds: Delay between the player's turn ending and
            the shadow acting.
        max_combat_turns: Turn at which an unresolved encounter ends in defeat.
        history_log_limit: Number of log entries handed to the history sink.
        fortified_threshold: Consecutive ENDUREs needed for the Fortified bonus.
        restore_health_on_end: Refill health after the encounter is synced
            back to the player's resources.
        illuminate_lp_cost: LP spent by ILLUMINATE.
        illuminate_base_damage: Flat ILLUMINATE damage before level scaling.
        illuminate_level_scaling: ILLUMINATE damage gained per player level.
        reflect_sp_cost: SP spent by REFLECT.
        reflect_lp_gain: LP gained by REFLECT.
        reflect_heal_base: Flat health restored by REFLECT before level bonus.
        embrace_min_sp: SP required before EMBRACE can be used.
        endure_energy_cost: Energy spent by ENDURE; zero disables the check.
        endure_lp_gain: LP gained by ENDURE.
        endure_damage_reduction: Incoming damage multiplier set by ENDURE.
        fortified_damage_reduction: Extra multiplier stacked when Fortified.
        enemy_base_damage: Base strike damage of every shadow turn.
        enemy_lp_mitigation: Strike damage removed per LP the player holds.
        enemy_min_damage: Floor of the shadow strike before modifiers.
        enemy_sp_gain: SP the player gains from each shadow strike.
        shadow_vulnerable_lp_threshold: Player LP below which the shadow
            presses its signature ability.
        shadow_aggressive_hp_ratio: Shadow HP ratio below which the shadow
            prefers aggressive abilities.
    """

    model_config = SettingsConfigDict(
        env_prefix="LUMINARI_COMBAT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    enemy_turn_delay_seconds: float = Field(
        default=2.5,
        ge=0,
        le=30,
        description="Delay before the shadow acts",
    )
    max_combat_turns: int = Field(
        default=20,
        ge=1,
        le=200,
        description="Turn limit for a single encounter",
    )
    history_log_limit: int = Field(
        default=50,
        ge=1,
        description="Log entries kept in the history snapshot",
    )
    fortified_threshold: int = Field(
        default=3,
        ge=1,
        description="Consecutive ENDUREs that grant Fortified",
    )
    restore_health_on_end: bool = Field(
        default=True,
        description="Refill player health once an encounter ends",
    )

    # Player actions
    illuminate_lp_cost: int = Field(default=2, ge=0)
    illuminate_base_damage: int = Field(default=3, ge=0)
    illuminate_level_scaling: float = Field(default=1.5, ge=0)
    reflect_sp_cost: int = Field(default=3, ge=0)
    reflect_lp_gain: int = Field(default=1, ge=0)
    reflect_heal_base: int = Field(default=2, ge=0)
    embrace_min_sp: int = Field(default=1, ge=1)
    endure_energy_cost: int = Field(default=0, ge=0)
    endure_lp_gain: int = Field(default=1, ge=0)
    endure_damage_reduction: float = Field(default=0.5, gt=0, le=1)
    fortified_damage_reduction: float = Field(default=0.5, gt=0, le=1)

    # Shadow turn
    enemy_base_damage: int = Field(default=8, ge=0)
    enemy_lp_mitigation: float = Field(default=0.5, ge=0)
    enemy_min_damage: int = Field(default=1, ge=0)
    enemy_sp_gain: int = Field(default=1, ge=0)
    shadow_vulnerable_lp_threshold: int = Field(default=5, ge=0)
    shadow_aggressive_hp_ratio: float = Field(default=0.3, ge=0, le=1)

    @model_validator(mode="after")
    def validate_damage_floor(self) -> CombatSettings:
        """Ensure the strike floor never exceeds the base strike.

        Returns:
            Self if validation passes.

        Raises:
            ConfigurationError: If enemy_min_damage > enemy_base_damage.
        """
        if self.enemy_min_damage > self.enemy_base_damage:
            raise ConfigurationError(
                f"enemy_min_damage ({self.enemy_min_damage}) must not exceed "
                f"enemy_base_damage ({self.enemy_base_damage})",
                config_key="enemy_min_damage",
            )
        return self


def _per_scene_type(
    social: int, skill: int, combat: int, journal: int, exploration: int
) -> dict[SceneType, int]:
    return {
        SceneType.SOCIAL: social,
        SceneType.SKILL: skill,
        SceneType.COMBAT: combat,
        SceneType.JOURNAL: journal,
        SceneType.EXPLORATION: exploration,
    }


class SceneSettings(BaseSettings):
    """Economy of non-combat scene resolution.

    Attributes:
        energy_costs: Energy spent to attempt a scene, per scene type.
        energy_rewards: Energy restored on success, per scene type.
        lp_rewards: Default LP reward on success when a scene sets none.
        sp_penalties: Default SP penalty on failure when a scene sets none.
        base_xp: XP awarded for a scene, per scene type.
        failure_xp_ratio: Share of base XP granted on a failed attempt.
        xp_difficulty_step: Scenes per difficulty tier.
        xp_difficulty_bonus: XP added per difficulty tier.
        trust_change: Guardian trust gained on success, lost on failure.
        bold_dc_modifier: DC adjustment for a bold choice.
        cautious_dc_modifier: DC adjustment for a cautious choice.
        bold_trust_bonus: Extra trust for succeeding with a bold choice.
    """

    model_config = SettingsConfigDict(
        env_prefix="LUMINARI_SCENE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    energy_costs: dict[SceneType, int] = Field(
        default_factory=lambda: _per_scene_type(8, 12, 15, 5, 10),
    )
    energy_rewards: dict[SceneType, int] = Field(
        default_factory=lambda: _per_scene_type(3, 5, 8, 2, 4),
    )
    lp_rewards: dict[SceneType, int] = Field(
        default_factory=lambda: _per_scene_type(3, 2, 4, 2, 3),
    )
    sp_penalties: dict[SceneType, int] = Field(
        default_factory=lambda: _per_scene_type(2, 1, 3, 1, 2),
    )
    base_xp: dict[SceneType, int] = Field(
        default_factory=lambda: _per_scene_type(25, 35, 50, 20, 30),
    )
    failure_xp_ratio: float = Field(default=0.6, ge=0, le=1)
    xp_difficulty_step: int = Field(default=10, ge=1)
    xp_difficulty_bonus: int = Field(default=5, ge=0)
    trust_change: int = Field(default=5, ge=0)
    bold_dc_modifier: int = Field(default=2)
    cautious_dc_modifier: int = Field(default=-2)
    bold_trust_bonus: int = Field(default=2, ge=0)

    @model_validator(mode="after")
    def validate_scene_tables(self) -> SceneSettings:
        """Ensure every per-type table covers every scene type.

        Returns:
            Self if validation passes.

        Raises:
            ConfigurationError: If a table is missing a scene type.
        """
        tables = {
            "energy_costs": self.energy_costs,
            "energy_rewards": self.energy_rewards,
            "lp_rewards": self.lp_rewards,
            "sp_penalties": self.sp_penalties,
            "base_xp": self.base_xp,
        }
        for key, table in tables.items():
            missing = [t.value for t in SceneType if t not in table]
            if missing:
                raise ConfigurationError(
                    f"{key} is missing scene types: {', '.join(missing)}",
                    config_key=key,
                )
        return self


class StorageSettings(BaseSettings):
    """Configuration for the local combat history store.

    Attributes:
        history_db_path: Path to the SQLite database file.
    """

    model_config = SettingsConfigDict(
        env_prefix="LUMINARI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    history_db_path: Path = Field(
        default=Path("data/combat_history.db"),
        description="Path to SQLite combat history database",
    )


class Settings(BaseSettings):
    """Main application settings aggregating all configuration domains.

    Attributes:
        app_name: Application name.
        debug: Enable debug mode.
        log_level: Application logging level.
        log_json: Render log events as JSON lines.
        combat: Combat balance settings.
        scene: Scene economy settings.
        storage: History storage settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="LUMINARI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(
        default="Luminari's Quest",
        description="Application name",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_json: bool = Field(
        default=False,
        description="Render log events as JSON",
    )

    combat: CombatSettings = Field(default_factory=CombatSettings)
    scene: SceneSettings = Field(default_factory=SceneSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        The application Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except ConfigurationError:
        raise
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load application settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access."""
    get_settings.cache_clear()


__all__ = [
    "CombatSettings",
    "SceneSettings",
    "StorageSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
