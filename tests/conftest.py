"""Pytest configuration and shared fixtures.

This module provides common fixtures for the Luminari encounter core
test suite: settings isolation, deterministic dice, a virtual-clock
scheduler and ready-to-use combat engines.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

import pytest

from luminari.core.config import CombatSettings, SceneSettings
from luminari.data.shadows import EnemyRegistry, default_registry
from luminari.engine.combat import CombatEngine
from luminari.engine.dice import DiceSource, fixed_source
from luminari.engine.scheduler import ManualScheduler
from luminari.models.enemies import ShadowManifestation
from luminari.models.enums import ShadowType
from luminari.models.resources import PlayerResources
from luminari.storage.history import InMemoryCombatHistory


if TYPE_CHECKING:
    from collections.abc import Generator


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from luminari.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def reset_log_context() -> Generator[None, None, None]:
    """Keep structlog context variables from leaking between tests."""
    from luminari.core.logging import clear_context

    clear_context()
    yield
    clear_context()


@pytest.fixture
def combat_settings() -> CombatSettings:
    """Default combat balance."""
    return CombatSettings()


@pytest.fixture
def scene_settings() -> SceneSettings:
    """Default scene economy."""
    return SceneSettings()


# =============================================================================
# Dice & Scheduling Fixtures
# =============================================================================


@pytest.fixture
def fixed_dice() -> Callable[..., DiceSource]:
    """Factory for dice sources replaying the given faces."""
    return fixed_source


@pytest.fixture
def scheduler() -> ManualScheduler:
    """Virtual-clock scheduler that only fires when advanced."""
    return ManualScheduler()


# =============================================================================
# Model Fixtures
# =============================================================================


@pytest.fixture
def player() -> PlayerResources:
    """Fresh player resources at level 1."""
    return PlayerResources()


@pytest.fixture
def registry() -> EnemyRegistry:
    """Registry with the built-in archetypes."""
    return default_registry()


@pytest.fixture
def training_shadow() -> Callable[..., ShadowManifestation]:
    """Factory for an ability-less shadow, so only the basic strike applies.

    Returns:
        Callable taking ``hp`` (default 30) and returning a new shadow.
    """

    def _make(hp: int = 30) -> ShadowManifestation:
        return ShadowManifestation(
            id="training-shade",
            name="Training Shade",
            type=ShadowType.DOUBT,
            description="A faint outline that only strikes back.",
            current_hp=hp,
            max_hp=hp,
            therapeutic_insight="Practice makes the unfamiliar familiar.",
        )

    return _make


# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def history() -> InMemoryCombatHistory:
    """In-memory sink collecting finished encounters."""
    return InMemoryCombatHistory()


@pytest.fixture
def make_engine(
    scheduler: ManualScheduler,
    player: PlayerResources,
    history: InMemoryCombatHistory,
    registry: EnemyRegistry,
) -> Callable[..., CombatEngine]:
    """Factory for engines wired to the shared scheduler, player and sink.

    Keyword arguments override CombatSettings fields.
    """

    def _make(**overrides: object) -> CombatEngine:
        return CombatEngine(
            registry=registry,
            settings=CombatSettings(**overrides),
            scheduler=scheduler,
            history=history,
            player=player,
        )

    return _make


@pytest.fixture
def engine(make_engine: Callable[..., CombatEngine]) -> CombatEngine:
    """Engine with default settings and no active encounter."""
    return make_engine()
