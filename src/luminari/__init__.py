"""Luminari's Quest - turn-based encounter core.

A deterministic state machine turning player intents (scene choices and
combat actions) into resource changes, narrative outcomes and win/loss
results.

- Scenes resolve through pure functions over an injectable dice source
- Combat runs on an explicit CombatSession owned by a CombatEngine
- The shadow's turn is a cancelable scheduled task
- Finished encounters are handed to a history sink as read-only snapshots

Example:
    >>> from luminari import CombatEngine, ManualScheduler, PlayerResources
    >>> from luminari.data import get_scene
    >>> from luminari.engine import fixed_source, resolve_scene, apply_scene_outcome
    >>>
    >>> player = PlayerResources()
    >>> scene = get_scene(2)
    >>> result, outcome = resolve_scene(scene, player_level=player.level, source=fixed_source(3))
    >>> _ = apply_scene_outcome(player, outcome)
    >>> engine = CombatEngine(player=player, scheduler=ManualScheduler())
    >>> session = engine.start_encounter(outcome, scene_index=2)

Modules:
    core: Configuration, logging, and base exceptions.
    models: Pydantic V2 models for resources, status, enemies and sessions.
    engine: Dice, scene resolution, scheduling and the combat state machine.
    data: Built-in shadow archetypes and scene catalog.
    storage: Combat history sinks.
"""

from __future__ import annotations

# Core
from luminari.core.config import Settings, get_settings
from luminari.core.exceptions import LuminariError
from luminari.core.logging import configure_logging, get_logger

# Models
from luminari.models import (
    CombatAction,
    CombatSession,
    PlayerResources,
    Scene,
    SceneOutcome,
    ShadowManifestation,
    StatusEffects,
)

# Engine
from luminari.engine import (
    AsyncioScheduler,
    CombatEngine,
    ManualScheduler,
    handle_scene_outcome,
    resolve_scene,
    roll_dice,
)

# Content & storage
from luminari.data import default_registry
from luminari.storage import InMemoryCombatHistory, SQLiteCombatHistory


__version__ = "0.1.0"

__all__ = [
    # Core
    "Settings",
    "get_settings",
    "LuminariError",
    "configure_logging",
    "get_logger",
    # Models
    "CombatAction",
    "CombatSession",
    "PlayerResources",
    "Scene",
    "SceneOutcome",
    "ShadowManifestation",
    "StatusEffects",
    # Engine
    "AsyncioScheduler",
    "CombatEngine",
    "ManualScheduler",
    "handle_scene_outcome",
    "resolve_scene",
    "roll_dice",
    # Content & storage
    "default_registry",
    "InMemoryCombatHistory",
    "SQLiteCombatHistory",
    "__version__",
]
