"""Built-in content: shadow archetypes and the scene catalog."""

from __future__ import annotations

from luminari.data.scenes import SCENES, SceneProgress, get_scene, get_scene_progress, is_last_scene
from luminari.data.shadows import (
    ECHO_OF_PAST_PAIN,
    STORM_OF_OVERWHELM,
    VEIL_OF_ISOLATION,
    WHISPER_OF_DOUBT,
    EnemyRegistry,
    ShadowFactory,
    default_registry,
)


__all__ = [
    "SCENES",
    "SceneProgress",
    "get_scene",
    "get_scene_progress",
    "is_last_scene",
    "EnemyRegistry",
    "ShadowFactory",
    "default_registry",
    "WHISPER_OF_DOUBT",
    "VEIL_OF_ISOLATION",
    "STORM_OF_OVERWHELM",
    "ECHO_OF_PAST_PAIN",
]
