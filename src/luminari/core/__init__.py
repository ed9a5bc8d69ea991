"""Cross-cutting infrastructure: settings, structured logging and errors.

Settings are pydantic-settings models read from ``LUMINARI_*`` environment
variables or a ``.env`` file. Logging is structlog with contextvars
binding. Every exception raised by the package derives from LuminariError.
"""

from __future__ import annotations

from luminari.core.config import (
    CombatSettings,
    SceneSettings,
    Settings,
    StorageSettings,
    clear_settings_cache,
    get_settings,
)
from luminari.core.exceptions import (
    CombatError,
    ConfigurationError,
    DiceRollError,
    GameEngineError,
    InvalidGameStateError,
    LuminariError,
    PersistenceError,
    UnknownEnemyError,
    ValidationError,
)
from luminari.core.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    unbind_context,
)


__all__ = [
    # Base exception
    "LuminariError",
    # Configuration exceptions
    "ConfigurationError",
    "ValidationError",
    # Game engine exceptions
    "GameEngineError",
    "InvalidGameStateError",
    "CombatError",
    "UnknownEnemyError",
    "DiceRollError",
    # Storage exceptions
    "PersistenceError",
    # Configuration
    "Settings",
    "CombatSettings",
    "SceneSettings",
    "StorageSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "get_logger",
    "bind_context",
    "unbind_context",
    "clear_context",
]
