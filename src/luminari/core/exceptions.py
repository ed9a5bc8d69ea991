"""Exception hierarchy for the Luminari encounter core.

Everything raised by this package derives from LuminariError and carries a
``details`` dict, so callers at the application boundary can log one
structured event regardless of which subsystem failed.

Rejected player input (acting out of turn, not enough LP or SP) is not an
error: the combat engine answers False and leaves the session untouched.
The classes here cover API misuse, bad configuration or content, and
failing history sinks.

Example:
    >>> from luminari.core.exceptions import UnknownEnemyError
    >>> raise UnknownEnemyError("No such archetype", enemy_id="mist-of-apathy")
"""

from __future__ import annotations

from typing import Any


def _with_context(details: dict[str, Any] | None, **context: Any) -> dict[str, Any]:
    """Merge keyword context into ``details``, skipping unset values."""
    merged = dict(details or {})
    merged.update({key: value for key, value in context.items() if value is not None})
    return merged


class LuminariError(Exception):
    """Root of the package's exceptions.

    Attributes:
        message: Human-readable error description.
        details: Structured context, rendered into ``str(exc)``.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if not self.details:
            return self.message
        context = ", ".join(f"{key}={value!r}" for key, value in self.details.items())
        return f"{self.message} [{context}]"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Encounter Engine
# =============================================================================


class GameEngineError(LuminariError):
    """Scene resolution, dice or combat could not proceed."""


class InvalidGameStateError(GameEngineError):
    """An operation arrived in a lifecycle state that cannot accept it.

    Starting an encounter while one is active, or before the previous end
    status was cleared, raises this.
    """

    def __init__(
        self,
        message: str,
        *,
        current_state: str | None = None,
        expected_states: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message,
            details=_with_context(
                details,
                current_state=current_state,
                expected_states=expected_states,
            ),
        )


class CombatError(GameEngineError):
    """Combat resolution hit an inconsistent session.

    Args:
        message: What went wrong.
        enemy_id: Archetype involved, if known.
        turn: Encounter turn, if known.
        details: Extra context.
    """

    def __init__(
        self,
        message: str,
        *,
        enemy_id: str | None = None,
        turn: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=_with_context(details, enemy_id=enemy_id, turn=turn))


class UnknownEnemyError(CombatError):
    """No archetype is registered under the requested id."""


class DiceRollError(GameEngineError):
    """A die produced a face outside 1..20.

    Only an injected dice source can cause this; the d20 library source
    never does.
    """

    def __init__(
        self,
        message: str,
        *,
        dc: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=_with_context(details, dc=dc))


# =============================================================================
# History
# =============================================================================


class PersistenceError(LuminariError):
    """A history sink could not write a snapshot.

    save_combat_history catches and logs it, so it never reaches combat
    flow.
    """


# =============================================================================
# Configuration & Content
# =============================================================================


class ConfigurationError(LuminariError):
    """Settings failed to load or are inconsistent."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=_with_context(details, config_key=config_key))


class ValidationError(LuminariError):
    """Scene or archetype content is invalid, or a lookup is out of range."""

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        invalid_value: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message,
            details=_with_context(details, field_name=field_name, invalid_value=invalid_value),
        )


__all__ = [
    "LuminariError",
    # Encounter engine
    "GameEngineError",
    "InvalidGameStateError",
    "CombatError",
    "UnknownEnemyError",
    "DiceRollError",
    # History
    "PersistenceError",
    # Configuration & content
    "ConfigurationError",
    "ValidationError",
]
