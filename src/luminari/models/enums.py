"""Enumeration types for the Luminari encounter core.

Combat actions, log actors, scene categories and shadow archetype families.
All enums are StrEnums so they serialize cleanly into log entries and
history snapshots.
"""

from __future__ import annotations

from enum import StrEnum


class CombatAction(StrEnum):
    """The four therapeutic actions available to the player in combat."""

    ILLUMINATE = "ILLUMINATE"
    REFLECT = "REFLECT"
    ENDURE = "ENDURE"
    EMBRACE = "EMBRACE"

    @property
    def display_name(self) -> str:
        """Get the title-cased action name.

        Returns:
            Display name (e.g., 'Illuminate').
        """
        return self.value.capitalize()


class Actor(StrEnum):
    """Who produced a combat log entry."""

    PLAYER = "player"
    SHADOW = "shadow"
    SYSTEM = "system"


class SceneType(StrEnum):
    """Scene categories.

    The type drives default rewards and penalties, energy cost, base XP,
    and whether a failed check escalates into combat.
    """

    SOCIAL = "social"
    SKILL = "skill"
    COMBAT = "combat"
    JOURNAL = "journal"
    EXPLORATION = "exploration"


class ShadowType(StrEnum):
    """Families of shadow manifestation."""

    DOUBT = "doubt"
    ISOLATION = "isolation"
    OVERWHELM = "overwhelm"
    PAST_PAIN = "past_pain"


class ChoiceType(StrEnum):
    """Approach the player picks for a scene."""

    BOLD = "bold"
    CAUTIOUS = "cautious"


class CombatEndReason(StrEnum):
    """Why an encounter ended."""

    VICTORY = "victory"
    DEFEAT = "defeat"
    SURRENDER = "surrender"
    OUTLASTED = "outlasted"


__all__ = [
    "CombatAction",
    "Actor",
    "SceneType",
    "ShadowType",
    "ChoiceType",
    "CombatEndReason",
]
