"""Per-side status effects and the incoming damage formula.

Each side of an encounter (player and shadow) carries one StatusEffects
record. Its fields compose in three ways:

* multipliers (``damage_multiplier``, ``damage_reduction``) scale damage
  multiplicatively and are consumed by the next hit they take part in;
* duration counters (``healing_blocked``, ``lp_generation_blocked``) add
  up and tick down by one at the start of the owning side's turn;
* one-shot flags (``skip_next_turn``) are consumed when the turn begins.

Multipliers are clamped into ``[0.1, 3.0]`` on every write, counters are
floored at zero.
"""

from __future__ import annotations

import math
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from luminari.core.constants import (
    MAX_DAMAGE_MODIFIER,
    MIN_DAMAGE_MODIFIER,
    NEUTRAL_DAMAGE_MODIFIER,
)


def clamp_modifier(value: float) -> float:
    """Clamp a damage multiplier into the supported range."""
    return min(MAX_DAMAGE_MODIFIER, max(MIN_DAMAGE_MODIFIER, value))


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 rounding away from zero for positives.

    Python's ``round`` uses banker's rounding, which would turn 2.5 into 2.
    """
    return math.floor(value + 0.5)


class StatusEffects(BaseModel):
    """Status record for one side of an encounter.

    Attributes:
        damage_multiplier: Scales damage this side deals.
        damage_reduction: Scales damage this side receives.
        healing_blocked: Turns during which healing is suppressed.
        lp_generation_blocked: Turns during which LP gains are suppressed.
        skip_next_turn: Consumed when this side's turn begins.
        consecutive_endures: ENDURE streak, reset by any other action.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    damage_multiplier: float = Field(default=NEUTRAL_DAMAGE_MODIFIER)
    damage_reduction: float = Field(default=NEUTRAL_DAMAGE_MODIFIER)
    healing_blocked: Annotated[int, Field(ge=0)] = 0
    lp_generation_blocked: Annotated[int, Field(ge=0)] = 0
    skip_next_turn: bool = False
    consecutive_endures: Annotated[int, Field(ge=0)] = 0

    @field_validator("damage_multiplier", "damage_reduction", mode="after")
    @classmethod
    def clamp_multipliers(cls, value: float) -> float:
        return clamp_modifier(value)

    @property
    def is_healing_blocked(self) -> bool:
        return self.healing_blocked > 0

    @property
    def is_lp_generation_blocked(self) -> bool:
        return self.lp_generation_blocked > 0

    def block_healing(self, turns: int) -> None:
        """Extend the healing block by ``turns``."""
        self.healing_blocked += max(0, turns)

    def block_lp_generation(self, turns: int) -> None:
        """Extend the LP generation block by ``turns``."""
        self.lp_generation_blocked += max(0, turns)

    def scale_outgoing(self, factor: float) -> None:
        """Multiply outgoing damage by ``factor`` for the next hit."""
        self.damage_multiplier = self.damage_multiplier * factor

    def scale_incoming(self, factor: float) -> None:
        """Multiply incoming damage by ``factor`` for the next hit.

        Factors below 1.0 protect (ENDURE), above 1.0 expose.
        """
        self.damage_reduction = self.damage_reduction * factor

    def tick_turn_start(self) -> bool:
        """Advance counters at the start of this side's turn.

        Decrements both block counters by one (floor 0) and consumes the
        skip flag.

        Returns:
            True if the turn must be skipped.
        """
        if self.healing_blocked > 0:
            self.healing_blocked -= 1
        if self.lp_generation_blocked > 0:
            self.lp_generation_blocked -= 1
        skipped = self.skip_next_turn
        self.skip_next_turn = False
        return skipped

    def reset(self) -> None:
        """Return every field to its neutral value."""
        self.damage_multiplier = NEUTRAL_DAMAGE_MODIFIER
        self.damage_reduction = NEUTRAL_DAMAGE_MODIFIER
        self.healing_blocked = 0
        self.lp_generation_blocked = 0
        self.skip_next_turn = False
        self.consecutive_endures = 0


def compute_damage(base: int, attacker: StatusEffects, defender: StatusEffects) -> int:
    """Resolve one hit and consume the one-shot multipliers involved.

    ``damage = round_half_up(base * attacker.damage_multiplier *
    defender.damage_reduction)``, never below zero. Afterwards the
    attacker's multiplier and the defender's reduction return to 1.0.

    Example:
        >>> attacker, defender = StatusEffects(), StatusEffects(damage_reduction=0.5)
        >>> compute_damage(5, attacker, defender)
        3
        >>> defender.damage_reduction
        1.0
    """
    raw = max(0, base) * attacker.damage_multiplier * defender.damage_reduction
    damage = max(0, round_half_up(raw))
    attacker.damage_multiplier = NEUTRAL_DAMAGE_MODIFIER
    defender.damage_reduction = NEUTRAL_DAMAGE_MODIFIER
    return damage


__all__ = [
    "StatusEffects",
    "clamp_modifier",
    "compute_damage",
    "round_half_up",
]
