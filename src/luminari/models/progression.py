"""Level progression rules for Luminari's Quest.

XP requirements grow geometrically by level, and each level unlocks
small, stacking benefits: more maximum energy, a larger starting LP
pool, cheaper scenes and faster guardian trust. Everything here is pure
and side-effect free.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from luminari.core.constants import BASE_LEVEL_XP, LEVEL_XP_GROWTH


# =============================================================================
# XP Curve
# =============================================================================


def xp_required_for_level(level: int) -> int:
    """XP needed to advance from ``level`` to ``level + 1``."""
    if level < 1:
        return BASE_LEVEL_XP
    return math.floor(BASE_LEVEL_XP * LEVEL_XP_GROWTH ** (level - 1))


@dataclass(frozen=True)
class LevelProgress:
    """Where a total XP amount sits on the level curve.

    Attributes:
        level: Current level (1-based).
        xp_into_level: XP earned since the current level began.
        xp_to_next_level: XP still needed for the next level.
        total_xp: Total accumulated XP.
    """

    level: int
    xp_into_level: int
    xp_to_next_level: int
    total_xp: int

    @property
    def progress_ratio(self) -> float:
        """Fraction of the current level completed, for progress bars."""
        span = self.xp_into_level + self.xp_to_next_level
        if span <= 0:
            return 0.0
        return self.xp_into_level / span


def calculate_level_progression(total_xp: int) -> LevelProgress:
    """Derive the level and in-level progress from total XP.

    Args:
        total_xp: Accumulated experience points. Negative values count as 0.

    Returns:
        The LevelProgress for that XP total.

    Example:
        >>> calculate_level_progression(100).level
        2
        >>> calculate_level_progression(239).level
        2
        >>> calculate_level_progression(240).level
        3
    """
    total_xp = max(0, total_xp)
    level = 1
    remaining = total_xp
    while remaining >= xp_required_for_level(level):
        remaining -= xp_required_for_level(level)
        level += 1
    return LevelProgress(
        level=level,
        xp_into_level=remaining,
        xp_to_next_level=xp_required_for_level(level) - remaining,
        total_xp=total_xp,
    )


# =============================================================================
# Level Benefits
# =============================================================================


@dataclass(frozen=True)
class LevelBenefits:
    """Passive benefits granted by a level.

    Attributes:
        max_energy_bonus: Added to the player's maximum energy.
        starting_lp_bonus: Added to the starting LP pool.
        energy_cost_reduction: Subtracted from scene energy costs.
        trust_gain_multiplier: Scales positive guardian trust changes.
    """

    max_energy_bonus: int
    starting_lp_bonus: int
    energy_cost_reduction: int
    trust_gain_multiplier: float


def get_level_benefits(level: int) -> LevelBenefits:
    """Benefits unlocked at ``level``.

    Every 2 levels grant +10 max energy, every 3 levels +5 starting LP,
    every 4 levels one point of scene energy discount and every 5 levels
    +20% trust gain.
    """
    gained = max(0, level - 1)
    return LevelBenefits(
        max_energy_bonus=(gained // 2) * 10,
        starting_lp_bonus=(gained // 3) * 5,
        energy_cost_reduction=gained // 4,
        trust_gain_multiplier=1.0 + (gained // 5) * 0.2,
    )


def get_level_roll_bonus(level: int) -> int:
    """Bonus added to scene d20 rolls: +1 per level after the first."""
    return max(0, level - 1)


__all__ = [
    "xp_required_for_level",
    "LevelProgress",
    "calculate_level_progression",
    "LevelBenefits",
    "get_level_benefits",
    "get_level_roll_bonus",
]
