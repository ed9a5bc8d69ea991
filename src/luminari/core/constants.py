"""Rule constants for the Luminari encounter core.

These are structural limits, not balance numbers. Balance numbers (costs,
damage, cooldown-driven AI thresholds) live in CombatSettings and
SceneSettings so they can be tuned without code changes.
"""

from __future__ import annotations

# =============================================================================
# Dice
# =============================================================================

D20_MIN = 1
"""Lowest face of the d20."""

D20_MAX = 20
"""Highest face of the d20."""

# =============================================================================
# Status Effects
# =============================================================================

MIN_DAMAGE_MODIFIER = 0.1
"""Lower clamp for damage_multiplier and damage_reduction."""

MAX_DAMAGE_MODIFIER = 3.0
"""Upper clamp for damage_multiplier and damage_reduction."""

NEUTRAL_DAMAGE_MODIFIER = 1.0
"""Value a multiplier returns to once it has been consumed."""

# =============================================================================
# Player Defaults
# =============================================================================

DEFAULT_MAX_HEALTH = 100
DEFAULT_MAX_ENERGY = 100
DEFAULT_LIGHT_POINTS = 10
DEFAULT_SHADOW_POINTS = 5

# =============================================================================
# Progression
# =============================================================================

BASE_LEVEL_XP = 100
"""XP needed to go from level 1 to level 2."""

LEVEL_XP_GROWTH = 1.4
"""Growth factor of the XP requirement per level."""

MAX_GUARDIAN_TRUST = 100
"""Guardian trust is a 0-100 gauge."""

# =============================================================================
# Combat Log
# =============================================================================

HISTORY_LOG_LIMIT = 50
"""Default number of log entries handed to the history sink."""
