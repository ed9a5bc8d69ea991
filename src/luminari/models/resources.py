"""Player resource economy.

PlayerResources is the single owner of the player's persistent numbers:
Light Points, Shadow Points, health, energy, experience and guardian trust.
All mutation goes through the named ``modify_*`` operations, which clamp
into range and emit a structured debug event with the previous value, the
requested delta and the new value. Direct assignment is still validated, so
an out-of-range write raises instead of corrupting state.

Example:
    >>> resources = PlayerResources()
    >>> resources.modify_light_points(-50)
    -10
    >>> resources.light_points
    0
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from luminari.core.constants import (
    DEFAULT_LIGHT_POINTS,
    DEFAULT_MAX_ENERGY,
    DEFAULT_MAX_HEALTH,
    DEFAULT_SHADOW_POINTS,
    MAX_GUARDIAN_TRUST,
)
from luminari.core.logging import get_logger
from luminari.models.progression import (
    calculate_level_progression,
    get_level_benefits,
)


logger = get_logger(__name__)

NonNegativeInt = Annotated[int, Field(ge=0)]


class ResourceSnapshot(BaseModel):
    """Immutable point-in-time copy of the combat-relevant resources."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    light_points: NonNegativeInt
    shadow_points: NonNegativeInt
    health: NonNegativeInt
    energy: NonNegativeInt


class PlayerResources(BaseModel):
    """The player's persistent resource pools.

    Attributes:
        light_points: Hope and resilience, spent on ILLUMINATE.
        shadow_points: Accumulated struggle, spent on REFLECT and EMBRACE.
        health: Current health, 0 means defeat in combat.
        max_health: Health ceiling.
        energy: Stamina spent on scene attempts.
        max_energy: Energy ceiling, raised by level benefits.
        level: Player level, derived from experience_points.
        experience_points: Total accumulated XP.
        guardian_trust: Bond with the guardian spirit, 0-100.
    """

    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
        json_schema_extra={"description": "Persistent player resource pools"},
    )

    light_points: NonNegativeInt = Field(default=DEFAULT_LIGHT_POINTS)
    shadow_points: NonNegativeInt = Field(default=DEFAULT_SHADOW_POINTS)
    health: NonNegativeInt = Field(default=DEFAULT_MAX_HEALTH)
    max_health: Annotated[int, Field(ge=1)] = Field(default=DEFAULT_MAX_HEALTH)
    energy: NonNegativeInt = Field(default=DEFAULT_MAX_ENERGY)
    max_energy: Annotated[int, Field(ge=1)] = Field(default=DEFAULT_MAX_ENERGY)
    level: Annotated[int, Field(ge=1)] = Field(default=1)
    experience_points: NonNegativeInt = Field(default=0)
    guardian_trust: Annotated[int, Field(ge=0, le=MAX_GUARDIAN_TRUST)] = Field(default=50)

    @model_validator(mode="after")
    def validate_ceilings(self) -> PlayerResources:
        """Reject health or energy above their ceilings.

        Raises:
            ValueError: If a pool exceeds its maximum.
        """
        if self.health > self.max_health:
            msg = f"health ({self.health}) exceeds max_health ({self.max_health})"
            raise ValueError(msg)
        if self.energy > self.max_energy:
            msg = f"energy ({self.energy}) exceeds max_energy ({self.max_energy})"
            raise ValueError(msg)
        return self

    @computed_field(description="Health as a fraction of maximum")
    @property
    def health_ratio(self) -> float:
        return self.health / self.max_health

    # -------------------------------------------------------------------------
    # Modifier operations
    # -------------------------------------------------------------------------

    def modify_light_points(self, delta: int) -> int:
        """Add ``delta`` LP, clamped at 0.

        Returns:
            The change actually applied.
        """
        previous = self.light_points
        self.light_points = max(0, previous + delta)
        logger.debug("Modified light points", previous=previous, delta=delta, new=self.light_points)
        return self.light_points - previous

    def modify_shadow_points(self, delta: int) -> int:
        """Add ``delta`` SP, clamped at 0.

        Returns:
            The change actually applied.
        """
        previous = self.shadow_points
        self.shadow_points = max(0, previous + delta)
        logger.debug("Modified shadow points", previous=previous, delta=delta, new=self.shadow_points)
        return self.shadow_points - previous

    def modify_health(self, delta: int) -> int:
        """Add ``delta`` health, clamped to ``[0, max_health]``.

        Returns:
            The change actually applied.
        """
        previous = self.health
        self.health = min(self.max_health, max(0, previous + delta))
        logger.debug(
            "Modified player health",
            previous=previous,
            delta=delta,
            new=self.health,
            max=self.max_health,
        )
        return self.health - previous

    def modify_player_energy(self, delta: int) -> int:
        """Add ``delta`` energy, clamped to ``[0, max_energy]``.

        Returns:
            The change actually applied.
        """
        previous = self.energy
        self.energy = min(self.max_energy, max(0, previous + delta))
        logger.debug(
            "Modified player energy",
            previous=previous,
            delta=delta,
            new=self.energy,
            max=self.max_energy,
        )
        return self.energy - previous

    def modify_guardian_trust(self, delta: int) -> int:
        """Add ``delta`` guardian trust, clamped to ``[0, 100]``.

        Returns:
            The change actually applied.
        """
        previous = self.guardian_trust
        self.guardian_trust = min(MAX_GUARDIAN_TRUST, max(0, previous + delta))
        logger.debug("Modified guardian trust", previous=previous, delta=delta, new=self.guardian_trust)
        return self.guardian_trust - previous

    def convert_shadow_to_light(self, amount: int) -> int:
        """Turn up to ``amount`` SP into the same number of LP.

        Returns:
            Number of points converted (0 when no SP is held).
        """
        converted = min(max(0, amount), self.shadow_points)
        if converted == 0:
            logger.warning("No shadow points to convert", requested=amount, available=self.shadow_points)
            return 0
        self.shadow_points -= converted
        self.light_points += converted
        logger.info(
            "Converted shadow points to light",
            converted=converted,
            shadow_points=self.shadow_points,
            light_points=self.light_points,
        )
        return converted

    def modify_experience_points(self, amount: int, reason: str | None = None) -> bool:
        """Add XP and advance level, applying newly unlocked level benefits.

        A level-up raises max energy (and current energy by the same amount)
        and grants the starting-LP bonus difference.

        Args:
            amount: XP to add; negative values remove XP, floored at 0.
            reason: Free-form description for the log.

        Returns:
            True if the player gained at least one level.
        """
        previous_xp = self.experience_points
        previous_level = self.level
        self.experience_points = max(0, previous_xp + amount)
        progress = calculate_level_progression(self.experience_points)
        leveled_up = progress.level > previous_level

        logger.debug(
            "Modified experience points",
            previous=previous_xp,
            delta=amount,
            new=self.experience_points,
            level=progress.level,
            leveled_up=leveled_up,
            reason=reason,
        )

        if not leveled_up:
            return False

        old_benefits = get_level_benefits(previous_level)
        new_benefits = get_level_benefits(progress.level)
        self.level = progress.level

        energy_bonus = new_benefits.max_energy_bonus - old_benefits.max_energy_bonus
        if energy_bonus > 0:
            self.max_energy += energy_bonus
            self.energy += energy_bonus

        lp_bonus = new_benefits.starting_lp_bonus - old_benefits.starting_lp_bonus
        if lp_bonus > 0:
            self.light_points += lp_bonus

        logger.info(
            "Level up",
            level=self.level,
            previous_level=previous_level,
            energy_bonus=energy_bonus,
            lp_bonus=lp_bonus,
            reason=reason,
        )
        return True

    def snapshot(self) -> ResourceSnapshot:
        """Copy the combat-relevant pools."""
        return ResourceSnapshot(
            light_points=self.light_points,
            shadow_points=self.shadow_points,
            health=self.health,
            energy=self.energy,
        )


__all__ = [
    "ResourceSnapshot",
    "PlayerResources",
]
