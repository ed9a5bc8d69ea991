"""Shadow manifestation models.

A ShadowManifestation is the enemy of an encounter. Its abilities are
ordered: the first is the signature ability the shadow presses when the
player is vulnerable. Ability effects are declarative (AbilityEffect) and
interpreted by luminari.engine.shadow_ai, so archetypes are plain data.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from luminari.models.enums import CombatAction, ShadowType


class AbilityEffect(BaseModel):
    """What a shadow ability does when it resolves.

    Every field is optional; zero or None means "no effect of this kind".

    Attributes:
        lp_drain: LP removed from the player.
        sp_drain: SP removed from the player.
        sp_gain: SP added to the player.
        lp_to_sp: Up to this many LP are converted into SP.
        block_healing: Turns added to the player's healing block.
        block_lp_generation: Turns added to the player's LP generation block.
        skip_next_turn: The player loses their next turn.
        amplify: Multiplier applied to the shadow's next strike.
        expose: Multiplier applied to the next damage the player receives.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    lp_drain: Annotated[int, Field(ge=0)] = 0
    sp_drain: Annotated[int, Field(ge=0)] = 0
    sp_gain: Annotated[int, Field(ge=0)] = 0
    lp_to_sp: Annotated[int, Field(ge=0)] = 0
    block_healing: Annotated[int, Field(ge=0)] = 0
    block_lp_generation: Annotated[int, Field(ge=0)] = 0
    skip_next_turn: bool = False
    amplify: Annotated[float, Field(gt=0)] | None = None
    expose: Annotated[float, Field(gt=0)] | None = None


class ShadowAbility(BaseModel):
    """A special ability of a shadow.

    Attributes:
        id: Stable identifier (kebab-case).
        name: Display name.
        description: Narrative description shown in the log.
        cooldown_turns: Turns before the ability can be used again.
        current_cooldown: Turns remaining; 0 means ready.
        effect: Declarative effect applied on use.
        aggressive: Preferred when the shadow is badly hurt.
        counters: Player actions this ability is chosen to punish.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    description: str = ""
    cooldown_turns: Annotated[int, Field(ge=0)] = 0
    current_cooldown: Annotated[int, Field(ge=0)] = 0
    effect: AbilityEffect = Field(default_factory=AbilityEffect)
    aggressive: bool = False
    counters: frozenset[CombatAction] = Field(default_factory=frozenset)

    @property
    def is_ready(self) -> bool:
        return self.current_cooldown == 0

    def start_cooldown(self) -> None:
        self.current_cooldown = self.cooldown_turns

    def tick_cooldown(self) -> None:
        if self.current_cooldown > 0:
            self.current_cooldown -= 1


class VictoryReward(BaseModel):
    """What the player earns for overcoming a shadow."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    lp_bonus: Annotated[int, Field(ge=0)] = 0
    growth_message: str = ""
    permanent_benefit: str = ""


class ShadowManifestation(BaseModel):
    """An enemy shadow for a single encounter.

    Attributes:
        id: Archetype identifier (registry key).
        name: Display name.
        type: Shadow family.
        description: Narrative description.
        current_hp: Remaining hit points, ``0 <= current_hp <= max_hp``.
        max_hp: Hit point ceiling.
        abilities: Ordered abilities; index 0 is the signature ability.
        therapeutic_insight: Reflection shown after the encounter.
        victory_reward: Reward granted on victory.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    type: ShadowType
    description: str = ""
    current_hp: Annotated[int, Field(ge=0)]
    max_hp: Annotated[int, Field(ge=1)]
    abilities: list[ShadowAbility] = Field(default_factory=list)
    therapeutic_insight: str = ""
    victory_reward: VictoryReward = Field(default_factory=VictoryReward)

    @model_validator(mode="after")
    def validate_hp(self) -> ShadowManifestation:
        if self.current_hp > self.max_hp:
            msg = f"current_hp ({self.current_hp}) exceeds max_hp ({self.max_hp})"
            raise ValueError(msg)
        return self

    @computed_field(description="Remaining HP as a fraction of maximum")
    @property
    def hp_ratio(self) -> float:
        return self.current_hp / self.max_hp

    @property
    def is_defeated(self) -> bool:
        return self.current_hp <= 0

    @property
    def available_abilities(self) -> list[ShadowAbility]:
        """Abilities off cooldown, in declaration order."""
        return [a for a in self.abilities if a.is_ready]

    def take_damage(self, amount: int) -> int:
        """Remove HP, floored at zero.

        Returns:
            HP actually removed.
        """
        before = self.current_hp
        self.current_hp = max(0, before - max(0, amount))
        return before - self.current_hp


__all__ = [
    "AbilityEffect",
    "ShadowAbility",
    "VictoryReward",
    "ShadowManifestation",
]
