"""Scene and scene outcome models.

A Scene is supplied by the content layer; a SceneOutcome is the transient
result of resolving one, consumed by the caller (which applies its deltas
through PlayerResources) and, for failed combat scenes, by the combat
engine.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, model_validator

from luminari.models.enums import ChoiceType, SceneType


class SceneChoices(BaseModel):
    """The two approaches offered for a scene."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    bold: str
    cautious: str

    def text_for(self, choice: ChoiceType) -> str:
        return self.bold if choice == ChoiceType.BOLD else self.cautious


class Scene(BaseModel):
    """A narrative scene with a difficulty check.

    Attributes:
        id: Stable identifier (kebab-case).
        type: Scene category.
        title: Display title.
        text: Narrative setup.
        dc: Difficulty class for the d20 check.
        success_text: Narrative shown on success.
        failure_text: Narrative shown on failure.
        choices: Bold and cautious approach texts.
        shadow_type: Enemy archetype id fought when a combat scene fails.
        lp_reward: LP granted on success; the type default when unset.
        sp_penalty: SP gained on failure; the type default when unset.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(min_length=1)
    type: SceneType
    title: str
    text: str = ""
    dc: Annotated[int, Field(ge=1)]
    success_text: str = ""
    failure_text: str = ""
    choices: SceneChoices
    shadow_type: str | None = None
    lp_reward: Annotated[int, Field(ge=0)] | None = None
    sp_penalty: Annotated[int, Field(ge=0)] | None = None

    @model_validator(mode="after")
    def validate_combat_shadow(self) -> Scene:
        if self.type == SceneType.COMBAT and not self.shadow_type:
            msg = f"combat scene {self.id!r} must name a shadow_type"
            raise ValueError(msg)
        return self


class ResourceChanges(BaseModel):
    """LP/SP deltas of an outcome. Both unset means no change."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    lp_change: int | None = None
    sp_change: int | None = None

    @property
    def is_empty(self) -> bool:
        return self.lp_change is None and self.sp_change is None


class EnergyChanges(BaseModel):
    """Energy cost of the attempt (<= 0) and reward on success (>= 0)."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    energy_cost: Annotated[int, Field(le=0)] = 0
    energy_reward: Annotated[int, Field(ge=0)] = 0


class ExperienceChanges(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    xp_gained: Annotated[int, Field(ge=0)] = 0
    reason: str = ""


class TrustModifiers(BaseModel):
    """Guardian trust change, plus any bonus for a bold success."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    trust_change: int = 0
    trust_bonus: Annotated[int, Field(ge=0)] = 0

    @property
    def total(self) -> int:
        return self.trust_change + self.trust_bonus


class SceneOutcome(BaseModel):
    """Result of resolving a scene.

    Attributes:
        scene: The scene that was resolved.
        success: Whether the check succeeded.
        roll: The d20 total used, if any.
        triggered_combat: A failed combat scene escalated into an encounter.
        shadow_type: Enemy archetype id when combat was triggered.
        resource_changes: LP/SP deltas (empty when combat was triggered).
        energy_changes: Energy cost and reward.
        experience_changes: XP gained and why.
        trust_modifiers: Guardian trust deltas.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    scene: Scene
    success: bool
    roll: int | None = None
    triggered_combat: bool = False
    shadow_type: str | None = None
    resource_changes: ResourceChanges = Field(default_factory=ResourceChanges)
    energy_changes: EnergyChanges = Field(default_factory=EnergyChanges)
    experience_changes: ExperienceChanges = Field(default_factory=ExperienceChanges)
    trust_modifiers: TrustModifiers = Field(default_factory=TrustModifiers)


__all__ = [
    "SceneChoices",
    "Scene",
    "ResourceChanges",
    "EnergyChanges",
    "ExperienceChanges",
    "TrustModifiers",
    "SceneOutcome",
]
