"""Built-in scene catalog.

A short journey covering every scene type, with a combat scene for each
shadow archetype. Content layers with their own catalogs only need to
produce Scene objects; nothing in the engine depends on this module.
"""

from __future__ import annotations

from dataclasses import dataclass

from luminari.core.exceptions import ValidationError
from luminari.data.shadows import (
    ECHO_OF_PAST_PAIN,
    STORM_OF_OVERWHELM,
    VEIL_OF_ISOLATION,
    WHISPER_OF_DOUBT,
)
from luminari.models.enums import SceneType
from luminari.models.scenes import Scene, SceneChoices


SCENES: tuple[Scene, ...] = (
    Scene(
        id="social-encounter",
        type=SceneType.SOCIAL,
        title="The Worried Merchant",
        text="A merchant sits beside an overturned cart, goods scattered across the road.",
        dc=9,
        success_text="Your kindness steadies him, and your guardian glows warmly.",
        failure_text="Your words come out awkward and he stays withdrawn.",
        choices=SceneChoices(
            bold="Offer help straight away",
            cautious="Listen before you speak",
        ),
    ),
    Scene(
        id="skill-challenge",
        type=SceneType.SKILL,
        title="The Ancient Lock",
        text="A chest covered in shifting runes waits to be opened.",
        dc=11,
        success_text="The runes align and the lid opens with a soft click.",
        failure_text="The runes flare and go dark. The chest stays shut.",
        choices=SceneChoices(
            bold="Trust your hands and work fast",
            cautious="Study the pattern first",
        ),
    ),
    Scene(
        id="combat-encounter",
        type=SceneType.COMBAT,
        title="Shadow Wolf",
        text="A wolf of living smoke blocks the path, feeding on hesitation.",
        dc=15,
        success_text="Your light holds and the wolf dissolves into harmless shade.",
        failure_text="Fear takes hold and the shadow closes in.",
        choices=SceneChoices(
            bold="Face the wolf head on",
            cautious="Try to understand what it stands for",
        ),
        shadow_type=WHISPER_OF_DOUBT,
        lp_reward=4,
        sp_penalty=3,
    ),
    Scene(
        id="journal-reflection",
        type=SceneType.JOURNAL,
        title="The Memory Pool",
        text="A still pool shows memories instead of your reflection.",
        dc=8,
        success_text="You let the memories come and find strength in naming them.",
        failure_text="It is too much for now and you step back.",
        choices=SceneChoices(
            bold="Look at the hardest memories",
            cautious="Approach them slowly",
        ),
    ),
    Scene(
        id="exploration-discovery",
        type=SceneType.EXPLORATION,
        title="The Singing Crystals",
        text="Crystals in a cavern hum in tune with your mood.",
        dc=12,
        success_text="You find the harmony and the great crystal's song becomes clear.",
        failure_text="The songs clash and their meaning slips away.",
        choices=SceneChoices(
            bold="Touch the central crystal",
            cautious="Listen to the small crystals first",
        ),
    ),
    Scene(
        id="combat-isolation",
        type=SceneType.COMBAT,
        title="The Veil of Isolation",
        text="A grey fog rolls in, muffling every voice but your own.",
        dc=16,
        success_text="You call out and someone answers. The fog thins.",
        failure_text="The fog wraps around you and the silence deepens.",
        choices=SceneChoices(
            bold="Push through the fog",
            cautious="Stay still and listen for others",
        ),
        shadow_type=VEIL_OF_ISOLATION,
        lp_reward=5,
        sp_penalty=4,
    ),
    Scene(
        id="combat-overwhelm",
        type=SceneType.COMBAT,
        title="The Storm of Overwhelm",
        text="Wind carries a hundred demands, all shouting at once.",
        dc=17,
        success_text="You choose one task and the storm loses its grip.",
        failure_text="Every demand pulls at once and the storm breaks over you.",
        choices=SceneChoices(
            bold="Tackle everything at once",
            cautious="Pick one thing and breathe",
        ),
        shadow_type=STORM_OF_OVERWHELM,
        lp_reward=4,
        sp_penalty=3,
    ),
    Scene(
        id="combat-past-pain",
        type=SceneType.COMBAT,
        title="The Echo of Past Pain",
        text="An old hurt speaks in a familiar voice.",
        dc=18,
        success_text="You hear it out and it quiets, no longer in charge.",
        failure_text="The memory pulls you back into the moment it happened.",
        choices=SceneChoices(
            bold="Confront the memory",
            cautious="Ground yourself in the present first",
        ),
        shadow_type=ECHO_OF_PAST_PAIN,
    ),
)


@dataclass(frozen=True)
class SceneProgress:
    current: int
    total: int


def get_scene(index: int, scenes: tuple[Scene, ...] = SCENES) -> Scene:
    """Return the scene at ``index``.

    Raises:
        ValidationError: If the index is outside the catalog.
    """
    if not 0 <= index < len(scenes):
        raise ValidationError(
            f"Scene index out of range (0..{len(scenes) - 1})",
            field_name="index",
            invalid_value=index,
        )
    return scenes[index]


def is_last_scene(index: int, scenes: tuple[Scene, ...] = SCENES) -> bool:
    return index >= len(scenes) - 1


def get_scene_progress(index: int, scenes: tuple[Scene, ...] = SCENES) -> SceneProgress:
    """One-based position of ``index`` in the journey."""
    return SceneProgress(current=index + 1, total=len(scenes))


__all__ = [
    "SCENES",
    "SceneProgress",
    "get_scene",
    "is_last_scene",
    "get_scene_progress",
]
