"""Shadow archetypes and the registry that builds fresh instances of them.

Each archetype is a factory returning a brand new ShadowManifestation with
full HP and all abilities ready, so no encounter can leak cooldowns or
damage into the next one. The registry is injected into the combat engine
and the scene layer instead of being read from module state.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator

from luminari.core.exceptions import UnknownEnemyError
from luminari.core.logging import get_logger
from luminari.models.enemies import (
    AbilityEffect,
    ShadowAbility,
    ShadowManifestation,
    VictoryReward,
)
from luminari.models.enums import CombatAction, ShadowType


logger = get_logger(__name__)

ShadowFactory = Callable[[], ShadowManifestation]

WHISPER_OF_DOUBT = "whisper-of-doubt"
VEIL_OF_ISOLATION = "veil-of-isolation"
STORM_OF_OVERWHELM = "storm-of-overwhelm"
ECHO_OF_PAST_PAIN = "echo-of-past-pain"


class EnemyRegistry:
    """Maps archetype ids to shadow factories.

    Example:
        >>> registry = default_registry()
        >>> registry.create("whisper-of-doubt").max_hp
        15
    """

    def __init__(self) -> None:
        self._factories: dict[str, ShadowFactory] = {}

    def __contains__(self, enemy_id: object) -> bool:
        return enemy_id in self._factories

    def __iter__(self) -> Iterator[str]:
        return iter(self._factories)

    def __len__(self) -> int:
        return len(self._factories)

    def register(self, enemy_id: str, factory: ShadowFactory) -> None:
        """Register (or replace) the factory for ``enemy_id``."""
        if enemy_id in self._factories:
            logger.warning("Replacing registered shadow archetype", enemy_id=enemy_id)
        self._factories[enemy_id] = factory

    def create(self, enemy_id: str) -> ShadowManifestation:
        """Build a fresh shadow for ``enemy_id``.

        Raises:
            UnknownEnemyError: If no archetype is registered under that id.
        """
        factory = self._factories.get(enemy_id)
        if factory is None:
            raise UnknownEnemyError(
                f"Unknown shadow archetype: {enemy_id}",
                enemy_id=enemy_id,
                details={"known": sorted(self._factories)},
            )
        return factory()


# =============================================================================
# Archetypes
# =============================================================================


def whisper_of_doubt() -> ShadowManifestation:
    return ShadowManifestation(
        id=WHISPER_OF_DOUBT,
        name="The Whisper of Doubt",
        type=ShadowType.DOUBT,
        description="A murmuring silhouette that repeats every uncertainty back to you.",
        current_hp=15,
        max_hp=15,
        abilities=[
            ShadowAbility(
                id="self-questioning",
                name="Self-Questioning",
                description="An inner voice asks 'what if you are wrong?' and hope stops growing.",
                cooldown_turns=3,
                effect=AbilityEffect(lp_drain=1, block_lp_generation=2),
                counters=frozenset({CombatAction.ILLUMINATE}),
            ),
            ShadowAbility(
                id="magnification",
                name="Magnification",
                description="Small worries swell into disasters; the next strike lands twice as hard.",
                cooldown_turns=5,
                effect=AbilityEffect(amplify=2.0),
                aggressive=True,
                counters=frozenset({CombatAction.EMBRACE}),
            ),
        ],
        therapeutic_insight=(
            "Doubt shows how much you care about choosing well. Notice it kindly, "
            "then take one small step anyway."
        ),
        victory_reward=VictoryReward(
            lp_bonus=5,
            growth_message="Courage is acting wisely while uncertainty is still present.",
            permanent_benefit="Greater tolerance for uncertainty.",
        ),
    )


def veil_of_isolation() -> ShadowManifestation:
    return ShadowManifestation(
        id=VEIL_OF_ISOLATION,
        name="The Veil of Isolation",
        type=ShadowType.ISOLATION,
        description="A cold haze insisting that nobody could understand you.",
        current_hp=18,
        max_hp=18,
        abilities=[
            ShadowAbility(
                id="withdrawal",
                name="Withdrawal",
                description="Walls built for safety now keep healing out.",
                cooldown_turns=4,
                effect=AbilityEffect(block_healing=3),
                counters=frozenset({CombatAction.REFLECT}),
            ),
            ShadowAbility(
                id="loneliness",
                name="Loneliness",
                description="Disconnection turns hope into heaviness.",
                cooldown_turns=6,
                effect=AbilityEffect(lp_to_sp=3),
                aggressive=True,
                counters=frozenset({CombatAction.ILLUMINATE}),
            ),
        ],
        therapeutic_insight=(
            "Isolation once protected you and now blocks repair. Reach out in a small way: "
            "one message, one call."
        ),
        victory_reward=VictoryReward(
            lp_bonus=6,
            growth_message="Letting others in is a form of strength.",
            permanent_benefit="More courage to ask for support.",
        ),
    )


def storm_of_overwhelm() -> ShadowManifestation:
    return ShadowManifestation(
        id=STORM_OF_OVERWHELM,
        name="The Storm of Overwhelm",
        type=ShadowType.OVERWHELM,
        description="A whirl of demands that all seem to need you at once.",
        current_hp=20,
        max_hp=20,
        abilities=[
            ShadowAbility(
                id="cascade",
                name="Cascade",
                description="Everything feels urgent at once and you freeze.",
                cooldown_turns=3,
                effect=AbilityEffect(skip_next_turn=True),
                counters=frozenset({CombatAction.ENDURE}),
            ),
            ShadowAbility(
                id="pressure",
                name="Pressure",
                description="Expectations press down and drain both light and shadow.",
                cooldown_turns=4,
                effect=AbilityEffect(lp_drain=2, sp_drain=1),
                aggressive=True,
                counters=frozenset({CombatAction.ILLUMINATE, CombatAction.EMBRACE}),
            ),
        ],
        therapeutic_insight=(
            "When everything feels urgent, pause and ask what needs you right now. "
            "One thing at a time is enough."
        ),
        victory_reward=VictoryReward(
            lp_bonus=7,
            growth_message="You found the calm at the centre of the storm.",
            permanent_benefit="Steadier prioritizing under stress.",
        ),
    )


def echo_of_past_pain() -> ShadowManifestation:
    return ShadowManifestation(
        id=ECHO_OF_PAST_PAIN,
        name="The Echo of Past Pain",
        type=ShadowType.PAST_PAIN,
        description="Old wounds replayed until they feel new.",
        current_hp=22,
        max_hp=22,
        abilities=[
            ShadowAbility(
                id="flashback",
                name="Flashback",
                description="The past floods the present and leaves you exposed.",
                cooldown_turns=5,
                effect=AbilityEffect(expose=1.5, sp_gain=2),
                aggressive=True,
                counters=frozenset({CombatAction.ENDURE}),
            ),
            ShadowAbility(
                id="rumination",
                name="Rumination",
                description="Looping 'what ifs' stall every attempt to heal.",
                cooldown_turns=4,
                effect=AbilityEffect(block_lp_generation=3, block_healing=2),
                counters=frozenset({CombatAction.REFLECT}),
            ),
        ],
        therapeutic_insight=(
            "Past pain is part of your story, not all of it. "
            "Healing changes your relationship to what happened."
        ),
        victory_reward=VictoryReward(
            lp_bonus=8,
            growth_message="Old wounds have become a source of wisdom.",
            permanent_benefit="Meaning and empathy drawn from hardship.",
        ),
    )


def default_registry() -> EnemyRegistry:
    """Registry holding the four built-in archetypes."""
    registry = EnemyRegistry()
    registry.register(WHISPER_OF_DOUBT, whisper_of_doubt)
    registry.register(VEIL_OF_ISOLATION, veil_of_isolation)
    registry.register(STORM_OF_OVERWHELM, storm_of_overwhelm)
    registry.register(ECHO_OF_PAST_PAIN, echo_of_past_pain)
    return registry


__all__ = [
    "ShadowFactory",
    "EnemyRegistry",
    "default_registry",
    "WHISPER_OF_DOUBT",
    "VEIL_OF_ISOLATION",
    "STORM_OF_OVERWHELM",
    "ECHO_OF_PAST_PAIN",
    "whisper_of_doubt",
    "veil_of_isolation",
    "storm_of_overwhelm",
    "echo_of_past_pain",
]
