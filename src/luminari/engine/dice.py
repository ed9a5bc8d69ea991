"""d20 checks against a difficulty class.

Scene checks roll a single d20, add the player's level bonus and succeed
when the total meets or beats the DC. There is no advantage, disadvantage
or critical handling. The random source is injectable so tests and replays
can fix the die.
"""

from __future__ import annotations

import random
from collections.abc import Callable
from dataclasses import dataclass

import d20

from luminari.core.constants import D20_MAX, D20_MIN
from luminari.core.exceptions import DiceRollError
from luminari.core.logging import get_logger


logger = get_logger(__name__)

DiceSource = Callable[[], int]
"""Zero-argument callable returning a d20 face in ``[1, 20]``."""


def d20_source() -> int:
    """Roll one d20 with the d20 library."""
    return d20.roll("1d20").total


def fixed_source(*faces: int) -> DiceSource:
    """Build a source that replays ``faces`` in order, cycling at the end.

    Example:
        >>> source = fixed_source(14, 3)
        >>> source(), source(), source()
        (14, 3, 14)
    """
    if not faces:
        raise DiceRollError("fixed_source needs at least one face")
    state = {"index": 0}

    def _next() -> int:
        face = faces[state["index"] % len(faces)]
        state["index"] += 1
        return face

    return _next


@dataclass(frozen=True)
class DiceResult:
    """Result of a d20 check.

    Attributes:
        roll: The natural d20 face.
        modifier: Level bonus added to the face.
        total: ``roll + modifier``.
        dc: Difficulty class checked against.
        success: ``total >= dc``.
    """

    roll: int
    modifier: int
    total: int
    dc: int
    success: bool


class DiceRoller:
    """Rolls d20 checks from a configurable source.

    Example:
        >>> roller = DiceRoller(source=fixed_source(14))
        >>> roller.check(14).success
        True
    """

    def __init__(self, *, source: DiceSource | None = None, seed: int | None = None) -> None:
        """Initialize the roller.

        Args:
            source: Custom face source; defaults to the d20 library.
            seed: Seed for the global random module used by d20.
        """
        if seed is not None:
            random.seed(seed)
        self._source = source or d20_source
        logger.debug("DiceRoller initialized", seed=seed, custom_source=source is not None)

    def roll_face(self) -> int:
        """Draw one face and verify it is a legal d20 result.

        Raises:
            DiceRollError: If the source yields a value outside ``[1, 20]``.
        """
        face = self._source()
        if not isinstance(face, int) or not D20_MIN <= face <= D20_MAX:
            raise DiceRollError(
                f"Dice source produced an impossible d20 face: {face!r}",
                details={"face": face},
            )
        return face

    def check(self, dc: int, *, level_bonus: int = 0) -> DiceResult:
        """Roll a d20 check.

        Args:
            dc: Difficulty class (inclusive).
            level_bonus: Bonus added to the natural roll.

        Returns:
            The DiceResult of the check.
        """
        face = self.roll_face()
        total = face + level_bonus
        result = DiceResult(
            roll=face,
            modifier=level_bonus,
            total=total,
            dc=dc,
            success=total >= dc,
        )
        logger.info(
            "Dice check",
            roll=face,
            modifier=level_bonus,
            total=total,
            dc=dc,
            success=result.success,
        )
        return result


def roll_dice(dc: int, *, level_bonus: int = 0, source: DiceSource | None = None) -> DiceResult:
    """Roll a single d20 check against ``dc``.

    Args:
        dc: Difficulty class; a total equal to the DC succeeds.
        level_bonus: Bonus added to the roll (see get_level_roll_bonus).
        source: Optional face source; defaults to the d20 library.

    Returns:
        The DiceResult of the check.

    Raises:
        DiceRollError: If the source yields a value outside ``[1, 20]``.

    Example:
        >>> roll_dice(14, source=fixed_source(14)).success
        True
    """
    try:
        return DiceRoller(source=source).check(dc, level_bonus=level_bonus)
    except DiceRollError as exc:
        raise DiceRollError(exc.message, dc=dc, details=exc.details) from exc


__all__ = [
    "DiceSource",
    "DiceResult",
    "DiceRoller",
    "d20_source",
    "fixed_source",
    "roll_dice",
]
