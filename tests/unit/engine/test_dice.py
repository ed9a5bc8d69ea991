"""Tests for d20 checks."""

from __future__ import annotations

import pytest

from luminari.core.exceptions import DiceRollError
from luminari.engine.dice import DiceRoller, d20_source, fixed_source, roll_dice


class TestRollDice:
    """Tests for roll_dice."""

    def test_dc_is_inclusive(self) -> None:
        """Test a roll equal to the DC succeeds."""
        result = roll_dice(14, source=fixed_source(14))

        assert result.roll == 14
        assert result.success is True

    def test_below_dc_fails(self) -> None:
        """Test a roll one below the DC fails."""
        assert roll_dice(14, source=fixed_source(13)).success is False

    def test_level_bonus_added(self) -> None:
        """Test the level bonus counts toward the total."""
        result = roll_dice(14, level_bonus=2, source=fixed_source(12))

        assert result.total == 14
        assert result.modifier == 2
        assert result.success is True

    @pytest.mark.parametrize("face", [0, 21, -3])
    def test_impossible_face_rejected(self, face: int) -> None:
        """Test a source yielding a non-d20 value raises with the DC."""
        with pytest.raises(DiceRollError) as exc_info:
            roll_dice(10, source=lambda: face)

        assert exc_info.value.details["dc"] == 10
        assert exc_info.value.details["face"] == face

    def test_default_source_in_range(self) -> None:
        """Test the d20 library source always yields a legal face."""
        for _ in range(200):
            assert 1 <= roll_dice(10).roll <= 20


class TestDiceSources:
    """Tests for the face sources."""

    def test_fixed_source_cycles(self) -> None:
        """Test fixed faces replay in order and wrap around."""
        source = fixed_source(3, 17)

        assert [source() for _ in range(5)] == [3, 17, 3, 17, 3]

    def test_fixed_source_needs_faces(self) -> None:
        """Test an empty fixed source is rejected."""
        with pytest.raises(DiceRollError):
            fixed_source()

    def test_d20_source_range(self) -> None:
        """Test the library-backed source stays within 1..20."""
        faces = {d20_source() for _ in range(500)}

        assert faces <= set(range(1, 21))

    def test_seeded_rollers_repeat(self) -> None:
        """Test the same seed reproduces the same faces."""
        roller_a = DiceRoller(seed=42)
        faces_a = [roller_a.roll_face() for _ in range(10)]
        roller_b = DiceRoller(seed=42)
        faces_b = [roller_b.roll_face() for _ in range(10)]

        assert faces_a == faces_b
