"""Tests for dice utilities."""

import pytest
import numpy as np
from expectigammon.core.dice import (
    ALL_DICE_ROLLS,
    DICE_PROBABILITIES,
    all_dice_rolls,
    dice_to_string,
    is_double,
    make_roll,
    roll_dice,
    roll_probability,
)
from expectigammon.core.types import DiceRoll


class TestDiceUtilities:
    """Tests for dice utility functions."""

    def test_all_dice_rolls(self):
        """Test that we get all 21 unique dice rolls."""
        rolls = all_dice_rolls()
        assert len(rolls) == 21

        for i in range(1, 7):
            assert (i, i) in rolls

        # No reordered duplicates such as both (2,3) and (3,2)
        seen = set()
        for roll in rolls:
            canonical = tuple(sorted(roll))
            assert canonical not in seen
            seen.add(canonical)

    def test_rolls_are_dice_roll_instances(self):
        """Test rolls are DiceRoll instances."""
        assert all(isinstance(roll, DiceRoll) for roll in ALL_DICE_ROLLS)

    def test_is_double(self):
        """Test doubles detection."""
        assert is_double((1, 1))
        assert is_double(DiceRoll(6, 6))
        assert not is_double((1, 2))

    def test_roll_dice(self):
        """Test dice rolling."""
        rng = np.random.default_rng(42)
        for _ in range(100):
            roll = roll_dice(rng)
            assert isinstance(roll, DiceRoll)
            assert 1 <= roll.one <= 6
            assert 1 <= roll.two <= 6

    def test_roll_dice_reproducible(self):
        """Test seeded rolls repeat."""
        first = [roll_dice(np.random.default_rng(7)) for _ in range(3)]
        second = [roll_dice(np.random.default_rng(7)) for _ in range(3)]
        assert first == second

    def test_make_roll(self):
        """Test roll construction and validation."""
        assert make_roll(3, 5) == DiceRoll(3, 5)
        with pytest.raises(ValueError):
            make_roll(0, 5)
        with pytest.raises(ValueError):
            make_roll(3, 7)

    def test_dice_to_string(self):
        """Test dice string conversion."""
        assert dice_to_string(DiceRoll(3, 5)) == "3-5"
        assert dice_to_string(DiceRoll(4, 4)) == "Double 4s"


class TestDiceProbabilities:
    """Tests for chance node weights."""

    def test_probabilities_sum_to_one(self):
        """Test probabilities sum to 1."""
        total_prob = sum(DICE_PROBABILITIES.values())
        assert total_prob == pytest.approx(1.0)

    def test_individual_probabilities(self):
        """Test doubles and non-doubles probabilities."""
        assert DICE_PROBABILITIES[(1, 1)] == pytest.approx(1 / 36)
        assert DICE_PROBABILITIES[(1, 2)] == pytest.approx(2 / 36)
        assert roll_probability(DiceRoll(5, 5)) == pytest.approx(1 / 36)
        assert roll_probability(DiceRoll(6, 5)) == pytest.approx(2 / 36)

    def test_weighted_rolls_cover_all_36_outcomes(self):
        """Test weighted rolls cover all 36 outcomes."""
        weights = [36 * DICE_PROBABILITIES[roll] for roll in ALL_DICE_ROLLS]
        assert sum(round(w) for w in weights) == 36
