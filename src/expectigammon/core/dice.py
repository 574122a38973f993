"""Dice utilities.

This module handles dice rolling and the enumeration of the 21 distinct
rolls consumed by chance nodes during search.
"""

from typing import Dict, List
import numpy as np
from expectigammon.core.types import DiceRoll


def all_dice_rolls() -> List[DiceRoll]:
    """Generate all 21 unique dice outcomes.

    (2,3) and (3,2) are the same roll, so there are 21 unique rolls:
    - 6 doubles: (1,1), (2,2), ..., (6,6)
    - 15 non-doubles: (1,2), (1,3), ..., (5,6)

    Returns:
        List of all 21 unique dice combinations, smaller die first
    """
    rolls = []
    for one in range(1, 7):
        for two in range(one, 7):  # two >= one skips reordered duplicates
            rolls.append(DiceRoll(one, two))
    return rolls


def is_double(roll: DiceRoll) -> bool:
    """Check if a roll is a double."""
    return roll[0] == roll[1]


def roll_probability(roll: DiceRoll) -> float:
    """Probability of an unordered roll: 1/36 for doubles, 2/36 otherwise."""
    return 1 / 36 if is_double(roll) else 2 / 36


def roll_dice(rng: np.random.Generator) -> DiceRoll:
    """Roll two dice.

    Args:
        rng: NumPy random generator. Generators are not safe to share
            between threads; give each simulation its own.

    Returns:
        DiceRoll with both values in 1-6
    """
    one = int(rng.integers(1, 7))
    two = int(rng.integers(1, 7))
    return DiceRoll(one, two)


def make_roll(one: int, two: int) -> DiceRoll:
    """Build a roll from two die values, rejecting values outside 1-6."""
    if not (1 <= one <= 6 and 1 <= two <= 6):
        raise ValueError(f"Invalid dice roll: ({one}, {two})")
    return DiceRoll(one, two)


def dice_to_string(roll: DiceRoll) -> str:
    """Convert a roll to a readable string.

    Examples:
        >>> dice_to_string(DiceRoll(3, 5))
        '3-5'
        >>> dice_to_string(DiceRoll(4, 4))
        'Double 4s'
    """
    if is_double(roll):
        return f"Double {roll[0]}s"
    return f"{roll[0]}-{roll[1]}"


# Precomputed for chance nodes
ALL_DICE_ROLLS = all_dice_rolls()

DICE_PROBABILITIES: Dict[DiceRoll, float] = {
    roll: roll_probability(roll) for roll in ALL_DICE_ROLLS
}
