"""Pytest configuration and shared fixtures."""

import pytest
import numpy as np

from expectigammon.core.game import Game
from expectigammon.core.player import PlayerState
from expectigammon.core.types import Side


@pytest.fixture
def rng():
    """Seeded NumPy generator for dice."""
    return np.random.default_rng(42)


@pytest.fixture
def opening_game():
    """Standard starting position, Max to move."""
    return Game.setup()


@pytest.fixture
def make_game():
    """Factory for positions given as ``{point: count}`` mappings.

    Points are each side's own perspective (0 = 1-point, 23 = 24-point).
    """
    def _make_game(max_points, min_points, max_bar=0, min_bar=0, side=Side.MAX):
        return Game(
            max_player=PlayerState.from_points(max_points, bar=max_bar, name="Max"),
            min_player=PlayerState.from_points(min_points, bar=min_bar, name="Min"),
            side_to_move=side,
        )
    return _make_game
