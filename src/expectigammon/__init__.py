"""
Expectigammon - backgammon simulation with an expectimax ply search.
"""

__version__ = "0.1.0"

# Core exports
from expectigammon.core.types import (
    DiceRoll,
    Move,
    Ply,
    NO_PLY,
    Side,
    IllegalPlyError,
    FrozenPlyError,
)
from expectigammon.core.player import PlayerState
from expectigammon.core.game import Game

__all__ = [
    "DiceRoll",
    "Move",
    "Ply",
    "NO_PLY",
    "Side",
    "IllegalPlyError",
    "FrozenPlyError",
    "PlayerState",
    "Game",
]
