"""Core game logic and data structures."""

from expectigammon.core.types import (
    DiceRoll,
    Move,
    Ply,
    NO_PLY,
    Side,
    Point,
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
    "Point",
    "IllegalPlyError",
    "FrozenPlyError",
    "PlayerState",
    "Game",
]
