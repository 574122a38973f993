"""Core type definitions for expectigammon.

This module defines the data structures shared by the game state machine,
the search and the agents: sides, dice rolls, single-checker moves and plies.

Point convention:
    Each player reads its own board from its own perspective. Point 23 is the
    player's 24-point (furthest from home), point 0 is the 1-point. The bar is
    the virtual source point 24. A move whose target is below 0 bears off.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, NamedTuple, Optional, Tuple


# ==============================================================================
# BOARD CONSTANTS
# ==============================================================================

Point = int  # 0-23 own-perspective points, 24 = bar
CheckerCount = int  # 0-15

NUM_POINTS = 24
BAR_POINT = 24
NUM_CHECKERS = 15
BAR_PIPS = 25  # a checker on the bar is 25 pips from home


class Side(Enum):
    """The two sides of a game. Max moves first and maximizes the score."""
    MAX = "max"
    MIN = "min"

    def opponent(self) -> "Side":
        """Return the other side."""
        return Side.MIN if self == Side.MAX else Side.MAX

    def __str__(self) -> str:
        return self.value


# ==============================================================================
# ERRORS
# ==============================================================================


class IllegalPlyError(ValueError):
    """A ply cannot be executed on the current state."""


class FrozenPlyError(TypeError):
    """Attempt to modify a frozen ply."""


# ==============================================================================
# DICE
# ==============================================================================


class DiceRoll(NamedTuple):
    """Outcome of rolling two dice.

    The order only decides which die is played first during move generation.
    Being a tuple, ``DiceRoll(3, 5) == (3, 5)``.
    """
    one: int
    two: int

    def is_double(self) -> bool:
        """True if both dice show the same value."""
        return self.one == self.two

    def __str__(self) -> str:
        return f"Roll {self.one} and {self.two}"


# ==============================================================================
# MOVES AND PLIES
# ==============================================================================


@dataclass(frozen=True, order=True)
class Move:
    """A single checker displacement.

    Attributes:
        source: Starting point (0-23 own perspective, 24 = bar)
        pips: Die value used (1-6)
    """
    source: Point
    pips: int

    def __post_init__(self):
        """Validate move."""
        assert 0 <= self.source <= BAR_POINT, f"Invalid source: {self.source}"
        assert 1 <= self.pips <= 6, f"Invalid pips: {self.pips}"

    @property
    def target(self) -> int:
        """Landing point; negative when the checker is borne off."""
        return self.source - self.pips

    @property
    def is_bar_entry(self) -> bool:
        return self.source == BAR_POINT

    @property
    def is_bear_off(self) -> bool:
        return self.target < 0

    def __str__(self) -> str:
        if self.is_bear_off:
            return f"Bear off {self.source + 1}"
        if self.is_bar_entry:
            return f"Enter on {self.target + 1}"
        return f"From {self.source + 1} to {self.target + 1}"


class Ply:
    """One turn's worth of moves (at most two).

    Moves are kept sorted by pips so that two plies built from the same moves
    print identically. Equality and hashing only depend on which moves the
    ply contains, never on the order they were added in.

    Args:
        *moves: Zero, one or two moves
        frozen: Reject any later ``add_move`` call
    """

    MAX_MOVES = 2

    __slots__ = ("_moves", "_bar_movement_count", "_frozen")

    def __init__(self, *moves: Move, frozen: bool = False):
        self._moves: List[Move] = []
        self._bar_movement_count = 0
        self._frozen = False
        for move in moves:
            self.add_move(move)
        self._frozen = frozen

    def add_move(self, move: Move) -> None:
        """Insert a move, keeping ascending pip order.

        Raises:
            FrozenPlyError: If the ply was created frozen
            ValueError: If the ply already holds two moves
        """
        if self._frozen:
            raise FrozenPlyError(f"Cannot add {move} to frozen ply: {self}")
        if len(self._moves) >= self.MAX_MOVES:
            raise ValueError(f"A ply holds at most {self.MAX_MOVES} moves")

        if move.is_bar_entry:
            self._bar_movement_count += 1

        if self._moves and move.pips < self._moves[0].pips:
            self._moves.insert(0, move)
        else:
            self._moves.append(move)

    @property
    def moves(self) -> Tuple[Move, ...]:
        return tuple(self._moves)

    @property
    def bar_movement_count(self) -> int:
        """Number of moves entering from the bar."""
        return self._bar_movement_count

    def is_single_move(self) -> bool:
        return len(self._moves) == 1

    def _key(self) -> Tuple[Move, ...]:
        return tuple(sorted(self._moves))

    def __len__(self) -> int:
        return len(self._moves)

    def __iter__(self) -> Iterator[Move]:
        return iter(tuple(self._moves))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ply):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        inner = ", ".join(f"Move({m.source}, {m.pips})" for m in self._moves)
        return f"Ply({inner})"

    def __str__(self) -> str:
        if not self._moves:
            return "No moves"
        return "; ".join(str(m) for m in self._moves)


# Shared "no move available" ply, executed to pass the turn.
NO_PLY = Ply(frozen=True)


def ply_from_pairs(pairs: List[Tuple[int, int]]) -> Ply:
    """Build a ply from ``(source, pips)`` pairs.

    Examples:
        >>> str(ply_from_pairs([(23, 5), (23, 3)]))
        'From 24 to 21; From 24 to 19'
    """
    return Ply(*(Move(source, pips) for source, pips in pairs))


# Optional ply, as stored for the last executed turn
LastPly = Optional[Ply]
