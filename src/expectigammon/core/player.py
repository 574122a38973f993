"""Per-side checker distribution.

A PlayerState holds one side's checkers on its 24 points (own perspective,
see ``expectigammon.core.types``) plus the checkers waiting on the bar.
Borne-off checkers are implicit: ``15 - sum(board) - bar``.
"""

from dataclasses import dataclass, field
from typing import List
import numpy as np
from numpy.typing import NDArray

from expectigammon.core.types import (
    BAR_PIPS,
    BAR_POINT,
    NUM_CHECKERS,
    NUM_POINTS,
    Point,
)


# Pip distance of each point: point i is i + 1 pips from bearing off
PIP_DISTANCES = np.arange(1, NUM_POINTS + 1, dtype=np.int32)


def opening_board() -> NDArray[np.int32]:
    """Standard starting layout for one side.

    Two on the 24-point, five on the 13-point, three on the 8-point and five
    on the 6-point (indices 23, 12, 7, 5).
    """
    board = np.zeros(NUM_POINTS, dtype=np.int32)
    board[23] = 2
    board[12] = 5
    board[7] = 3
    board[5] = 5
    return board


def empty_board() -> NDArray[np.int32]:
    return np.zeros(NUM_POINTS, dtype=np.int32)


@dataclass
class PlayerState:
    """One side's checkers.

    Attributes:
        board: Checker count per point (length 24, own perspective)
        bar: Checkers waiting to re-enter
        name: Display name
    """
    board: NDArray[np.int32] = field(default_factory=opening_board)
    bar: int = 0
    name: str = ""

    def __post_init__(self):
        """Validate player state."""
        self.board = np.asarray(self.board, dtype=np.int32)
        assert self.board.shape == (NUM_POINTS,), "board must have length 24"
        assert self.bar >= 0, f"Invalid bar count: {self.bar}"

    @classmethod
    def from_points(cls, points: dict, bar: int = 0, name: str = "") -> "PlayerState":
        """Create a state from a ``{point: count}`` mapping."""
        board = empty_board()
        for point, count in points.items():
            board[point] = count
        return cls(board=board, bar=bar, name=name)

    def clone(self) -> "PlayerState":
        """Independent deep copy."""
        return PlayerState(board=self.board.copy(), bar=self.bar, name=self.name)

    def remaining_pips(self) -> int:
        """Pips needed to bear everything off; a bar checker counts 25."""
        return self.bar * BAR_PIPS + int(np.dot(PIP_DISTANCES, self.board))

    def remaining_checkers(self) -> int:
        """Checkers still in play, bar included."""
        return int(self.board.sum()) + self.bar

    def borne_off(self) -> int:
        return NUM_CHECKERS - self.remaining_checkers()

    def is_finished(self) -> bool:
        return self.remaining_checkers() == 0

    def has_checkers_on_bar(self) -> bool:
        return self.bar > 0

    def occupied_points(self) -> List[Point]:
        """Points holding at least one checker, ascending, bar (24) last."""
        points = [int(p) for p in np.flatnonzero(self.board)]
        if self.bar > 0:
            points.append(BAR_POINT)
        return points

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PlayerState):
            return NotImplemented
        return self.bar == other.bar and bool(np.array_equal(self.board, other.board))

    def __str__(self) -> str:
        return " ".join(str(int(c)) for c in self.board) + f" | {self.bar}"
