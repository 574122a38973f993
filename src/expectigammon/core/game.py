"""Game state machine and movement rules.

This module implements the backgammon turn logic:
- Game setup
- Legal ply generation for a dice roll (hits, bar entry, bear-off)
- Ply validation and execution with optional rollback
- Terminal state queries

Board orientation:
    Both sides store their checkers from their own perspective (point 23 is
    the 24-point, point 0 the 1-point). Point ``i`` of one side is point
    ``23 - i`` of the other, so the opponent's count on a target point is
    read at the mirrored index.

    Max's view, 1-based:
    13 14 15 16 17 18    19 20 21 22 23 24
    +------------------+------------------+
    |                  |                  |  Min home
    |                  |                  |
    |                  |                  |  Max home
    +------------------+------------------+
    12 11 10  9  8  7     6  5  4  3  2  1
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple
import numpy as np
from numpy.typing import NDArray

from expectigammon.core.dice import make_roll
from expectigammon.core.player import PlayerState
from expectigammon.core.types import (
    NO_PLY,
    NUM_CHECKERS,
    NUM_POINTS,
    IllegalPlyError,
    Move,
    Ply,
    Side,
)

logger = logging.getLogger(__name__)

# Candidate ply with the number of dice it accounts for
_Candidate = Tuple[Ply, int]


# ==============================================================================
# MOVE MECHANICS
# ==============================================================================


def _mirror(point: int) -> int:
    """Index of a point as seen from the other side."""
    return NUM_POINTS - 1 - point


def opponent_checkers_on_target(opponent: PlayerState, move: Move) -> int:
    """Number of opposing checkers on the move's landing point.

    Bearing off never lands on a point, so it always reports 0.
    """
    if move.target < 0:
        return 0
    return int(opponent.board[_mirror(move.target)])


def is_target_open(opponent: PlayerState, move: Move) -> bool:
    """A target is open unless two or more opposing checkers hold it."""
    return opponent_checkers_on_target(opponent, move) < 2


def _apply_hit(opponent: PlayerState, move: Move) -> None:
    """Send the opposing blot on the move's target to the bar."""
    opponent.board[_mirror(move.target)] -= 1
    opponent.bar += 1


def _move_checker(player: PlayerState, move: Move) -> None:
    """Lift a checker from its source and place it on the target (unless borne off)."""
    if move.is_bar_entry:
        player.bar -= 1
    else:
        player.board[move.source] -= 1

    if move.target >= 0:
        player.board[move.target] += 1


def _apply_move(player: PlayerState, opponent: PlayerState, move: Move) -> None:
    """Apply a move known to be open, hitting a blot if there is one."""
    if opponent_checkers_on_target(opponent, move) == 1:
        _apply_hit(opponent, move)
    _move_checker(player, move)


def _illegal_reason(player: PlayerState, opponent: PlayerState, move: Move) -> Optional[str]:
    """Why a move cannot be played, or None if it can."""
    if move.is_bar_entry:
        if player.bar == 0:
            return "no checker on the bar"
    elif player.board[move.source] == 0:
        return f"no checker on point {move.source + 1}"

    if not is_target_open(opponent, move):
        return f"point {move.target + 1} is blocked"
    return None


def _play_in_order(
    player: PlayerState,
    opponent: PlayerState,
    moves: Sequence[Move],
) -> Optional[Tuple[Move, str]]:
    """Apply moves one after the other; returns the first failing move and why."""
    for move in moves:
        reason = _illegal_reason(player, opponent, move)
        if reason is not None:
            return move, reason
        _apply_move(player, opponent, move)
    return None


def _possible_moves(player: PlayerState, opponent: PlayerState, pips: int) -> List[Move]:
    """All single-checker moves for one die value."""
    moves = []
    for point in player.occupied_points():
        move = Move(point, pips)
        if is_target_open(opponent, move):
            moves.append(move)
    return moves


def _plies_for_order(
    player: PlayerState,
    opponent: PlayerState,
    first: int,
    second: int,
) -> List[_Candidate]:
    """Enumerate plies playing ``first`` then ``second``.

    Each candidate carries the number of dice it accounts for: a ply that
    bears off the last checker with its first move is complete, so it counts
    as using both dice.
    """
    candidates: List[_Candidate] = []

    for first_move in _possible_moves(player, opponent, first):
        player_after = player.clone()
        opponent_after = opponent.clone()
        _apply_move(player_after, opponent_after, first_move)

        if player_after.is_finished():
            candidates.append((Ply(first_move, frozen=True), 2))
            continue

        follow_ups = _possible_moves(player_after, opponent_after, second)
        if not follow_ups:
            candidates.append((Ply(first_move, frozen=True), 1))
            continue

        for second_move in follow_ups:
            candidates.append((Ply(first_move, second_move, frozen=True), 2))

    return candidates


def _filter_candidates(candidates: List[_Candidate]) -> List[Ply]:
    """Apply the bar-first and maximum-dice rules and drop duplicates."""
    if not candidates:
        return []

    # Enter as many checkers from the bar as the roll allows
    most_bar_moves = max(ply.bar_movement_count for ply, _ in candidates)
    candidates = [c for c in candidates if c[0].bar_movement_count == most_bar_moves]

    # Play both dice whenever possible
    most_dice = max(dice_used for _, dice_used in candidates)
    candidates = [c for c in candidates if c[1] == most_dice]

    # Only one die playable: the larger one must be played if it can be
    if most_dice == 1:
        larger = max(ply.moves[0].pips for ply, _ in candidates)
        candidates = [c for c in candidates if c[0].moves[0].pips == larger]

    return list(dict.fromkeys(ply for ply, _ in candidates))


# ==============================================================================
# GAME STATE
# ==============================================================================


@dataclass
class Game:
    """Full game state.

    Attributes:
        max_player: Checkers of the maximizing side (moves first)
        min_player: Checkers of the minimizing side
        side_to_move: Which side plays the next ply
        last_ply: Ply that produced this state, None for a fresh game
    """
    max_player: PlayerState = field(default_factory=lambda: PlayerState(name="Max"))
    min_player: PlayerState = field(default_factory=lambda: PlayerState(name="Min"))
    side_to_move: Side = Side.MAX
    last_ply: Optional[Ply] = None

    @classmethod
    def setup(cls) -> "Game":
        """Standard starting position with Max to move."""
        return cls()

    def clone(self) -> "Game":
        """Independent deep copy; plies are shared since they are never mutated."""
        return Game(
            max_player=self.max_player.clone(),
            min_player=self.min_player.clone(),
            side_to_move=self.side_to_move,
            last_ply=self.last_ply,
        )

    # --------------------------------------------------------------------------
    # Queries
    # --------------------------------------------------------------------------

    def player(self, side: Side) -> PlayerState:
        return self.max_player if side == Side.MAX else self.min_player

    def current_player(self) -> PlayerState:
        return self.player(self.side_to_move)

    def opponent_player(self) -> PlayerState:
        return self.player(self.side_to_move.opponent())

    def max_to_move(self) -> bool:
        return self.side_to_move == Side.MAX

    def min_to_move(self) -> bool:
        return self.side_to_move == Side.MIN

    def is_terminal(self) -> bool:
        """True once either side has no checkers left."""
        return (
            self.max_player.remaining_checkers() == 0
            or self.min_player.remaining_checkers() == 0
        )

    def winner(self) -> Optional[Side]:
        """The side that has borne off everything, or None while in progress."""
        if self.max_player.is_finished():
            return Side.MAX
        if self.min_player.is_finished():
            return Side.MIN
        return None

    # --------------------------------------------------------------------------
    # Ply generation and validation
    # --------------------------------------------------------------------------

    def legal_plies(self, roll: Sequence[int]) -> List[Ply]:
        """Generate every distinct legal ply for a roll.

        Both dice orders are explored for non-doubles, since a roll can be
        playable in one order only. Plies entering fewer checkers from the
        bar than possible, or playing fewer dice than possible, are dropped.

        Args:
            roll: Dice roll (any ``(one, two)`` pair)

        Returns:
            Distinct plies in enumeration order; empty if the mover cannot
            move at all (the turn passes).

        Raises:
            ValueError: If a die value is outside 1-6
        """
        roll = make_roll(*roll)
        player = self.current_player()
        opponent = self.opponent_player()

        candidates = _plies_for_order(player, opponent, roll.one, roll.two)
        if not roll.is_double():
            candidates += _plies_for_order(player, opponent, roll.two, roll.one)

        return _filter_candidates(candidates)

    def validate(self, ply: Ply, roll: Sequence[int]) -> bool:
        """Check that a ply is one of the legal plies for the roll."""
        return ply in self.legal_plies(roll)

    # --------------------------------------------------------------------------
    # Transitions
    # --------------------------------------------------------------------------

    def execute(self, ply: Ply, rollback_on_error: bool = False) -> bool:
        """Play a ply for the side to move and hand the turn over.

        Moves are applied to copies of both sides which replace the live
        state only once every move has been played, so the state is never
        left half-updated. A ply stores its moves by pips, so when one checker
        is moved twice the stored order may not be playable; the reverse
        order is tried before giving up. Executing ``NO_PLY`` passes the turn.

        Args:
            ply: Ply to play
            rollback_on_error: Return False instead of raising when a move
                cannot be played

        Returns:
            True on success, False if a move failed and rollback was requested

        Raises:
            IllegalPlyError: A move is blocked or has no checker to move and
                rollback was not requested
        """
        moves = ply.moves
        orders = [moves, moves[::-1]] if len(moves) == 2 and moves[0] != moves[1] else [moves]

        for order in orders:
            player = self.current_player().clone()
            opponent = self.opponent_player().clone()
            failure = _play_in_order(player, opponent, order)
            if failure is None:
                break
        else:
            move, reason = failure
            if rollback_on_error:
                logger.debug("Rolled back %s: %s", ply, reason)
                return False
            raise IllegalPlyError(f"Move not allowed: {move} ({reason})")

        if self.side_to_move == Side.MAX:
            self.max_player, self.min_player = player, opponent
        else:
            self.min_player, self.max_player = player, opponent

        self.last_ply = ply
        self.side_to_move = self.side_to_move.opponent()
        return True

    def pass_turn(self) -> None:
        """Forfeit the turn when no ply is available."""
        self.execute(NO_PLY)

    def expand(self, roll: Sequence[int]) -> List["Game"]:
        """One cloned successor state per legal ply, in enumeration order."""
        successors = []
        for ply in self.legal_plies(roll):
            child = self.clone()
            child.execute(ply)
            successors.append(child)
        return successors

    # --------------------------------------------------------------------------
    # Diagnostics and display
    # --------------------------------------------------------------------------

    def check_consistency(self) -> Tuple[bool, str]:
        """Validate the board invariants.

        Returns:
            (is_valid, error_message) tuple
        """
        for side in Side:
            state = self.player(side)
            if np.any(state.board < 0):
                return False, f"{side} has a negative checker count"
            if state.bar < 0:
                return False, f"{side} has a negative bar count"
            if state.remaining_checkers() > NUM_CHECKERS:
                return False, f"{side} has {state.remaining_checkers()} checkers in play"

        contested = (self.max_player.board > 0) & (self.min_player.board[::-1] > 0)
        if np.any(contested):
            point = int(np.flatnonzero(contested)[0])
            return False, f"Point {point + 1} is occupied by both sides"

        return True, ""

    def board_view(self) -> NDArray[np.int32]:
        """Signed checker counts from Max's orientation.

        Max's checkers are positive at their own index, Min's checkers are
        negative at the mirrored index ``23 - i``.
        """
        return self.max_player.board - self.min_player.board[::-1]

    def pip_counts(self) -> Dict[Side, int]:
        return {side: self.player(side).remaining_pips() for side in Side}

    def __str__(self) -> str:
        move = f"{self.last_ply}\n" if self.last_ply is not None else ""
        return f"{move}Max {self.max_player}\nMin {self.min_player}"


def board_to_string(game: Game) -> str:
    """Render a game as a point table for debugging.

    Args:
        game: Game to display

    Returns:
        Multi-line text, points numbered from Max's side
    """
    view = game.board_view()
    lines = []
    lines.append("=" * 40)
    lines.append(f"Side to move: {game.side_to_move}")
    if game.last_ply is not None:
        lines.append(f"Last ply: {game.last_ply}")
    lines.append(f"Max pip count: {game.max_player.remaining_pips()}")
    lines.append(f"Min pip count: {game.min_player.remaining_pips()}")
    lines.append("")
    lines.append("Point |  Max |  Min")
    lines.append("------+------+------")

    for point in range(NUM_POINTS - 1, -1, -1):
        count = int(view[point])
        max_count = count if count > 0 else 0
        min_count = -count if count < 0 else 0
        lines.append(f"{point + 1:5d} | {max_count:4d} | {min_count:4d}")

    lines.append(f"  BAR | {game.max_player.bar:4d} | {game.min_player.bar:4d}")
    lines.append(f"  OFF | {game.max_player.borne_off():4d} | {game.min_player.borne_off():4d}")
    lines.append("=" * 40)
    return "\n".join(lines)
