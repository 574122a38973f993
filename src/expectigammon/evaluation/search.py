"""Expectimax search for ply selection.

Implements a fixed-depth game tree search with dice averaging. Three kinds
of node alternate:

- Decision node: the side to move picks the successor with the best value
  (Max takes the largest, Min the smallest). Ties keep the first successor
  in enumeration order.
- Chance node: the next roll is unknown. The value is the probability
  weighted average over all 21 distinct rolls (1/36 for doubles, 2/36 for
  the rest), each continuing with a decision node one ply deeper.
- Cutoff node: depth exhausted or game over. The position is scored with a
  linear heuristic.

Depth counts the decision layers of the side searching, so depth 2 looks at
our ply, every opponent roll, and the opponent's best reply.

Scores are always from Max's point of view: each side is rated by how much
work it has left (lower is better, 0 once finished) and the position score
is Min's rating minus Max's rating.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from expectigammon.core.dice import ALL_DICE_ROLLS, DICE_PROBABILITIES, make_roll
from expectigammon.core.game import Game
from expectigammon.core.player import PlayerState
from expectigammon.core.types import NO_PLY, DiceRoll, Ply, Side

logger = logging.getLogger(__name__)


# ==============================================================================
# CONFIGURATION
# ==============================================================================


@dataclass
class EvaluationWeights:
    """Weights of the static evaluation.

    Attributes:
        checkers: Weight per checker still in play
        pips: Weight per remaining pip
        bar: Extra weight per checker on the bar
    """
    checkers: float = 1.0
    pips: float = 0.5
    bar: float = 1.0

    def __post_init__(self):
        for name in ("checkers", "pips", "bar"):
            if getattr(self, name) < 0:
                raise ValueError(f"Weight '{name}' must be non-negative, got {getattr(self, name)}")


@dataclass
class SearchConfig:
    """Configuration for ply selection.

    Attributes:
        depth: Decision layers to search (2 = our ply plus the opponent's reply)
        weights: Static evaluation weights
        workers: Threads used to score root candidates (1 = serial)
    """
    depth: int = 2
    weights: EvaluationWeights = field(default_factory=EvaluationWeights)
    workers: int = 1

    def __post_init__(self):
        if self.depth < 1:
            raise ValueError(f"Search depth must be at least 1, got {self.depth}")
        if self.workers < 1:
            raise ValueError(f"Workers must be at least 1, got {self.workers}")


@dataclass
class PlyEvaluation:
    """Search score of one root candidate."""
    ply: Ply
    score: float


@dataclass
class SearchResult:
    """Result of searching for the best ply.

    Attributes:
        best_ply: The chosen ply (NO_PLY if nothing is playable)
        best_score: Expected score of the chosen ply, Max's point of view
        candidates: Every root candidate with its score, in enumeration order
        positions_evaluated: Number of static evaluations performed
        time_ms: Search time in milliseconds
    """
    best_ply: Ply
    best_score: float
    candidates: List[PlyEvaluation]
    positions_evaluated: int
    time_ms: float


@dataclass
class SearchStats:
    positions_evaluated: int = 0


# ==============================================================================
# STATIC EVALUATION
# ==============================================================================


def evaluate_player(player: PlayerState, weights: Optional[EvaluationWeights] = None) -> float:
    """Rate one side by the work it has left.

    Args:
        player: Side to rate
        weights: Evaluation weights (defaults if None)

    Returns:
        Non-negative rating, lower is better, exactly 0 once the side has
        borne off every checker
    """
    if weights is None:
        weights = EvaluationWeights()
    return (
        weights.checkers * player.remaining_checkers()
        + weights.pips * player.remaining_pips()
        + weights.bar * player.bar
    )


def evaluate_position(game: Game, weights: Optional[EvaluationWeights] = None) -> float:
    """Score a position from Max's point of view (higher favours Max)."""
    return evaluate_player(game.min_player, weights) - evaluate_player(game.max_player, weights)


# ==============================================================================
# EXPECTIMAX
# ==============================================================================


def _successors(game: Game, roll: DiceRoll) -> List[Game]:
    """Successor states for a roll; a blocked mover has the pass as only successor."""
    children = game.expand(roll)
    if not children:
        child = game.clone()
        child.pass_turn()
        children = [child]
    return children


def _is_better(side: Side, score: float, best: float) -> bool:
    return score > best if side == Side.MAX else score < best


def _cutoff_value(game: Game, weights: EvaluationWeights, stats: SearchStats) -> float:
    stats.positions_evaluated += 1
    return evaluate_position(game, weights)


def _decision_value(
    game: Game,
    roll: DiceRoll,
    depth: int,
    weights: EvaluationWeights,
    stats: SearchStats,
) -> Tuple[float, Ply]:
    """Best value the side to move can reach with this roll."""
    if depth == 0 or game.is_terminal():
        return _cutoff_value(game, weights, stats), NO_PLY

    side = game.side_to_move
    best_score = float("-inf") if side == Side.MAX else float("inf")
    best_ply = NO_PLY

    for child in _successors(game, roll):
        score = _chance_value(child, depth, weights, stats)
        if _is_better(side, score, best_score):
            best_score = score
            best_ply = child.last_ply

    return best_score, best_ply


def _chance_value(
    game: Game,
    depth: int,
    weights: EvaluationWeights,
    stats: SearchStats,
) -> float:
    """Expected value over the next roll; the decision below is one ply deeper."""
    # With one ply of budget left every roll leads straight to a cutoff
    if depth <= 1 or game.is_terminal():
        return _cutoff_value(game, weights, stats)

    expected = 0.0
    for roll in ALL_DICE_ROLLS:
        score, _ = _decision_value(game, roll, depth - 1, weights, stats)
        expected += DICE_PROBABILITIES[roll] * score
    return expected


def expectimax(
    game: Game,
    roll: Sequence[int],
    depth: int = 2,
    weights: Optional[EvaluationWeights] = None,
) -> Tuple[float, Ply]:
    """Run the search from a decision node.

    The game passed in is never modified; every branch works on clones.

    Args:
        game: Current state
        roll: Roll the side to move has to play
        depth: Decision layers to search
        weights: Evaluation weights (defaults if None)

    Returns:
        Tuple of (score, best_ply)
    """
    if weights is None:
        weights = EvaluationWeights()
    return _decision_value(game, make_roll(*roll), depth, weights, SearchStats())


def _score_candidate(child: Game, depth: int, weights: EvaluationWeights) -> Tuple[float, int]:
    stats = SearchStats()
    score = _chance_value(child, depth, weights, stats)
    return score, stats.positions_evaluated


def select_ply(
    game: Game,
    roll: Sequence[int],
    config: Optional[SearchConfig] = None,
) -> SearchResult:
    """Select the best ply for a roll.

    Root candidates are independent, so with ``config.workers > 1`` they
    are scored on a thread pool. Each branch owns its cloned states; results
    are folded in enumeration order so ties resolve exactly as in a serial
    search.

    Args:
        game: Current state (not modified)
        roll: Roll to play
        config: Search configuration (defaults if None)

    Returns:
        SearchResult; ``best_ply`` is NO_PLY when nothing can be played
    """
    if config is None:
        config = SearchConfig()

    start = time.perf_counter()
    roll = make_roll(*roll)
    side = game.side_to_move

    children = game.expand(roll)
    if not children or game.is_terminal():
        return SearchResult(
            best_ply=NO_PLY,
            best_score=evaluate_position(game, config.weights),
            candidates=[],
            positions_evaluated=1,
            time_ms=(time.perf_counter() - start) * 1000,
        )

    if config.workers > 1 and len(children) > 1:
        with ThreadPoolExecutor(max_workers=config.workers) as pool:
            scored = list(pool.map(
                lambda child: _score_candidate(child, config.depth, config.weights),
                children,
            ))
    else:
        scored = [_score_candidate(child, config.depth, config.weights) for child in children]

    candidates = []
    best_ply = NO_PLY
    best_score = float("-inf") if side == Side.MAX else float("inf")
    positions = 0

    for child, (score, evaluated) in zip(children, scored):
        candidates.append(PlyEvaluation(ply=child.last_ply, score=score))
        positions += evaluated
        if _is_better(side, score, best_score):
            best_score = score
            best_ply = child.last_ply

    time_ms = (time.perf_counter() - start) * 1000
    logger.debug(
        "Searched %d plies at depth %d for %s: %d positions in %.1f ms",
        len(candidates), config.depth, side, positions, time_ms,
    )

    return SearchResult(
        best_ply=best_ply,
        best_score=best_score,
        candidates=candidates,
        positions_evaluated=positions,
        time_ms=time_ms,
    )
