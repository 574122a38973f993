"""Player agents for simulation and benchmarking.

Every agent answers the same question: given the roll just drawn and the
live game, which ply should the side to move play?

- Random agent: picks uniformly among the legal plies
- Greedy agent: one-ply search, takes the ply that looks best right away
- Expectimax agent: dice-averaged lookahead (see ``evaluation.search``)

Agents never modify the game they are handed.
"""

import threading
from dataclasses import dataclass
from typing import Callable, Optional
import numpy as np

from expectigammon.core.game import Game
from expectigammon.core.types import NO_PLY, DiceRoll, Ply
from expectigammon.evaluation.search import EvaluationWeights, SearchConfig, select_ply


# ==============================================================================
# AGENT BASE CLASS
# ==============================================================================


@dataclass
class Agent:
    """Agent playing one side.

    Attributes:
        name: Agent name for identification
        select_ply_fn: Function choosing a ply for a roll and game state
    """
    name: str
    select_ply_fn: Callable[[DiceRoll, Game], Ply]

    def next_ply(self, roll: DiceRoll, game: Game) -> Ply:
        """Choose a legal ply, or NO_PLY if the roll cannot be played.

        Args:
            roll: Dice roll to play
            game: Current game state (not modified)

        Returns:
            Selected ply
        """
        return self.select_ply_fn(roll, game)


# ==============================================================================
# RANDOM AGENT
# ==============================================================================


def random_agent(seed: Optional[int] = None) -> Agent:
    """Create an agent that selects plies uniformly at random.

    The generator is guarded by a lock so one agent can serve games running
    on several threads.

    Args:
        seed: Random seed (optional, for reproducibility)

    Returns:
        Random agent
    """
    rng = np.random.default_rng(seed)
    lock = threading.Lock()

    def select_random_ply(roll: DiceRoll, game: Game) -> Ply:
        """Select a random legal ply."""
        plies = game.legal_plies(roll)
        if not plies:
            return NO_PLY
        with lock:
            idx = int(rng.integers(0, len(plies)))
        return plies[idx]

    return Agent(name="Random", select_ply_fn=select_random_ply)


# ==============================================================================
# SEARCH AGENTS
# ==============================================================================


def expectimax_agent(config: Optional[SearchConfig] = None, name: Optional[str] = None) -> Agent:
    """Create an agent backed by the expectimax search.

    Args:
        config: Search configuration (depth 2 with default weights if None)
        name: Agent name (derived from the depth if None)

    Returns:
        Expectimax agent
    """
    if config is None:
        config = SearchConfig()

    def select_search_ply(roll: DiceRoll, game: Game) -> Ply:
        return select_ply(game, roll, config).best_ply

    return Agent(name=name or f"Expectimax-{config.depth}ply", select_ply_fn=select_search_ply)


def greedy_agent(weights: Optional[EvaluationWeights] = None) -> Agent:
    """Create a fast agent that only looks at the position right after its ply.

    Returns:
        Greedy agent (a depth-1 search)
    """
    config = SearchConfig(depth=1, weights=weights or EvaluationWeights())
    return expectimax_agent(config, name="Greedy")
