"""Agent-versus-agent benchmarking.

Provides:
- Win rate evaluation of one agent against another
- Reproducible threaded runs: every game draws its dice from its own
  ``numpy.random.SeedSequence`` child stream
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Tuple
import numpy as np

from expectigammon.core.types import Side
from expectigammon.evaluation.agents import Agent
from expectigammon.simulation.self_play import GameResult, compute_game_statistics, play_game

logger = logging.getLogger(__name__)


@dataclass
class EvalResult:
    """Result of evaluating an agent against an opponent."""
    agent_name: str
    opponent_name: str
    num_games: int
    wins: int
    losses: int
    draws: int
    avg_game_length: float
    agent_max_games: int = 0
    statistics: Dict[str, Any] = field(default_factory=dict)

    @property
    def win_rate(self) -> float:
        """Win rate as fraction [0, 1]."""
        if self.num_games == 0:
            return 0.0
        return self.wins / self.num_games

    def summary(self) -> str:
        """One-line summary string."""
        return (
            f"{self.agent_name} vs {self.opponent_name}: "
            f"{self.win_rate:.1%} ({self.wins}W/{self.losses}L/{self.draws}D "
            f"in {self.num_games}g, "
            f"avg len: {self.avg_game_length:.0f})"
        )

    def to_dict(self) -> Dict[str, Any]:
        entry = asdict(self)
        entry['win_rate'] = self.win_rate
        for key, value in entry.pop('statistics').items():
            entry[f'stats/{key}'] = value
        return entry


def evaluate_agents(
    agent: Agent,
    opponent: Agent,
    num_games: int = 10,
    seed: Optional[int] = None,
    workers: int = 1,
    max_turns: int = 2000,
) -> EvalResult:
    """Evaluate an agent against an opponent over many games.

    The agent plays Max in the first half of the games and Min in the
    second half, to cancel out the advantage of moving first. With an odd
    number of games the extra game goes to the agent as Max.

    Args:
        agent: Agent to evaluate.
        opponent: Opponent agent.
        num_games: Total number of games.
        seed: Seed of the dice streams (fresh entropy if None).
        workers: Threads playing games concurrently.
        max_turns: Turn cap per game.

    Returns:
        EvalResult with the tally and the per-side statistics of the games.
    """
    streams = np.random.SeedSequence(seed).spawn(num_games)
    games_per_side = (num_games + 1) // 2

    def run(index: int) -> Tuple[Side, GameResult]:
        rng = np.random.default_rng(streams[index])
        if index < games_per_side:
            return Side.MAX, play_game(agent, opponent, max_turns=max_turns, rng=rng)
        return Side.MIN, play_game(opponent, agent, max_turns=max_turns, rng=rng)

    if workers > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            outcomes: List[Tuple[Side, GameResult]] = list(pool.map(run, range(num_games)))
    else:
        outcomes = [run(i) for i in range(num_games)]

    wins = 0
    losses = 0
    draws = 0
    total_turns = 0

    for agent_side, result in outcomes:
        total_turns += result.num_turns
        if result.winner is None:
            draws += 1
        elif result.winner == agent_side:
            wins += 1
        else:
            losses += 1

    evaluation = EvalResult(
        agent_name=agent.name,
        opponent_name=opponent.name,
        num_games=num_games,
        wins=wins,
        losses=losses,
        draws=draws,
        avg_game_length=total_turns / max(num_games, 1),
        agent_max_games=games_per_side,
        statistics=compute_game_statistics([result for _, result in outcomes]),
    )
    logger.info("%s", evaluation.summary())
    return evaluation
