"""Whole-game simulation between two agents.

Each call to ``play_game`` owns its game state and its dice generator from
setup to the end, so independent games can run side by side.
"""

import logging
from dataclasses import dataclass
from typing import List, NamedTuple, Optional
import numpy as np

from expectigammon.core.dice import roll_dice
from expectigammon.core.game import Game
from expectigammon.core.types import NO_PLY, DiceRoll, IllegalPlyError, Ply, Side
from expectigammon.evaluation.agents import Agent

logger = logging.getLogger(__name__)


class GameStep(NamedTuple):
    """Single turn of a game."""
    side: Side
    roll: DiceRoll
    ply: Ply
    num_legal_plies: int


@dataclass
class GameResult:
    """Result of a finished (or abandoned) game.

    Attributes:
        winner: Side that bore off first, None if the turn cap was reached
        num_turns: Turns played, passes included
        steps: Turn-by-turn record
        final_game: State at the end of the game
    """
    winner: Optional[Side]
    num_turns: int
    steps: List[GameStep]
    final_game: Game


def play_game(
    max_agent: Agent,
    min_agent: Agent,
    game: Optional[Game] = None,
    max_turns: int = 2000,
    rng: Optional[np.random.Generator] = None,
    check_invariants: bool = False,
) -> GameResult:
    """Play a single game between two agents.

    A roll without legal plies passes the turn without consulting the agent.

    Args:
        max_agent: Agent playing Max
        min_agent: Agent playing Min
        game: Starting position (copied; standard setup if None)
        max_turns: Turns before the game is abandoned
        rng: Dice generator
        check_invariants: Verify board invariants after every turn

    Returns:
        GameResult with the complete trajectory

    Raises:
        IllegalPlyError: An agent returned a ply that is not legal for the roll
    """
    if rng is None:
        rng = np.random.default_rng()
    game = Game.setup() if game is None else game.clone()
    steps: List[GameStep] = []

    for turn in range(max_turns):
        if game.is_terminal():
            return GameResult(winner=game.winner(), num_turns=turn, steps=steps, final_game=game)

        side = game.side_to_move
        agent = max_agent if side == Side.MAX else min_agent

        roll = roll_dice(rng)
        legal_plies = game.legal_plies(roll)

        if legal_plies:
            ply = agent.next_ply(roll, game)
            if ply not in legal_plies:
                raise IllegalPlyError(f"{agent.name} chose an illegal ply for {roll}: {ply}")
        else:
            ply = NO_PLY

        game.execute(ply)
        steps.append(GameStep(side=side, roll=roll, ply=ply, num_legal_plies=len(legal_plies)))

        if check_invariants:
            valid, message = game.check_consistency()
            if not valid:
                logger.warning("Inconsistent state after %s played %s: %s", side, ply, message)

    if game.is_terminal():
        return GameResult(winner=game.winner(), num_turns=max_turns, steps=steps, final_game=game)

    logger.warning("Game hit max turn limit (%d)", max_turns)
    return GameResult(winner=None, num_turns=max_turns, steps=steps, final_game=game)


def compute_game_statistics(games: List[GameResult]) -> dict:
    """Compute statistics from a batch of games.

    Args:
        games: List of game results

    Returns:
        Dictionary of statistics
    """
    total_games = len(games)
    max_wins = sum(1 for g in games if g.winner == Side.MAX)
    min_wins = sum(1 for g in games if g.winner == Side.MIN)
    unfinished = sum(1 for g in games if g.winner is None)

    avg_turns = float(np.mean([g.num_turns for g in games])) if games else 0.0
    passes = sum(1 for g in games for step in g.steps if step.num_legal_plies == 0)

    return {
        'total_games': total_games,
        'max_wins': max_wins,
        'min_wins': min_wins,
        'unfinished': unfinished,
        'max_win_rate': max_wins / total_games if total_games > 0 else 0.0,
        'avg_turns': avg_turns,
        'passes': passes,
    }
