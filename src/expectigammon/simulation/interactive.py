"""Human-versus-agent play on the console.

The human types one source point per die, numbered 1-24 from their own
side, or 25 to enter from the bar. An empty line leaves a die unplayed and
``q`` abandons the game.
"""

import logging
from typing import Optional
import numpy as np

from expectigammon.core.dice import roll_dice
from expectigammon.core.game import Game, board_to_string
from expectigammon.core.types import BAR_POINT, DiceRoll, Move, Ply, Side
from expectigammon.evaluation.agents import Agent

logger = logging.getLogger(__name__)

QUIT_COMMANDS = {"q", "quit", "exit"}


class QuitGame(Exception):
    """The human asked to leave the game."""


def read_move(pips: int) -> Optional[Move]:
    """Prompt until the human enters a source point for one die.

    Returns:
        The move, or None if the die is left unplayed

    Raises:
        QuitGame: On a quit command or end of input
    """
    while True:
        try:
            raw = input(f"Enter move (<point>) for dice {pips} or q to quit: ").strip()
        except EOFError:
            raise QuitGame() from None

        if raw.lower() in QUIT_COMMANDS:
            raise QuitGame()
        if not raw:
            return None
        if not raw.isdigit():
            print("Input is not recognized.")
            continue

        point = int(raw)
        if not 1 <= point <= BAR_POINT + 1:
            print("Move is not valid.")
            continue
        return Move(point - 1, pips)


def read_ply(roll: DiceRoll) -> Ply:
    """Read one move per die and collect them into a ply."""
    ply = Ply()
    for pips in roll:
        move = read_move(pips)
        if move is not None:
            ply.add_move(move)
    return ply


def _human_turn(game: Game, roll: DiceRoll) -> None:
    legal = game.legal_plies(roll)
    if not legal:
        print("No legal moves, turn passes.")
        game.pass_turn()
        return

    print("Legal plies:")
    for ply in legal:
        print(f"  {ply}")

    while True:
        ply = read_ply(roll)
        if game.validate(ply, roll) and game.execute(ply, rollback_on_error=True):
            return
        print("One or more moves are invalid.")


def _agent_turn(game: Game, roll: DiceRoll, agent: Agent) -> None:
    if not game.legal_plies(roll):
        print(f"{agent.name} has no legal moves, turn passes.")
        game.pass_turn()
        return

    print("Agent is thinking...")
    ply = agent.next_ply(roll, game)
    game.execute(ply)
    print(f"{agent.name} plays: {ply}")


def play_interactive(
    agent: Agent,
    human_side: Side = Side.MAX,
    game: Optional[Game] = None,
    rng: Optional[np.random.Generator] = None,
    max_turns: Optional[int] = None,
) -> Optional[Side]:
    """Play a game between a human on the console and an agent.

    Args:
        agent: Agent playing the side the human does not
        human_side: Side the human plays
        game: Starting position (copied; standard setup if None)
        rng: Dice generator
        max_turns: Turns before the game is stopped (no limit if None)

    Returns:
        The winning side, or None if the game was abandoned or stopped
    """
    if rng is None:
        rng = np.random.default_rng()
    game = Game.setup() if game is None else game.clone()

    turn = 0
    while not game.is_terminal():
        if max_turns is not None and turn >= max_turns:
            print("Turn limit reached.")
            return None

        roll = roll_dice(rng)
        print(board_to_string(game))
        print(f"==== {roll} ====")

        if game.side_to_move == human_side:
            try:
                _human_turn(game, roll)
            except QuitGame:
                print("Game abandoned.")
                logger.info("Game abandoned after %d turns", turn)
                return None
        else:
            _agent_turn(game, roll, agent)
        turn += 1

    winner = game.winner()
    print(board_to_string(game))
    if winner == human_side:
        print("You win!")
    else:
        print(f"{agent.name} wins!")
    return winner
