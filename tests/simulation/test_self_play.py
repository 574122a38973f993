"""Tests for whole-game simulation."""

import pytest
import numpy as np

from expectigammon.core.game import Game
from expectigammon.core.types import NO_PLY, IllegalPlyError, Move, Ply, Side
from expectigammon.evaluation.agents import Agent, greedy_agent, random_agent
from expectigammon.simulation.self_play import (
    GameResult,
    GameStep,
    compute_game_statistics,
    play_game,
)


def _never_called(roll, game):
    raise AssertionError("agent consulted without a legal ply")


class TestPlayGame:
    """Tests for the game driver."""

    def test_random_game_completes(self, rng):
        """Test random game runs to completion."""
        result = play_game(
            random_agent(seed=1), random_agent(seed=2), rng=rng, check_invariants=True,
        )
        assert result.winner in (Side.MAX, Side.MIN)
        assert result.final_game.is_terminal()
        assert result.final_game.player(result.winner).is_finished()
        assert result.num_turns == len(result.steps)

    def test_sides_alternate(self, rng):
        """Test sides alternate every turn."""
        result = play_game(random_agent(seed=1), random_agent(seed=2), rng=rng, max_turns=20)
        sides = [step.side for step in result.steps]
        assert sides[0] == Side.MAX
        assert all(a != b for a, b in zip(sides, sides[1:]))

    def test_greedy_game(self, rng):
        """Test greedy agent game finishes."""
        result = play_game(greedy_agent(), random_agent(seed=4), rng=rng)
        assert result.winner is not None

    def test_starting_position_not_modified(self, opening_game, rng):
        """Test the starting position is copied."""
        snapshot = opening_game.clone()
        play_game(random_agent(seed=1), random_agent(seed=2), game=opening_game, rng=rng)
        assert opening_game == snapshot

    def test_reproducible(self):
        """Test same seeds replay the same game."""
        first = play_game(
            random_agent(seed=1), random_agent(seed=2), rng=np.random.default_rng(9),
        )
        second = play_game(
            random_agent(seed=1), random_agent(seed=2), rng=np.random.default_rng(9),
        )
        assert first.steps == second.steps
        assert first.winner == second.winner

    def test_blocked_side_passes(self, make_game, rng):
        """Min holds Max's whole entry board, so Max cannot come in."""
        game = make_game({}, {0: 2, 1: 2, 2: 2, 3: 2, 4: 2, 5: 2}, max_bar=1)
        blocked = Agent(name="Blocked", select_ply_fn=_never_called)

        result = play_game(blocked, random_agent(seed=0), game=game, rng=rng, max_turns=1)
        step = result.steps[0]
        assert step.ply is NO_PLY
        assert step.num_legal_plies == 0
        assert result.final_game.side_to_move == Side.MIN

    def test_illegal_ply_rejected(self, rng):
        """Test illegal agent ply raises."""
        cheater = Agent(name="Cheater", select_ply_fn=lambda roll, game: Ply(Move(20, 1)))
        with pytest.raises(IllegalPlyError):
            play_game(cheater, random_agent(seed=0), rng=rng)

    def test_turn_cap(self, rng):
        """Test turn cap ends the game without a winner."""
        result = play_game(random_agent(seed=1), random_agent(seed=2), rng=rng, max_turns=3)
        assert result.winner is None
        assert result.num_turns == 3
        assert len(result.steps) == 3
        assert not result.final_game.is_terminal()

    def test_finished_start(self, make_game, rng):
        """Test game already over at the start."""
        game = make_game({}, {12: 15})
        result = play_game(random_agent(seed=1), random_agent(seed=2), game=game, rng=rng)
        assert result.winner == Side.MAX
        assert result.num_turns == 0
        assert result.steps == []


class TestGameStatistics:
    """Tests for batch statistics."""

    def _result(self, winner, num_turns, passes=0):
        steps = [
            GameStep(side=Side.MAX, roll=(1, 2), ply=NO_PLY, num_legal_plies=0)
            for _ in range(passes)
        ]
        return GameResult(winner=winner, num_turns=num_turns, steps=steps, final_game=Game.setup())

    def test_statistics(self):
        """Test statistics over a batch."""
        games = [
            self._result(Side.MAX, 40, passes=2),
            self._result(Side.MIN, 60),
            self._result(None, 80, passes=1),
        ]
        stats = compute_game_statistics(games)
        assert stats['total_games'] == 3
        assert stats['max_wins'] == 1
        assert stats['min_wins'] == 1
        assert stats['unfinished'] == 1
        assert stats['max_win_rate'] == pytest.approx(1 / 3)
        assert stats['avg_turns'] == pytest.approx(60.0)
        assert stats['passes'] == 3

    def test_empty(self):
        """Test statistics of an empty batch."""
        stats = compute_game_statistics([])
        assert stats['total_games'] == 0
        assert stats['max_win_rate'] == 0.0
        assert stats['avg_turns'] == 0.0
