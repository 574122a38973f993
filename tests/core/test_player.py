"""Tests for PlayerState."""

import pytest
import numpy as np

from expectigammon.core.player import PlayerState, empty_board, opening_board


class TestPlayerCreation:
    """Tests for player construction."""

    def test_opening_layout(self):
        """Test standard starting layout."""
        player = PlayerState()
        assert player.board[23] == 2
        assert player.board[12] == 5
        assert player.board[7] == 3
        assert player.board[5] == 5
        assert player.bar == 0
        assert player.remaining_checkers() == 15

    def test_opening_pips(self):
        """Standard opening pip count is 167."""
        assert PlayerState().remaining_pips() == 167

    def test_from_points(self):
        """Test creating a player from point counts."""
        player = PlayerState.from_points({0: 3, 4: 1}, bar=2, name="Max")
        assert player.board[0] == 3
        assert player.board[4] == 1
        assert player.bar == 2
        assert player.name == "Max"

    def test_board_length_checked(self):
        """Test board length validation."""
        with pytest.raises(AssertionError):
            PlayerState(board=np.zeros(23, dtype=np.int32))

    def test_negative_bar_rejected(self):
        """Test bar count validation."""
        with pytest.raises(AssertionError):
            PlayerState(bar=-1)

    def test_opening_board_fresh_each_time(self):
        """Test opening board is a new array each call."""
        first = opening_board()
        first[5] = 0
        assert opening_board()[5] == 5


class TestPlayerQueries:
    """Tests for derived values."""

    def test_remaining_pips_counts_bar_as_25(self):
        """Test pip count with a checker on the bar."""
        player = PlayerState.from_points({0: 2, 5: 1}, bar=1)
        assert player.remaining_pips() == 2 * 1 + 6 + 25

    def test_remaining_checkers_includes_bar(self):
        """Test checker counts include the bar."""
        player = PlayerState.from_points({3: 2}, bar=3)
        assert player.remaining_checkers() == 5
        assert player.borne_off() == 10

    def test_is_finished(self):
        """Test finished detection."""
        assert PlayerState(board=empty_board()).is_finished()
        assert not PlayerState(board=empty_board(), bar=1).is_finished()
        assert not PlayerState().is_finished()

    def test_occupied_points(self):
        """Test occupied points with a checker on the bar."""
        player = PlayerState.from_points({12: 1, 3: 2}, bar=1)
        assert player.occupied_points() == [3, 12, 24]
        assert player.has_checkers_on_bar()

    def test_occupied_points_without_bar(self):
        """Test occupied points at the start."""
        assert PlayerState().occupied_points() == [5, 7, 12, 23]


class TestPlayerClone:
    """Tests for cloning."""

    def test_clone_is_independent(self):
        """Mutating a clone never changes the original's counts."""
        original = PlayerState()
        checkers = original.remaining_checkers()
        pips = original.remaining_pips()

        clone = original.clone()
        clone.board[23] -= 1
        clone.bar += 1
        clone.board[5] = 0

        assert original.remaining_checkers() == checkers
        assert original.remaining_pips() == pips
        assert original.bar == 0

    def test_clone_equal(self):
        """Test clone equals the original."""
        original = PlayerState.from_points({4: 2}, bar=1, name="Min")
        clone = original.clone()
        assert clone == original
        assert clone.name == "Min"
        assert clone.board is not original.board

    def test_string(self):
        """Test string representation."""
        player = PlayerState.from_points({0: 1}, bar=2)
        assert str(player).startswith("1 0 0")
        assert str(player).endswith("| 2")
