"""Unit tests for the egocentric feature encoder."""

import numpy as np
import pytest

from solidblock.env.state import EnvironmentState, Position
from solidblock.solver.core.constants import (
    CELL_BLOCKED,
    CELL_EMPTY,
    CELL_FOOD,
    CELL_GREEN,
    CELL_PLAYER,
    CELL_RED,
    NUM_CLASSES,
)
from solidblock.solver.observation import encode_observation, stack_observations


def _state(player=(10, 7), food=(12, 7), obstacles=(), red=(), green=()):
    return EnvironmentState(
        width=20,
        height=15,
        player=Position(*player),
        food=Position(*food) if food is not None else None,
        obstacles=tuple(Position(*p) for p in obstacles),
        red_blocks=tuple(Position(*p) for p in red),
        green_blocks=tuple(Position(*p) for p in green),
        tick_count=0,
        score=0.0,
        move_history=(),
        visited=frozenset({Position(*player)}),
    )


def _category(obs, dx, dy, half=4):
    return int(np.argmax(obs.grid[dy + half, dx + half]))


class TestEncodeObservation:
    """Tests for encode_observation."""

    def test_shapes_and_one_hot(self):
        """Every cell of the 9x9 window carries exactly one category."""
        obs = encode_observation(_state())
        assert obs.grid.shape == (9, 9, NUM_CLASSES)
        assert obs.grid.dtype == np.float32
        assert obs.offset.shape == (2,)
        np.testing.assert_array_equal(obs.grid.sum(axis=-1), np.ones((9, 9)))

    def test_categories(self):
        """Rows follow dy and columns follow dx."""
        obs = encode_observation(
            _state(obstacles=[(9, 7)], red=[(10, 6)], green=[(10, 8)], food=(11, 7))
        )
        assert _category(obs, 0, 0) == CELL_PLAYER
        assert _category(obs, -1, 0) == CELL_BLOCKED
        assert _category(obs, 0, -1) == CELL_RED
        assert _category(obs, 0, 1) == CELL_GREEN
        assert _category(obs, 1, 0) == CELL_FOOD
        assert _category(obs, 2, 2) == CELL_EMPTY

    def test_out_of_bounds_is_blocked(self):
        """Cells beyond the board edge count as blocked."""
        obs = encode_observation(_state(player=(0, 0), food=(3, 3)))
        assert _category(obs, -1, 0) == CELL_BLOCKED
        assert _category(obs, 0, -4) == CELL_BLOCKED
        assert _category(obs, 1, 1) == CELL_EMPTY

    def test_offset_is_scaled_and_normalised(self):
        obs = encode_observation(_state(player=(10, 7), food=(14, 4)))
        assert obs.offset[0] == pytest.approx(5.0 * 4 / 20)
        assert obs.offset[1] == pytest.approx(5.0 * -3 / 15)

    def test_custom_window(self):
        obs = encode_observation(_state(), half=2, offset_scale=1.0)
        assert obs.grid.shape == (5, 5, NUM_CLASSES)
        assert obs.offset[0] == pytest.approx(2 / 20)

    def test_deterministic(self):
        state = _state(red=[(11, 8)])
        first, second = encode_observation(state), encode_observation(state)
        np.testing.assert_array_equal(first.grid, second.grid)
        np.testing.assert_array_equal(first.offset, second.offset)

    def test_stack_observations(self):
        grids, offsets = stack_observations([encode_observation(_state())] * 3)
        assert grids.shape == (3, 9, 9, NUM_CLASSES)
        assert offsets.shape == (3, 2)
