from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from solidblock.env.state import EnvironmentState, Position

from .core.constants import (
    CELL_BLOCKED,
    CELL_EMPTY,
    CELL_FOOD,
    CELL_GREEN,
    CELL_PLAYER,
    CELL_RED,
    NUM_CLASSES,
    OFFSET_SCALE,
    VIEW_HALF,
)


@dataclass
class EncodedObservation:
    """Egocentric one-hot view (rows by dy, columns by dx) plus the scaled offset to food."""

    grid: np.ndarray
    offset: np.ndarray

    @property
    def view_size(self) -> int:
        return int(self.grid.shape[0])


def classify_cell(state: EnvironmentState, pos: Position) -> int:
    if not state.in_bounds(pos) or state.is_obstacle(pos):
        return CELL_BLOCKED
    if pos in state.red_blocks:
        return CELL_RED
    if pos in state.green_blocks:
        return CELL_GREEN
    if pos == state.food:
        return CELL_FOOD
    if pos == state.player:
        return CELL_PLAYER
    return CELL_EMPTY


def encode_observation(
    state: EnvironmentState,
    *,
    half: int = VIEW_HALF,
    offset_scale: float = OFFSET_SCALE,
) -> EncodedObservation:
    if half < 0:
        raise ValueError(f"half must be non-negative, got {half}")

    size = 2 * half + 1
    grid = np.zeros((size, size, NUM_CLASSES), dtype=np.float32)
    px, py = state.player
    for row, dy in enumerate(range(-half, half + 1)):
        for col, dx in enumerate(range(-half, half + 1)):
            grid[row, col, classify_cell(state, Position(px + dx, py + dy))] = 1.0

    offset = np.zeros(2, dtype=np.float32)
    if state.food is not None:
        offset[0] = offset_scale * (state.food.x - px) / state.width
        offset[1] = offset_scale * (state.food.y - py) / state.height
    return EncodedObservation(grid=grid, offset=offset)


def stack_observations(observations: Sequence[EncodedObservation]) -> tuple[np.ndarray, np.ndarray]:
    """Batch observations into `(B, V, V, C)` grids and `(B, 2)` offsets."""
    grids = np.stack([obs.grid for obs in observations]).astype(np.float32, copy=False)
    offsets = np.stack([obs.offset for obs in observations]).astype(np.float32, copy=False)
    return grids, offsets


__all__ = ["EncodedObservation", "classify_cell", "encode_observation", "stack_observations"]
