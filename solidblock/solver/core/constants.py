from __future__ import annotations

from solidblock.env.constants import ACTION_DIM

# Cell categories of the egocentric view, in first-match order.
CELL_BLOCKED = 0
CELL_RED = 1
CELL_GREEN = 2
CELL_FOOD = 3
CELL_PLAYER = 4
CELL_EMPTY = 5
NUM_CLASSES = 6

VIEW_HALF = 4
VIEW_SIZE = 2 * VIEW_HALF + 1
OFFSET_SCALE = 5.0
OFFSET_DIM = 2

__all__ = [
    "ACTION_DIM",
    "CELL_BLOCKED",
    "CELL_RED",
    "CELL_GREEN",
    "CELL_FOOD",
    "CELL_PLAYER",
    "CELL_EMPTY",
    "NUM_CLASSES",
    "VIEW_HALF",
    "VIEW_SIZE",
    "OFFSET_SCALE",
    "OFFSET_DIM",
]
