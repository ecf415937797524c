from __future__ import annotations

from enum import IntEnum
from typing import Tuple

BOARD_WIDTH = 20
BOARD_HEIGHT = 15
TICK_SPAWN_INTERVAL = 30
MAX_PLACEMENT_ATTEMPTS = 1000
HISTORY_LENGTH = 20


class Action(IntEnum):
    UP = 0
    DOWN = 1
    LEFT = 2
    RIGHT = 3

    @property
    def delta(self) -> Tuple[int, int]:
        return DIRS[self]

    @classmethod
    def parse(cls, value: "Action | int | str") -> "Action | None":
        """Coerce an action index or name; returns None for anything unknown."""
        if isinstance(value, Action):
            return value
        if isinstance(value, str):
            return _BY_NAME.get(value.strip().lower())
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            return None


# (dx, dy) per action; y grows downwards.
DIRS: Tuple[Tuple[int, int], ...] = ((0, -1), (0, 1), (-1, 0), (1, 0))
ACTION_DIM = len(DIRS)

_BY_NAME = {action.name.lower(): action for action in Action}

OBSTACLE_PATTERNS: Tuple[str, ...] = ("normal", "diamond", "none")
DEFAULT_PATTERN = "normal"

__all__ = [
    "BOARD_WIDTH",
    "BOARD_HEIGHT",
    "TICK_SPAWN_INTERVAL",
    "MAX_PLACEMENT_ATTEMPTS",
    "HISTORY_LENGTH",
    "Action",
    "DIRS",
    "ACTION_DIM",
    "OBSTACLE_PATTERNS",
    "DEFAULT_PATTERN",
]
