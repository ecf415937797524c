from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, NamedTuple, Tuple

from solidblock.env.constants import Action


class Position(NamedTuple):
    x: int
    y: int

    def shifted(self, action: Action) -> "Position":
        dx, dy = action.delta
        return Position(self.x + dx, self.y + dy)


def manhattan(a: Position, b: Position) -> int:
    return abs(a.x - b.x) + abs(a.y - b.y)


@dataclass(frozen=True)
class EnvironmentState:
    """
    Read-only snapshot of the grid world.

    Every collection is a tuple or frozenset, so a snapshot never aliases the
    environment's mutable bookkeeping.
    """

    width: int
    height: int
    player: Position
    food: Position | None
    obstacles: Tuple[Position, ...]
    red_blocks: Tuple[Position, ...]
    green_blocks: Tuple[Position, ...]
    tick_count: int
    score: float
    move_history: Tuple[Action, ...]
    visited: FrozenSet[Position]

    def in_bounds(self, pos: Position) -> bool:
        return 0 <= pos.x < self.width and 0 <= pos.y < self.height

    def is_obstacle(self, pos: Position) -> bool:
        return pos in self.obstacles


__all__ = ["Position", "EnvironmentState", "manhattan"]
