from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Protocol, Tuple

from solidblock.env.constants import Action
from solidblock.env.state import Position


@dataclass(frozen=True)
class RewardContext:
    previous: Position
    current: Position
    food: Position | None
    history: Tuple[Action, ...]
    first_visit: bool = False

    @property
    def moved(self) -> bool:
        return self.previous != self.current


@dataclass(frozen=True)
class RewardResult:
    value: float
    breakdown: Dict[str, float]


class RewardEngine(Protocol):
    def compute(self, ctx: RewardContext) -> RewardResult:
        ... # override in implementations
