from __future__ import annotations

from dataclasses import dataclass

from solidblock.env.rewards.base import RewardContext, RewardEngine, RewardResult


@dataclass
class WallPenalty(RewardEngine):
    """Charged when a move was rejected by the board edge or an obstacle."""

    penalty: float

    def compute(self, ctx: RewardContext) -> RewardResult:
        if ctx.moved or not self.penalty:
            return RewardResult(value=0.0, breakdown={})
        return RewardResult(value=-self.penalty, breakdown={"wall": -self.penalty})
