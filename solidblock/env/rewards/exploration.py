from __future__ import annotations

from dataclasses import dataclass

from solidblock.env.rewards.base import RewardContext, RewardEngine, RewardResult


@dataclass
class ExplorationBonus(RewardEngine):
    """Flat bonus the first time the player stands on a cell in an episode."""

    bonus: float

    def compute(self, ctx: RewardContext) -> RewardResult:
        if not ctx.first_visit or not self.bonus:
            return RewardResult(value=0.0, breakdown={})
        return RewardResult(value=self.bonus, breakdown={"exploration": self.bonus})
