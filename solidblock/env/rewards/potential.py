from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from solidblock.env.rewards.base import RewardContext, RewardEngine, RewardResult
from solidblock.env.state import manhattan


@dataclass
class PotentialReward(RewardEngine):
    """
    Manhattan-distance shaping towards the food plus a penalty for stalling.

    Any step whose distance decrease is below `progress_threshold` (sideways,
    backwards or blocked moves) also pays `progress_penalty`.
    """

    distance_scale: float
    progress_threshold: float
    progress_penalty: float

    def compute(self, ctx: RewardContext) -> RewardResult:
        if ctx.food is None:
            return RewardResult(value=0.0, breakdown={})

        breakdown: Dict[str, float] = {}
        reward = 0.0

        delta = manhattan(ctx.previous, ctx.food) - manhattan(ctx.current, ctx.food)
        shaped = self.distance_scale * delta
        if shaped:
            reward += shaped
            breakdown["distance"] = shaped

        if delta < self.progress_threshold and self.progress_penalty:
            reward -= self.progress_penalty
            breakdown["no_progress"] = -self.progress_penalty

        return RewardResult(value=reward, breakdown=breakdown)
