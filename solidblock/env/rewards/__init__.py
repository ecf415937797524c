from __future__ import annotations

from dataclasses import dataclass

from solidblock.env.config import ShapingConfig
from solidblock.env.rewards.base import RewardContext, RewardEngine, RewardResult
from solidblock.env.rewards.collision import WallPenalty
from solidblock.env.rewards.composite import CompositeReward
from solidblock.env.rewards.exploration import ExplorationBonus
from solidblock.env.rewards.patterns import PatternPenalty
from solidblock.env.rewards.potential import PotentialReward


@dataclass
class RewardSystem:
    engine: RewardEngine
    food_score: float
    green_score: float
    red_score: float


def build_reward_system(shaping: ShapingConfig) -> RewardSystem:
    """Compose the per-step shaping engines in the order they are applied."""
    engines: list[RewardEngine] = [
        ExplorationBonus(bonus=shaping.exploration_bonus),
        PotentialReward(
            distance_scale=shaping.distance_scale,
            progress_threshold=shaping.progress_threshold,
            progress_penalty=shaping.progress_penalty,
        ),
        PatternPenalty(
            cycle_penalty=shaping.cycle_penalty,
            constant_penalty=shaping.constant_penalty,
            alternating_penalty=shaping.alternating_penalty,
            dominant_penalty=shaping.dominant_penalty,
            dominant_ratio=shaping.dominant_ratio,
        ),
        WallPenalty(penalty=shaping.wall_penalty),
    ]
    return RewardSystem(
        engine=CompositeReward(engines=engines),
        food_score=shaping.food_score,
        green_score=shaping.green_score,
        red_score=shaping.red_score,
    )


__all__ = [
    "RewardSystem",
    "RewardContext",
    "RewardResult",
    "RewardEngine",
    "build_reward_system",
]
