"""Greedy-leaning policy evaluation without learning or rendering."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

import numpy as np

from solidblock.env import Action, EnvConfig, GridEnv
from solidblock.solver.trainers.exploration import ExplorationScheduler
from solidblock.solver.observation import EncodedObservation, encode_observation
from solidblock.solver.policies import Approximator
from solidblock.solver.trainers.config import EvaluationConfig


@dataclass
class EvaluationResult:
    avg_score: float
    episodes: List[Dict[str, Any]] = field(default_factory=list)

    def item_averages(self) -> Dict[str, float]:
        if not self.episodes:
            return {}
        keys = ("food", "green", "red", "cycle_penalties", "wall_penalties")
        return {key: float(np.mean([ep[key] for ep in self.episodes])) for key in keys}


def evaluate_policy(
    approximator: Approximator,
    config: EvaluationConfig | None = None,
    *,
    env: GridEnv | None = None,
) -> EvaluationResult:
    """Play `eval_episodes` episodes; with probability `eval_epsilon` a random non-greedy move is taken."""
    config = config or EvaluationConfig()
    env = env or GridEnv(EnvConfig(obstacle_pattern=config.obstacle_pattern, seed=config.seed))
    scheduler = ExplorationScheduler(rng=np.random.default_rng(config.seed))

    def q_fn(observation: EncodedObservation) -> np.ndarray:
        return approximator.predict(observation.grid[None], observation.offset[None])[0]

    details: List[Dict[str, Any]] = []
    for episode in range(1, config.eval_episodes + 1):
        observation = encode_observation(env.reset())
        for _ in range(config.max_steps):
            action = scheduler.select_non_greedy(q_fn, observation, config.eval_epsilon)
            result = env.step(Action(action))
            if result.done:
                break
            observation = encode_observation(result.state)

        details.append(
            {
                "episode": episode,
                "score": env.score,
                **env.item_counts(),
                **env.penalty_stats(),
            }
        )

    avg_score = float(np.mean([ep["score"] for ep in details])) if details else 0.0
    return EvaluationResult(avg_score=avg_score, episodes=details)


__all__ = ["EvaluationResult", "evaluate_policy"]
