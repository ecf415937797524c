"""Evaluation configuration."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class EvaluationConfig:
    """Configuration for running a trained approximator without learning."""

    eval_episodes: int = 5
    max_steps: int = 500
    eval_epsilon: float = 0.05  # Chance of a random non-greedy move (0 = greedy)
    obstacle_pattern: str = "normal"
    seed: int | None = None

    def __post_init__(self):
        """Validate configuration."""
        if self.eval_episodes <= 0:
            raise ValueError(f"eval_episodes must be positive, got {self.eval_episodes}")
        if self.max_steps <= 0:
            raise ValueError(f"max_steps must be positive, got {self.max_steps}")
        if not 0.0 <= self.eval_epsilon <= 1.0:
            raise ValueError(f"eval_epsilon must be in [0, 1], got {self.eval_epsilon}")
