"""Core DQN training hyperparameters."""

from __future__ import annotations

from dataclasses import dataclass

import torch


@dataclass
class TrainingConfig:
    """Core DQN training hyperparameters and optimization settings."""

    # Episode and batch settings
    episodes: int | None = None  # None = run until a stop signal arrives
    max_steps: int = 500
    batch_size: int = 32
    buffer_size: int = 10_000

    # Learning parameters
    gamma: float = 0.99
    tau: float = 0.005
    lr: float = 1e-3
    lr_decay: float = 0.98
    lr_decay_every: int = 200
    grad_clip: float = 5.0

    # Reward processing
    step_penalty: float = 0.05
    reward_min: float = -20.0
    reward_max: float = 20.0

    # Replay sampling
    use_prioritized: bool = True
    recency_alpha: float = 2.0
    purge_every: int = 500
    purge_fraction: float = 0.2

    # Cadences
    summary_every: int = 20
    snapshot_every: int = 200
    yield_every: int = 50
    rolling_window: int = 20

    # Logging
    use_tensorboard: bool = True

    # Environment
    obstacle_pattern: str = "normal"
    seed: int | None = None
    device: str = "cuda" if torch.cuda.is_available() else "cpu"

    def __post_init__(self):
        """Validate configuration."""
        if self.episodes is not None and self.episodes <= 0:
            raise ValueError(f"episodes must be positive if set, got {self.episodes}")
        if self.max_steps <= 0:
            raise ValueError(f"max_steps must be positive, got {self.max_steps}")
        if self.batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {self.batch_size}")
        if self.buffer_size < self.batch_size:
            raise ValueError(
                f"buffer_size ({self.buffer_size}) must be >= batch_size ({self.batch_size})"
            )
        if not 0.0 <= self.gamma <= 1.0:
            raise ValueError(f"gamma must be in [0, 1], got {self.gamma}")
        if not 0.0 < self.tau <= 1.0:
            raise ValueError(f"tau must be in (0, 1], got {self.tau}")
        if self.lr <= 0:
            raise ValueError(f"lr must be positive, got {self.lr}")
        if not 0.0 < self.lr_decay <= 1.0:
            raise ValueError(f"lr_decay must be in (0, 1], got {self.lr_decay}")
        if self.grad_clip <= 0:
            raise ValueError(f"grad_clip must be positive, got {self.grad_clip}")
        if self.reward_min > self.reward_max:
            raise ValueError(
                f"reward_min ({self.reward_min}) must be <= reward_max ({self.reward_max})"
            )
        if not 0.0 <= self.purge_fraction <= 1.0:
            raise ValueError(f"purge_fraction must be in [0, 1], got {self.purge_fraction}")
        for name in (
            "lr_decay_every",
            "purge_every",
            "summary_every",
            "snapshot_every",
            "yield_every",
            "rolling_window",
        ):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")

    def learning_rate_for(self, base_lr: float, episode: int) -> float:
        """Geometric step decay: `base * decay ** (episode // every)`."""
        return base_lr * self.lr_decay ** (episode // self.lr_decay_every)
