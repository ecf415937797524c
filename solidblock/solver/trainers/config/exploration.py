"""Sawtooth epsilon schedule settings."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ExplorationConfig:
    """
    Epsilon starts at `epsilon_start` and decays multiplicatively every episode.

    Dropping below `epsilon_min` bumps it back to `epsilon_boost`; every
    `cycle_length` episodes it is raised by a draw from
    `[epsilon_min, epsilon_reset_cycle)`.
    """

    epsilon_start: float = 1.0
    epsilon_decay: float = 0.999
    epsilon_min: float = 0.1
    epsilon_boost: float = 0.2
    cycle_length: int = 1200
    epsilon_reset_cycle: float = 0.2

    def __post_init__(self):
        """Validate configuration."""
        if self.epsilon_start < 0.0:
            raise ValueError(f"epsilon_start must be non-negative, got {self.epsilon_start}")
        if not 0.0 < self.epsilon_decay < 1.0:
            raise ValueError(f"epsilon_decay must be in (0, 1), got {self.epsilon_decay}")
        if self.epsilon_min < 0.0:
            raise ValueError(f"epsilon_min must be non-negative, got {self.epsilon_min}")
        if self.epsilon_boost < self.epsilon_min:
            raise ValueError(
                f"epsilon_boost ({self.epsilon_boost}) must be >= epsilon_min ({self.epsilon_min})"
            )
        if self.epsilon_reset_cycle < self.epsilon_min:
            raise ValueError(
                f"epsilon_reset_cycle ({self.epsilon_reset_cycle}) must be >= epsilon_min ({self.epsilon_min})"
            )
        if self.cycle_length <= 0:
            raise ValueError(f"cycle_length must be positive, got {self.cycle_length}")
