from __future__ import annotations

from dataclasses import dataclass, field

from solidblock.env.constants import (
    BOARD_HEIGHT,
    BOARD_WIDTH,
    DEFAULT_PATTERN,
    HISTORY_LENGTH,
    MAX_PLACEMENT_ATTEMPTS,
    TICK_SPAWN_INTERVAL,
)


@dataclass(frozen=True)
class ShapingConfig:
    """
    Scalar knobs for the per-step reward engines and item pickups.

    Penalties are stored as positive magnitudes and subtracted by the engines.
    """

    exploration_bonus: float = 0.6
    distance_scale: float = 1.0
    progress_threshold: float = 0.5
    progress_penalty: float = 0.5
    cycle_penalty: float = 1.5
    constant_penalty: float = 2.0
    alternating_penalty: float = 2.0
    dominant_penalty: float = 0.5
    dominant_ratio: float = 0.8
    wall_penalty: float = 3.0
    food_score: float = 40.0
    green_score: float = 25.0
    red_score: float = -20.0


@dataclass(frozen=True)
class EnvConfig:
    """
    Immutable configuration for GridEnv construction.

    - `width`/`height` define the board; positions are (x, y) with 0 <= x < width.
    - `obstacle_pattern` is one of `normal`, `diamond`, `none` (unknown -> `normal`).
    - `spawn_interval` is the tick period for spawning one red and one green block.
    - `max_placement_attempts` bounds rejection sampling before BoardFullError.
    - `history_length` caps the trailing action history used by pattern penalties.
    - `seed` seeds the environment RNG for deterministic placements.
    """

    width: int = BOARD_WIDTH
    height: int = BOARD_HEIGHT
    obstacle_pattern: str = DEFAULT_PATTERN
    spawn_interval: int = TICK_SPAWN_INTERVAL
    max_placement_attempts: int = MAX_PLACEMENT_ATTEMPTS
    history_length: int = HISTORY_LENGTH
    shaping: ShapingConfig = field(default_factory=ShapingConfig)
    debug_patterns: bool = False
    seed: int | None = None

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"board must be non-empty, got {self.width}x{self.height}")
        if self.spawn_interval <= 0:
            raise ValueError(f"spawn_interval must be positive, got {self.spawn_interval}")
        if self.max_placement_attempts <= 0:
            raise ValueError(
                f"max_placement_attempts must be positive, got {self.max_placement_attempts}"
            )
        if self.history_length < 10:
            raise ValueError(f"history_length must be >= 10, got {self.history_length}")


__all__ = ["EnvConfig", "ShapingConfig"]
