from __future__ import annotations

from .config import EnvConfig, ShapingConfig
from .constants import Action, OBSTACLE_PATTERNS
from .env import BoardFullError, GridEnv, StepResult
from .state import EnvironmentState, Position

__all__ = [
    "GridEnv",
    "StepResult",
    "BoardFullError",
    "EnvConfig",
    "ShapingConfig",
    "Action",
    "OBSTACLE_PATTERNS",
    "EnvironmentState",
    "Position",
]
