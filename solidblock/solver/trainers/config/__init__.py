"""DQN training configuration components."""

from solidblock.solver.trainers.config.evaluation import EvaluationConfig
from solidblock.solver.trainers.config.exploration import ExplorationConfig
from solidblock.solver.trainers.config.training import TrainingConfig

__all__ = [
    "TrainingConfig",
    "ExplorationConfig",
    "EvaluationConfig",
]
