"""DQN trainers and shared training utilities."""

from solidblock.solver.trainers.config import EvaluationConfig, ExplorationConfig, TrainingConfig
from solidblock.solver.trainers.dqn_trainer import DQNTrainer, TrainerPhase
from solidblock.solver.trainers.evaluation import EvaluationResult, evaluate_policy
from solidblock.solver.trainers.signals import TrainingSignals, parse_command

__all__ = [
    "DQNTrainer",
    "TrainerPhase",
    "TrainingConfig",
    "ExplorationConfig",
    "EvaluationConfig",
    "TrainingSignals",
    "parse_command",
    "EvaluationResult",
    "evaluate_policy",
]
