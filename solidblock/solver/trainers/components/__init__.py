"""DQN training components."""

from solidblock.solver.trainers.components.logger import DQNLogger
from solidblock.solver.trainers.components.metrics_tracker import EpisodeStats, MetricsTracker

__all__ = [
    "EpisodeStats",
    "MetricsTracker",
    "DQNLogger",
]
