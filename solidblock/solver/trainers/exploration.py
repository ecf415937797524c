from __future__ import annotations

from typing import Callable

import numpy as np

from solidblock.env.constants import ACTION_DIM
from solidblock.solver.observation import EncodedObservation
from solidblock.solver.trainers.config import ExplorationConfig

QFunction = Callable[[EncodedObservation], np.ndarray]


class ExplorationScheduler:
    """
    Stateless epsilon-greedy policy with a sawtooth epsilon profile.

    The current epsilon is owned by the caller (the training state); every
    method takes it as an argument and returns the next value.
    """

    def __init__(
        self,
        config: ExplorationConfig | None = None,
        *,
        action_dim: int = ACTION_DIM,
        rng: np.random.Generator | None = None,
    ):
        self.config = config or ExplorationConfig()
        self.action_dim = action_dim
        self._rng = rng or np.random.default_rng()

    def resume_epsilon(self, epsilon: float) -> float:
        """(Re)starting training never begins below the configured start value."""
        return max(float(epsilon), self.config.epsilon_start)

    def select_action(self, q_fn: QFunction, observation: EncodedObservation, epsilon: float) -> int:
        if self._rng.random() < epsilon:
            return int(self._rng.integers(self.action_dim))
        return greedy_action(q_fn(observation))

    def select_non_greedy(self, q_fn: QFunction, observation: EncodedObservation, epsilon: float) -> int:
        """With probability epsilon take a random action other than the greedy one."""
        best = greedy_action(q_fn(observation))
        if self.action_dim > 1 and self._rng.random() < epsilon:
            choice = int(self._rng.integers(self.action_dim - 1))
            return choice if choice < best else choice + 1
        return best

    def next_epsilon(self, epsilon: float, episode: int) -> float:
        cfg = self.config
        if episode % cfg.cycle_length == 0:
            return epsilon + float(self._rng.uniform(cfg.epsilon_min, cfg.epsilon_reset_cycle))
        epsilon *= cfg.epsilon_decay
        if epsilon < cfg.epsilon_min:
            epsilon = cfg.epsilon_boost
        return epsilon


def greedy_action(q_values: np.ndarray) -> int:
    """First index of the maximum Q-value."""
    return int(np.argmax(np.asarray(q_values).reshape(-1)))


__all__ = ["ExplorationScheduler", "greedy_action", "QFunction"]
