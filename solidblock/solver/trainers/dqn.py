"""DQN learning utilities shared by the trainer and evaluation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np
import torch

from solidblock.solver.data import Transition
from solidblock.solver.observation import stack_observations
from solidblock.solver.policies import Approximator


@dataclass
class LearnResult:
    loss: float
    max_q: float
    td_errors: np.ndarray


def clip_reward(raw: float, *, step_penalty: float, low: float, high: float) -> float:
    """Charge the per-step penalty, then clip into `[low, high]`."""
    return float(min(high, max(low, raw - step_penalty)))


def compute_double_q_targets(
    rewards: np.ndarray,
    dones: np.ndarray,
    next_q_main: np.ndarray,
    next_q_target: np.ndarray,
    gamma: float,
) -> np.ndarray:
    """`r + gamma * Q_target(s')[argmax_a Q_main(s')] * (1 - done)`."""
    next_actions = np.argmax(next_q_main, axis=1)
    next_best = next_q_target[np.arange(len(next_actions)), next_actions]
    return (rewards + gamma * next_best * (1.0 - dones)).astype(np.float32)


def learn_from_batch(
    main: Approximator,
    target: Approximator,
    batch: Sequence[Transition],
    *,
    gamma: float,
    clip_value: float,
) -> LearnResult:
    grids, offsets = stack_observations([t.state for t in batch])
    next_grids, next_offsets = stack_observations([t.next_state for t in batch])
    actions = np.array([t.action for t in batch], dtype=np.int64)
    rewards = np.array([t.reward for t in batch], dtype=np.float32)
    dones = np.array([t.done for t in batch], dtype=np.float32)

    targets = compute_double_q_targets(
        rewards,
        dones,
        main.predict(next_grids, next_offsets),
        target.predict(next_grids, next_offsets),
        gamma,
    )
    q_values = main.predict(grids, offsets)
    predicted = q_values[np.arange(len(actions)), actions]

    loss = main.train_step(grids, offsets, targets, actions, clip_value)
    return LearnResult(loss=loss, max_q=float(q_values.max()), td_errors=targets - predicted)


def soft_update(target: Approximator, source: Approximator, tau: float) -> None:
    """Polyak averaging: `target <- tau * source + (1 - tau) * target`."""
    source_weights = source.get_weights()
    blended = {}
    for key, value in target.get_weights().items():
        incoming = source_weights[key]
        if torch.is_floating_point(value):
            blended[key] = tau * incoming + (1.0 - tau) * value
        else:
            blended[key] = incoming.clone()
    target.set_weights(blended)


__all__ = [
    "LearnResult",
    "clip_reward",
    "compute_double_q_targets",
    "learn_from_batch",
    "soft_update",
]
