"""Training-state checkpoints and snapshot directories.

A snapshot directory holds `model.pt` (approximator weights) next to
`checkpoint.json`, whose keys are `episode`, `epsilon`, `replayBuffer`,
`episodeLosses`, `episodeMaxQs` and `baseLearningRate`.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List

import numpy as np
import torch

from solidblock.solver.data import ReplayBuffer

MODEL_FILENAME = "model.pt"
CHECKPOINT_FILENAME = "checkpoint.json"


@dataclass
class TrainingState:
    replay_buffer: ReplayBuffer
    episode: int = 1
    epsilon: float = 1.0
    episode_losses: List[float] = field(default_factory=list)
    episode_max_qs: List[float] = field(default_factory=list)
    base_learning_rate: float = 1e-3
    # In-memory only; not part of the checkpoint file.
    episode_rewards: List[float] = field(default_factory=list)

    def frozen_copy(self) -> "TrainingState":
        """Copy detached from later buffer pushes, evictions and priority updates."""
        buffer = ReplayBuffer(self.replay_buffer.capacity)
        buffer.extend(replace(t) for t in self.replay_buffer.snapshot())
        return TrainingState(
            replay_buffer=buffer,
            episode=self.episode,
            epsilon=self.epsilon,
            episode_losses=list(self.episode_losses),
            episode_max_qs=list(self.episode_max_qs),
            base_learning_rate=self.base_learning_rate,
            episode_rewards=list(self.episode_rewards),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "episode": self.episode,
            "epsilon": self.epsilon,
            "replayBuffer": self.replay_buffer.to_records(),
            "episodeLosses": [float(v) for v in self.episode_losses],
            "episodeMaxQs": [float(v) for v in self.episode_max_qs],
            "baseLearningRate": self.base_learning_rate,
        }

    @classmethod
    def from_dict(
        cls,
        payload: Dict[str, Any],
        *,
        capacity: int,
        rng: np.random.Generator | None = None,
    ) -> "TrainingState":
        defaults = cls(replay_buffer=ReplayBuffer(capacity))
        return cls(
            replay_buffer=ReplayBuffer.from_records(payload.get("replayBuffer") or [], capacity, rng=rng),
            episode=int(payload.get("episode", defaults.episode)),
            epsilon=float(payload.get("epsilon", defaults.epsilon)),
            episode_losses=[float(v) for v in payload.get("episodeLosses") or []],
            episode_max_qs=[float(v) for v in payload.get("episodeMaxQs") or []],
            base_learning_rate=float(payload.get("baseLearningRate") or defaults.base_learning_rate),
        )


def save_training_state(state: TrainingState, path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        json.dump(state.to_dict(), handle)
    return path


def load_training_state(
    path: Path,
    *,
    capacity: int,
    rng: np.random.Generator | None = None,
) -> TrainingState | None:
    """Returns None when the checkpoint is missing or unreadable."""
    path = Path(path)
    if path.is_dir():
        path = path / CHECKPOINT_FILENAME
    if not path.exists():
        return None
    try:
        with path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
        if not isinstance(payload, dict):
            raise ValueError("checkpoint root is not an object")
        return TrainingState.from_dict(payload, capacity=capacity, rng=rng)
    except (OSError, ValueError, KeyError, TypeError) as exc:
        print(f"[warn] Ignoring unreadable checkpoint {path}: {exc}")
        return None


@dataclass
class Snapshot:
    """Weights and training state captured together at one episode boundary."""

    weights: Dict[str, torch.Tensor]
    state: TrainingState


def snapshot_timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")


def periodic_snapshot_name(episode: int, avg_reward: float) -> str:
    return f"snapshot_{episode}_{avg_reward:.2f}_{snapshot_timestamp()}"


def signal_snapshot_name() -> str:
    return f"model_snapshot_{snapshot_timestamp()}"


def final_snapshot_name() -> str:
    return f"saved-model_{snapshot_timestamp()}"


def write_snapshot(snapshot: Snapshot, directory: Path) -> Path:
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    torch.save(snapshot.weights, directory / MODEL_FILENAME)
    save_training_state(snapshot.state, directory / CHECKPOINT_FILENAME)
    return directory


def snapshot_model_path(directory: Path) -> Path:
    directory = Path(directory)
    return directory if directory.suffix == ".pt" else directory / MODEL_FILENAME


__all__ = [
    "TrainingState",
    "Snapshot",
    "save_training_state",
    "load_training_state",
    "write_snapshot",
    "snapshot_model_path",
    "periodic_snapshot_name",
    "signal_snapshot_name",
    "final_snapshot_name",
    "MODEL_FILENAME",
    "CHECKPOINT_FILENAME",
]
