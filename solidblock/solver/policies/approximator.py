from __future__ import annotations

import copy
from pathlib import Path
from typing import Dict, Protocol

import numpy as np
import torch
import torch.nn.functional as F
from torch import optim

from .q_network import GridQNetwork

__all__ = ["Approximator", "TorchApproximator", "save_network", "load_network"]

Weights = Dict[str, torch.Tensor]


class Approximator(Protocol):
    """Q-value estimator used by the trainer; concrete models stay behind this surface."""

    def predict(self, grids: np.ndarray, offsets: np.ndarray) -> np.ndarray:
        ...

    def train_step(
        self,
        grids: np.ndarray,
        offsets: np.ndarray,
        targets: np.ndarray,
        actions: np.ndarray,
        clip_value: float,
    ) -> float:
        ...

    def get_weights(self) -> Weights:
        ...

    def set_weights(self, weights: Weights) -> None:
        ...

    def save(self, path: Path) -> None:
        ...

    def load(self, path: Path) -> None:
        ...

    def set_learning_rate(self, lr: float) -> None:
        ...

    def clone(self) -> "Approximator":
        ...


def save_network(model: GridQNetwork, path: Path) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    torch.save(model.state_dict(), path)


def load_network(model: GridQNetwork, path: Path, *, map_location: str | torch.device | None = None) -> None:
    state = torch.load(Path(path), map_location=map_location, weights_only=True)
    model.load_state_dict(state)


class TorchApproximator:
    """GridQNetwork trained with Adam on a Huber loss of the taken action's Q-value."""

    def __init__(
        self,
        network: GridQNetwork | None = None,
        *,
        lr: float = 1e-3,
        device: str | torch.device = "cpu",
    ):
        self.device = torch.device(device)
        self.network = (network or GridQNetwork()).to(self.device)
        self.optimizer = optim.Adam(self.network.parameters(), lr=lr)

    @property
    def learning_rate(self) -> float:
        return float(self.optimizer.param_groups[0]["lr"])

    def _tensor(self, array: np.ndarray, dtype: torch.dtype = torch.float32) -> torch.Tensor:
        return torch.as_tensor(np.asarray(array), dtype=dtype, device=self.device)

    def predict(self, grids: np.ndarray, offsets: np.ndarray) -> np.ndarray:
        self.network.eval()
        with torch.no_grad():
            q_values = self.network(self._tensor(grids), self._tensor(offsets))
        return q_values.cpu().numpy()

    def train_step(
        self,
        grids: np.ndarray,
        offsets: np.ndarray,
        targets: np.ndarray,
        actions: np.ndarray,
        clip_value: float,
    ) -> float:
        self.network.train()
        q_values = self.network(self._tensor(grids), self._tensor(offsets))
        action_idx = self._tensor(actions, dtype=torch.long)
        q_selected = q_values.gather(1, action_idx.unsqueeze(1)).squeeze(1)
        loss = F.smooth_l1_loss(q_selected, self._tensor(targets))

        self.optimizer.zero_grad()
        loss.backward()
        torch.nn.utils.clip_grad_value_(self.network.parameters(), clip_value)
        self.optimizer.step()
        return float(loss.item())

    def get_weights(self) -> Weights:
        return {key: value.detach().clone() for key, value in self.network.state_dict().items()}

    def set_weights(self, weights: Weights) -> None:
        self.network.load_state_dict(weights)

    def save(self, path: Path) -> None:
        save_network(self.network, path)

    def load(self, path: Path) -> None:
        load_network(self.network, path, map_location=self.device)

    def set_learning_rate(self, lr: float) -> None:
        # Updating in place keeps Adam's moment estimates.
        for group in self.optimizer.param_groups:
            group["lr"] = lr

    def clone(self) -> "TorchApproximator":
        return TorchApproximator(copy.deepcopy(self.network), lr=self.learning_rate, device=self.device)
