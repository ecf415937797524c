from __future__ import annotations

from .approximator import Approximator, TorchApproximator, load_network, save_network
from .q_network import GridQNetwork

__all__ = [
    "Approximator",
    "TorchApproximator",
    "GridQNetwork",
    "save_network",
    "load_network",
]
