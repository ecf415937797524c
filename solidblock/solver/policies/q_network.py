from __future__ import annotations

import torch
import torch.nn as nn

from solidblock.solver.core import ACTION_DIM, NUM_CLASSES, OFFSET_DIM, VIEW_SIZE

__all__ = ["GridQNetwork"]


class GridQNetwork(nn.Module):
    """Two same-padded convolutions over the local view, pooled and fused with the food offset."""

    def __init__(
        self,
        view_size: int = VIEW_SIZE,
        in_channels: int = NUM_CLASSES,
        offset_dim: int = OFFSET_DIM,
        action_dim: int = ACTION_DIM,
        dropout: float = 0.2,
    ):
        super().__init__()
        self.view_size = view_size
        self.in_channels = in_channels
        self.offset_dim = offset_dim
        self.action_dim = action_dim
        self.dropout = dropout

        self.features = nn.Sequential(
            nn.Conv2d(in_channels, 32, kernel_size=3, padding=1),
            nn.ReLU(inplace=True),
            nn.Conv2d(32, 64, kernel_size=3, padding=1),
            nn.ReLU(inplace=True),
            nn.MaxPool2d(kernel_size=2),
            nn.Flatten(),
        )
        pooled = view_size // 2
        feature_dim = 64 * pooled * pooled + offset_dim
        self.head = nn.Sequential(
            nn.Linear(feature_dim, 256),
            nn.ReLU(inplace=True),
            nn.Dropout(p=dropout),
            nn.Linear(256, 128),
            nn.ReLU(inplace=True),
            nn.Linear(128, 64),
            nn.ReLU(inplace=True),
            nn.Linear(64, action_dim),
        )

    def forward(self, grid: torch.Tensor, offset: torch.Tensor) -> torch.Tensor:
        # grid arrives channels-last (B, V, V, C)
        x = self.features(grid.permute(0, 3, 1, 2))
        return self.head(torch.cat([x, offset], dim=1))
