from __future__ import annotations

from .config import RunPaths
from .constants import (
    ACTION_DIM,
    NUM_CLASSES,
    OFFSET_DIM,
    OFFSET_SCALE,
    VIEW_HALF,
    VIEW_SIZE,
)
from .logging import MLflowRunLogger, NullRunLogger, RunLogger

__all__ = [
    "ACTION_DIM",
    "NUM_CLASSES",
    "OFFSET_DIM",
    "OFFSET_SCALE",
    "VIEW_HALF",
    "VIEW_SIZE",
    "RunLogger",
    "NullRunLogger",
    "MLflowRunLogger",
    "RunPaths",
]
