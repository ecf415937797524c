from __future__ import annotations

from solidblock.solver.core import (  # noqa: F401
    ACTION_DIM,
    NUM_CLASSES,
    VIEW_SIZE,
    MLflowRunLogger,
    NullRunLogger,
    RunLogger,
    RunPaths,
)
